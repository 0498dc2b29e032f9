"""web3.py binding of the DonationPlatform contract (PAYMENT_MODE=testnet|mainnet)."""

import logging
from typing import Any

from web3 import AsyncHTTPProvider, AsyncWeb3
from web3.exceptions import ContractLogicError, TimeExhausted

from donation_gallery.core.exceptions import (
    ContractInterfaceMismatch,
    NetworkError,
    PurchaseRejected,
)
from donation_gallery.models.contract import TransactionReceipt
from donation_gallery.services.contract_service import DonationPlatformContract, WalletProvider

logger = logging.getLogger(__name__)

DONATION_PLATFORM_ABI: list[dict[str, Any]] = [
    {
        "type": "function",
        "name": "donateWithImage",
        "stateMutability": "payable",
        "inputs": [{"name": "fileHash", "type": "string"}],
        "outputs": [],
    },
    {
        "type": "function",
        "name": "commissionRate",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "type": "function",
        "name": "imagePrice",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "type": "function",
        "name": "recipient",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "address"}],
    },
]

# EIP-1193 "User Rejected Request"
USER_REJECTED_CODE = 4001


def function_signatures(abi: list[dict[str, Any]]) -> list[str]:
    return [
        f"{entry['name']}({','.join(arg['type'] for arg in entry['inputs'])})"
        for entry in abi
        if entry["type"] == "function"
    ]


def missing_functions(code: bytes, abi: list[dict[str, Any]] = DONATION_PLATFORM_ABI) -> list[str]:
    """Signatures from ``abi`` whose 4-byte selector does not appear in ``code``.

    Solidity dispatchers embed every external selector as a PUSH4 operand, so a
    selector absent from the runtime bytecode means the function is not there.
    """
    code = bytes(code)
    if not code:
        return function_signatures(abi)
    return [
        signature
        for signature in function_signatures(abi)
        if bytes(AsyncWeb3.keccak(text=signature)[:4]) not in code
    ]


def is_user_rejection(exc: BaseException) -> bool:
    """True when a JSON-RPC error says the user refused to sign."""
    payloads = [getattr(exc, "rpc_response", None), *exc.args]
    for payload in payloads:
        if not isinstance(payload, dict):
            continue
        error = payload.get("error", payload)
        if isinstance(error, dict) and error.get("code") == USER_REJECTED_CODE:
            return True
    message = str(exc).lower()
    return "user rejected" in message or "user denied" in message


class Web3DonationPlatform(DonationPlatformContract):
    def __init__(self, w3: AsyncWeb3, address: str, confirmation_timeout: float = 120.0):
        self._w3 = w3
        self._contract = w3.eth.contract(address=address, abi=DONATION_PLATFORM_ABI)
        self._confirmation_timeout = confirmation_timeout

    async def commission_rate(self) -> int:
        return await self._contract.functions.commissionRate().call()

    async def recipient(self) -> str:
        return await self._contract.functions.recipient().call()

    async def image_price(self) -> int:
        return await self._contract.functions.imagePrice().call()

    async def donate_with_image(self, file_hash: str, value_wei: int, sender: str) -> TransactionReceipt:
        try:
            tx_hash = await self._contract.functions.donateWithImage(file_hash).transact(
                {"from": sender, "value": value_wei}
            )
        except ContractLogicError as exc:
            logger.warning("donateWithImage reverted during submission: %s", exc)
            raise NetworkError(f"The contract rejected the payment: {exc}") from exc
        except Exception as exc:
            if is_user_rejection(exc):
                logger.info("User declined to sign donateWithImage for %s", file_hash)
                raise PurchaseRejected() from exc
            logger.exception("donateWithImage submission failed")
            raise NetworkError() from exc

        try:
            receipt = await self._w3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=self._confirmation_timeout
            )
        except TimeExhausted as exc:
            raise NetworkError(
                f"Transaction {AsyncWeb3.to_hex(tx_hash)} was not mined within "
                f"{self._confirmation_timeout:.0f}s."
            ) from exc
        except Exception as exc:
            logger.exception("Waiting for receipt of %s failed", AsyncWeb3.to_hex(tx_hash))
            raise NetworkError() from exc

        if receipt["status"] != 1:
            raise NetworkError(f"Transaction {AsyncWeb3.to_hex(tx_hash)} reverted.")
        return TransactionReceipt(
            tx_hash=AsyncWeb3.to_hex(receipt["transactionHash"]),
            block_number=receipt["blockNumber"],
            status=receipt["status"],
        )


class Web3WalletProvider(WalletProvider):
    """Wallet backed by the accounts a JSON-RPC node manages (``eth_accounts``)."""

    def __init__(self, rpc_url: str, confirmation_timeout: float = 120.0, w3: AsyncWeb3 | None = None):
        self.rpc_url = rpc_url
        self._confirmation_timeout = confirmation_timeout
        self._w3 = w3 or AsyncWeb3(AsyncHTTPProvider(rpc_url))

    async def request_accounts(self) -> list[str]:
        return list(await self._w3.eth.accounts)

    async def bind_contract(self, address: str) -> DonationPlatformContract:
        checksum_address = AsyncWeb3.to_checksum_address(address)
        code = await self._w3.eth.get_code(checksum_address)
        missing = missing_functions(code)
        if missing:
            logger.error("Contract at %s is missing %s", checksum_address, missing)
            raise ContractInterfaceMismatch(checksum_address, missing)
        return Web3DonationPlatform(self._w3, checksum_address, self._confirmation_timeout)

    async def aclose(self) -> None:
        disconnect = getattr(self._w3.provider, "disconnect", None)
        if disconnect is not None:
            await disconnect()

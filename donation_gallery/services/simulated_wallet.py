"""Simulated wallet and DonationPlatform contract for PAYMENT_MODE=simulated."""
import uuid

from donation_gallery.core.exceptions import ContractInterfaceMismatch, PurchaseRejected
from donation_gallery.models.contract import TransactionReceipt
from donation_gallery.services.contract_service import DonationPlatformContract, WalletProvider


class SimulatedDonationPlatform(DonationPlatformContract):
    """In-memory stand-in for the deployed contract.

    Records every payment in ``payments`` and mines each one into its own block.
    """

    def __init__(self, commission_rate: int, recipient: str, image_price_wei: int, decline: bool = False):
        self._commission_rate = commission_rate
        self._recipient = recipient
        self._image_price_wei = image_price_wei
        self.decline = decline
        self.payments: list[dict] = []
        self._block_number = 0

    async def commission_rate(self) -> int:
        return self._commission_rate

    async def recipient(self) -> str:
        return self._recipient

    async def image_price(self) -> int:
        return self._image_price_wei

    async def donate_with_image(self, file_hash: str, value_wei: int, sender: str) -> TransactionReceipt:
        if self.decline:
            raise PurchaseRejected()
        self._block_number += 1
        donated = value_wei * self._commission_rate // 100
        self.payments.append({
            "file_hash": file_hash,
            "sender": sender,
            "value_wei": value_wei,
            "donated_wei": donated,
            "owner_wei": value_wei - donated,
        })
        return TransactionReceipt(
            tx_hash=f"0x{uuid.uuid4().hex}{uuid.uuid4().hex}",
            block_number=self._block_number,
            status=1,
        )


class SimulatedWalletProvider(WalletProvider):
    """Wallet with a single mock account and one simulated contract deployment."""

    def __init__(
        self,
        commission_rate: int = 10,
        recipient: str = "0x" + "0" * 40,
        image_price_wei: int = 10**16,
        accounts: list[str] | None = None,
        contract_address: str | None = None,
    ):
        self.accounts = accounts if accounts is not None else [f"0x{uuid.uuid4().hex}{uuid.uuid4().hex[:8]}"]
        # None accepts any address
        self.contract_address = contract_address
        self.contract = SimulatedDonationPlatform(commission_rate, recipient, image_price_wei)

    async def request_accounts(self) -> list[str]:
        return list(self.accounts)

    async def bind_contract(self, address: str) -> DonationPlatformContract:
        if self.contract_address is not None and address.lower() != self.contract_address.lower():
            raise ContractInterfaceMismatch(address, ["<no contract deployed>"])
        return self.contract

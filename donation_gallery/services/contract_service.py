"""Gateway to the deployed DonationPlatform payment-splitting contract.

The contract is reached through a :class:`WalletProvider`, which hands out
accounts and binds the statically declared :class:`DonationPlatformContract`
interface. Two providers exist, mirroring ``PAYMENT_MODE``:

- ``simulated`` -> :class:`SimulatedWalletProvider` (no chain involved)
- ``testnet`` / ``mainnet`` -> :class:`Web3WalletProvider` (JSON-RPC via web3.py)
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from decimal import Decimal

from donation_gallery.config import settings
from donation_gallery.core.accounting import to_wei
from donation_gallery.core.exceptions import (
    ConfigUnavailable,
    GalleryError,
    NetworkError,
    PurchaseRejected,
)
from donation_gallery.models.contract import ContractConfig, TransactionReceipt

logger = logging.getLogger(__name__)


class DonationPlatformContract(ABC):
    """The four DonationPlatform operations the gallery relies on, and nothing else."""

    @abstractmethod
    async def commission_rate(self) -> int:
        """``commissionRate() view returns (uint256)``, a plain percentage."""
        ...

    @abstractmethod
    async def recipient(self) -> str:
        """``recipient() view returns (address)``."""
        ...

    @abstractmethod
    async def image_price(self) -> int:
        """``imagePrice() view returns (uint256)``, in wei."""
        ...

    @abstractmethod
    async def donate_with_image(self, file_hash: str, value_wei: int, sender: str) -> TransactionReceipt:
        """``donateWithImage(string fileHash) payable``; returns once the transaction is mined."""
        ...


class WalletProvider(ABC):
    @abstractmethod
    async def request_accounts(self) -> list[str]:
        """Ask the wallet for accounts. An empty list means the user declined."""
        ...

    @abstractmethod
    async def bind_contract(self, address: str) -> DonationPlatformContract:
        """Bind the contract at ``address``.

        Raises:
            ContractInterfaceMismatch: nothing deployed there, or the deployed
                code lacks one of the declared functions
        """
        ...

    async def aclose(self) -> None:
        return None


class ContractGateway:
    """Reads the contract configuration and submits purchases."""

    def __init__(self, provider: WalletProvider, contract_address: str):
        self.provider = provider
        self.contract_address = contract_address
        self.account: str | None = None
        self._contract: DonationPlatformContract | None = None

    async def request_accounts(self) -> list[str]:
        try:
            accounts = await self.provider.request_accounts()
        except GalleryError:
            raise
        except Exception as exc:
            logger.exception("Wallet account request failed")
            raise NetworkError("Could not reach the wallet provider.") from exc
        self.account = accounts[0] if accounts else None
        return accounts

    async def fetch_config(self) -> ContractConfig:
        """Read commission rate, recipient and minimum price as one snapshot."""
        contract = await self._bound_contract()
        try:
            rate, recipient, price_wei = await asyncio.gather(
                contract.commission_rate(),
                contract.recipient(),
                contract.image_price(),
            )
        except Exception as exc:
            logger.warning("Reading DonationPlatform configuration failed: %s", exc)
            raise ConfigUnavailable() from exc

        rate = int(rate)
        if not 0 <= rate <= 100:
            raise ConfigUnavailable(f"Contract reports a commission rate of {rate}%, expected 0-100.")
        config = ContractConfig(
            commission_rate=rate,
            recipient=str(recipient),
            minimum_price_wei=int(price_wei),
        )
        logger.info(
            "Loaded contract config: rate=%s%% recipient=%s min_price_wei=%s",
            config.commission_rate, config.recipient, config.minimum_price_wei,
        )
        return config

    async def submit_purchase(self, content_id: str, amount: Decimal) -> TransactionReceipt:
        """Pay ``amount`` ETH to the contract for ``content_id`` and wait for confirmation.

        Never retried: a second submission could pay twice.
        """
        if not self.account:
            raise PurchaseRejected("No wallet account is connected.")
        value_wei = to_wei(amount)
        contract = await self._bound_contract()
        try:
            receipt = await contract.donate_with_image(content_id, value_wei, self.account)
        except GalleryError:
            raise
        except Exception as exc:
            logger.exception("donateWithImage failed for %s", content_id)
            raise NetworkError() from exc
        logger.info(
            "Purchase confirmed: content_id=%s value_wei=%s tx=%s block=%s",
            content_id, value_wei, receipt.tx_hash, receipt.block_number,
        )
        return receipt

    async def aclose(self) -> None:
        await self.provider.aclose()

    async def _bound_contract(self) -> DonationPlatformContract:
        if self._contract is None:
            try:
                self._contract = await self.provider.bind_contract(self.contract_address)
            except ConfigUnavailable:
                raise
            except Exception as exc:
                logger.warning("Could not bind contract at %s: %s", self.contract_address, exc)
                raise ConfigUnavailable() from exc
        return self._contract


# Singleton gateway
_gateway: ContractGateway | None = None


def get_contract_gateway() -> ContractGateway:
    """Get or create the global contract gateway for the configured PAYMENT_MODE."""
    global _gateway
    if _gateway is None:
        if settings.payment_mode == "simulated":
            from donation_gallery.services.simulated_wallet import SimulatedWalletProvider

            provider: WalletProvider = SimulatedWalletProvider(
                commission_rate=settings.simulated_commission_rate,
                recipient=settings.simulated_recipient,
                image_price_wei=settings.simulated_image_price_wei,
            )
        else:
            from donation_gallery.services.web3_provider import Web3WalletProvider

            provider = Web3WalletProvider(
                rpc_url=settings.wallet_rpc_url,
                confirmation_timeout=settings.confirmation_timeout_seconds,
            )
        _gateway = ContractGateway(provider, settings.donation_contract_address)
    return _gateway

"""Per-process session state.

One :class:`SessionState` is created when the app starts and lives until the
process is restarted; nothing is persisted.
"""

import asyncio
import logging

from donation_gallery.config import settings
from donation_gallery.core.accounting import format_amount
from donation_gallery.models.contract import ContractConfig
from donation_gallery.models.listing import UploadDraft
from donation_gallery.services.listing_service import ListingStore

logger = logging.getLogger(__name__)


class SessionState:
    def __init__(
        self,
        default_commission_rate: int = 10,
        default_recipient: str = "",
        default_price: str = "0.01",
        currency: str = "ETH",
    ):
        self.wallet_address: str | None = None
        self.contract_config: ContractConfig | None = None
        self.listings = ListingStore()
        self.draft = UploadDraft(price=default_price)
        self.status: str = ""
        self.currency = currency
        self._default_commission_rate = default_commission_rate
        self._default_recipient = default_recipient
        # One in-flight workflow of each kind
        self.upload_lock = asyncio.Lock()
        self.purchase_lock = asyncio.Lock()

    @property
    def commission_rate(self) -> int:
        if self.contract_config is not None:
            return self.contract_config.commission_rate
        return self._default_commission_rate

    @property
    def recipient(self) -> str:
        if self.contract_config is not None:
            return self.contract_config.recipient
        return self._default_recipient

    def apply_config(self, config: ContractConfig) -> None:
        """Cache a fresh contract snapshot and pre-fill the price with its minimum."""
        self.contract_config = config
        self.draft.price = format_amount(config.minimum_price)

    def set_status(self, message: str) -> str:
        self.status = message
        logger.info("Status: %s", message)
        return message


_session: SessionState | None = None


def get_session() -> SessionState:
    """FastAPI dependency returning the process-wide session."""
    global _session
    if _session is None:
        _session = SessionState(
            default_commission_rate=settings.default_commission_rate,
            default_recipient=settings.default_recipient,
            default_price=settings.default_asking_price,
            currency=settings.currency_symbol,
        )
    return _session

"""Purchase workflow: pay the DonationPlatform contract for a listed image.

States:
  IDLE: nothing submitted yet
  VALIDATING: asking price checked against the cached contract minimum
  SUBMITTING: waiting for the wallet signature and block confirmation
  CONFIRMED: payment mined, split reported
  REJECTED: validation failure, wallet decline, network or config error

The listing store is never touched: an image can be bought any number of times.
"""

import enum
import logging
from dataclasses import dataclass

from donation_gallery.core.accounting import (
    PurchaseResult,
    describe_purchase,
    format_amount,
    parse_price,
    split_payment,
)
from donation_gallery.core.exceptions import (
    BelowMinimumPrice,
    ConfigUnavailable,
    GalleryError,
    NetworkError,
    PurchaseRejected,
    WorkflowBusy,
)
from donation_gallery.models.contract import TransactionReceipt
from donation_gallery.models.listing import Listing
from donation_gallery.services.contract_service import ContractGateway
from donation_gallery.session import SessionState

logger = logging.getLogger(__name__)


class PurchaseState(enum.Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    SUBMITTING = "submitting"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"


@dataclass(frozen=True)
class PurchaseOutcome:
    state: PurchaseState
    message: str
    listing: Listing
    result: PurchaseResult | None = None
    receipt: TransactionReceipt | None = None
    error: GalleryError | None = None

    @property
    def ok(self) -> bool:
        return self.state == PurchaseState.CONFIRMED


class PurchaseWorkflow:
    def __init__(self, session: SessionState, gateway: ContractGateway):
        self.session = session
        self.gateway = gateway
        self.state = PurchaseState.IDLE

    async def run(self, listing: Listing) -> PurchaseOutcome:
        """Buy ``listing`` at its asking price and return the outcome; never raises."""
        if self.session.purchase_lock.locked():
            return self._reject(listing, WorkflowBusy("purchase"))

        async with self.session.purchase_lock:
            # Split is computed with the rate cached when the purchase started
            commission_rate = self.session.commission_rate
            recipient = self.session.recipient
            config = self.session.contract_config
            currency = self.session.currency

            self.state = PurchaseState.VALIDATING
            try:
                price = parse_price(listing.asking_price)
                if config is not None and price < config.minimum_price:
                    raise BelowMinimumPrice(
                        offered=listing.asking_price,
                        minimum=format_amount(config.minimum_price),
                        currency=currency,
                    )
            except GalleryError as exc:
                return self._reject(listing, exc)

            self.state = PurchaseState.SUBMITTING
            self.session.set_status("Sending transaction to the DonationPlatform contract...")
            try:
                accounts = await self.gateway.request_accounts()
                if not accounts:
                    raise PurchaseRejected("The wallet did not share any account.")
                self.session.wallet_address = accounts[0]
                receipt = await self.gateway.submit_purchase(listing.content_id, price)
            except GalleryError as exc:
                logger.warning("Purchase of listing %s failed: %s", listing.id, exc.detail)
                return self._reject(listing, exc)

            result = split_payment(price, commission_rate)
            self.state = PurchaseState.CONFIRMED
            message = self.session.set_status(describe_purchase(result, recipient, currency))
            return PurchaseOutcome(
                state=self.state,
                message=message,
                listing=listing,
                result=result,
                receipt=receipt,
            )

    def _reject(self, listing: Listing, error: GalleryError) -> PurchaseOutcome:
        self.state = PurchaseState.REJECTED
        if isinstance(error, (PurchaseRejected, NetworkError, ConfigUnavailable)):
            message = f"Error completing the purchase: {error.detail}"
        else:
            message = error.detail
        message = self.session.set_status(message)
        return PurchaseOutcome(state=self.state, message=message, listing=listing, error=error)

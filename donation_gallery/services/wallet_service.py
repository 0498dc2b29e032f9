import logging

from donation_gallery.core.exceptions import ConfigUnavailable, GalleryError
from donation_gallery.models.contract import ContractConfig
from donation_gallery.services.contract_service import ContractGateway
from donation_gallery.session import SessionState

logger = logging.getLogger(__name__)


async def refresh_contract_config(session: SessionState, gateway: ContractGateway) -> ContractConfig | None:
    """Re-read the contract configuration into the session. Returns None on failure."""
    try:
        config = await gateway.fetch_config()
    except ConfigUnavailable as exc:
        session.set_status(exc.detail)
        return None
    session.apply_config(config)
    return config


async def connect_wallet(session: SessionState, gateway: ContractGateway) -> str:
    """Request wallet access, then load the contract configuration. Returns the status line."""
    try:
        accounts = await gateway.request_accounts()
    except GalleryError as exc:
        logger.warning("Wallet connection failed: %s", exc.detail)
        return session.set_status("Error connecting the wallet.")
    if not accounts:
        return session.set_status("Wallet connection was declined.")

    session.wallet_address = accounts[0]
    session.set_status("Wallet connected.")
    # A config failure replaces the status but the wallet stays connected
    await refresh_contract_config(session, gateway)
    return session.status

from fastapi import APIRouter, Depends

from donation_gallery import __version__
from donation_gallery.config import settings
from donation_gallery.schemas.common import HealthResponse, StatusResponse
from donation_gallery.session import SessionState, get_session

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(session: SessionState = Depends(get_session)):
    return HealthResponse(
        status="healthy",
        version=__version__,
        payment_mode=settings.payment_mode,
        storage_mode=settings.storage_mode,
        listings_count=len(session.listings),
        contract_config_loaded=session.contract_config is not None,
    )


@router.get("/status", response_model=StatusResponse)
async def get_status(session: SessionState = Depends(get_session)):
    return StatusResponse(status=session.status, wallet_address=session.wallet_address)

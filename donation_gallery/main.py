"""Donation Gallery: sell images stored on IPFS through the DonationPlatform contract."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from donation_gallery import __version__
from donation_gallery.config import settings, validate_settings

logger = logging.getLogger(__name__)
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    from donation_gallery.services.contract_service import get_contract_gateway
    from donation_gallery.services.storage_service import get_storage
    from donation_gallery.services.wallet_service import refresh_contract_config
    from donation_gallery.session import get_session

    gateway = get_contract_gateway()
    storage = get_storage()

    # Startup: best-effort preload of the contract configuration
    config = await refresh_contract_config(get_session(), gateway)
    if config is None:
        logger.warning("Contract configuration not available at startup; using defaults until wallet connect")

    yield

    # Shutdown: close RPC and IPFS clients
    await gateway.aclose()
    await storage.aclose()


def create_app() -> FastAPI:
    validate_settings(settings)

    app = FastAPI(
        title="Donation Gallery",
        description="Upload images to IPFS and sell them through a donation-splitting contract",
        version=__version__,
        lifespan=lifespan,
    )

    # CORS configurable via CORS_ORIGINS env var
    allowed_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    from donation_gallery.api import API_PREFIX, API_ROUTERS, ROOT_ROUTERS

    for router in API_ROUTERS:
        app.include_router(router, prefix=API_PREFIX)

    for router in ROOT_ROUTERS:
        app.include_router(router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.gallery_host, port=settings.gallery_port)

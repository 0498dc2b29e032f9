"""Shared fixtures for the donation gallery test suite.

Every test gets a fresh session, an on-disk content store under tmp_path and
a simulated wallet whose contract reports a 10% commission, recipient "R" and
a 0.01 ETH minimum price.
"""

import pytest

from donation_gallery.models.contract import ContractConfig
from donation_gallery.services.contract_service import ContractGateway
from donation_gallery.services.simulated_wallet import SimulatedWalletProvider
from donation_gallery.session import SessionState
from donation_gallery.storage.local import LocalStorageGateway

BUYER = "0x00000000000000000000000000000000000000b0"
CONTRACT_ADDRESS = "0xB6CA37e7c6114d4E661b425A5DCbcFd334dB7b97"
DEFAULT_RECIPIENT = "0x9ca138540fd77eaf4e82bc51eed9b81c647a5c2b"


@pytest.fixture
def session():
    return SessionState(
        default_commission_rate=10,
        default_recipient=DEFAULT_RECIPIENT,
        default_price="0.01",
        currency="ETH",
    )


@pytest.fixture
def storage(tmp_path):
    return LocalStorageGateway(root_dir=str(tmp_path / "content_store"), gateway_url="http://test")


@pytest.fixture
def provider():
    return SimulatedWalletProvider(
        commission_rate=10,
        recipient="R",
        image_price_wei=10**16,
        accounts=[BUYER],
    )


@pytest.fixture
def gateway(provider):
    return ContractGateway(provider, CONTRACT_ADDRESS)


@pytest.fixture
def loaded_config():
    return ContractConfig(commission_rate=10, recipient="R", minimum_price_wei=10**16)


@pytest.fixture
async def client(session, storage, gateway):
    """httpx AsyncClient wired to the FastAPI app with test session and gateways."""
    import httpx

    from donation_gallery.main import app
    from donation_gallery.services.contract_service import get_contract_gateway
    from donation_gallery.services.storage_service import get_storage
    from donation_gallery.session import get_session

    app.dependency_overrides[get_session] = lambda: session
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_contract_gateway] = lambda: gateway

    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()

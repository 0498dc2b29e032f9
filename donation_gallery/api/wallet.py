from fastapi import APIRouter, Depends

from donation_gallery.core.accounting import format_amount
from donation_gallery.schemas.contract import ContractInfoResponse, WalletConnectResponse
from donation_gallery.services import wallet_service
from donation_gallery.services.contract_service import ContractGateway, get_contract_gateway
from donation_gallery.session import SessionState, get_session

router = APIRouter(tags=["wallet"])


@router.post("/wallet/connect", response_model=WalletConnectResponse)
async def connect_wallet(
    session: SessionState = Depends(get_session),
    gateway: ContractGateway = Depends(get_contract_gateway),
):
    status = await wallet_service.connect_wallet(session, gateway)
    return WalletConnectResponse(
        connected=session.wallet_address is not None,
        wallet_address=session.wallet_address,
        status=status,
        contract=_contract_info(session, gateway),
    )


@router.get("/contract", response_model=ContractInfoResponse)
async def get_contract_info(
    session: SessionState = Depends(get_session),
    gateway: ContractGateway = Depends(get_contract_gateway),
):
    return _contract_info(session, gateway)


def _contract_info(session: SessionState, gateway: ContractGateway) -> ContractInfoResponse:
    config = session.contract_config
    return ContractInfoResponse(
        contract_address=gateway.contract_address,
        loaded=config is not None,
        recipient=session.recipient,
        commission_rate=session.commission_rate,
        minimum_price=format_amount(config.minimum_price) if config else None,
        currency=session.currency,
    )

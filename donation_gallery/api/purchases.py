from fastapi import APIRouter, Depends

from donation_gallery.api.listings import find_listing, split_to_response
from donation_gallery.schemas.purchase import PurchaseResponse
from donation_gallery.services.contract_service import ContractGateway, get_contract_gateway
from donation_gallery.services.purchase_service import PurchaseWorkflow
from donation_gallery.session import SessionState, get_session

router = APIRouter(prefix="/listings", tags=["purchases"])


@router.post("/{listing_id}/purchase", response_model=PurchaseResponse)
async def purchase_listing(
    listing_id: int,
    session: SessionState = Depends(get_session),
    gateway: ContractGateway = Depends(get_contract_gateway),
):
    listing = find_listing(session, listing_id)
    outcome = await PurchaseWorkflow(session, gateway).run(listing)
    return PurchaseResponse(
        state=outcome.state.value,
        status=outcome.message,
        listing_id=listing.id,
        tx_hash=outcome.receipt.tx_hash if outcome.receipt else None,
        block_number=outcome.receipt.block_number if outcome.receipt else None,
        split=split_to_response(outcome.result) if outcome.result else None,
    )

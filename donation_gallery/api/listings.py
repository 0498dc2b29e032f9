from fastapi import APIRouter, Depends, File, Form, HTTPException, Response, UploadFile

from donation_gallery.core.accounting import PurchaseResult, format_amount
from donation_gallery.core.exceptions import ListingNotFoundError
from donation_gallery.models.listing import Listing
from donation_gallery.schemas.listing import (
    GalleryItemResponse,
    GalleryResponse,
    ListingResponse,
    SplitResponse,
    UploadResponse,
)
from donation_gallery.services import listing_service
from donation_gallery.services.storage_service import get_storage
from donation_gallery.services.upload_service import UploadWorkflow
from donation_gallery.session import SessionState, get_session
from donation_gallery.storage.base import StorageGateway

router = APIRouter(prefix="/listings", tags=["listings"])


@router.get("", response_model=GalleryResponse)
async def list_gallery(session: SessionState = Depends(get_session)):
    items = listing_service.gallery(
        session.listings, session.commission_rate, session.recipient, session.currency
    )
    return GalleryResponse(
        total=len(items),
        recipient=session.recipient,
        commission_rate=session.commission_rate,
        currency=session.currency,
        results=[
            GalleryItemResponse(
                listing=_listing_to_response(item.listing),
                split=split_to_response(item.split) if item.split else None,
                split_summary=item.split_summary,
            )
            for item in items
        ],
    )


@router.post("", response_model=UploadResponse)
async def upload_listing(
    response: Response,
    title: str = Form(""),
    price: str | None = Form(None),
    file: UploadFile | None = File(None),
    session: SessionState = Depends(get_session),
    storage: StorageGateway = Depends(get_storage),
):
    blob = await file.read() if file is not None else None

    # An in-flight upload owns the draft until it finishes
    draft = session.draft
    if not session.upload_lock.locked():
        draft.title = title
        if price is not None:
            draft.price = price
        draft.blob = blob
        draft.filename = file.filename if file is not None else None

    outcome = await UploadWorkflow(session, storage).run(draft)
    if outcome.ok:
        response.status_code = 201
    return UploadResponse(
        state=outcome.state.value,
        status=outcome.message,
        listing=_listing_to_response(outcome.listing) if outcome.listing else None,
        draft_price=draft.price,
    )


@router.get("/{listing_id}", response_model=ListingResponse)
async def get_listing(listing_id: int, session: SessionState = Depends(get_session)):
    return _listing_to_response(find_listing(session, listing_id))


def find_listing(session: SessionState, listing_id: int) -> Listing:
    try:
        return session.listings.get(listing_id)
    except ListingNotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.detail)


def split_to_response(result: PurchaseResult) -> SplitResponse:
    return SplitResponse(
        total_paid=format_amount(result.total_paid),
        donated_amount=format_amount(result.donated_amount),
        owner_amount=format_amount(result.owner_amount),
        commission_rate=result.commission_rate,
        owner_rate=result.owner_rate,
    )


def _listing_to_response(listing: Listing) -> ListingResponse:
    return ListingResponse.model_validate(listing)

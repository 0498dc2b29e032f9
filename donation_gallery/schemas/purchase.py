from pydantic import BaseModel

from donation_gallery.schemas.listing import SplitResponse


class PurchaseResponse(BaseModel):
    state: str
    status: str
    listing_id: int
    tx_hash: str | None = None
    block_number: int | None = None
    split: SplitResponse | None = None

from datetime import datetime

from pydantic import BaseModel


class SplitResponse(BaseModel):
    total_paid: str
    donated_amount: str
    owner_amount: str
    commission_rate: int
    owner_rate: int


class ListingResponse(BaseModel):
    id: int
    title: str
    content_id: str
    retrieval_url: str
    asking_price: str
    created_at: datetime

    model_config = {"from_attributes": True}


class GalleryItemResponse(BaseModel):
    listing: ListingResponse
    split: SplitResponse | None = None
    split_summary: str


class GalleryResponse(BaseModel):
    total: int
    recipient: str
    commission_rate: int
    currency: str
    results: list[GalleryItemResponse]


class UploadResponse(BaseModel):
    state: str
    status: str
    listing: ListingResponse | None = None
    # Price field value to show in the form for the next upload
    draft_price: str

from dataclasses import dataclass

from donation_gallery.core.accounting import PurchaseResult, describe_split, parse_price, split_payment
from donation_gallery.core.exceptions import ListingNotFoundError, ValidationError
from donation_gallery.models.listing import Listing


class ListingStore:
    """Session-scoped, append-only gallery of listings.

    Ids are ``previous count + 1``. ``add`` never suspends, so two uploads
    finishing on the same event loop cannot receive the same id.
    """

    def __init__(self) -> None:
        self._listings: list[Listing] = []

    def add(self, title: str, content_id: str, retrieval_url: str, asking_price: str) -> Listing:
        listing = Listing(
            id=len(self._listings) + 1,
            title=title,
            content_id=content_id,
            retrieval_url=retrieval_url,
            asking_price=asking_price,
        )
        self._listings.append(listing)
        return listing

    def get(self, listing_id: int) -> Listing:
        if 1 <= listing_id <= len(self._listings):
            return self._listings[listing_id - 1]
        raise ListingNotFoundError(listing_id)

    def all(self) -> tuple[Listing, ...]:
        return tuple(self._listings)

    def __len__(self) -> int:
        return len(self._listings)

    def __iter__(self):
        return iter(tuple(self._listings))


@dataclass(frozen=True)
class GalleryItem:
    listing: Listing
    split: PurchaseResult | None
    split_summary: str


def gallery_item(listing: Listing, commission_rate: int, recipient: str, currency: str = "ETH") -> GalleryItem:
    """Listing plus the split a purchase at its asking price would produce."""
    try:
        split = split_payment(parse_price(listing.asking_price), commission_rate)
    except ValidationError as exc:
        return GalleryItem(listing=listing, split=None, split_summary=exc.detail)
    return GalleryItem(
        listing=listing,
        split=split,
        split_summary="Of each purchase: " + describe_split(split, recipient, currency),
    )


def gallery(store: ListingStore, commission_rate: int, recipient: str, currency: str = "ETH") -> list[GalleryItem]:
    return [gallery_item(listing, commission_rate, recipient, currency) for listing in store]

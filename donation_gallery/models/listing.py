from dataclasses import dataclass, field
from datetime import datetime, timezone


def utcnow():
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Listing:
    id: int
    title: str
    content_id: str  # opaque storage identifier, e.g. a CID
    retrieval_url: str
    asking_price: str  # decimal string in ETH, validated at purchase time
    created_at: datetime = field(default_factory=utcnow)


@dataclass
class UploadDraft:
    """Upload form inputs. Title and file are cleared after a successful upload; price is kept."""

    price: str
    title: str = ""
    blob: bytes | None = None
    filename: str | None = None

    def clear_file_inputs(self) -> None:
        self.title = ""
        self.blob = None
        self.filename = None

"""Upload workflow: store an image, publish it, and add it to the gallery.

States:
  IDLE: nothing submitted yet
  UPLOADING: blob is being stored/published
  DONE: listing appended, draft title/file cleared
  FAILED: validation or storage failure, no listing created
"""

import enum
import logging
from dataclasses import dataclass

from donation_gallery.config import settings
from donation_gallery.core.accounting import parse_price
from donation_gallery.core.exceptions import GalleryError, ValidationError, WorkflowBusy
from donation_gallery.models.listing import Listing, UploadDraft
from donation_gallery.session import SessionState
from donation_gallery.storage.base import StorageGateway

logger = logging.getLogger(__name__)


class UploadState(enum.Enum):
    IDLE = "idle"
    UPLOADING = "uploading"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class UploadOutcome:
    state: UploadState
    message: str
    listing: Listing | None = None
    error: GalleryError | None = None

    @property
    def ok(self) -> bool:
        return self.state == UploadState.DONE


class UploadWorkflow:
    def __init__(self, session: SessionState, storage: StorageGateway, max_upload_bytes: int | None = None):
        self.session = session
        self.storage = storage
        self.max_upload_bytes = max_upload_bytes if max_upload_bytes is not None else settings.max_upload_bytes
        self.state = UploadState.IDLE

    async def run(self, draft: UploadDraft | None = None) -> UploadOutcome:
        """Upload the session's draft (or ``draft``) and return the outcome; never raises."""
        draft = draft or self.session.draft
        if self.session.upload_lock.locked():
            return self._fail(WorkflowBusy("upload"))

        async with self.session.upload_lock:
            try:
                title, price = self._validate(draft)
            except ValidationError as exc:
                return self._fail(exc)

            self.state = UploadState.UPLOADING
            self.session.set_status("Uploading image to IPFS...")
            try:
                content_id = await self.storage.store(draft.blob)
                await self.storage.publish(content_id)
            except GalleryError as exc:
                logger.warning("Upload of '%s' failed: %s", title, exc.detail)
                return self._fail(exc, message="Error uploading the image to IPFS.")

            listing = self.session.listings.add(
                title=title,
                content_id=content_id,
                retrieval_url=self.storage.resolve_url(content_id),
                asking_price=price,
            )
            draft.clear_file_inputs()
            self.state = UploadState.DONE
            message = self.session.set_status(f"Image uploaded. CID: {content_id}")
            logger.info("Listing %s created for %s at %s", listing.id, content_id, price)
            return UploadOutcome(state=self.state, message=message, listing=listing)

    def _validate(self, draft: UploadDraft) -> tuple[str, str]:
        if not draft.blob:
            raise ValidationError("Select an image file.")
        if not draft.title or not draft.title.strip():
            raise ValidationError("Give the image a title.")
        if len(draft.blob) > self.max_upload_bytes:
            raise ValidationError(
                f"The image is larger than the upload limit of {self.max_upload_bytes} bytes."
            )
        price = parse_price(draft.price)
        return draft.title.strip(), format(price, "f")

    def _fail(self, error: GalleryError, message: str | None = None) -> UploadOutcome:
        self.state = UploadState.FAILED
        message = self.session.set_status(message or error.detail)
        return UploadOutcome(state=self.state, message=message, error=error)

import hashlib
import logging
from pathlib import Path

from donation_gallery.core.exceptions import StorageUnavailable
from donation_gallery.storage.base import StorageGateway

logger = logging.getLogger(__name__)


class LocalStorageGateway(StorageGateway):
    """On-disk content-addressed store used when no IPFS node is available.

    Blobs live in a sharded tree keyed by their SHA-256 hex digest:
        root/objects/ab/cd/abcdef1234567890...

    Publishing drops an empty marker under ``root/published/`` so the set of
    listed identifiers survives alongside the blobs. Content is served back by
    the app at ``<gateway_url>/ipfs/<content_id>``.
    """

    def __init__(self, root_dir: str, gateway_url: str, depth: int = 2, width: int = 2):
        self.root = Path(root_dir)
        self.gateway_url = gateway_url.rstrip("/")
        self.depth = depth
        self.width = width
        self._objects = self.root / "objects"
        self._published = self.root / "published"

    async def store(self, blob: bytes) -> str:
        content_id = self.compute_content_id(blob)
        path = self._object_path(content_id)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            if not path.exists():
                path.write_bytes(blob)
        except OSError as exc:
            logger.exception("Local content store write failed for %s", content_id)
            raise StorageUnavailable() from exc
        return content_id

    async def publish(self, content_id: str) -> None:
        if not self.exists(content_id):
            raise StorageUnavailable(f"Content {content_id} has not been stored")
        marker = self._published / content_id
        try:
            self._published.mkdir(parents=True, exist_ok=True)
            marker.touch(exist_ok=True)
        except OSError as exc:
            logger.exception("Could not publish %s", content_id)
            raise StorageUnavailable() from exc

    def resolve_url(self, content_id: str) -> str:
        return f"{self.gateway_url}/ipfs/{content_id}"

    def get(self, content_id: str) -> bytes | None:
        """Return stored bytes, or None for unknown or malformed identifiers."""
        if not self._is_valid(content_id):
            return None
        path = self._object_path(content_id)
        if path.is_file():
            return path.read_bytes()
        return None

    def exists(self, content_id: str) -> bool:
        return self._is_valid(content_id) and self._object_path(content_id).is_file()

    def is_published(self, content_id: str) -> bool:
        return self._is_valid(content_id) and (self._published / content_id).is_file()

    @staticmethod
    def compute_content_id(blob: bytes) -> str:
        return hashlib.sha256(blob).hexdigest()

    def _object_path(self, content_id: str) -> Path:
        parts = [
            content_id[i * self.width : (i + 1) * self.width]
            for i in range(self.depth)
        ]
        return self._objects / Path(*parts) / content_id

    @staticmethod
    def _is_valid(content_id: str) -> bool:
        # Only 64 lowercase hex chars can map into the tree, no path traversal
        return len(content_id) == 64 and all(c in "0123456789abcdef" for c in content_id)

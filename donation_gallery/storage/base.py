from abc import ABC, abstractmethod


class StorageGateway(ABC):
    """Content-addressed storage node: identical bytes always get the same identifier."""

    @abstractmethod
    async def store(self, blob: bytes) -> str:
        """Upload ``blob`` and return its content identifier.

        Raises:
            StorageUnavailable: the node could not be reached or refused the upload
        """
        ...

    @abstractmethod
    async def publish(self, content_id: str) -> None:
        """Make ``content_id`` discoverable in the listing namespace. Idempotent."""
        ...

    @abstractmethod
    def resolve_url(self, content_id: str) -> str:
        """Retrieval URL for ``content_id``. Pure, no network call."""
        ...

    async def aclose(self) -> None:
        return None

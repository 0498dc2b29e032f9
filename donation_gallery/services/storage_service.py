from donation_gallery.config import settings
from donation_gallery.storage.base import StorageGateway

# Singleton storage instance
_storage: StorageGateway | None = None


def get_storage() -> StorageGateway:
    """Get or create the global storage gateway.

    Uses the Kubo RPC API when STORAGE_MODE=kubo, otherwise the local
    content-addressed store served by this app.
    """
    global _storage
    if _storage is None:
        if settings.storage_mode == "kubo":
            from donation_gallery.storage.kubo import KuboStorageGateway
            _storage = KuboStorageGateway(
                api_url=settings.ipfs_api_url,
                gateway_url=settings.ipfs_gateway_url,
                publish_dir=settings.ipfs_publish_dir,
                timeout=settings.ipfs_timeout_seconds,
            )
        else:
            from donation_gallery.storage.local import LocalStorageGateway
            _storage = LocalStorageGateway(
                root_dir=settings.content_store_path,
                gateway_url=settings.local_gateway_url,
            )
    return _storage

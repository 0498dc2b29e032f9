from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from donation_gallery.services.storage_service import get_storage
from donation_gallery.storage.base import StorageGateway
from donation_gallery.storage.local import LocalStorageGateway

router = APIRouter(tags=["content"])


@router.get("/ipfs/{content_id}")
async def get_content(content_id: str, storage: StorageGateway = Depends(get_storage)):
    """Serve images held by the local content store (STORAGE_MODE=local)."""
    if not isinstance(storage, LocalStorageGateway):
        raise HTTPException(status_code=404, detail="Content is served by the IPFS gateway")
    data = storage.get(content_id)
    if data is None:
        raise HTTPException(status_code=404, detail=f"Content {content_id} not found")
    return Response(
        content=data,
        media_type="application/octet-stream",
        headers={"Cache-Control": "public, max-age=31536000, immutable"},
    )

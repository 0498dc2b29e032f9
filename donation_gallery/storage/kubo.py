"""Kubo (go-ipfs) HTTP RPC adapter.

Only the two RPC calls the gallery needs are wrapped:

- ``POST /add``       upload a blob, returns ``{"Hash": <cid>, ...}``
- ``POST /files/cp``  copy ``/ipfs/<cid>`` into the MFS publish directory so
                      the image shows up in the node's "Files" view

Kubo answers RPC errors with HTTP 500 and a ``{"Message": ..., "Type": "error"}``
body.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from donation_gallery.core.exceptions import StorageUnavailable
from donation_gallery.storage.base import StorageGateway

logger = logging.getLogger(__name__)

_ALREADY_PUBLISHED = "already has entry"


class KuboStorageGateway(StorageGateway):
    def __init__(
        self,
        api_url: str = "http://127.0.0.1:5001/api/v0",
        gateway_url: str = "http://127.0.0.1:8080",
        publish_dir: str = "/",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_url = api_url.rstrip("/")
        self.gateway_url = gateway_url.rstrip("/")
        self.publish_dir = "/" + publish_dir.strip("/")
        self._client = httpx.AsyncClient(
            base_url=self.api_url,
            timeout=timeout,
            transport=transport,
        )

    async def store(self, blob: bytes) -> str:
        try:
            resp = await self._client.post("/add", files={"file": ("blob", blob)})
        except httpx.HTTPError as exc:
            logger.warning("IPFS node unreachable at %s: %s", self.api_url, exc)
            raise StorageUnavailable() from exc
        data = self._json_or_raise(resp, "add")
        content_id = data.get("Hash")
        if not content_id:
            logger.error("IPFS add returned no Hash: %s", data)
            raise StorageUnavailable()
        return content_id

    async def publish(self, content_id: str) -> None:
        destination = f"{self.publish_dir.rstrip('/')}/{content_id}"
        params = [("arg", f"/ipfs/{content_id}"), ("arg", destination)]
        try:
            resp = await self._client.post("/files/cp", params=params)
        except httpx.HTTPError as exc:
            logger.warning("IPFS node unreachable at %s: %s", self.api_url, exc)
            raise StorageUnavailable() from exc
        if resp.status_code != 200 and _ALREADY_PUBLISHED in self._error_message(resp):
            logger.info("%s already published at %s", content_id, destination)
            return
        self._json_or_raise(resp, "files/cp")

    def resolve_url(self, content_id: str) -> str:
        return f"{self.gateway_url}/ipfs/{content_id}"

    async def aclose(self) -> None:
        await self._client.aclose()

    def _json_or_raise(self, resp: httpx.Response, call: str) -> dict[str, Any]:
        if resp.status_code != 200:
            logger.error("IPFS %s failed (%s): %s", call, resp.status_code, self._error_message(resp))
            raise StorageUnavailable()
        if not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError as exc:
            logger.error("IPFS %s returned a non-JSON body", call)
            raise StorageUnavailable() from exc

    @staticmethod
    def _error_message(resp: httpx.Response) -> str:
        try:
            return str(resp.json().get("Message", ""))
        except (ValueError, AttributeError):
            return resp.text

"""Tests for the local content store and the Kubo RPC adapter.

The Kubo adapter is exercised against httpx.MockTransport handlers that mimic
the node's /add and /files/cp responses.
"""

import hashlib

import httpx
import pytest

from donation_gallery.core.exceptions import StorageUnavailable
from donation_gallery.storage.kubo import KuboStorageGateway
from donation_gallery.storage.local import LocalStorageGateway


# ============================================================================
# LocalStorageGateway
# ============================================================================


class TestLocalStorageGateway:
    async def test_content_id_is_sha256_of_bytes(self, storage):
        content_id = await storage.store(b"pixels")
        assert content_id == hashlib.sha256(b"pixels").hexdigest()

    async def test_same_bytes_same_id(self, storage):
        first = await storage.store(b"pixels")
        second = await storage.store(b"pixels")
        assert first == second

    async def test_different_bytes_different_id(self, storage):
        assert await storage.store(b"a") != await storage.store(b"b")

    async def test_stored_bytes_round_trip(self, storage):
        content_id = await storage.store(b"pixels")
        assert storage.get(content_id) == b"pixels"

    async def test_objects_are_sharded(self, storage):
        content_id = await storage.store(b"pixels")
        expected = storage.root / "objects" / content_id[:2] / content_id[2:4] / content_id
        assert expected.is_file()

    async def test_publish_marks_content(self, storage):
        content_id = await storage.store(b"pixels")
        assert not storage.is_published(content_id)
        await storage.publish(content_id)
        assert storage.is_published(content_id)

    async def test_publish_twice_is_noop(self, storage):
        content_id = await storage.store(b"pixels")
        await storage.publish(content_id)
        await storage.publish(content_id)
        assert storage.is_published(content_id)

    async def test_publish_unknown_content_fails(self, storage):
        with pytest.raises(StorageUnavailable):
            await storage.publish("0" * 64)

    def test_resolve_url(self, storage):
        assert storage.resolve_url("abc") == "http://test/ipfs/abc"

    @pytest.mark.parametrize("content_id", ["../../etc/passwd", "ABC", "", "g" * 64])
    def test_malformed_ids_never_resolve(self, storage, content_id):
        assert storage.get(content_id) is None
        assert storage.exists(content_id) is False

    async def test_unwritable_root_raises_storage_unavailable(self, tmp_path):
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("x")
        store = LocalStorageGateway(root_dir=str(blocker), gateway_url="http://test")
        with pytest.raises(StorageUnavailable):
            await store.store(b"pixels")


# ============================================================================
# KuboStorageGateway
# ============================================================================


def _kubo(handler) -> KuboStorageGateway:
    return KuboStorageGateway(
        api_url="http://127.0.0.1:5001/api/v0",
        gateway_url="http://127.0.0.1:8080",
        transport=httpx.MockTransport(handler),
    )


def _add_response(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"Name": "blob", "Hash": "QmTestCid", "Size": "12"})


class TestKuboStore:
    async def test_add_returns_hash(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["method"] = request.method
            seen["body"] = request.read()
            return _add_response(request)

        gateway = _kubo(handler)
        assert await gateway.store(b"pixels") == "QmTestCid"
        assert seen["path"] == "/api/v0/add"
        assert seen["method"] == "POST"
        assert b"pixels" in seen["body"]
        await gateway.aclose()

    async def test_unreachable_node(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(StorageUnavailable):
            await _kubo(handler).store(b"pixels")

    async def test_rpc_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"Message": "repo locked", "Code": 0, "Type": "error"})

        with pytest.raises(StorageUnavailable):
            await _kubo(handler).store(b"pixels")

    async def test_missing_hash(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"Name": "blob"})

        with pytest.raises(StorageUnavailable):
            await _kubo(handler).store(b"pixels")

    async def test_non_json_body(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>proxy</html>")

        with pytest.raises(StorageUnavailable):
            await _kubo(handler).store(b"pixels")


class TestKuboPublish:
    async def test_copies_into_publish_dir(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["args"] = request.url.params.get_list("arg")
            return httpx.Response(200)

        await _kubo(handler).publish("QmTestCid")
        assert seen["path"] == "/api/v0/files/cp"
        assert seen["args"] == ["/ipfs/QmTestCid", "/QmTestCid"]

    async def test_nested_publish_dir(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["args"] = request.url.params.get_list("arg")
            return httpx.Response(200)

        gateway = KuboStorageGateway(publish_dir="/gallery/", transport=httpx.MockTransport(handler))
        await gateway.publish("QmTestCid")
        assert seen["args"][1] == "/gallery/QmTestCid"

    async def test_already_published_is_noop(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                500,
                json={
                    "Message": "cp: cannot put node in path /QmTestCid: directory already has entry by that name",
                    "Code": 0,
                    "Type": "error",
                },
            )

        await _kubo(handler).publish("QmTestCid")

    async def test_other_errors_raise(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"Message": "merkledag: not found", "Code": 0, "Type": "error"})

        with pytest.raises(StorageUnavailable):
            await _kubo(handler).publish("QmTestCid")

    def test_resolve_url_uses_gateway(self):
        gateway = _kubo(_add_response)
        assert gateway.resolve_url("QmTestCid") == "http://127.0.0.1:8080/ipfs/QmTestCid"

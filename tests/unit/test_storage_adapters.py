"""Unit tests for the local and Firebase storage adapters."""

import asyncio

import pytest
from aiohttp import test_utils, web

from product_ingest.infrastructure import (
    FirebaseObjectStorage,
    FirestoreDocumentStore,
    JsonDocumentStore,
    LocalObjectStorage,
    create_document_store,
    create_object_storage,
)
from product_ingest.infrastructure.catalog.firestore_catalog import (
    to_firestore_fields,
    to_firestore_value,
)
from product_ingest.utils.config import StorageConfig
from product_ingest.utils.exceptions import DocumentExistsError, StorageError


class TestLocalObjectStorage:
    """Test filesystem object storage."""

    @pytest.fixture
    def storage(self, tmp_path):
        return LocalObjectStorage(tmp_path / "objects")

    def test_put_writes_file(self, storage, tmp_path):
        url = asyncio.run(storage.put("products/images/abc", b"data", "image/jpeg"))

        path = tmp_path / "objects" / "products" / "images" / "abc"
        assert path.read_bytes() == b"data"
        assert url == path.resolve().as_uri()

    def test_put_existing_key(self, storage):
        asyncio.run(storage.put("k", b"1", "image/jpeg"))

        with pytest.raises(StorageError, match="already exists"):
            asyncio.run(storage.put("k", b"2", "image/jpeg"))

    @pytest.mark.parametrize("key", ["../outside", "a/../../b", ""])
    def test_key_escaping_root(self, storage, key):
        with pytest.raises(StorageError, match="Invalid storage key"):
            storage.path_for(key)

    def test_delete(self, storage):
        asyncio.run(storage.put("products/x", b"1", "image/jpeg"))
        asyncio.run(storage.delete("products/x"))

        assert not storage.path_for("products/x").exists()

    def test_delete_missing(self, storage):
        with pytest.raises(StorageError, match="not found"):
            asyncio.run(storage.delete("missing"))


class TestJsonDocumentStore:
    """Test the JSON-file document store."""

    @pytest.fixture
    def store(self, tmp_path):
        return JsonDocumentStore(tmp_path / "catalog")

    def test_add_and_load(self, store):
        document = {"id": "p-1", "name": "Sweater", "colors": [1, 2]}
        ack = asyncio.run(store.add("Products", document))

        assert ack.endswith("p-1.json")
        assert store.load("Products", "p-1") == document

    def test_identical_readd_is_confirmed(self, store):
        """Test re-adding the stored document returns the same path and writes nothing new."""
        document = {"id": "p-1", "name": "Sweater", "colors": [-65536]}
        first = asyncio.run(store.add("Products", document))
        second = asyncio.run(store.add("Products", dict(document)))

        assert second == first
        assert len(list(store.collection_dir("Products").iterdir())) == 1

    def test_duplicate_id_with_other_content(self, store):
        asyncio.run(store.add("Products", {"id": "p-1", "name": "Sweater"}))

        with pytest.raises(DocumentExistsError, match="already exists") as exc_info:
            asyncio.run(store.add("Products", {"id": "p-1", "name": "Scarf"}))

        assert exc_info.value.document_id == "p-1"
        assert exc_info.value.ack.endswith("p-1.json")
        assert store.load("Products", "p-1")["name"] == "Sweater"

    def test_unserializable_document(self, store):
        with pytest.raises(StorageError):
            asyncio.run(store.add("Products", {"id": "p-2", "bad": object()}))

    def test_load_missing(self, store):
        with pytest.raises(FileNotFoundError):
            store.load("Products", "nope")


class TestFirestoreEncoding:
    """Test conversion to Firestore typed values."""

    def test_scalars(self):
        assert to_firestore_value(None) == {"nullValue": None}
        assert to_firestore_value(True) == {"booleanValue": True}
        assert to_firestore_value(-65536) == {"integerValue": "-65536"}
        assert to_firestore_value(19.99) == {"doubleValue": 19.99}
        assert to_firestore_value("S") == {"stringValue": "S"}

    def test_nested(self):
        fields = to_firestore_fields({"sizes": ["S", "M"], "meta": {"n": 1}})

        assert fields == {
            "sizes": {"arrayValue": {"values": [{"stringValue": "S"}, {"stringValue": "M"}]}},
            "meta": {"mapValue": {"fields": {"n": {"integerValue": "1"}}}},
        }

    def test_unsupported_type(self):
        with pytest.raises(TypeError):
            to_firestore_value(object())


class TestFirebaseObjectStorage:
    """Test the Firebase Storage REST adapter against a local server."""

    def test_urls(self):
        storage = FirebaseObjectStorage(bucket="shop.appspot.com", base_url="https://fs.test/v0/b/")

        assert storage.object_url("products/images/a b") == (
            "https://fs.test/v0/b/shop.appspot.com/o/products%2Fimages%2Fa%20b"
        )
        assert storage.download_url("k", "tok").endswith("/o/k?alt=media&token=tok")

    def test_put_and_delete(self):
        received = {}

        async def upload(request):
            received["name"] = request.query["name"]
            received["content_type"] = request.headers["Content-Type"]
            received["auth"] = request.headers.get("Authorization")
            received["body"] = await request.read()
            return web.json_response({"name": request.query["name"], "downloadTokens": "tok1,tok2"})

        async def delete(request):
            received["deleted"] = True
            return web.Response(status=204)

        async def scenario():
            app = web.Application()
            app.router.add_post("/b/{bucket}/o", upload)
            app.router.add_route("DELETE", "/b/{bucket}/o/{name:.+}", delete)
            async with test_utils.TestServer(app) as server:
                storage = FirebaseObjectStorage(
                    bucket="shop", auth_token="secret", base_url=str(server.make_url("/b"))
                )
                try:
                    url = await storage.put("products/images/k1", b"jpeg", "image/jpeg")
                    await storage.delete("products/images/k1")
                finally:
                    await storage.close()
            return url

        url = asyncio.run(scenario())

        assert url.endswith("/shop/o/products%2Fimages%2Fk1?alt=media&token=tok1")
        assert received["name"] == "products/images/k1"
        assert received["content_type"] == "image/jpeg"
        assert received["auth"] == "Bearer secret"
        assert received["body"] == b"jpeg"
        assert received["deleted"] is True

    def test_http_error(self):
        async def upload(request):
            return web.json_response({"error": "denied"}, status=403)

        async def scenario():
            app = web.Application()
            app.router.add_post("/b/{bucket}/o", upload)
            async with test_utils.TestServer(app) as server:
                storage = FirebaseObjectStorage(bucket="shop", base_url=str(server.make_url("/b")))
                try:
                    await storage.put("k", b"x", "image/jpeg")
                finally:
                    await storage.close()

        with pytest.raises(StorageError) as exc_info:
            asyncio.run(scenario())

        assert exc_info.value.context["status_code"] == 403

    def test_missing_download_token(self):
        async def upload(request):
            return web.json_response({"name": "k"})

        async def scenario():
            app = web.Application()
            app.router.add_post("/b/{bucket}/o", upload)
            async with test_utils.TestServer(app) as server:
                storage = FirebaseObjectStorage(bucket="shop", base_url=str(server.make_url("/b")))
                try:
                    await storage.put("k", b"x", "image/jpeg")
                finally:
                    await storage.close()

        with pytest.raises(StorageError, match="no download token"):
            asyncio.run(scenario())


class TestFirestoreDocumentStore:
    """Test the Firestore REST adapter against a local server."""

    def test_collection_url(self):
        store = FirestoreDocumentStore(project_id="shop", base_url="https://fs.test/v1")

        assert store.collection_url("Products") == (
            "https://fs.test/v1/projects/shop/databases/(default)/documents/Products"
        )

    def test_add(self):
        received = {}

        async def create(request):
            received["path"] = request.path
            received["document_id"] = request.query.get("documentId")
            received["body"] = await request.json()
            return web.json_response({"name": "projects/shop/databases/(default)/documents/Products/p-1"})

        async def scenario():
            app = web.Application()
            app.router.add_post("/v1/{tail:.+}", create)
            async with test_utils.TestServer(app) as server:
                store = FirestoreDocumentStore(project_id="shop", base_url=str(server.make_url("/v1")))
                try:
                    return await store.add("Products", {"id": "p-1", "price": 2.5})
                finally:
                    await store.close()

        ack = asyncio.run(scenario())

        assert ack.endswith("/documents/Products/p-1")
        assert received["path"].endswith("/documents/Products")
        assert received["document_id"] == "p-1"
        assert received["body"] == {
            "fields": {"id": {"stringValue": "p-1"}, "price": {"doubleValue": 2.5}}
        }

    def test_add_existing_document(self):
        """Test a 409 from Firestore becomes DocumentExistsError naming the stored document."""
        async def create(request):
            return web.json_response(
                {"error": {"code": 409, "status": "ALREADY_EXISTS"}}, status=409
            )

        async def scenario():
            app = web.Application()
            app.router.add_post("/v1/{tail:.+}", create)
            async with test_utils.TestServer(app) as server:
                store = FirestoreDocumentStore(project_id="shop", base_url=str(server.make_url("/v1")))
                try:
                    await store.add("Products", {"id": "p-1"})
                finally:
                    await store.close()

        with pytest.raises(DocumentExistsError) as exc_info:
            asyncio.run(scenario())

        assert exc_info.value.document_id == "p-1"
        assert exc_info.value.status_code == 409
        assert exc_info.value.ack == "projects/shop/databases/(default)/documents/Products/p-1"

    def test_add_other_http_error(self):
        async def create(request):
            return web.json_response({"error": "denied"}, status=403)

        async def scenario():
            app = web.Application()
            app.router.add_post("/v1/{tail:.+}", create)
            async with test_utils.TestServer(app) as server:
                store = FirestoreDocumentStore(project_id="shop", base_url=str(server.make_url("/v1")))
                try:
                    await store.add("Products", {"id": "p-1"})
                finally:
                    await store.close()

        with pytest.raises(StorageError) as exc_info:
            asyncio.run(scenario())

        assert not isinstance(exc_info.value, DocumentExistsError)
        assert exc_info.value.status_code == 403


class TestFactories:
    """Test backend selection from StorageConfig."""

    def test_local_backend(self, tmp_path):
        config = StorageConfig(backend="local", local_root=str(tmp_path))

        assert isinstance(create_object_storage(config), LocalObjectStorage)
        store = create_document_store(config)
        assert isinstance(store, JsonDocumentStore)
        assert store.root_dir == tmp_path / "catalog"

    def test_firebase_backend(self):
        config = StorageConfig(
            backend="firebase", firebase_bucket="shop.appspot.com", firebase_project_id="shop"
        )
        storage = create_object_storage(config)
        store = create_document_store(config)

        assert isinstance(storage, FirebaseObjectStorage)
        assert storage.bucket == "shop.appspot.com"
        assert isinstance(store, FirestoreDocumentStore)
        assert store.project_id == "shop"

"""Pytest fixtures and configuration for Product Ingest tests."""

import asyncio
import io
from typing import Any, Dict, List, Optional

import pytest
from PIL import Image

from product_ingest.core import (
    AssetEncoder,
    AssetUploader,
    CatalogRecordBuilder,
    IngestionPipeline,
    RetryPolicy,
)
from product_ingest.domain.entities import (
    BytesAsset,
    PipelineState,
    ProductForm,
    ProductInputs,
    SelectionState,
    UploadFailure,
)
from product_ingest.domain.interfaces import (
    DocumentStoreInterface,
    ObjectStorageInterface,
    PipelineObserver,
)
from product_ingest.utils.config import (
    AppConfig,
    PipelineConfig,
    RetryConfig,
    StorageConfig,
    reset_config,
)
from product_ingest.utils.exceptions import DocumentExistsError, StorageError


# Opaque red and green as signed 32-bit ARGB
RED = -65536
GREEN = -16711936


def make_image_bytes(
    color=(255, 0, 0),
    size=(64, 48),
    mode: str = "RGB",
    image_format: str = "PNG",
) -> bytes:
    """Encode a solid-color image into bytes."""
    img = Image.new(mode, size, color=color)
    buffer = io.BytesIO()
    img.save(buffer, format=image_format)
    return buffer.getvalue()


class FakeObjectStorage(ObjectStorageInterface):
    """In-memory object storage recording every call."""

    def __init__(self, fail_puts: int = 0):
        self.objects: Dict[str, bytes] = {}
        self.put_calls: List[str] = []
        self.deleted: List[str] = []
        self.fail_puts = fail_puts
        self.closed = False

    async def put(self, key: str, data: bytes, content_type: str) -> str:
        self.put_calls.append(key)
        if self.fail_puts > 0:
            self.fail_puts -= 1
            raise StorageError(f"Simulated upload failure for {key}")
        self.objects[key] = data
        return f"https://storage.test/{key}"

    async def delete(self, key: str) -> None:
        if key not in self.objects:
            raise StorageError(f"No object {key}")
        del self.objects[key]
        self.deleted.append(key)

    async def close(self) -> None:
        self.closed = True


class FakeDocumentStore(DocumentStoreInterface):
    """
    In-memory document store keyed by document id.

    The first fail_adds calls are rejected without storing anything; the
    next lose_acks calls store the document and then time out.
    """

    def __init__(self, fail_adds: int = 0, lose_acks: int = 0):
        self.documents: List[tuple[str, Dict[str, Any]]] = []
        self.add_calls = 0
        self.fail_adds = fail_adds
        self.lose_acks = lose_acks
        self.closed = False

    async def add(self, collection: str, document: Dict[str, Any]) -> str:
        self.add_calls += 1
        if self.fail_adds > 0:
            self.fail_adds -= 1
            raise StorageError("Simulated permission denied", status_code=403)

        ack = f"{collection}/{document['id']}"
        if any(c == collection and d["id"] == document["id"] for c, d in self.documents):
            raise DocumentExistsError(document_id=document["id"], ack=ack, status_code=409)

        self.documents.append((collection, document))
        if self.lose_acks > 0:
            self.lose_acks -= 1
            raise asyncio.TimeoutError("Simulated lost acknowledgement")
        return ack

    async def close(self) -> None:
        self.closed = True


class FailingIndexUploader(AssetUploader):
    """Uploader that refuses the payloads at the given selection indexes."""

    def __init__(self, storage: ObjectStorageInterface, failing_indexes, prefix: str = "products/images"):
        super().__init__(storage, prefix=prefix)
        self.failing_indexes = set(failing_indexes)

    async def upload(self, payload):
        if payload.index in self.failing_indexes:
            return UploadFailure(
                index=payload.index,
                source_ref=payload.source_ref,
                cause=StorageError("Simulated network drop"),
            )
        return await super().upload(payload)


class RecordingObserver(PipelineObserver):
    """Observer collecting every notification."""

    def __init__(self):
        self.states: List[PipelineState] = []
        self.loading: List[bool] = []
        self.outcomes: List[Any] = []

    def on_loading(self, active: bool) -> None:
        self.loading.append(active)

    def on_state(self, state: PipelineState) -> None:
        self.states.append(state)

    def on_outcome(self, outcome) -> None:
        self.outcomes.append(outcome)


@pytest.fixture
def test_config(tmp_path) -> AppConfig:
    """Provide test configuration with a temporary local backend and no retry delays."""
    return AppConfig(
        storage=StorageConfig(backend="local", local_root=str(tmp_path / "data")),
        pipeline=PipelineConfig(
            max_concurrency=4,
            retry=RetryConfig(max_attempts=1, base_delay=0.0),
        ),
        log_level="DEBUG",
    )


@pytest.fixture
def sample_image_bytes() -> bytes:
    return make_image_bytes()


@pytest.fixture
def sample_assets() -> list[BytesAsset]:
    """Three distinct images in pick order."""
    return [
        BytesAsset("red.png", make_image_bytes((255, 0, 0))),
        BytesAsset("green.png", make_image_bytes((0, 255, 0))),
        BytesAsset("blue.jpg", make_image_bytes((0, 0, 255), image_format="JPEG")),
    ]


@pytest.fixture
def valid_form() -> ProductForm:
    return ProductForm(
        name="  Linen shirt ",
        category=" Shirts ",
        price="19.99",
        offer_percentage="15",
        description=" Breathable summer shirt ",
        sizes="S, M ,L",
    )


@pytest.fixture
def selection(sample_assets) -> SelectionState:
    state = SelectionState()
    state.add_color(RED)
    state.add_color(GREEN)
    state.add_images(sample_assets)
    return state


@pytest.fixture
def valid_inputs(valid_form, selection) -> ProductInputs:
    return ProductInputs(form=valid_form, selection=selection.snapshot())


@pytest.fixture
def fake_storage() -> FakeObjectStorage:
    return FakeObjectStorage()


@pytest.fixture
def fake_catalog() -> FakeDocumentStore:
    return FakeDocumentStore()


@pytest.fixture
def observer() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture
def make_pipeline(fake_storage, fake_catalog, observer):
    """Factory building a pipeline around the fakes."""

    def _make(
        uploader: Optional[AssetUploader] = None,
        document_store: Optional[DocumentStoreInterface] = None,
        retry: Optional[RetryPolicy] = None,
        cleanup_orphans: bool = False,
        max_concurrency: int = 4,
    ) -> IngestionPipeline:
        return IngestionPipeline(
            encoder=AssetEncoder(),
            uploader=uploader or AssetUploader(fake_storage),
            builder=CatalogRecordBuilder(),
            document_store=document_store or fake_catalog,
            retry=retry,
            max_concurrency=max_concurrency,
            cleanup_orphans=cleanup_orphans,
            observer=observer,
        )

    return _make


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset the cached configuration between tests."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def image_factory():
    """Expose make_image_bytes to tests."""
    return make_image_bytes


@pytest.fixture
def storage_factory():
    return FakeObjectStorage


@pytest.fixture
def catalog_factory():
    return FakeDocumentStore


@pytest.fixture
def failing_uploader_factory():
    return FailingIndexUploader

# Submit Product Use Case
"""
Use case for saving a composed product listing.

Wires configuration into a fresh IngestionPipeline for every submission
and owns the storage collaborators shared across submissions.
"""
from typing import Optional, Union

from product_ingest.core.asset_encoder import AssetEncoder
from product_ingest.core.asset_uploader import AssetUploader
from product_ingest.core.ingestion_pipeline import IngestionPipeline
from product_ingest.core.record_builder import CatalogRecordBuilder
from product_ingest.core.retry import RetryPolicy
from product_ingest.domain.entities.outcome import PipelineOutcome
from product_ingest.domain.entities.product import ProductForm, ProductInputs
from product_ingest.domain.entities.selection import SelectionSnapshot, SelectionState
from product_ingest.domain.interfaces.catalog_interface import DocumentStoreInterface
from product_ingest.domain.interfaces.observer_interface import PipelineObserver
from product_ingest.domain.interfaces.storage_interface import ObjectStorageInterface
from product_ingest.infrastructure import create_document_store, create_object_storage
from product_ingest.utils import get_logger
from product_ingest.utils.config import AppConfig

logger = get_logger(__name__)


class SubmitProductUseCase:
    """
    Use case for submitting a product listing.

    This encapsulates the business logic of:
    1. Snapshotting the live selection
    2. Creating a single-use pipeline configured from AppConfig
    3. Running it and returning the terminal outcome
    """

    def __init__(
        self,
        config: AppConfig,
        storage: Optional[ObjectStorageInterface] = None,
        document_store: Optional[DocumentStoreInterface] = None,
        retry: Optional[RetryPolicy] = None,
    ):
        """
        Initialize the use case.

        Args:
            config: Application configuration
            storage: Object storage (default: built from config.storage)
            document_store: Catalog store (default: built from config.storage)
            retry: Retry policy override (default: from config.pipeline.retry)
        """
        self.config = config
        self.storage = storage or create_object_storage(config.storage)
        self.document_store = document_store or create_document_store(config.storage)
        self.retry = retry or RetryPolicy.from_config(config.pipeline.retry)

        self.encoder = AssetEncoder.from_config(config.encoder)
        self.uploader = AssetUploader(self.storage, prefix=config.storage.images_prefix)
        self.builder = CatalogRecordBuilder(size_policy=config.catalog.size_segment_policy)

    def create_pipeline(self, observer: Optional[PipelineObserver] = None) -> IngestionPipeline:
        return IngestionPipeline(
            encoder=self.encoder,
            uploader=self.uploader,
            builder=self.builder,
            document_store=self.document_store,
            collection=self.config.catalog.collection_name,
            retry=self.retry,
            max_concurrency=self.config.pipeline.max_concurrency,
            cleanup_orphans=self.config.pipeline.cleanup_orphans,
            observer=observer,
        )

    async def execute(
        self,
        form: ProductForm,
        selection: Union[SelectionState, SelectionSnapshot],
        observer: Optional[PipelineObserver] = None,
    ) -> PipelineOutcome:
        """
        Submit a product.

        Args:
            form: Raw form text
            selection: Live selection state (snapshotted here) or a snapshot
            observer: Presentation hooks for this submission

        Returns:
            Succeeded or Failed outcome
        """
        if isinstance(selection, SelectionState):
            selection = selection.snapshot()

        inputs = ProductInputs(form=form, selection=selection)
        logger.info(
            f"Submitting product '{form.name.strip()}' with {inputs.image_count} image(s) "
            f"and {len(selection.colors)} color(s)"
        )
        return await self.create_pipeline(observer).submit(inputs)

    async def close(self) -> None:
        """Release storage collaborators."""
        await self.storage.close()
        await self.document_store.close()

    async def __aenter__(self) -> "SubmitProductUseCase":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

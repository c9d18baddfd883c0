"""Single-use orchestrator turning one product submission into a catalog record.

Flow: validate → encode all images → upload all images → build record →
commit record. Any failure ends the run in FAILED with one typed error; no
record is committed unless every image was encoded and uploaded.
"""

import asyncio
import uuid
from typing import Optional, Sequence

from product_ingest.domain.entities.assets import (
    AssetRef,
    EncodedPayload,
    EncodingFailure,
    UploadFailure,
    UploadResult,
)
from product_ingest.domain.entities.outcome import Failed, PipelineOutcome, PipelineState, Succeeded
from product_ingest.domain.entities.product import ProductInputs, ProductRecord
from product_ingest.domain.interfaces.catalog_interface import DocumentStoreInterface
from product_ingest.domain.interfaces.observer_interface import PipelineObserver
from product_ingest.utils import SubmissionLoggerAdapter, get_logger, log_stage_duration
from product_ingest.utils.exceptions import (
    CommitError,
    DocumentExistsError,
    EncodingError,
    IngestionError,
    PipelineStateError,
    UploadError,
    ValidationError,
)

from .asset_encoder import AssetEncoder
from .asset_uploader import AssetUploader
from .record_builder import CatalogRecordBuilder
from .retry import RetryPolicy

logger = get_logger(__name__)


class IngestionPipeline:
    """
    State machine for one submission.

    States: IDLE → VALIDATING → ENCODING → UPLOADING → COMMITTING →
    SUCCEEDED | FAILED. An instance runs once; create a new one per
    submission.
    """

    def __init__(
        self,
        encoder: AssetEncoder,
        uploader: AssetUploader,
        builder: CatalogRecordBuilder,
        document_store: DocumentStoreInterface,
        collection: str = "Products",
        retry: Optional[RetryPolicy] = None,
        max_concurrency: int = 4,
        cleanup_orphans: bool = False,
        observer: Optional[PipelineObserver] = None,
    ):
        """
        Args:
            encoder: Image re-encoder
            uploader: Object storage uploader
            builder: Record validator/builder
            document_store: Catalog store receiving the record
            collection: Catalog collection name
            retry: Retry policy for uploads and the commit (default: no retry)
            max_concurrency: Images encoded or uploaded at the same time
            cleanup_orphans: Delete uploaded images when the run fails afterwards
            observer: Presentation hooks
        """
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")

        self.encoder = encoder
        self.uploader = uploader
        self.builder = builder
        self.document_store = document_store
        self.collection = collection
        self.retry = retry or RetryPolicy.no_retry()
        self.max_concurrency = max_concurrency
        self.cleanup_orphans = cleanup_orphans
        self.observer = observer or PipelineObserver()
        self.submission_id = uuid.uuid4().hex[:8]
        self._log = SubmissionLoggerAdapter(logger, self.submission_id)

        self._state = PipelineState.IDLE
        self._outcome: Optional[PipelineOutcome] = None
        self._semaphore: Optional[asyncio.Semaphore] = None

    @property
    def state(self) -> PipelineState:
        return self._state

    @property
    def outcome(self) -> Optional[PipelineOutcome]:
        return self._outcome

    async def submit(self, inputs: ProductInputs) -> PipelineOutcome:
        """Run the whole submission and return its terminal outcome.

        Raises:
            PipelineStateError: If this instance was already submitted
        """
        if self._state is not PipelineState.IDLE:
            raise PipelineStateError(state=self._state.value)

        self._semaphore = asyncio.Semaphore(self.max_concurrency)
        self._emit("on_loading", True)
        try:
            with log_stage_duration(self._log, "product submission"):
                outcome = await self._run(inputs)
            self._outcome = outcome
            self._emit("on_outcome", outcome)
            return outcome
        finally:
            self._emit("on_loading", False)

    async def _run(self, inputs: ProductInputs) -> PipelineOutcome:
        self._transition(PipelineState.VALIDATING)
        validation = self.builder.validate(inputs)
        if not validation.is_valid:
            return self._fail(validation.to_error())

        self._transition(PipelineState.ENCODING)
        encoded = await self._encode_all(inputs)
        encode_failures = [r for r in encoded if isinstance(r, EncodingFailure)]
        if encode_failures:
            first = encode_failures[0]
            return self._fail(EncodingError(
                f"Error compressing image: {first.reason}",
                image_ref=first.source_ref,
                context={"failed_refs": [f.source_ref for f in encode_failures]},
            ))

        self._transition(PipelineState.UPLOADING)
        uploaded = await self._upload_all(encoded)
        refs = sorted((r for r in uploaded if isinstance(r, AssetRef)), key=lambda r: r.index)
        upload_failures = [r for r in uploaded if isinstance(r, UploadFailure)]
        if upload_failures:
            first = upload_failures[0]
            return await self._fail_with_orphans(
                UploadError(
                    f"Error uploading image: {first.reason}",
                    image_ref=first.source_ref,
                    cause=first.cause,
                    context={"failed_refs": [f.source_ref for f in upload_failures]},
                ),
                refs,
            )

        self._transition(PipelineState.COMMITTING)
        try:
            record = self.builder.build(inputs, [ref.url for ref in refs])
        except (ValidationError, ValueError) as e:
            return await self._fail_with_orphans(
                CommitError(f"Cannot build product record: {e}", cause=e), refs
            )

        try:
            ack = await self._commit(record)
        except CommitError as e:
            return await self._fail_with_orphans(e, refs)

        self._transition(PipelineState.SUCCEEDED)
        self._log.info(f"Product {record.id} saved with {len(refs)} image(s)")
        return Succeeded(record=record, ack=ack)

    async def _encode_all(self, inputs: ProductInputs) -> list:
        async def encode_one(index, asset):
            async with self._semaphore:
                return await self.encoder.encode(asset, index)

        with log_stage_duration(self._log, f"encoding {inputs.image_count} image(s)"):
            return list(await asyncio.gather(
                *(encode_one(i, asset) for i, asset in enumerate(inputs.selection.images))
            ))

    async def _upload_all(self, payloads: Sequence[EncodedPayload]) -> list[UploadResult]:
        # Barrier: every upload finishes (or fails) before anything is committed
        with log_stage_duration(self._log, f"uploading {len(payloads)} image(s)"):
            return list(await asyncio.gather(*(self._upload_one(p) for p in payloads)))

    async def _upload_one(self, payload: EncodedPayload) -> UploadResult:
        attempt = 1
        while True:
            async with self._semaphore:
                result = await self.uploader.upload(payload)
            if isinstance(result, AssetRef) or attempt >= self.retry.max_attempts:
                return result
            self._log.warning(
                f"Upload of {payload.source_ref} failed (attempt {attempt}/"
                f"{self.retry.max_attempts}): {result.reason}"
            )
            await self.retry.wait(attempt)
            attempt += 1

    async def _commit(self, record: ProductRecord) -> str:
        document = record.to_document()
        last_error: Optional[Exception] = None

        for attempt in range(1, self.retry.max_attempts + 1):
            try:
                return await self.document_store.add(self.collection, document)
            except DocumentExistsError as e:
                # Only an earlier attempt of this run can have stored this id
                if attempt > 1 and e.ack:
                    self._log.info(f"Product {record.id} was stored by an earlier attempt")
                    return e.ack
                last_error = e
                break
            except Exception as e:
                last_error = e
                self._log.warning(
                    f"Error adding product {record.id} (attempt {attempt}/"
                    f"{self.retry.max_attempts}): {e}"
                )
                if attempt < self.retry.max_attempts:
                    await self.retry.wait(attempt)

        raise CommitError(cause=last_error, context={"record_id": record.id})

    async def _fail_with_orphans(self, error: IngestionError, refs: Sequence[AssetRef]) -> Failed:
        orphaned = tuple(refs)
        cleaned_up = False
        if orphaned:
            if self.cleanup_orphans:
                deleted = await asyncio.gather(*(self.uploader.delete(ref) for ref in orphaned))
                cleaned_up = all(deleted)
            else:
                self._log.warning(
                    f"{len(orphaned)} uploaded image(s) left without a product record: "
                    f"{[ref.key for ref in orphaned]}"
                )
        return self._fail(error, orphaned, cleaned_up)

    def _fail(
        self,
        error: IngestionError,
        orphaned: tuple[AssetRef, ...] = (),
        cleaned_up: bool = False,
    ) -> Failed:
        failed_in = self._state
        self._log.error(f"Submission failed while {failed_in.value}: {error}")
        self._transition(PipelineState.FAILED)
        return Failed(error=error, failed_in=failed_in, orphaned_refs=orphaned, cleaned_up=cleaned_up)

    def _transition(self, state: PipelineState) -> None:
        self._log.debug(f"Pipeline {self._state.value} -> {state.value}")
        self._state = state
        self._emit("on_state", state)

    def _emit(self, hook: str, *args) -> None:
        try:
            getattr(self.observer, hook)(*args)
        except Exception as e:
            self._log.warning(f"Observer hook {hook} raised: {e}")

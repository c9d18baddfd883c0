"""JSON-file document store for product records.

Creates directory structure:
- {root_dir}/{collection}/{document_id}.json
"""

import asyncio
import json
import uuid
from pathlib import Path
from typing import Any, Dict

from product_ingest.domain.interfaces.catalog_interface import DocumentStoreInterface
from product_ingest.utils.exceptions import DocumentExistsError, StorageError
from product_ingest.utils.logger import get_logger
from product_ingest.utils.validators import sanitize_filename

logger = get_logger(__name__)


class JsonDocumentStore(DocumentStoreInterface):
    """Document store writing one JSON file per document."""

    def __init__(self, root_dir: Path | str):
        self.root_dir = Path(root_dir)

    def collection_dir(self, collection: str) -> Path:
        return self.root_dir / sanitize_filename(collection)

    async def add(self, collection: str, document: Dict[str, Any]) -> str:
        """Write a new document; the file name comes from its "id" field.

        Re-adding a document identical to the stored one is confirmed
        rather than rejected.

        Returns:
            Path of the written file

        Raises:
            DocumentExistsError: If a different document with this id is stored
        """
        document_id = sanitize_filename(str(document.get("id") or uuid.uuid4()))
        path = self.collection_dir(collection) / f"{document_id}.json"

        try:
            await asyncio.to_thread(self._write, path, document)
        except FileExistsError as e:
            try:
                existing = self.load(collection, document_id)
            except (OSError, ValueError) as load_error:
                raise StorageError(
                    f"Cannot read existing document {document_id}: {load_error}",
                    context={"path": str(path)},
                ) from load_error
            if existing == document:
                logger.info(f"Document {document_id} already saved at {path}")
                return str(path)
            raise DocumentExistsError(
                f"Document {document_id} already exists in {collection}",
                document_id=document_id,
                ack=str(path),
                context={"path": str(path)},
            ) from e
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(
                f"Failed to write document {document_id}: {e}",
                context={"path": str(path)},
            ) from e

        logger.info(f"Saved document {document_id} to {path}")
        return str(path)

    def load(self, collection: str, document_id: str) -> Dict[str, Any]:
        """Load a single document.

        Raises:
            FileNotFoundError: If the document doesn't exist
        """
        path = self.collection_dir(collection) / f"{sanitize_filename(document_id)}.json"
        if not path.exists():
            raise FileNotFoundError(f"Document not found: {path}")

        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)

    @staticmethod
    def _write(path: Path, document: Dict[str, Any]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(document, indent=2, ensure_ascii=False)
        with open(path, 'x', encoding='utf-8') as f:
            f.write(payload)

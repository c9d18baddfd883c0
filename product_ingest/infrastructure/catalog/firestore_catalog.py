"""
Cloud Firestore document store using the REST API.
"""

from typing import Any, Dict, Optional
from urllib.parse import quote

import aiohttp

from product_ingest.domain.interfaces.catalog_interface import DocumentStoreInterface
from product_ingest.infrastructure.http_client import AiohttpAdapter
from product_ingest.utils.exceptions import DocumentExistsError, StorageError
from product_ingest.utils.logger import get_logger

logger = get_logger(__name__)

FIRESTORE_URL = "https://firestore.googleapis.com/v1"


def to_firestore_value(value: Any) -> Dict[str, Any]:
    """Encode a JSON-like Python value as a Firestore typed Value.

    Raises:
        TypeError: For values Firestore cannot represent
    """
    if value is None:
        return {"nullValue": None}
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    if isinstance(value, str):
        return {"stringValue": value}
    if isinstance(value, (list, tuple)):
        return {"arrayValue": {"values": [to_firestore_value(v) for v in value]}}
    if isinstance(value, dict):
        return {"mapValue": {"fields": to_firestore_fields(value)}}
    raise TypeError(f"Unsupported Firestore value type: {type(value).__name__}")


def to_firestore_fields(document: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    """Encode every field of a document."""
    return {str(key): to_firestore_value(value) for key, value in document.items()}


class FirestoreDocumentStore(AiohttpAdapter, DocumentStoreInterface):
    """
    Adds documents to a Firestore collection.

    The record's own "id" field is used as the Firestore document id, so
    inserting the same record twice is detected instead of duplicated.
    """

    def __init__(
        self,
        project_id: str,
        auth_token: Optional[str] = None,
        timeout_seconds: float = 30.0,
        database: str = "(default)",
        session: Optional[aiohttp.ClientSession] = None,
        base_url: str = FIRESTORE_URL,
    ):
        super().__init__(auth_token=auth_token, timeout_seconds=timeout_seconds, session=session)
        self.project_id = project_id
        self.database = database
        self.base_url = base_url.rstrip("/")

    def collection_url(self, collection: str) -> str:
        return (
            f"{self.base_url}/projects/{self.project_id}/databases/{self.database}"
            f"/documents/{quote(collection, safe='')}"
        )

    def document_name(self, collection: str, document_id: str) -> str:
        return (
            f"projects/{self.project_id}/databases/{self.database}"
            f"/documents/{collection}/{document_id}"
        )

    async def add(self, collection: str, document: Dict[str, Any]) -> str:
        document_id = str(document["id"])
        body = {"fields": to_firestore_fields(document)}
        try:
            created = await self._request_json(
                "POST",
                self.collection_url(collection),
                action=f"Insert into {collection}",
                params={"documentId": document_id},
                json=body,
                headers=self._headers(),
            )
        except StorageError as e:
            # 409 ALREADY_EXISTS
            if e.status_code == 409:
                raise DocumentExistsError(
                    f"Document {document_id} already exists in {collection}",
                    document_id=document_id,
                    ack=self.document_name(collection, document_id),
                    status_code=409,
                ) from e
            raise

        name = created.get("name") or self.document_name(collection, document_id)
        logger.info(f"Firestore document created: {name}")
        return name

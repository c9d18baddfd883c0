"""
Custom exception hierarchy for Product Ingest.

Provides a structured exception hierarchy for different error scenarios:
- AppException: Base for all application errors
- ConfigError: Configuration-related errors
- StorageError: Object storage / document store errors
- DocumentExistsError: Document store insert hit an existing id
- IngestionError: Errors ending a product submission

Each exception includes:
- Descriptive message
- Optional error code for programmatic handling
- Optional context dictionary for debugging

Example:
    >>> from product_ingest.utils.exceptions import UploadError
    >>> raise UploadError("Upload rejected", image_ref="photo.jpg", cause=exc)
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence


# ============================================
# Base Exception
# ============================================


class AppException(Exception):
    """
    Base exception for all Product Ingest application errors.

    Attributes:
        message: Human-readable error description.
        code: Optional error code for programmatic handling.
        context: Optional dictionary with debugging context.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self._default_code()
        self.context = context or {}
        super().__init__(self.message)

    def _default_code(self) -> str:
        """Generate default error code from class name."""
        # CamelCase -> UPPER_SNAKE_CASE
        name = self.__class__.__name__
        code = ""
        for i, char in enumerate(name):
            if char.isupper() and i > 0:
                code += "_"
            code += char.upper()
        return code

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code!r}, "
            f"context={self.context!r})"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "code": self.code,
            "context": self.context,
        }


# ============================================
# Configuration Errors
# ============================================


class ConfigError(AppException):
    """Base exception for configuration-related errors."""

    pass


class ConfigFileNotFoundError(ConfigError):
    """Raised when a required configuration file is not found."""

    def __init__(
        self,
        message: str = "Configuration file not found",
        path: Optional[str] = None,
        **kwargs,
    ) -> None:
        context = kwargs.pop("context", {})
        if path:
            context["path"] = path
        super().__init__(message, code="CONFIG_FILE_NOT_FOUND", context=context, **kwargs)


class ConfigurationError(ConfigError):
    """Raised when configuration is invalid or cannot be parsed."""

    def __init__(
        self,
        message: str = "Invalid configuration",
        **kwargs,
    ) -> None:
        super().__init__(message, code="CONFIG_INVALID", **kwargs)


# ============================================
# Storage Errors
# ============================================


class StorageError(AppException):
    """
    Raised by storage collaborators when a remote write/delete fails.

    Raised when there are issues with:
    - Object storage uploads and deletes
    - Document store inserts
    - HTTP transport (timeouts, non-2xx responses)
    """

    def __init__(
        self,
        message: str = "Storage operation failed",
        status_code: Optional[int] = None,
        **kwargs,
    ) -> None:
        self.status_code = status_code
        context = kwargs.pop("context", {})
        if status_code:
            context["status_code"] = status_code
        super().__init__(message, code=kwargs.pop("code", "STORAGE_ERROR"), context=context, **kwargs)


class DocumentExistsError(StorageError):
    """
    Raised by a document store when a document with the same id is already stored.

    ack is the store's reference to the existing document, so a retried
    insert whose first attempt did land can be confirmed.
    """

    def __init__(
        self,
        message: str = "Document already exists",
        document_id: Optional[str] = None,
        ack: Optional[str] = None,
        **kwargs,
    ) -> None:
        self.document_id = document_id
        self.ack = ack
        context = kwargs.pop("context", {})
        if document_id:
            context["document_id"] = document_id
        super().__init__(message, code="DOCUMENT_EXISTS", context=context, **kwargs)


# ============================================
# Ingestion Errors
# ============================================


class IngestionError(AppException):
    """
    Base exception for errors that end a product submission.

    Every subclass is converted into a single Failed outcome at the
    pipeline boundary.
    """

    pass


class ValidationError(IngestionError):
    """
    Raised when the product form fails validation.

    Example:
        >>> raise ValidationError(reasons=[("price", "Price must be greater than 0")])
    """

    def __init__(
        self,
        message: str = "Check your inputs",
        reasons: Optional[Sequence[tuple[str, str]]] = None,
        **kwargs,
    ) -> None:
        self.reasons: List[tuple[str, str]] = list(reasons or [])
        context = kwargs.pop("context", {})
        context["missing_fields"] = self.missing_fields
        super().__init__(message, code="VALIDATION_FAILED", context=context, **kwargs)

    @property
    def missing_fields(self) -> List[str]:
        """Names of the fields that failed, in report order."""
        return [field for field, _ in self.reasons]


class EncodingError(IngestionError):
    """Raised when a picked image cannot be decoded or re-encoded."""

    def __init__(
        self,
        message: str = "Failed to encode image",
        image_ref: Optional[str] = None,
        **kwargs,
    ) -> None:
        self.image_ref = image_ref
        context = kwargs.pop("context", {})
        if image_ref:
            context["image_ref"] = image_ref
        super().__init__(message, code="ENCODING_ERROR", context=context, **kwargs)


class UploadError(IngestionError):
    """Raised when an encoded image cannot be uploaded to object storage."""

    def __init__(
        self,
        message: str = "Failed to upload image",
        image_ref: Optional[str] = None,
        cause: Optional[BaseException] = None,
        **kwargs,
    ) -> None:
        self.image_ref = image_ref
        self.cause = cause
        context = kwargs.pop("context", {})
        if image_ref:
            context["image_ref"] = image_ref
        if cause is not None:
            context["cause"] = str(cause)
        super().__init__(message, code="UPLOAD_ERROR", context=context, **kwargs)


class CommitError(IngestionError):
    """Raised when the document store rejects the product record."""

    def __init__(
        self,
        message: str = "Failed to save product",
        cause: Optional[BaseException] = None,
        **kwargs,
    ) -> None:
        self.cause = cause
        context = kwargs.pop("context", {})
        if cause is not None:
            context["cause"] = str(cause)
        super().__init__(message, code="COMMIT_ERROR", context=context, **kwargs)


class PipelineStateError(AppException):
    """Raised when a finished pipeline instance is submitted again."""

    def __init__(
        self,
        message: str = "Pipeline instance already used",
        state: Optional[str] = None,
        **kwargs,
    ) -> None:
        context = kwargs.pop("context", {})
        if state:
            context["state"] = state
        super().__init__(message, code="PIPELINE_STATE", context=context, **kwargs)

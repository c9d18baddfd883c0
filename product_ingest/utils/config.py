"""Configuration management system using Pydantic v2 and YAML.

This module provides type-safe configuration loading with validation
for the Product Ingest application.
"""

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from product_ingest.domain.entities.product import SizeSegmentPolicy
from product_ingest.utils.exceptions import ConfigFileNotFoundError, ConfigurationError


class EncoderConfig(BaseModel):
    """Configuration for client-side image re-encoding."""

    quality: int = Field(default=85, ge=1, le=95, description="JPEG quality used for every upload")
    max_dimension: Optional[int] = Field(
        default=None, ge=16, description="Downscale longest side to this many pixels (None keeps size)"
    )


class StorageConfig(BaseModel):
    """Configuration for object storage and the document store backends."""

    backend: str = Field(default="local", description="Storage backend: local or firebase")
    images_prefix: str = Field(default="products/images", description="Key prefix for uploaded images")
    local_root: str = Field(default="./data", description="Root directory for the local backend")
    firebase_bucket: Optional[str] = Field(default=None, description="Firebase Storage bucket name")
    firebase_project_id: Optional[str] = Field(default=None, description="Firebase / GCP project id")
    auth_token: Optional[str] = Field(default=None, description="Bearer token forwarded to Firebase")
    timeout_seconds: float = Field(default=30.0, gt=0.0, description="Per-request network timeout")

    @field_validator('backend')
    @classmethod
    def validate_backend(cls, v: str) -> str:
        """Validate and normalize backend name."""
        valid_backends = ["local", "firebase"]
        v_lower = v.lower()
        if v_lower not in valid_backends:
            raise ValueError(f"Invalid storage backend. Choose from: {valid_backends}")
        return v_lower

    @field_validator('images_prefix')
    @classmethod
    def validate_images_prefix(cls, v: str) -> str:
        """Strip surrounding slashes so keys join cleanly."""
        v = v.strip("/")
        if not v:
            raise ValueError("images_prefix cannot be empty")
        return v

    @model_validator(mode='after')
    def validate_firebase_settings(self) -> 'StorageConfig':
        """Firebase backend needs both a bucket and a project id."""
        if self.backend == "firebase":
            if not self.firebase_bucket or not self.firebase_project_id:
                raise ValueError("firebase backend requires firebase_bucket and firebase_project_id")
        return self


class CatalogConfig(BaseModel):
    """Configuration for product records."""

    collection_name: str = Field(default="Products", min_length=1, description="Document store collection")
    size_segment_policy: SizeSegmentPolicy = Field(
        default=SizeSegmentPolicy.KEEP, description="Keep or drop empty comma-separated size segments"
    )


class RetryConfig(BaseModel):
    """Retry policy applied by the pipeline to uploads and the commit."""

    max_attempts: int = Field(default=3, ge=1, description="Attempts per operation (1 disables retry)")
    base_delay: float = Field(default=0.5, ge=0.0, description="Delay before the first retry in seconds")
    backoff_factor: float = Field(default=2.0, ge=1.0, description="Multiplier applied after each retry")
    max_delay: float = Field(default=10.0, ge=0.0, description="Upper bound for a single delay")


class PipelineConfig(BaseModel):
    """Configuration for the ingestion pipeline."""

    max_concurrency: int = Field(default=4, ge=1, description="Images encoded/uploaded at the same time")
    cleanup_orphans: bool = Field(
        default=False, description="Delete uploaded images when the submission fails afterwards"
    )
    retry: RetryConfig = Field(default_factory=RetryConfig)


class AppConfig(BaseModel):
    """Root configuration model containing all sub-configurations."""

    encoder: EncoderConfig = Field(default_factory=EncoderConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level. Choose from: {valid_levels}")
        return v_upper

    @classmethod
    def from_yaml(cls, path: Path | str) -> 'AppConfig':
        """Load configuration from a YAML file."""
        return load_config(path)


# Singleton pattern for configuration
_config: Optional[AppConfig] = None


def load_config(config_path: Optional[Path | str] = None) -> AppConfig:
    """Load and validate configuration from YAML file.

    Args:
        config_path: Path to configuration file. Defaults to the
                    PRODUCT_INGEST_CONFIG env var, then config/config.yaml
                    relative to the project root.

    Returns:
        Validated AppConfig instance

    Raises:
        ConfigFileNotFoundError: If config file doesn't exist
        ConfigurationError: If the file cannot be parsed or fails validation
    """
    if config_path is None:
        env_config_path = os.environ.get('PRODUCT_INGEST_CONFIG')
        if env_config_path:
            config_path = Path(env_config_path)
        else:
            project_root = Path(__file__).parent.parent.parent
            config_path = project_root / "config" / "config.yaml"
    else:
        config_path = Path(config_path)

    if not config_path.exists():
        example_path = config_path.parent / "config.example.yaml"
        raise ConfigFileNotFoundError(
            f"Configuration file not found: {config_path}. "
            f"Copy {example_path} to {config_path} or set PRODUCT_INGEST_CONFIG.",
            path=str(config_path),
        )

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config_dict = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Cannot parse {config_path}: {e}") from e

    if not isinstance(config_dict, dict):
        raise ConfigurationError(f"Top level of {config_path} must be a mapping")

    try:
        return AppConfig.model_validate(config_dict)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration in {config_path}",
            context={"errors": e.errors(include_url=False)},
        ) from e


def get_config(config_path: Optional[Path | str] = None, reload: bool = False) -> AppConfig:
    """Get configuration instance (singleton pattern).

    Args:
        config_path: Path to configuration file (only used on first call or if reload=True)
        reload: Force reload of configuration

    Returns:
        Cached or newly loaded AppConfig instance
    """
    global _config

    if _config is None or reload:
        _config = load_config(config_path)

    return _config


def reset_config() -> None:
    """Reset cached configuration (useful for testing)."""
    global _config
    _config = None

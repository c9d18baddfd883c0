"""Utility modules for configuration, logging, and image processing."""

from .config import get_config, load_config, reset_config
from .logger import (
    SubmissionLoggerAdapter,
    get_logger,
    configure_logging,
    log_failure,
    log_stage_duration,
)
from .image_utils import (
    DEFAULT_JPEG_QUALITY,
    JPEG_CONTENT_TYPE,
    decode_image,
    downscale,
    encode_jpeg,
    normalize_to_rgb,
)

__all__ = [
    # Configuration
    "get_config",
    "load_config",
    "reset_config",
    # Logging
    "get_logger",
    "SubmissionLoggerAdapter",
    "configure_logging",
    "log_failure",
    "log_stage_duration",
    # Image processing
    "DEFAULT_JPEG_QUALITY",
    "JPEG_CONTENT_TYPE",
    "decode_image",
    "downscale",
    "encode_jpeg",
    "normalize_to_rgb",
]

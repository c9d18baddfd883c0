"""Image decoding and re-encoding utilities.

This module provides the Pillow helpers used to turn arbitrary picked
image bytes into a normalized JPEG payload before upload.
"""

import io
from typing import Optional

from PIL import Image, ImageOps


DEFAULT_JPEG_QUALITY = 85
JPEG_CONTENT_TYPE = "image/jpeg"

# Background used when flattening transparent images
FLATTEN_BACKGROUND = (255, 255, 255)


def decode_image(data: bytes) -> Image.Image:
    """Decode raw bytes into a fully loaded PIL image.

    Args:
        data: Encoded image bytes in any format Pillow understands

    Returns:
        Loaded PIL Image object

    Raises:
        OSError: If the bytes are empty, corrupted or the format is unsupported
    """
    if not data:
        raise OSError("Image data is empty")

    try:
        # Verify first, then reopen (verify leaves the image unusable)
        with Image.open(io.BytesIO(data)) as probe:
            probe.verify()
        image = Image.open(io.BytesIO(data))
        image.load()
        return image
    except Exception as e:
        raise OSError(f"Failed to decode image: {str(e)}") from e


def normalize_to_rgb(image: Image.Image) -> Image.Image:
    """Apply EXIF orientation and convert to RGB.

    Transparent images are flattened onto a white background since JPEG
    has no alpha channel.
    """
    image = ImageOps.exif_transpose(image)

    if image.mode in ("RGBA", "LA") or (image.mode == "P" and "transparency" in image.info):
        rgba = image.convert("RGBA")
        background = Image.new("RGB", rgba.size, FLATTEN_BACKGROUND)
        background.paste(rgba, mask=rgba.getchannel("A"))
        return background

    if image.mode != "RGB":
        image = image.convert("RGB")

    return image


def downscale(image: Image.Image, max_dimension: Optional[int]) -> Image.Image:
    """Shrink an image so its longest side is at most max_dimension.

    Aspect ratio is preserved. Images already small enough are returned as-is.
    """
    if max_dimension is None or max(image.size) <= max_dimension:
        return image

    resized = image.copy()
    resized.thumbnail((max_dimension, max_dimension), Image.Resampling.LANCZOS)
    return resized


def encode_jpeg(image: Image.Image, quality: int = DEFAULT_JPEG_QUALITY) -> bytes:
    """Encode an RGB image as JPEG bytes.

    Args:
        image: PIL Image in RGB mode
        quality: JPEG quality (1-95)

    Returns:
        JPEG-encoded bytes

    Raises:
        OSError: If encoding fails
    """
    buffer = io.BytesIO()
    try:
        image.save(buffer, format="JPEG", quality=quality, optimize=True)
    except Exception as e:
        raise OSError(f"Failed to encode JPEG: {str(e)}") from e
    return buffer.getvalue()

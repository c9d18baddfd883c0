"""
Input parsing helpers for raw form text.
"""

import re
from typing import Optional


# "19.99", "19.", ".5" or a decimal comma with at most two digits ("25,50").
# Grouping separators, underscores, exponents and inf/nan never match.
_DOT_DECIMAL = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)$")
_COMMA_DECIMAL = re.compile(r"^[+-]?\d+,\d{1,2}$")


def parse_decimal(text: str) -> Optional[float]:
    """
    Convert plain decimal text to float.

    A comma is accepted only as the single decimal separator, so "1,000"
    is rejected instead of being read as 1.0.

    Returns:
        The value, or None if the text is not a plain decimal number.
    """
    if _DOT_DECIMAL.match(text):
        return float(text)
    if _COMMA_DECIMAL.match(text):
        return float(text.replace(",", "."))
    return None


def parse_price(price: Optional[str]) -> float:
    """
    Validate and convert a price string to float.

    Args:
        price: Raw price text, e.g. "19.99", " 25,50 € ".

    Returns:
        Price as float.

    Raises:
        ValueError: If price is missing, not a number, or not positive.
    """
    if price is None:
        raise ValueError("Price is required")

    # Remove currency symbols and spaces
    cleaned = re.sub(r"[€$£\s]", "", price)
    if not cleaned:
        raise ValueError("Price is required")

    value = parse_decimal(cleaned)
    if value is None:
        raise ValueError(f"Invalid price value: {price}")
    if value <= 0:
        raise ValueError("Price must be greater than 0")

    return value


def parse_percentage(text: Optional[str]) -> Optional[float]:
    """
    Parse an optional percentage in [0, 100].

    Args:
        text: Raw percentage text, may be empty or contain a trailing "%".

    Returns:
        The percentage, or None when the text is empty.

    Raises:
        ValueError: If the text is not a number or is outside [0, 100].
    """
    if text is None:
        return None

    cleaned = text.strip().rstrip("%").strip()
    if not cleaned:
        return None

    value = parse_decimal(cleaned)
    if value is None:
        raise ValueError(f"Invalid percentage: {text}")
    if not 0.0 <= value <= 100.0:
        raise ValueError(f"Percentage out of range [0, 100]: {text}")

    return value


def clean_text(text: Optional[str]) -> str:
    """Trim a raw text field, mapping None to an empty string."""
    return (text or "").strip()


def sanitize_filename(filename: str) -> str:
    """
    Sanitize a string to be safe for use as a filename.

    Args:
        filename: String to sanitize.

    Returns:
        Sanitized filename.
    """
    invalid_chars = r'[<>:"/\\|?*]'
    sanitized = re.sub(invalid_chars, "_", filename)

    sanitized = sanitized.strip(". ")

    max_length = 200
    if len(sanitized) > max_length:
        sanitized = sanitized[:max_length]

    return sanitized or "unnamed"

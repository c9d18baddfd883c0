"""
Selection state for in-progress color and image picks.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, List, Tuple

from product_ingest.domain.interfaces.asset_interface import AssetSource


_HEX_COLOR = re.compile(r"^#?([0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")


def to_signed_argb(color: int) -> int:
    """Wrap an ARGB value to the signed 32-bit int stored in records.

    Opaque red 0xFFFF0000 becomes -65536.
    """
    color &= 0xFFFFFFFF
    return color - (1 << 32) if color & 0x80000000 else color


def parse_color(value: str) -> int:
    """Parse "#RRGGBB" or "#AARRGGBB" into a signed 32-bit ARGB integer.

    Six-digit values are treated as fully opaque.
    """
    match = _HEX_COLOR.match(value.strip())
    if not match:
        raise ValueError(f"Invalid color value: {value!r}")

    digits = match.group(1)
    if len(digits) == 6:
        digits = "ff" + digits
    return to_signed_argb(int(digits, 16))


def format_color(color: int) -> str:
    """Format an ARGB integer as "#aarrggbb"."""
    return f"#{color & 0xFFFFFFFF:08x}"


@dataclass(frozen=True)
class SelectionSnapshot:
    """Immutable copy of the selection taken at submit time."""

    colors: Tuple[int, ...] = ()
    images: Tuple[AssetSource, ...] = ()


class SelectionState:
    """
    Mutable picks owned by one interactive session.

    The pipeline never sees this object, only the snapshot returned by
    snapshot(), so picks made while a submission is in flight cannot
    change what is being uploaded.
    """

    def __init__(self) -> None:
        self._colors: List[int] = []
        self._images: List[AssetSource] = []

    @property
    def colors(self) -> Tuple[int, ...]:
        return tuple(self._colors)

    @property
    def images(self) -> Tuple[AssetSource, ...]:
        return tuple(self._images)

    def add_color(self, color: int) -> None:
        """Append one picked color; duplicates are allowed.

        Unsigned values such as 0xFFFF0000 are stored in signed form.
        """
        if not isinstance(color, int) or isinstance(color, bool):
            raise TypeError(f"Color must be an ARGB int, got {type(color).__name__}")
        self._colors.append(to_signed_argb(color))

    def add_images(self, images: Iterable[AssetSource]) -> int:
        """Append picked images in pick order.

        Returns:
            Number of images added.
        """
        added = list(images)
        self._images.extend(added)
        return len(added)

    def clear(self) -> None:
        """Discard all picks (session end)."""
        self._colors.clear()
        self._images.clear()

    def snapshot(self) -> SelectionSnapshot:
        return SelectionSnapshot(colors=tuple(self._colors), images=tuple(self._images))

    def describe_colors(self) -> str:
        """Human-readable list of picked colors."""
        return ", ".join(format_color(c) for c in self._colors)

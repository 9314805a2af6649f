from __future__ import annotations

import colorsys
import zlib
from functools import lru_cache

from .types import Color, NormalizedBox, ViewportRect

HUE_BUCKETS = 256
LABEL_SATURATION = 0.9
LABEL_BRIGHTNESS = 0.9


def to_viewport(box: NormalizedBox, viewport_width: float, viewport_height: float) -> ViewportRect:
    """
    Scale a normalized corner-form box into viewport pixels.

    Plain linear scale per axis; the viewport is assumed to share the source
    frame's aspect ratio.
    """

    return ViewportRect(
        x=box.x * viewport_width,
        y=box.y * viewport_height,
        width=box.width * viewport_width,
        height=box.height * viewport_height,
    )


def to_normalized(rect: ViewportRect, viewport_width: float, viewport_height: float) -> NormalizedBox:
    """Inverse of `to_viewport`."""

    if viewport_width <= 0 or viewport_height <= 0:
        raise ValueError(f"Viewport size must be > 0, got {viewport_width}x{viewport_height}")
    return NormalizedBox(
        x=rect.x / viewport_width,
        y=rect.y / viewport_height,
        width=rect.width / viewport_width,
        height=rect.height / viewport_height,
    )


def label_hash(label: str) -> int:
    # crc32 is stable across processes, unlike the salted built-in hash().
    return zlib.crc32(label.encode("utf-8"))


@lru_cache(maxsize=512)
def color_for(label: str) -> Color:
    """
    Deterministic display color for a class label.

    The label hash picks one of 256 hues; saturation and brightness are
    fixed high so every class stays readable on a camera preview.
    """

    hue = (label_hash(label) % HUE_BUCKETS) / HUE_BUCKETS
    r, g, b = colorsys.hsv_to_rgb(hue, LABEL_SATURATION, LABEL_BRIGHTNESS)
    return Color(red=r, green=g, blue=b, alpha=1.0)

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class NormalizedBox:
    """
    Corner-form box in normalized frame coordinates.

    (x, y) is the top-left corner. Values may fall outside [0, 1] for boxes
    that extend past the frame edge; nothing clamps them.
    """

    x: float
    y: float
    width: float
    height: float

    def as_xywh(self) -> Tuple[float, float, float, float]:
        return self.x, self.y, self.width, self.height

    def as_xyxy(self) -> Tuple[float, float, float, float]:
        return self.x, self.y, self.x + self.width, self.y + self.height


@dataclass(frozen=True)
class Detection:
    """
    One decoded candidate that passed the confidence threshold.
    """

    class_index: int
    confidence: float
    box: NormalizedBox


@dataclass(frozen=True)
class ViewportRect:
    """Pixel-space rectangle inside the rendering viewport."""

    x: float
    y: float
    width: float
    height: float

    def as_xyxy(self) -> Tuple[float, float, float, float]:
        return self.x, self.y, self.x + self.width, self.y + self.height


@dataclass(frozen=True)
class Color:
    red: float
    green: float
    blue: float
    alpha: float = 1.0

    def as_bgr(self) -> Tuple[int, int, int]:
        """OpenCV-style 0-255 BGR tuple (alpha dropped)."""
        return (
            int(round(self.blue * 255)),
            int(round(self.green * 255)),
            int(round(self.red * 255)),
        )

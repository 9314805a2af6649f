from __future__ import annotations

from typing import Iterable

import numpy as np

from .overlay import Annotation

TEXT_COLOR_BGR = (255, 255, 255)
CAPTION_HEIGHT = 20


def draw_annotations(
    image_bgr: np.ndarray,
    annotations: Iterable[Annotation],
    *,
    box_thickness: int = 3,
    font_scale: float = 0.5,
    font_thickness: int = 1,
    caption_alpha: float = 0.7,
) -> np.ndarray:
    """
    Draw annotation boxes + caption plates on an OpenCV BGR image and return a copy.

    Annotation rects are expected in the pixel space of `image_bgr`, i.e.
    built with the image width/height as viewport size. Captions sit above
    the box, or at the top edge when the box touches it.
    """

    try:
        import cv2  # type: ignore
    except ImportError as e:  # pragma: no cover
        raise ImportError("OpenCV is required for draw_annotations(). Install with `pip install opencv-python`.") from e

    if image_bgr is None or not hasattr(image_bgr, "shape"):
        raise TypeError("image_bgr must be a NumPy array (BGR).")
    if image_bgr.ndim != 3 or image_bgr.shape[2] != 3:
        raise ValueError(f"Expected image shape (H, W, 3), got {getattr(image_bgr, 'shape', None)}")

    out = image_bgr.copy()
    h, w = out.shape[:2]

    for ann in annotations:
        x1, y1, x2, y2 = ann.rect.as_xyxy()
        x1i = int(np.clip(round(x1), 0, w - 1))
        y1i = int(np.clip(round(y1), 0, h - 1))
        x2i = int(np.clip(round(x2), 0, w - 1))
        y2i = int(np.clip(round(y2), 0, h - 1))

        color = ann.color.as_bgr()
        cv2.rectangle(out, (x1i, y1i), (x2i, y2i), color, thickness=box_thickness)

        # Caption plate: box width, fixed height, clamped to the top edge.
        plate_top = max(0, y1i - CAPTION_HEIGHT)
        plate_bottom = min(plate_top + CAPTION_HEIGHT, h - 1)
        plate_right = max(x2i, x1i + 1)
        plate = out.copy()
        cv2.rectangle(plate, (x1i, plate_top), (plate_right, plate_bottom), color, thickness=-1)
        out = cv2.addWeighted(plate, caption_alpha, out, 1.0 - caption_alpha, 0.0)

        (_, th), _ = cv2.getTextSize(ann.caption, cv2.FONT_HERSHEY_SIMPLEX, font_scale, font_thickness)
        cv2.putText(
            out,
            ann.caption,
            (x1i + 2, min(plate_top + (CAPTION_HEIGHT + th) // 2, h - 1)),
            cv2.FONT_HERSHEY_SIMPLEX,
            font_scale,
            TEXT_COLOR_BGR,
            thickness=font_thickness,
            lineType=cv2.LINE_AA,
        )

    return out

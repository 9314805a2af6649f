from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence

from .geometry import color_for, to_viewport
from .labels import ClassLabelTable
from .types import Color, Detection, ViewportRect

NO_OBJECTS_TEXT = "No objects detected"


@dataclass(frozen=True)
class Annotation:
    """One renderable box: viewport rect, class label, caption and color."""

    rect: ViewportRect
    label: str
    caption: str
    color: Color
    detection: Detection


def format_caption(label: str, confidence: float) -> str:
    return f"{label} {confidence * 100:.1f}%"


def build_annotations(
    detections: Iterable[Detection],
    labels: ClassLabelTable,
    viewport_width: float,
    viewport_height: float,
) -> List[Annotation]:
    """Map detections to viewport annotations, keeping detection order."""

    out: List[Annotation] = []
    for det in detections:
        label = labels.name_for(det.class_index)
        out.append(
            Annotation(
                rect=to_viewport(det.box, viewport_width, viewport_height),
                label=label,
                caption=format_caption(label, det.confidence),
                color=color_for(label),
                detection=det,
            )
        )
    return out


def count_by_class(detections: Iterable[Detection], labels: ClassLabelTable) -> Dict[str, int]:
    counts = Counter(labels.name_for(det.class_index) for det in detections)
    return {name: counts[name] for name in sorted(counts)}


def summarize(detections: Sequence[Detection], labels: ClassLabelTable) -> str:
    """
    One-line frame summary: "person: 2, car: 1" ordered by label, or
    "No objects detected" for an empty frame.
    """

    if not detections:
        return NO_OBJECTS_TEXT
    return ", ".join(f"{name}: {count}" for name, count in count_by_class(detections, labels).items())

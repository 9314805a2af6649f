from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .labels import ClassLabelTable, load_class_names
from .postprocess import DEFAULT_CONF_THRESHOLD, YoloPostConfig


@dataclass(frozen=True)
class DecodeProfile:
    schema_version: int
    viewport_width: float
    viewport_height: float
    confidence_threshold: float = DEFAULT_CONF_THRESHOLD
    labels_path: Optional[Path] = None
    apply_nms: bool = False
    iou_threshold: float = 0.45

    def __post_init__(self) -> None:
        if self.schema_version != 1:
            raise ValueError("decode profile schema_version must be 1")
        if self.viewport_width <= 0:
            raise ValueError("viewport_width must be > 0")
        if self.viewport_height <= 0:
            raise ValueError("viewport_height must be > 0")
        if not 0.0 <= self.confidence_threshold <= 1.0:
            raise ValueError("confidence_threshold must be within [0, 1]")
        if not 0.0 <= self.iou_threshold <= 1.0:
            raise ValueError("iou_threshold must be within [0, 1]")

    @property
    def viewport_size(self):
        return self.viewport_width, self.viewport_height

    def post_config(self) -> YoloPostConfig:
        return YoloPostConfig(
            conf_threshold=self.confidence_threshold,
            apply_nms=self.apply_nms,
            iou_threshold=self.iou_threshold,
        )

    def label_table(self) -> ClassLabelTable:
        if self.labels_path is None:
            return ClassLabelTable.coco()
        return load_class_names(self.labels_path)


def _require_number(payload: Dict[str, Any], key: str) -> float:
    if key not in payload:
        raise ValueError(f"Missing required key: {key}")
    return _number(payload, key)


def _number(payload: Dict[str, Any], key: str) -> float:
    value = payload[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key} must be a number")
    return float(value)


def _require_int(payload: Dict[str, Any], key: str) -> int:
    if key not in payload:
        raise ValueError(f"Missing required key: {key}")
    value = payload[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{key} must be an integer")
    return int(value)


def load_decode_profile(path: Path) -> DecodeProfile:
    """
    Load a JSON decode profile.

    Relative `labels_path` values resolve against the profile's directory.
    """

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Decode profile not found: {path}")
    raw = path.read_text(encoding="utf-8")
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid decode profile JSON: {path}") from exc
    if not isinstance(payload, dict):
        raise ValueError("Decode profile must be a JSON object")

    allowed = {
        "schema_version",
        "confidence_threshold",
        "viewport_width",
        "viewport_height",
        "labels_path",
        "apply_nms",
        "iou_threshold",
    }
    unknown = sorted(set(payload.keys()) - allowed)
    if unknown:
        raise ValueError(f"Unknown decode profile keys: {unknown}")

    schema_version = _require_int(payload, "schema_version")
    viewport_width = _require_number(payload, "viewport_width")
    viewport_height = _require_number(payload, "viewport_height")
    confidence_threshold = (
        _number(payload, "confidence_threshold") if "confidence_threshold" in payload else DEFAULT_CONF_THRESHOLD
    )
    iou_threshold = _number(payload, "iou_threshold") if "iou_threshold" in payload else 0.45

    apply_nms = payload.get("apply_nms", False)
    if not isinstance(apply_nms, bool):
        raise ValueError("apply_nms must be a boolean if provided")

    labels_path = payload.get("labels_path")
    if labels_path is not None:
        if not isinstance(labels_path, str) or not labels_path:
            raise ValueError("labels_path must be a non-empty string if provided")
        labels_path = Path(labels_path)
        if not labels_path.is_absolute():
            labels_path = (path.parent / labels_path).resolve()

    return DecodeProfile(
        schema_version=schema_version,
        viewport_width=viewport_width,
        viewport_height=viewport_height,
        confidence_threshold=confidence_threshold,
        labels_path=labels_path,
        apply_nms=apply_nms,
        iou_threshold=iou_threshold,
    )

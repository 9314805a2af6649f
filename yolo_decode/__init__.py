"""
Decode raw YOLO-family output tensors into detections and viewport annotations.

Framework-agnostic: works on NumPy arrays emitted by any inference runtime.
Only NumPy is needed for decoding; OpenCV is used by `draw_annotations`.
"""

from .types import Color, Detection, NormalizedBox, ViewportRect
from .errors import DecodeError, InvalidFixedAxis, UnsupportedShape
from .layout import ResolvedLayout, TensorLayout, resolve_layout, tensor_from_buffer
from .nms import NMSConfig, nms
from .postprocess import YoloPostConfig, YoloPostprocessor, decode, decode_generic
from .geometry import color_for, to_normalized, to_viewport
from .labels import COCO_CLASSES, ClassLabelTable, load_class_names
from .overlay import NO_OBJECTS_TEXT, Annotation, build_annotations, count_by_class, format_caption, summarize
from .frames import LatestFrameSlot
from .runtime import DetectionWorker, FramePipeline, FrameResult
from .config import DecodeProfile, load_decode_profile
from .logs import setup_logging
from .visualize import draw_annotations

__all__ = [
    "Color",
    "Detection",
    "NormalizedBox",
    "ViewportRect",
    "DecodeError",
    "InvalidFixedAxis",
    "UnsupportedShape",
    "ResolvedLayout",
    "TensorLayout",
    "resolve_layout",
    "tensor_from_buffer",
    "NMSConfig",
    "nms",
    "YoloPostConfig",
    "YoloPostprocessor",
    "decode",
    "decode_generic",
    "color_for",
    "to_normalized",
    "to_viewport",
    "COCO_CLASSES",
    "ClassLabelTable",
    "load_class_names",
    "NO_OBJECTS_TEXT",
    "Annotation",
    "build_annotations",
    "count_by_class",
    "format_caption",
    "summarize",
    "LatestFrameSlot",
    "DetectionWorker",
    "FramePipeline",
    "FrameResult",
    "DecodeProfile",
    "load_decode_profile",
    "setup_logging",
    "draw_annotations",
]

import logging
from dataclasses import dataclass
from typing import List, NamedTuple, Optional, Sequence

import numpy as np

from .errors import DecodeError, InvalidFixedAxis, UnsupportedShape
from .layout import BOX_FIELDS, ResolvedLayout, TensorLayout, resolve_layout
from .nms import NMSConfig, batched_nms, nms
from .types import Detection, NormalizedBox

logger = logging.getLogger(__name__)

DEFAULT_CONF_THRESHOLD = 0.5

# Fallback parser: (x, y, w, h, conf) tuples, scan bounded for malformed input.
GENERIC_TUPLE_SIZE = 5
GENERIC_MAX_CANDIDATES = 100


class DecodedArrays(NamedTuple):
    """Column-wise view of accepted candidates, in ascending candidate order."""

    indices: np.ndarray  # (K,) candidate index
    class_ids: np.ndarray  # (K,)
    scores: np.ndarray  # (K,)
    boxes: np.ndarray  # (K, 4) corner-form x, y, w, h

    def __len__(self) -> int:
        return int(self.indices.shape[0])

    def take(self, sel: np.ndarray) -> "DecodedArrays":
        return DecodedArrays(self.indices[sel], self.class_ids[sel], self.scores[sel], self.boxes[sel])

    def to_detections(self) -> List[Detection]:
        return [
            Detection(
                class_index=int(cls_id),
                confidence=float(score),
                box=NormalizedBox(x=float(x), y=float(y), width=float(w), height=float(h)),
            )
            for cls_id, score, (x, y, w, h) in zip(self.class_ids, self.scores, self.boxes)
        ]


def _empty() -> DecodedArrays:
    return DecodedArrays(
        indices=np.empty((0,), dtype=np.int64),
        class_ids=np.empty((0,), dtype=np.int64),
        scores=np.empty((0,), dtype=np.float32),
        boxes=np.empty((0, 4), dtype=np.float32),
    )


def _field_view(p: np.ndarray, layout: ResolvedLayout) -> np.ndarray:
    """
    Return a (fields, candidates) view of the first batch entry.
    CANDIDATES_MAJOR is transposed as a view, nothing is copied.
    """

    if p.ndim != 3:
        raise UnsupportedShape(p.shape)
    if p.shape[0] == 0:
        raise DecodeError(f"Empty batch in output {p.shape}")
    if p.shape[0] != 1:
        logger.debug("Batch of %d in output %s; decoding the first entry only", p.shape[0], p.shape)

    if layout.kind is TensorLayout.CLASSES_MAJOR:
        fields = p[0]
    elif layout.kind is TensorLayout.CANDIDATES_MAJOR:
        fields = p[0].T
    else:  # pragma: no cover
        raise DecodeError(f"Unknown layout: {layout.kind!r}")

    if fields.shape != (layout.fixed_axis_size, layout.candidate_count):
        raise DecodeError(f"Layout {layout} does not match tensor shape {p.shape}")
    return fields


def _center_to_corner(cxcywh: np.ndarray) -> np.ndarray:
    """(4, K) center-form rows -> (K, 4) corner-form x, y, w, h."""

    cx, cy, w, h = cxcywh
    return np.stack([cx - w / 2, cy - h / 2, w, h], axis=1)


def decode_arrays(tensor, layout: ResolvedLayout, confidence_threshold: float = DEFAULT_CONF_THRESHOLD) -> DecodedArrays:
    """
    Vectorized decode of a resolved 3-D output into accepted candidate columns.

    Per candidate: argmax over class scores (lowest index wins ties), drop
    candidates whose best score is below `confidence_threshold`, convert
    the box from center form to corner form.
    """

    p = np.asarray(tensor, dtype=np.float32)
    fields = _field_view(p, layout)

    class_scores = fields[BOX_FIELDS:]
    # NaN never wins the argmax; np.argmax would otherwise return its index.
    nan_mask = np.isnan(class_scores)
    if nan_mask.any():
        class_scores = np.where(nan_mask, -np.inf, class_scores)
    class_ids = np.argmax(class_scores, axis=0)
    scores = np.take_along_axis(class_scores, class_ids[None, :], axis=0)[0]

    keep = np.flatnonzero(scores >= confidence_threshold)
    if keep.size == 0:
        return _empty()

    boxes = _center_to_corner(fields[:BOX_FIELDS, keep])
    return DecodedArrays(indices=keep, class_ids=class_ids[keep].astype(np.int64), scores=scores[keep], boxes=boxes)


def decode(tensor, layout: ResolvedLayout, confidence_threshold: float = DEFAULT_CONF_THRESHOLD) -> List[Detection]:
    """
    Decode a raw detector output into detections, in candidate order.

    No sorting, deduplication or NMS is applied here; overlapping boxes for
    one object are all emitted.

    Args:
        tensor: float array shaped like `layout` ([1, 4+C, N] or [1, N, 4+C]).
        layout: result of `resolve_layout(tensor.shape)`.
        confidence_threshold: minimum best-class score to keep a candidate.
    """

    return decode_arrays(tensor, layout, confidence_threshold).to_detections()


def decode_generic_arrays(tensor, confidence_threshold: float = DEFAULT_CONF_THRESHOLD) -> DecodedArrays:
    flat = np.asarray(tensor, dtype=np.float32).ravel()
    count = min(GENERIC_MAX_CANDIDATES, flat.size // GENERIC_TUPLE_SIZE)
    if count == 0:
        return _empty()

    rows = flat[: count * GENERIC_TUPLE_SIZE].reshape(count, GENERIC_TUPLE_SIZE)
    scores = rows[:, 4]
    keep = np.flatnonzero(scores >= confidence_threshold)
    if keep.size == 0:
        return _empty()

    boxes = _center_to_corner(rows[keep, :4].T)
    return DecodedArrays(
        indices=keep,
        class_ids=np.zeros(keep.shape, dtype=np.int64),
        scores=scores[keep],
        boxes=boxes,
    )


def decode_generic(tensor, confidence_threshold: float = DEFAULT_CONF_THRESHOLD) -> List[Detection]:
    """
    Best-effort parser for outputs whose shape could not be resolved.

    Treats the tensor as flat `(x, y, w, h, conf)` tuples, scans at most
    `GENERIC_MAX_CANDIDATES` of them and assigns class 0 to everything.
    Class discrimination is not available on this path.
    """

    return decode_generic_arrays(tensor, confidence_threshold).to_detections()


@dataclass(frozen=True)
class YoloPostConfig:
    """
    Per-frame post-processing settings.
    """

    conf_threshold: float = DEFAULT_CONF_THRESHOLD
    # NMS is off by default: every candidate above threshold is emitted.
    apply_nms: bool = False
    iou_threshold: float = 0.45
    # If False, runs per-class NMS.
    class_agnostic_nms: bool = True
    # Cap on emitted detections (highest scores kept, candidate order preserved). None = no cap.
    max_detections: Optional[int] = None
    # Optional list of class IDs to keep; None keeps all.
    class_ids: Optional[Sequence[int]] = None

    def __post_init__(self) -> None:
        if not 0.0 <= self.conf_threshold <= 1.0:
            raise ValueError("conf_threshold must be within [0, 1]")
        if not 0.0 <= self.iou_threshold <= 1.0:
            raise ValueError("iou_threshold must be within [0, 1]")
        if self.max_detections is not None and self.max_detections < 0:
            raise ValueError("max_detections must be >= 0")


class YoloPostprocessor:
    """
    Per-frame entry point: resolve the layout once, decode, then apply the
    optional filters from `YoloPostConfig`.

    Supported outputs (per image):
    - (1, 4 + C, N): e.g. 1 x 84 x 8400 for YOLOv8 COCO exports
    - (1, N, 4 + C): the transposed export
    - anything else: flat (x, y, w, h, conf) tuples, best effort

    A bad frame never raises: unresolvable shapes go through the generic
    parser, while a field axis without classes or an empty batch yields no
    detections.
    """

    def __init__(self, cfg: YoloPostConfig = YoloPostConfig()):
        self.cfg = cfg

    def process(self, preds) -> List[Detection]:
        p = np.asarray(preds, dtype=np.float32)
        try:
            layout = resolve_layout(p.shape)
        except UnsupportedShape as exc:
            logger.warning("%s; falling back to generic parser, results may be unreliable", exc)
            decoded = decode_generic_arrays(p, self.cfg.conf_threshold)
        except InvalidFixedAxis as exc:
            logger.warning("%s; treating frame as empty", exc)
            return []
        else:
            logger.debug("Output shape %s resolved as %s", p.shape, layout)
            try:
                decoded = decode_arrays(p, layout, self.cfg.conf_threshold)
            except DecodeError as exc:
                logger.warning("%s; treating frame as empty", exc)
                return []

        decoded = self._filter(decoded)
        return decoded.to_detections()

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #
    def _filter(self, decoded: DecodedArrays) -> DecodedArrays:
        if len(decoded) == 0:
            return decoded

        if self.cfg.class_ids is not None:
            decoded = decoded.take(np.isin(decoded.class_ids, np.asarray(self.cfg.class_ids)))
            if len(decoded) == 0:
                return decoded

        if self.cfg.apply_nms:
            decoded = self._apply_nms(decoded)
        return self._select_topk(decoded)

    def _apply_nms(self, decoded: DecodedArrays) -> DecodedArrays:
        x, y, w, h = decoded.boxes.T
        xyxy = np.stack([x, y, x + w, y + h], axis=1)
        nms_cfg = NMSConfig(iou_threshold=self.cfg.iou_threshold)

        if self.cfg.class_agnostic_nms:
            keep = nms(xyxy, decoded.scores, nms_cfg)
        else:
            keep = batched_nms(xyxy, decoded.scores, decoded.class_ids, nms_cfg)
        # Back to candidate order.
        return decoded.take(np.sort(keep))

    def _select_topk(self, decoded: DecodedArrays) -> DecodedArrays:
        limit = self.cfg.max_detections
        if limit is None or len(decoded) <= limit:
            return decoded
        top = np.argsort(-decoded.scores, kind="stable")[:limit]
        return decoded.take(np.sort(top))

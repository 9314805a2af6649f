from dataclasses import dataclass
from typing import Optional

import numpy as np


@dataclass(frozen=True)
class NMSConfig:
    iou_threshold: float = 0.45
    # None keeps every surviving box.
    max_detections: Optional[int] = None


def iou_one_to_many(box: np.ndarray, others: np.ndarray) -> np.ndarray:
    """IoU between one xyxy box (4,) and a stack of xyxy boxes (M, 4)."""

    xx1 = np.maximum(box[0], others[:, 0])
    yy1 = np.maximum(box[1], others[:, 1])
    xx2 = np.minimum(box[2], others[:, 2])
    yy2 = np.minimum(box[3], others[:, 3])

    inter = np.maximum(0.0, xx2 - xx1) * np.maximum(0.0, yy2 - yy1)
    area = (box[2] - box[0]) * (box[3] - box[1])
    areas = (others[:, 2] - others[:, 0]) * (others[:, 3] - others[:, 1])
    union = area + areas - inter
    return inter / np.maximum(union, 1e-9)


def nms(boxes: np.ndarray, scores: np.ndarray, cfg: NMSConfig = NMSConfig()) -> np.ndarray:
    """
    Greedy NumPy NMS over normalized xyxy boxes (N, 4) with scores (N,).

    Returns kept indices, highest score first. Equal scores keep input
    order (stable sort), so earlier candidates win ties.
    """

    if boxes.size == 0:
        return np.empty((0,), dtype=np.int64)

    order = np.argsort(-scores, kind="stable")
    keep = []
    limit = cfg.max_detections

    while order.size > 0 and (limit is None or len(keep) < limit):
        i = order[0]
        keep.append(i)
        if order.size == 1:
            break
        iou = iou_one_to_many(boxes[i], boxes[order[1:]])
        order = order[1:][iou <= cfg.iou_threshold]

    return np.array(keep, dtype=np.int64)


def batched_nms(
    boxes: np.ndarray,
    scores: np.ndarray,
    class_ids: np.ndarray,
    cfg: NMSConfig = NMSConfig(),
) -> np.ndarray:
    """Per-class NMS; boxes of different classes never suppress each other."""

    kept = []
    for cls in np.unique(class_ids):
        idx = np.flatnonzero(class_ids == cls)
        kept.extend(idx[nms(boxes[idx], scores[idx], NMSConfig(cfg.iou_threshold))].tolist())

    if not kept:
        return np.empty((0,), dtype=np.int64)

    kept = np.array(kept, dtype=np.int64)
    kept = kept[np.argsort(-scores[kept], kind="stable")]
    if cfg.max_detections is not None:
        kept = kept[: cfg.max_detections]
    return kept

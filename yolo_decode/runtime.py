from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple

import numpy as np

from .frames import LatestFrameSlot
from .labels import ClassLabelTable
from .overlay import Annotation, build_annotations, summarize
from .postprocess import YoloPostConfig, YoloPostprocessor
from .types import Detection

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrameResult:
    detections: List[Detection]
    annotations: List[Annotation]
    summary: str


class FramePipeline:
    """
    Plug-and-play per-frame pipeline: inference -> decode -> annotations.

    `infer_fn` is the inference collaborator: it receives whatever frame
    object the caller hands in and returns the raw output tensor. Nothing
    here loads models or touches the camera.
    """

    def __init__(
        self,
        infer_fn: Callable[[Any], np.ndarray],
        *,
        labels: Optional[ClassLabelTable] = None,
        viewport_size: Tuple[float, float] = (1.0, 1.0),
        post_cfg: YoloPostConfig = YoloPostConfig(),
    ):
        self._infer_fn = infer_fn
        self.labels = labels if labels is not None else ClassLabelTable.coco()
        self.viewport_size = viewport_size
        self.post = YoloPostprocessor(post_cfg)

    def process_tensor(self, tensor) -> FrameResult:
        detections = self.post.process(tensor)
        vw, vh = self.viewport_size
        annotations = build_annotations(detections, self.labels, vw, vh)
        return FrameResult(detections=detections, annotations=annotations, summary=summarize(detections, self.labels))

    def process_frame(self, frame: Any) -> FrameResult:
        return self.process_tensor(self._infer_fn(frame))

    __call__ = process_frame


class DetectionWorker(threading.Thread):
    """
    Background consumer: pulls the newest frame from a `LatestFrameSlot`,
    runs the pipeline and hands the result to `on_result`.

    Frames that arrive while a decode is running replace each other in the
    slot, so the worker always moves on to the most recent one. A frame that
    fails is logged and skipped.
    """

    def __init__(
        self,
        slot: LatestFrameSlot,
        pipeline: FramePipeline,
        on_result: Callable[[FrameResult], None],
        *,
        poll_interval: float = 0.1,
        name: str = "detection-worker",
    ):
        super().__init__(name=name, daemon=True)
        self.slot = slot
        self.pipeline = pipeline
        self.on_result = on_result
        self.poll_interval = poll_interval
        self.frames_processed = 0
        self.frames_failed = 0
        self._stop_event = threading.Event()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop_event.set()
        self.slot.close()
        if self.is_alive() and threading.current_thread() is not self:
            self.join(timeout)

    def run(self) -> None:
        logger.debug("%s started", self.name)
        while not self._stop_event.is_set():
            frame = self.slot.take(timeout=self.poll_interval)
            if frame is None:
                if self.slot.closed:
                    break
                continue
            try:
                result = self.pipeline.process_frame(frame)
                self.on_result(result)
            except Exception:
                logger.exception("Detection failed for frame; skipping")
                self.frames_failed += 1
                continue
            self.frames_processed += 1
        logger.debug("%s stopped (%d processed, %d failed)", self.name, self.frames_processed, self.frames_failed)

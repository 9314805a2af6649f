from __future__ import annotations

import argparse
import statistics
import time
from typing import Callable, List

import numpy as np

from yolo_decode import YoloPostConfig, YoloPostprocessor, decode, resolve_layout


def _format_timings(label: str, values_s: List[float]) -> str:
    ms = [v * 1000.0 for v in values_s]
    # 1..99th percentiles, inclusive of the observed min/max.
    pct = statistics.quantiles(ms, n=100, method="inclusive")
    return (
        f"{label}: n={len(ms)} mean={statistics.fmean(ms):.3f}ms p50={pct[49]:.3f}ms "
        f"p90={pct[89]:.3f}ms p95={pct[94]:.3f}ms"
    )


def _synthetic_output(candidates: int, num_classes: int, hit_ratio: float, seed: int = 0) -> np.ndarray:
    """(1, 4 + C, N) tensor; roughly `hit_ratio` of candidates score above 0.5."""

    rng = np.random.default_rng(seed)
    boxes = np.empty((4, candidates), dtype=np.float32)
    boxes[0:2] = rng.uniform(0.0, 1.0, size=(2, candidates))
    boxes[2:4] = rng.uniform(0.02, 0.3, size=(2, candidates))
    scores = rng.uniform(0.0, 0.3, size=(num_classes, candidates)).astype(np.float32)
    hits = np.flatnonzero(rng.uniform(size=candidates) < hit_ratio)
    scores[rng.integers(0, num_classes, size=hits.size), hits] = rng.uniform(0.5, 1.0, size=hits.size)
    return np.concatenate([boxes, scores], axis=0)[None, ...]


def _time(fn: Callable[[], object], warmup: int, repeats: int) -> List[float]:
    for _ in range(warmup):
        fn()
    samples: List[float] = []
    for _ in range(repeats):
        t0 = time.perf_counter()
        fn()
        samples.append(time.perf_counter() - t0)
    return samples


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Benchmark tensor decoding latency for both layouts, with and without NMS (model-free)."
    )
    parser.add_argument("--candidates", type=int, default=8400, help="Candidate count (e.g. 8400 for 640x640).")
    parser.add_argument("--classes", type=int, default=80, help="Number of classes.")
    parser.add_argument("--hit-ratio", type=float, default=0.01, help="Fraction of candidates above threshold.")
    parser.add_argument("--conf", type=float, default=0.5, help="Confidence threshold.")
    parser.add_argument("--iou", type=float, default=0.45, help="IoU threshold for NMS.")
    parser.add_argument("--warmup", type=int, default=10, help="Warmup iterations to run but not record.")
    parser.add_argument("--repeats", type=int, default=200, help="Recorded iterations per case.")
    args = parser.parse_args()

    if args.candidates < 1:
        raise ValueError("--candidates must be >= 1")
    if args.classes < 1:
        raise ValueError("--classes must be >= 1")
    if args.warmup < 0:
        raise ValueError("--warmup must be >= 0")
    if args.repeats < 2:
        raise ValueError("--repeats must be >= 2")

    classes_major = _synthetic_output(int(args.candidates), int(args.classes), float(args.hit_ratio))
    candidates_major = np.ascontiguousarray(classes_major.transpose(0, 2, 1))
    layout_a = resolve_layout(classes_major.shape)
    layout_b = resolve_layout(candidates_major.shape)

    post_no_nms = YoloPostprocessor(YoloPostConfig(conf_threshold=float(args.conf)))
    post_nms = YoloPostprocessor(YoloPostConfig(conf_threshold=float(args.conf), apply_nms=True, iou_threshold=float(args.iou)))

    cases = [
        ("decode_classes_major", lambda: decode(classes_major, layout_a, float(args.conf))),
        ("decode_candidates_major", lambda: decode(candidates_major, layout_b, float(args.conf))),
        ("postprocess_no_nms", lambda: post_no_nms.process(classes_major)),
        ("postprocess_with_nms", lambda: post_nms.process(classes_major)),
    ]
    for label, fn in cases:
        print(_format_timings(label, _time(fn, int(args.warmup), int(args.repeats))))

    n_dets = len(decode(classes_major, layout_a, float(args.conf)))
    print(f"shape={tuple(classes_major.shape)} detections={n_dets} repeats={args.repeats} warmup={args.warmup}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

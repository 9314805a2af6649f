import argparse
import logging
from pathlib import Path

import numpy as np

from yolo_decode import (
    ClassLabelTable,
    FramePipeline,
    YoloPostConfig,
    draw_annotations,
    load_class_names,
    load_decode_profile,
    setup_logging,
)

logger = logging.getLogger("decode_tensor")


def main() -> int:
    parser = argparse.ArgumentParser(description="Decode a saved YOLO output tensor (.npy) and print/draw detections.")
    parser.add_argument("tensor", help="Path to a raw model output saved with numpy.save (e.g. shape 1x84x8400).")
    parser.add_argument("--profile", default=None, help="Decode profile JSON (threshold, viewport, labels).")
    parser.add_argument("--metadata", default=None, help="Class metadata yaml (names mapping). Defaults to COCO.")
    parser.add_argument("--conf", type=float, default=None, help="Confidence threshold (overrides profile).")
    parser.add_argument("--nms", action="store_true", help="Apply NMS to overlapping boxes (off by default).")
    parser.add_argument("--iou", type=float, default=0.45, help="IoU threshold for --nms.")
    parser.add_argument("--image", default=None, help="Optional image the tensor was produced from; boxes are drawn on it.")
    parser.add_argument("--out", default=None, help="Output path for the visualization (requires --image).")
    parser.add_argument("--show", action="store_true", help="Show a window with the visualization (requires --image).")
    parser.add_argument("--log-level", default="INFO", help="Logging level (DEBUG, INFO, WARNING...).")
    args = parser.parse_args()

    setup_logging(args.log_level)

    if args.profile:
        profile = load_decode_profile(Path(args.profile))
        labels = profile.label_table()
        post_cfg = profile.post_config()
        viewport = profile.viewport_size
    else:
        labels = ClassLabelTable.coco()
        post_cfg = YoloPostConfig(apply_nms=bool(args.nms), iou_threshold=args.iou)
        viewport = (1.0, 1.0)

    if args.metadata:
        labels = load_class_names(args.metadata)
    if args.conf is not None:
        post_cfg = YoloPostConfig(
            conf_threshold=args.conf,
            apply_nms=post_cfg.apply_nms or bool(args.nms),
            iou_threshold=post_cfg.iou_threshold,
        )

    image = None
    if args.image:
        import cv2

        image = cv2.imread(args.image)
        if image is None:
            raise FileNotFoundError(f"Could not read image at path: {args.image}")
        # Annotations go straight onto the image, so use its pixel size as the viewport.
        viewport = (float(image.shape[1]), float(image.shape[0]))
    elif args.out or args.show:
        parser.error("--out/--show require --image")

    tensor = np.load(args.tensor)
    logger.info("Loaded tensor %s with shape %s", args.tensor, tensor.shape)

    pipeline = FramePipeline(lambda t: t, labels=labels, viewport_size=viewport, post_cfg=post_cfg)
    result = pipeline.process_tensor(tensor)

    for ann in result.annotations:
        r = ann.rect
        print(f"{ann.caption}\t({r.x:.1f}, {r.y:.1f}, {r.width:.1f}, {r.height:.1f})")
    print(result.summary)

    if image is not None:
        import cv2

        vis = draw_annotations(image, result.annotations)
        if args.out:
            ok = cv2.imwrite(args.out, vis)
            if not ok:
                raise RuntimeError(f"Failed to write output image: {args.out}")
        if args.show:
            cv2.imshow("detections", vis)
            cv2.waitKey(0)
            cv2.destroyAllWindows()

    return 0


if __name__ == "__main__":
    raise SystemExit(main())

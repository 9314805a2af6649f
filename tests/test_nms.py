import unittest

import numpy as np

from yolo_decode.nms import NMSConfig, batched_nms, iou_one_to_many, nms


class TestNms(unittest.TestCase):
    def test_iou(self) -> None:
        box = np.array([0.0, 0.0, 0.5, 0.5])
        others = np.array([[0.0, 0.0, 0.5, 0.5], [0.25, 0.0, 0.75, 0.5], [0.6, 0.6, 1.0, 1.0]])
        self.assertTrue(np.allclose(iou_one_to_many(box, others), [1.0, 1.0 / 3.0, 0.0]))

    def test_suppresses_overlaps(self) -> None:
        boxes = np.array([[0.0, 0.0, 0.5, 0.5], [0.01, 0.0, 0.51, 0.5], [0.6, 0.6, 1.0, 1.0]], dtype=np.float32)
        scores = np.array([0.7, 0.9, 0.8], dtype=np.float32)
        self.assertEqual(nms(boxes, scores).tolist(), [1, 2])

    def test_equal_scores_keep_earlier(self) -> None:
        boxes = np.array([[0.0, 0.0, 0.5, 0.5]] * 3, dtype=np.float32)
        scores = np.array([0.8, 0.8, 0.8], dtype=np.float32)
        self.assertEqual(nms(boxes, scores).tolist(), [0])

    def test_max_detections(self) -> None:
        boxes = np.array([[0.1 * i, 0.0, 0.1 * i + 0.05, 0.05] for i in range(5)], dtype=np.float32)
        scores = np.array([0.1, 0.5, 0.3, 0.9, 0.7], dtype=np.float32)
        self.assertEqual(nms(boxes, scores, NMSConfig(max_detections=2)).tolist(), [3, 4])

    def test_empty(self) -> None:
        self.assertEqual(nms(np.empty((0, 4)), np.empty((0,))).size, 0)
        self.assertEqual(batched_nms(np.empty((0, 4)), np.empty((0,)), np.empty((0,), dtype=np.int64)).size, 0)

    def test_batched_keeps_classes_apart(self) -> None:
        boxes = np.array([[0.0, 0.0, 0.5, 0.5]] * 3, dtype=np.float32)
        scores = np.array([0.6, 0.9, 0.7], dtype=np.float32)
        class_ids = np.array([0, 1, 0])
        self.assertEqual(batched_nms(boxes, scores, class_ids).tolist(), [1, 2])


if __name__ == "__main__":
    unittest.main()

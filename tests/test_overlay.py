import unittest

from yolo_decode.geometry import color_for
from yolo_decode.labels import ClassLabelTable
from yolo_decode.overlay import NO_OBJECTS_TEXT, build_annotations, count_by_class, format_caption, summarize
from yolo_decode.types import Detection, NormalizedBox, ViewportRect


def det(class_index: int, confidence: float = 0.75) -> Detection:
    return Detection(class_index=class_index, confidence=confidence, box=NormalizedBox(0.25, 0.25, 0.5, 0.25))


class TestOverlay(unittest.TestCase):
    def setUp(self) -> None:
        self.labels = ClassLabelTable.coco()

    def test_caption_format(self) -> None:
        self.assertEqual(format_caption("person", 0.8768), "person 87.7%")
        self.assertEqual(format_caption("car", 0.5), "car 50.0%")
        self.assertEqual(format_caption("dog", 1.0), "dog 100.0%")

    def test_empty_summary(self) -> None:
        self.assertEqual(summarize([], self.labels), "No objects detected")
        self.assertEqual(NO_OBJECTS_TEXT, "No objects detected")

    def test_summary_counts_sorted_by_label(self) -> None:
        dets = [det(2), det(0), det(2), det(16), det(0), det(0)]
        self.assertEqual(summarize(dets, self.labels), "car: 2, dog: 1, person: 3")
        self.assertEqual(count_by_class(dets, self.labels), {"car": 2, "dog": 1, "person": 3})

    def test_summary_uses_clamped_labels(self) -> None:
        labels = ClassLabelTable(["cat", "dog"])
        self.assertEqual(summarize([det(1), det(5)], labels), "dog: 2")

    def test_build_annotations(self) -> None:
        dets = [det(0, 0.9), det(2, 0.55)]
        anns = build_annotations(dets, self.labels, 200.0, 100.0)
        self.assertEqual(len(anns), 2)
        self.assertEqual(anns[0].rect, ViewportRect(50.0, 25.0, 100.0, 25.0))
        self.assertEqual(anns[0].label, "person")
        self.assertEqual(anns[0].caption, "person 90.0%")
        self.assertEqual(anns[0].color, color_for("person"))
        self.assertIs(anns[0].detection, dets[0])
        self.assertEqual(anns[1].caption, "car 55.0%")

    def test_build_annotations_empty(self) -> None:
        self.assertEqual(build_annotations([], self.labels, 10.0, 10.0), [])


if __name__ == "__main__":
    unittest.main()

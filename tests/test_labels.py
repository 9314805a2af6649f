import tempfile
import unittest
from pathlib import Path

from yolo_decode.labels import COCO_CLASSES, ClassLabelTable, load_class_names


class TestClassLabelTable(unittest.TestCase):
    def test_coco(self) -> None:
        table = ClassLabelTable.coco()
        self.assertEqual(len(table), 80)
        self.assertEqual(table.name_for(0), "person")
        self.assertEqual(table.name_for(2), "car")
        self.assertEqual(table.name_for(79), "toothbrush")
        self.assertEqual(len(COCO_CLASSES), 80)

    def test_out_of_range_clamps_to_last(self) -> None:
        table = ClassLabelTable(["a", "b", "c"])
        self.assertEqual(table.name_for(2), "c")
        self.assertEqual(table.name_for(3), "c")
        self.assertEqual(table.name_for(10_000), "c")
        self.assertEqual(ClassLabelTable.coco().name_for(80), "toothbrush")

    def test_negative_index_clamps_to_first(self) -> None:
        table = ClassLabelTable(["a", "b", "c"])
        self.assertEqual(table.name_for(-1), "a")
        self.assertEqual(table.name_for(-100), "a")

    def test_empty_table_rejected(self) -> None:
        with self.assertRaises(ValueError):
            ClassLabelTable([])

    def test_equality(self) -> None:
        self.assertEqual(ClassLabelTable(["a", "b"]), ClassLabelTable(("a", "b")))
        self.assertNotEqual(ClassLabelTable(["a", "b"]), ClassLabelTable(["b", "a"]))


class TestLoadClassNames(unittest.TestCase):
    def _write(self, text: str) -> Path:
        tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(tmpdir.cleanup)
        path = Path(tmpdir.name) / "metadata.yaml"
        path.write_text(text, encoding="utf-8")
        return path

    def test_names_block(self) -> None:
        path = self._write(
            "description: demo model\n"
            "names:\n"
            "  0: person\n"
            "  # comment\n"
            "  1: 'traffic light'\n"
            "  2: \"hard hat\"\n"
            "imgsz: [640, 640]\n"
        )
        table = load_class_names(path)
        self.assertEqual(table.names, ("person", "traffic light", "hard hat"))

    def test_unordered_ids(self) -> None:
        path = self._write("names:\n  1: b\n  0: a\n")
        self.assertEqual(load_class_names(path).names, ("a", "b"))

    def test_gap_rejected(self) -> None:
        path = self._write("names:\n  0: a\n  2: c\n")
        with self.assertRaises(ValueError):
            load_class_names(path)

    def test_no_names_rejected(self) -> None:
        path = self._write("stride: 32\n")
        with self.assertRaises(ValueError):
            load_class_names(path)


if __name__ == "__main__":
    unittest.main()

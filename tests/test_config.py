import json
import tempfile
import unittest
from pathlib import Path

from yolo_decode.config import DecodeProfile, load_decode_profile
from yolo_decode.labels import ClassLabelTable


class TestDecodeProfile(unittest.TestCase):
    def _tmpdir(self) -> Path:
        tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(tmpdir.cleanup)
        return Path(tmpdir.name)

    def _write_profile(self, payload, directory: Path = None) -> Path:
        directory = directory or self._tmpdir()
        path = directory / "profile.json"
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    def test_load_ok(self) -> None:
        path = self._write_profile(
            {
                "schema_version": 1,
                "confidence_threshold": 0.35,
                "viewport_width": 390,
                "viewport_height": 390.0,
                "apply_nms": True,
                "iou_threshold": 0.6,
            }
        )
        profile = load_decode_profile(path)
        self.assertIsInstance(profile, DecodeProfile)
        self.assertEqual(profile.viewport_size, (390.0, 390.0))
        self.assertEqual(profile.confidence_threshold, 0.35)
        self.assertIsNone(profile.labels_path)

        post = profile.post_config()
        self.assertEqual(post.conf_threshold, 0.35)
        self.assertTrue(post.apply_nms)
        self.assertEqual(post.iou_threshold, 0.6)
        self.assertEqual(profile.label_table(), ClassLabelTable.coco())

    def test_defaults(self) -> None:
        path = self._write_profile({"schema_version": 1, "viewport_width": 10, "viewport_height": 20})
        profile = load_decode_profile(path)
        self.assertEqual(profile.confidence_threshold, 0.5)
        self.assertFalse(profile.apply_nms)
        self.assertEqual(profile.iou_threshold, 0.45)

    def test_relative_labels_path(self) -> None:
        directory = self._tmpdir()
        (directory / "metadata.yaml").write_text("names:\n  0: helmet\n  1: vest\n", encoding="utf-8")
        path = self._write_profile(
            {"schema_version": 1, "viewport_width": 10, "viewport_height": 10, "labels_path": "metadata.yaml"},
            directory,
        )
        profile = load_decode_profile(path)
        self.assertTrue(profile.labels_path.is_absolute())
        self.assertEqual(profile.label_table().names, ("helmet", "vest"))

    def test_unknown_keys_rejected(self) -> None:
        path = self._write_profile({"schema_version": 1, "viewport_width": 1, "viewport_height": 1, "extra": 123})
        with self.assertRaises(ValueError):
            load_decode_profile(path)

    def test_invalid_values_rejected(self) -> None:
        bad = [
            {"schema_version": 2, "viewport_width": 1, "viewport_height": 1},
            {"schema_version": 1, "viewport_width": 0, "viewport_height": 1},
            {"schema_version": 1, "viewport_width": 1},
            {"schema_version": 1, "viewport_width": 1, "viewport_height": 1, "confidence_threshold": 1.5},
            {"schema_version": 1, "viewport_width": 1, "viewport_height": 1, "confidence_threshold": True},
            {"schema_version": 1, "viewport_width": 1, "viewport_height": 1, "apply_nms": "yes"},
            {"schema_version": 1, "viewport_width": 1, "viewport_height": 1, "labels_path": ""},
            {"schema_version": "1", "viewport_width": 1, "viewport_height": 1},
        ]
        for payload in bad:
            with self.subTest(payload=payload):
                with self.assertRaises(ValueError):
                    load_decode_profile(self._write_profile(payload))

    def test_invalid_json_rejected(self) -> None:
        path = self._tmpdir() / "profile.json"
        path.write_text("{not json", encoding="utf-8")
        with self.assertRaises(ValueError):
            load_decode_profile(path)

    def test_missing_file(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_decode_profile(self._tmpdir() / "missing.json")


if __name__ == "__main__":
    unittest.main()

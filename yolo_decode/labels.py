from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, Iterator, Tuple, Union

COCO_CLASSES: Tuple[str, ...] = (
    "person", "bicycle", "car", "motorcycle", "airplane", "bus", "train", "truck", "boat",
    "traffic light", "fire hydrant", "stop sign", "parking meter", "bench", "bird", "cat",
    "dog", "horse", "sheep", "cow", "elephant", "bear", "zebra", "giraffe", "backpack",
    "umbrella", "handbag", "tie", "suitcase", "frisbee", "skis", "snowboard", "sports ball",
    "kite", "baseball bat", "baseball glove", "skateboard", "surfboard", "tennis racket",
    "bottle", "wine glass", "cup", "fork", "knife", "spoon", "bowl", "banana", "apple",
    "sandwich", "orange", "broccoli", "carrot", "hot dog", "pizza", "donut", "cake", "chair",
    "couch", "potted plant", "bed", "dining table", "toilet", "tv", "laptop", "mouse", "remote",
    "keyboard", "cell phone", "microwave", "oven", "toaster", "sink", "refrigerator", "book",
    "clock", "vase", "scissors", "teddy bear", "hair drier", "toothbrush",
)


class ClassLabelTable:
    """
    Fixed, ordered class names matching the model's training label order.

    Out-of-range indices clamp instead of raising: past the end to the last
    name, negatives to the first. A model with more classes than the table
    still renders something.
    """

    def __init__(self, names: Iterable[str]):
        self._names = tuple(str(n) for n in names)
        if not self._names:
            raise ValueError("ClassLabelTable needs at least one name")

    @classmethod
    def coco(cls) -> "ClassLabelTable":
        return cls(COCO_CLASSES)

    @property
    def names(self) -> Tuple[str, ...]:
        return self._names

    def name_for(self, class_index: int) -> str:
        return self._names[min(max(class_index, 0), len(self._names) - 1)]

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ClassLabelTable):
            return NotImplemented
        return self._names == other._names

    def __hash__(self) -> int:
        return hash(self._names)

    def __repr__(self) -> str:
        return f"ClassLabelTable({len(self._names)} names)"


def load_class_names(metadata_path: Union[str, Path]) -> ClassLabelTable:
    """
    Load class names from the lightweight `metadata.yaml` format:

        names:
          0: person
          1: bicycle
          ...

    Only the `names:` block is read, so no YAML parser is needed. Ids must
    be contiguous from 0 because the table is positional.
    """

    names: Dict[int, str] = {}
    in_names = False

    with open(metadata_path, "r", encoding="utf-8") as f:
        for raw in f:
            line = raw.strip()
            if not line or line.startswith("#"):
                continue
            if line == "names:":
                in_names = True
                continue
            if not in_names:
                continue
            # A new top-level key ends the block.
            if not raw[:1].isspace() and not line[:1].isdigit():
                break

            if ":" not in line:
                continue
            left, right = line.split(":", 1)
            left = left.strip()
            right = right.strip().strip("'").strip('"')
            if not left.isdigit():
                continue
            names[int(left)] = right

    if not names:
        raise ValueError(f"No class names found in {metadata_path}")
    expected = list(range(len(names)))
    if sorted(names) != expected:
        raise ValueError(f"Class ids in {metadata_path} must be contiguous from 0, got {sorted(names)}")
    return ClassLabelTable(names[i] for i in expected)

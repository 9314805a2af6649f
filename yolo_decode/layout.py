from dataclasses import dataclass
from enum import Enum
from typing import Sequence

import numpy as np

from .errors import InvalidFixedAxis, UnsupportedShape

BOX_FIELDS = 4


class TensorLayout(Enum):
    # [1, 4 + C, N]: fields on the slow axis, candidates on the fast axis.
    CLASSES_MAJOR = "classes_major"
    # [1, N, 4 + C]: candidates on the slow axis, fields on the fast axis.
    CANDIDATES_MAJOR = "candidates_major"


@dataclass(frozen=True)
class ResolvedLayout:
    kind: TensorLayout
    fixed_axis_size: int
    candidate_count: int

    @property
    def num_classes(self) -> int:
        return self.fixed_axis_size - BOX_FIELDS


def resolve_layout(shape: Sequence[int]) -> ResolvedLayout:
    """
    Pick the decoding strategy for a raw detector output shape.

    The smaller of the two non-batch dimensions is taken as the field axis
    (4 box fields + class scores), the larger as the candidate axis.

    Raises:
        UnsupportedShape: the shape does not have exactly 3 entries.
        InvalidFixedAxis: the field axis has fewer than 5 entries.
    """

    dims = tuple(int(d) for d in shape)
    if len(dims) != 3:
        raise UnsupportedShape(dims)

    if dims[1] < dims[2]:
        resolved = ResolvedLayout(TensorLayout.CLASSES_MAJOR, fixed_axis_size=dims[1], candidate_count=dims[2])
    else:
        resolved = ResolvedLayout(TensorLayout.CANDIDATES_MAJOR, fixed_axis_size=dims[2], candidate_count=dims[1])

    if resolved.num_classes < 1:
        raise InvalidFixedAxis(dims, resolved.fixed_axis_size)
    return resolved


def tensor_from_buffer(buffer, shape: Sequence[int]) -> np.ndarray:
    """
    Wrap a flat float buffer (as delivered by an inference runtime) into a
    read-only float32 array of the given shape.
    """

    arr = np.asarray(buffer, dtype=np.float32).reshape(tuple(int(d) for d in shape))
    arr = arr.view()
    arr.flags.writeable = False
    return arr

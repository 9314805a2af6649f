class DecodeError(ValueError):
    """
    Base class for tensor decoding failures.

    All subclasses are local to a single frame: callers recover by emitting
    an empty or best-effort detection list for that frame.
    """


class UnsupportedShape(DecodeError):
    """Tensor rank is not 3; the generic positional parser takes over."""

    def __init__(self, shape):
        self.shape = tuple(int(d) for d in shape)
        super().__init__(f"Unsupported tensor shape {self.shape}: expected 3 dimensions")


class InvalidFixedAxis(DecodeError):
    """Resolved field axis is too small to hold 4 box fields plus at least one class."""

    def __init__(self, shape, fixed_axis_size: int):
        self.shape = tuple(int(d) for d in shape)
        self.fixed_axis_size = int(fixed_axis_size)
        super().__init__(
            f"Fixed axis of size {self.fixed_axis_size} in shape {self.shape} "
            "leaves no room for class scores (need >= 5)"
        )

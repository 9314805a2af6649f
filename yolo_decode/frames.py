from __future__ import annotations

import threading
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class LatestFrameSlot(Generic[T]):
    """
    Single-slot handoff between a frame producer and its consumers.

    The producer (camera callback) calls `put()` for every frame; only the
    most recent one is kept, older unconsumed frames are dropped. The
    detection worker calls `take()` to wait for and remove the newest
    frame; a capture action calls `latest()` to read it without removing.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._frame: Optional[T] = None
        self._latest: Optional[T] = None
        self._closed = False
        self.dropped = 0

    def put(self, frame: T) -> None:
        with self._cond:
            if self._closed:
                return
            if self._frame is not None:
                self.dropped += 1
            self._frame = frame
            self._latest = frame
            self._cond.notify()

    def take(self, timeout: Optional[float] = None) -> Optional[T]:
        """Wait for a pending frame and remove it. None on timeout or close."""

        with self._cond:
            self._cond.wait_for(lambda: self._frame is not None or self._closed, timeout=timeout)
            frame, self._frame = self._frame, None
            return frame

    def latest(self) -> Optional[T]:
        """Most recent frame seen, consumed or not."""

        with self._cond:
            return self._latest

    def close(self) -> None:
        with self._cond:
            self._closed = True
            self._frame = None
            self._cond.notify_all()

    @property
    def closed(self) -> bool:
        with self._cond:
            return self._closed

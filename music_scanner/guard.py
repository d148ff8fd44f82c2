import threading
from contextlib import contextmanager

from .exceptions import AlreadyScanningError


class ScanGuard:
    """
    At most one scan in flight. try_begin() is a non-blocking
    compare-and-set; is_scanning() may be polled from any thread.
    """

    def __init__(self):
        self._lock = threading.Lock()

    def try_begin(self) -> bool:
        return self._lock.acquire(blocking=False)

    def end(self):
        self._lock.release()

    def is_scanning(self) -> bool:
        return self._lock.locked()

    @contextmanager
    def hold(self):
        """Holds the guard for the duration of the block, or raises AlreadyScanningError."""
        if not self.try_begin():
            raise AlreadyScanningError()
        try:
            yield self
        finally:
            self.end()

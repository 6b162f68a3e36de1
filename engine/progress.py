"""Per-operation progress reporting and cooperative cancellation."""

import threading
from typing import Callable, Optional

from common.exceptions import OperationCancelledError

ProgressCallback = Callable[[float], None]


class CancellationToken:
    """
    Cooperative cancellation flag owned by the caller of one operation.

    The running operation polls it between buffer transfers; any other thread
    may call cancel().
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        """Request cancellation of the operation holding this token."""
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self, operation: str) -> None:
        """
        Raise if cancellation was requested.

        Args:
            operation: Name of the running operation, used in the error message

        Raises:
            OperationCancelledError: If cancel() has been called
        """
        if self._event.is_set():
            raise OperationCancelledError(f"{operation} cancelled")


class ProgressTracker:
    """
    Tracks bytes processed by one operation and reports the fraction done.

    Reported values never decrease and end at 1.0. With a total of zero bytes
    the operation is complete as soon as it starts, so finish() reports 1.0.
    """

    def __init__(self, total_bytes: int, callback: Optional[ProgressCallback] = None):
        self.total_bytes = total_bytes
        self.processed_bytes = 0
        self._callback = callback
        self._last_reported = 0.0

    @property
    def fraction(self) -> float:
        if self.total_bytes <= 0:
            return 1.0
        return min(self.processed_bytes / self.total_bytes, 1.0)

    def advance(self, byte_count: int) -> None:
        """
        Record processed bytes and notify the callback.

        Args:
            byte_count: Number of bytes consumed since the last call
        """
        self.processed_bytes += byte_count
        self._report(self.fraction)

    def finish(self) -> None:
        """Report completion."""
        self._report(1.0)

    def _report(self, value: float) -> None:
        value = max(value, self._last_reported)
        self._last_reported = value
        if self._callback is not None:
            self._callback(value)

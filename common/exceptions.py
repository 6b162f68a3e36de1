"""Exception classes shared by the split, verify and merge operations."""

from typing import Optional


class FileSplitterError(Exception):
    """
    Base exception class for all split/merge errors.

    Attributes:
        kind: Stable name of the failure category
        detail: Optional offending file name or extra context
    """

    kind = "Error"

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class InvalidArgumentError(FileSplitterError):
    """
    Raised for a bad part count, an unreadable source or a malformed descriptor.
    """

    kind = "InvalidArgument"


class IOFailureError(FileSplitterError):
    """
    Raised when creating, opening, reading or writing a file fails.
    """

    kind = "IOFailure"


class MissingPartError(FileSplitterError):
    """
    Raised when a part referenced by a descriptor is absent.
    """

    kind = "MissingPart"


class IntegrityFailureError(FileSplitterError):
    """
    Raised when a computed hash does not match the recorded one.
    """

    kind = "IntegrityFailure"


class UnsupportedVersionError(FileSplitterError):
    """
    Raised when a descriptor declares a format version this code does not understand.
    """

    kind = "UnsupportedVersion"


class OperationCancelledError(FileSplitterError):
    """
    Raised when a running operation observes its cancellation token.
    """

    kind = "Cancelled"

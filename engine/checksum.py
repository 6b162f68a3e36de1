"""Provides SHA-256 checksum calculation and verification helpers."""

import hashlib
from pathlib import Path
from typing import BinaryIO, Callable, Optional, Union

from common.constants import BUFFER_SIZE_BYTES, HASH_ALGORITHM


def compute_checksum(data: bytes) -> str:
    """
    Compute SHA-256 checksum for given data.

    Args:
        data: Bytes to compute checksum for

    Returns:
        Lowercase hexadecimal string representation of SHA-256 hash
    """
    return hashlib.new(HASH_ALGORITHM, data).hexdigest()


def verify_checksum(data: bytes, expected: str) -> bool:
    """
    Verify that data matches expected checksum.

    Args:
        data: Bytes to verify
        expected: Expected SHA-256 checksum (hex string)

    Returns:
        True if checksum matches, False otherwise
    """
    return compute_checksum(data) == expected.lower()


class IncrementalChecksumCalculator:
    """
    Calculate SHA-256 checksum incrementally for streaming data.

    Usage:
        calculator = IncrementalChecksumCalculator()
        calculator.update(chunk1)
        calculator.update(chunk2)
        final_checksum = calculator.finalize()
    """

    def __init__(self):
        """Initialize a new incremental checksum calculator."""
        self._hasher = hashlib.new(HASH_ALGORITHM)
        self._finalized = False
        self._bytes_processed = 0

    @property
    def bytes_processed(self) -> int:
        """Number of bytes fed into the calculator since the last reset."""
        return self._bytes_processed

    def update(self, data: Union[bytes, bytearray, memoryview]) -> None:
        """
        Update checksum with new data.

        Args:
            data: Bytes to add to checksum calculation

        Raises:
            ValueError: If the calculator was already finalized
        """
        if self._finalized:
            raise ValueError("Cannot update after finalization")
        self._hasher.update(data)
        self._bytes_processed += len(data)

    def finalize(self) -> str:
        """
        Finalize checksum calculation and return result.

        Returns:
            Lowercase hexadecimal string representation of SHA-256 hash
        """
        self._finalized = True
        return self._hasher.hexdigest()

    def reset(self) -> None:
        """Reset calculator to initial state."""
        self._hasher = hashlib.new(HASH_ALGORITHM)
        self._finalized = False
        self._bytes_processed = 0


def compute_stream_checksum(
    stream: BinaryIO,
    buffer_size: int = BUFFER_SIZE_BYTES,
    on_read: Optional[Callable[[int], None]] = None
) -> str:
    """
    Compute SHA-256 checksum of a binary stream without loading it into memory.

    Args:
        stream: Readable binary stream, consumed until EOF
        buffer_size: Size of each read in bytes
        on_read: Optional callback invoked with the byte count of every read

    Returns:
        Lowercase hexadecimal string representation of SHA-256 hash
    """
    calculator = IncrementalChecksumCalculator()
    while True:
        piece = stream.read(buffer_size)
        if not piece:
            break
        calculator.update(piece)
        if on_read is not None:
            on_read(len(piece))
    return calculator.finalize()


def compute_file_checksum(
    path: Union[str, Path],
    buffer_size: int = BUFFER_SIZE_BYTES,
    on_read: Optional[Callable[[int], None]] = None
) -> str:
    """
    Compute SHA-256 checksum of a file on disk.

    Args:
        path: File to hash
        buffer_size: Size of each read in bytes
        on_read: Optional callback invoked with the byte count of every read

    Returns:
        Lowercase hexadecimal string representation of SHA-256 hash

    Raises:
        FileNotFoundError: If the file does not exist
        OSError: If the read fails
    """
    with open(path, 'rb') as f:
        return compute_stream_checksum(f, buffer_size=buffer_size, on_read=on_read)

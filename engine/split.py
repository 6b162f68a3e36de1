"""Splits a byte stream into sequential parts and records their hashes."""

import math
import os
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional, Union

from common.constants import BUFFER_SIZE_BYTES, MIN_PART_COUNT, UNKNOWN_FILE_NAME
from common.exceptions import InvalidArgumentError, IOFailureError
from common.logging_config import get_logger
from engine.checksum import IncrementalChecksumCalculator
from engine.metadata import MetadataBuilder, SplitMetadata, write_metadata
from engine.part_storage import PartDirectory, part_file_name
from engine.progress import CancellationToken, ProgressCallback, ProgressTracker

logger = get_logger(__name__)

Source = Union[str, Path, BinaryIO]


def compute_part_sizes(total_size: int, part_count: int) -> list[int]:
    """
    Compute the size of every part.

    Every part gets total_size // part_count bytes; the last one also takes
    the remainder.

    Args:
        total_size: Size of the source in bytes
        part_count: Number of parts (at least 2)

    Returns:
        List of part sizes summing to total_size

    Raises:
        InvalidArgumentError: If part_count is below 2 or total_size is negative
    """
    _check_part_count(part_count)
    if total_size < 0:
        raise InvalidArgumentError(f"Source size cannot be negative: {total_size}")
    base_size, remainder = divmod(total_size, part_count)
    sizes = [base_size] * part_count
    sizes[-1] += remainder
    return sizes


def parts_for_part_size(total_size: int, part_size: int) -> int:
    """
    Number of parts needed to split a file into pieces of roughly part_size bytes.

    The requested size is capped at half the file, so the result is never
    below 2.

    Raises:
        InvalidArgumentError: If part_size is not positive
    """
    if part_size <= 0:
        raise InvalidArgumentError(f"Part size must be positive, got {part_size}")
    capped = min(part_size, total_size // MIN_PART_COUNT)
    if capped <= 0:
        return MIN_PART_COUNT
    return max(math.ceil(total_size / capped), MIN_PART_COUNT)


def _check_part_count(part_count: int) -> None:
    if isinstance(part_count, bool) or not isinstance(part_count, int):
        raise InvalidArgumentError(f"Part count must be an integer, got {part_count!r}")
    if part_count < MIN_PART_COUNT:
        raise InvalidArgumentError(f"Parts must be at least {MIN_PART_COUNT}, got {part_count}")


def _check_prefix(name_prefix: str) -> None:
    if not name_prefix or name_prefix in (".", "..") or "/" in name_prefix or "\\" in name_prefix:
        raise InvalidArgumentError(f"Name prefix must be a bare file name, got {name_prefix!r}", name_prefix)


@dataclass
class LeftoverBuffer:
    """
    Bytes read from the source but not yet routed to a part.

    A single read can straddle a part boundary; the unconsumed tail is kept
    here and drained at the start of the next part.
    """

    buffered_bytes: bytes = b""
    buffered_offset: int = 0

    @property
    def remaining(self) -> int:
        return len(self.buffered_bytes) - self.buffered_offset

    def load(self, data: bytes, offset: int) -> None:
        """Keep data[offset:] for the next part."""
        self.buffered_bytes = data
        self.buffered_offset = offset

    def take(self, limit: int) -> memoryview:
        """
        Consume up to limit buffered bytes.

        Returns:
            View over the consumed bytes (empty when nothing is buffered)
        """
        count = min(self.remaining, limit)
        view = memoryview(self.buffered_bytes)[self.buffered_offset:self.buffered_offset + count]
        self.buffered_offset += count
        if self.remaining == 0:
            self.buffered_bytes = b""
            self.buffered_offset = 0
        return view


class _PartRouter:
    """Routes bytes into the current part while updating both hashes."""

    def __init__(self, whole_hash: IncrementalChecksumCalculator, tracker: ProgressTracker):
        self.whole_hash = whole_hash
        self.part_hash = IncrementalChecksumCalculator()
        self.tracker = tracker
        self.written = 0

    def start_part(self) -> None:
        self.part_hash.reset()
        self.written = 0

    def route(self, output: BinaryIO, data: Union[bytes, memoryview], name: str) -> None:
        try:
            output.write(data)
        except OSError as e:
            raise IOFailureError(f"Cannot write part file: {name}", name) from e
        self.whole_hash.update(data)
        self.part_hash.update(data)
        self.written += len(data)
        self.tracker.advance(len(data))


def _source_size(stream: BinaryIO) -> int:
    try:
        status = os.fstat(stream.fileno())
        if stat.S_ISREG(status.st_mode):
            return status.st_size - stream.tell()
    except (AttributeError, OSError, ValueError):
        pass
    try:
        if stream.seekable():
            position = stream.tell()
            end = stream.seek(0, os.SEEK_END)
            stream.seek(position)
            return end - position
    except (AttributeError, OSError, ValueError):
        pass
    raise InvalidArgumentError("Cannot determine source size; pass total_size explicitly")


def _source_name(stream: BinaryIO) -> str:
    name = getattr(stream, "name", None)
    if isinstance(name, str) and name:
        return Path(name).name
    return UNKNOWN_FILE_NAME


def split(
    source: Source,
    destination_dir: Union[str, Path, PartDirectory],
    part_count: int,
    name_prefix: Optional[str] = None,
    *,
    total_size: Optional[int] = None,
    original_file_name: Optional[str] = None,
    buffer_size: int = BUFFER_SIZE_BYTES,
    progress: Optional[ProgressCallback] = None,
    cancel_token: Optional[CancellationToken] = None,
) -> SplitMetadata:
    """
    Split a file into part_count parts and write their descriptor.

    Parts are written as "{name_prefix}.part{N}" and the descriptor as
    "{name_prefix}.split_metadata" in destination_dir. The descriptor is only
    written after every part is complete; when the split fails, parts written
    so far are left in place and no descriptor exists.

    Args:
        source: Path of the file to split, or a readable binary stream
        destination_dir: Directory receiving the parts and the descriptor
        part_count: Number of parts (at least 2)
        name_prefix: Prefix of the output names (defaults to the source file name)
        total_size: Source size in bytes, required for streams whose size cannot be probed
        original_file_name: Name recorded in the descriptor (defaults to the source name)
        buffer_size: Size of each read in bytes
        progress: Optional callback receiving the fraction of bytes consumed
        cancel_token: Optional token polled before every buffer transfer

    Returns:
        The descriptor of the completed split

    Raises:
        InvalidArgumentError: Bad part count or name prefix, unreadable source or unknown size
        IOFailureError: Any failure creating, reading or writing files
        OperationCancelledError: If cancel_token was cancelled
    """
    _check_part_count(part_count)
    if name_prefix:
        _check_prefix(name_prefix)
    if buffer_size <= 0:
        raise InvalidArgumentError(f"Buffer size must be positive, got {buffer_size}")

    if isinstance(source, (str, Path)):
        source_path = Path(source)
        if not source_path.is_file():
            raise InvalidArgumentError(f"Source is not a readable file: {source_path}", str(source_path))
        try:
            stream = open(source_path, 'rb')
        except OSError as e:
            raise InvalidArgumentError(f"Cannot open source: {source_path}", str(source_path)) from e
        with stream:
            return split(
                stream,
                destination_dir,
                part_count,
                name_prefix,
                total_size=total_size,
                original_file_name=original_file_name or source_path.name,
                buffer_size=buffer_size,
                progress=progress,
                cancel_token=cancel_token,
            )

    stream = source
    if total_size is None:
        total_size = _source_size(stream)
    if total_size < 0:
        raise InvalidArgumentError(f"Source size cannot be negative: {total_size}")

    original_file_name = original_file_name or _source_name(stream)
    name_prefix = name_prefix or original_file_name
    _check_prefix(name_prefix)
    directory = destination_dir if isinstance(destination_dir, PartDirectory) else PartDirectory(destination_dir)
    directory.ensure_exists()

    sizes = compute_part_sizes(total_size, part_count)
    cancel_token = cancel_token or CancellationToken()
    tracker = ProgressTracker(total_size, progress)
    whole_hash = IncrementalChecksumCalculator()
    router = _PartRouter(whole_hash, tracker)
    leftover = LeftoverBuffer()
    builder = MetadataBuilder(original_file_name, part_count)

    logger.info(
        f"Splitting {original_file_name} [size={total_size}, parts={part_count}, "
        f"dest={directory.root}, prefix={name_prefix}]"
    )

    for part_number, target_size in enumerate(sizes, start=1):
        name = part_file_name(name_prefix, part_number)
        cancel_token.raise_if_cancelled("Split")
        router.start_part()

        try:
            with directory.create(name) as output:
                if leftover.remaining:
                    router.route(output, leftover.take(target_size), name)

                while router.written < target_size:
                    cancel_token.raise_if_cancelled("Split")
                    data = _read(stream, buffer_size, original_file_name)
                    if not data:
                        raise IOFailureError(
                            f"Source ended after {tracker.processed_bytes} of {total_size} bytes",
                            original_file_name,
                        )
                    needed = target_size - router.written
                    if len(data) > needed:
                        leftover.load(data, needed)
                        data = data[:needed]
                    router.route(output, data, name)
        except OSError as e:
            raise IOFailureError(f"Cannot close part file: {name}", name) from e

        part = builder.add_part(name, router.written, router.part_hash.finalize())
        logger.debug(f"Wrote part {part.part_number}/{part_count} [file={name}, size={part.size}]")

    if leftover.remaining or _has_more(stream, original_file_name):
        raise IOFailureError(f"Source is larger than {total_size} bytes", original_file_name)

    metadata = builder.build(total_size, whole_hash.finalize())
    write_metadata(directory, name_prefix, metadata)
    tracker.finish()

    logger.info(f"Split complete: {original_file_name} -> {part_count} parts [hash={metadata.original_hash}]")
    return metadata


def _read(stream: BinaryIO, size: int, name: str) -> bytes:
    try:
        return stream.read(size)
    except OSError as e:
        raise IOFailureError(f"Cannot read source: {name}", name) from e


def _has_more(stream: BinaryIO, name: str) -> bool:
    return bool(_read(stream, 1, name))

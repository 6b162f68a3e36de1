"""Reassembles the original file from its parts."""

from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional, Union

from common.constants import BUFFER_SIZE_BYTES
from common.exceptions import IntegrityFailureError, IOFailureError, MissingPartError
from common.logging_config import get_logger
from engine.checksum import IncrementalChecksumCalculator
from engine.metadata import PartDescriptor, SplitMetadata
from engine.part_storage import PartDirectory
from engine.progress import CancellationToken, ProgressCallback, ProgressTracker

logger = get_logger(__name__)


@dataclass(frozen=True)
class MergeResult:
    """Outcome of a successful merge."""

    output_path: Path
    size: int
    hash: str


def _copy_part(
    directory: PartDirectory,
    part: PartDescriptor,
    output: BinaryIO,
    digest: IncrementalChecksumCalculator,
    tracker: ProgressTracker,
    cancel_token: CancellationToken,
    buffer_size: int,
) -> None:
    if not directory.exists(part.file_name):
        raise MissingPartError(f"Part file not found: {part.file_name}", part.file_name)

    try:
        source = directory.open_read(part.file_name)
    except FileNotFoundError as e:
        raise MissingPartError(f"Part file not found: {part.file_name}", part.file_name) from e
    except OSError as e:
        raise IOFailureError(f"Cannot open part file: {part.file_name}", part.file_name) from e

    with source:
        while True:
            cancel_token.raise_if_cancelled("Merge")
            try:
                data = source.read(buffer_size)
            except OSError as e:
                raise IOFailureError(f"Cannot read part file: {part.file_name}", part.file_name) from e
            if not data:
                break
            try:
                output.write(data)
            except OSError as e:
                raise IOFailureError(f"Cannot write merged file: {e}", part.file_name) from e
            digest.update(data)
            tracker.advance(len(data))


def _discard(output_path: Path) -> None:
    try:
        output_path.unlink(missing_ok=True)
        logger.info(f"Removed incomplete output {output_path}")
    except OSError as e:
        logger.error(f"Could not remove incomplete output {output_path}: {e}")


def merge(
    parts_dir: Union[str, Path, PartDirectory],
    metadata: SplitMetadata,
    output_path: Union[str, Path],
    *,
    buffer_size: int = BUFFER_SIZE_BYTES,
    progress: Optional[ProgressCallback] = None,
    cancel_token: Optional[CancellationToken] = None,
) -> MergeResult:
    """
    Concatenate the parts of a split into output_path and check the result.

    Parts are read in ascending part number order regardless of how the
    directory lists them. The hash of the concatenation must equal the
    descriptor's original hash. The output file must not exist beforehand;
    on any failure (missing part, I/O error, cancellation, hash mismatch) it
    is deleted, so a file left at output_path is always a verified copy.

    Args:
        parts_dir: Directory holding the parts
        metadata: Descriptor of the split
        output_path: File to create
        buffer_size: Size of each read in bytes
        progress: Optional callback receiving the fraction of bytes written
        cancel_token: Optional token polled before every buffer transfer

    Returns:
        MergeResult with the output path, size and hash

    Raises:
        MissingPartError: If a part file is absent
        IOFailureError: If the output exists or any read/write fails
        IntegrityFailureError: If the merged hash differs from the original hash
        OperationCancelledError: If cancel_token was cancelled
    """
    directory = parts_dir if isinstance(parts_dir, PartDirectory) else PartDirectory(parts_dir)
    output_path = Path(output_path)
    cancel_token = cancel_token or CancellationToken()
    tracker = ProgressTracker(metadata.original_size, progress)
    digest = IncrementalChecksumCalculator()

    try:
        output = open(output_path, 'xb')
    except FileExistsError as e:
        raise IOFailureError(f"Output file already exists: {output_path}", str(output_path)) from e
    except OSError as e:
        raise IOFailureError(f"Cannot create output file: {output_path}", str(output_path)) from e

    logger.info(
        f"Merging {metadata.part_count} parts of {metadata.original_file_name} "
        f"from {directory.root} into {output_path}"
    )

    try:
        with output:
            for part in metadata.ordered_parts():
                _copy_part(directory, part, output, digest, tracker, cancel_token, buffer_size)
                logger.debug(f"Merged part {part.part_number}/{metadata.part_count}: {part.file_name}")

        merged_hash = digest.finalize()
        if merged_hash != metadata.original_hash:
            raise IntegrityFailureError(
                "Hash verification failed after merge",
                f"expected {metadata.original_hash}, got {merged_hash}",
            )
    except BaseException as e:
        logger.warning(f"Merge of {metadata.original_file_name} failed: {e}")
        _discard(output_path)
        raise

    tracker.finish()
    logger.info(f"Merge complete: {output_path} [size={digest.bytes_processed}, hash={merged_hash}]")
    return MergeResult(output_path=output_path, size=digest.bytes_processed, hash=merged_hash)

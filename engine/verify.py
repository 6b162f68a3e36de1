"""Checks that every part listed in a descriptor is present and intact."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from common.constants import BUFFER_SIZE_BYTES
from common.logging_config import get_logger
from engine.checksum import compute_stream_checksum
from engine.metadata import PartDescriptor, SplitMetadata
from engine.part_storage import PartDirectory
from engine.progress import CancellationToken, ProgressCallback, ProgressTracker

logger = get_logger(__name__)


@dataclass(frozen=True)
class PartIssue:
    """A part that failed verification."""

    part_number: int
    file_name: str

    def __str__(self) -> str:
        return f"Part {self.part_number} ({self.file_name})"


@dataclass(frozen=True)
class VerificationReport:
    """
    Outcome of verifying a parts directory against its descriptor.

    A size mismatch is reported as corruption; the hash comparison decides.
    """

    missing_parts: tuple[PartIssue, ...] = field(default_factory=tuple)
    corrupted_parts: tuple[PartIssue, ...] = field(default_factory=tuple)

    @property
    def passed(self) -> bool:
        return not self.missing_parts and not self.corrupted_parts

    def format(self) -> str:
        """
        Render the report for display.

        Returns:
            "All parts verified" on success, otherwise one block
            per failure category
        """
        if self.passed:
            return "All parts verified"
        sections = []
        if self.missing_parts:
            lines = "\n".join(f"  {issue}" for issue in self.missing_parts)
            sections.append(f"Missing parts:\n{lines}")
        if self.corrupted_parts:
            lines = "\n".join(f"  {issue}" for issue in self.corrupted_parts)
            sections.append(f"Corrupted parts (hash mismatch):\n{lines}")
        return "\n\n".join(sections)


def _issue(part: PartDescriptor) -> PartIssue:
    return PartIssue(part_number=part.part_number, file_name=part.file_name)


def verify(
    parts_dir: Union[str, Path, PartDirectory],
    metadata: SplitMetadata,
    *,
    buffer_size: int = BUFFER_SIZE_BYTES,
    progress: Optional[ProgressCallback] = None,
    cancel_token: Optional[CancellationToken] = None,
) -> VerificationReport:
    """
    Verify every part of a split.

    All parts are checked even after a failure so the report lists every
    problem at once. A part that cannot be opened or read counts as missing.

    Args:
        parts_dir: Directory holding the parts
        metadata: Descriptor of the split
        buffer_size: Size of each read in bytes
        progress: Optional callback receiving the fraction of bytes hashed
        cancel_token: Optional token polled before every buffer read

    Returns:
        VerificationReport listing missing and corrupted parts

    Raises:
        OperationCancelledError: If cancel_token was cancelled
    """
    directory = parts_dir if isinstance(parts_dir, PartDirectory) else PartDirectory(parts_dir)
    cancel_token = cancel_token or CancellationToken()
    tracker = ProgressTracker(metadata.original_size, progress)

    missing: list[PartIssue] = []
    corrupted: list[PartIssue] = []

    logger.info(f"Verifying {metadata.part_count} parts of {metadata.original_file_name} in {directory.root}")

    def on_read(byte_count: int) -> None:
        tracker.advance(byte_count)
        cancel_token.raise_if_cancelled("Verify")

    for part in metadata.ordered_parts():
        cancel_token.raise_if_cancelled("Verify")

        if not directory.exists(part.file_name):
            logger.warning(f"Part {part.part_number} missing: {part.file_name}")
            missing.append(_issue(part))
            continue

        try:
            with directory.open_read(part.file_name) as f:
                actual_hash = compute_stream_checksum(f, buffer_size=buffer_size, on_read=on_read)
        except OSError as e:
            logger.warning(f"Part {part.part_number} unreadable: {part.file_name} ({e})")
            missing.append(_issue(part))
            continue

        if actual_hash != part.hash:
            logger.warning(
                f"Part {part.part_number} corrupted: {part.file_name} "
                f"[expected={part.hash}, actual={actual_hash}]"
            )
            corrupted.append(_issue(part))
        else:
            logger.debug(f"Part {part.part_number} verified: {part.file_name}")

    tracker.finish()
    report = VerificationReport(missing_parts=tuple(missing), corrupted_parts=tuple(corrupted))
    if report.passed:
        logger.info(f"Verification passed for {metadata.original_file_name}")
    else:
        logger.warning(
            f"Verification failed for {metadata.original_file_name} "
            f"[missing={len(missing)}, corrupted={len(corrupted)}]"
        )
    return report

"""Utility functions for CLI operations."""

import sys
from contextlib import contextmanager
from typing import Iterator, TextIO

from cli.constants import GREEN, RESET
from common.logging_config import get_logger, set_correlation_id
from engine.metadata import SplitMetadata

LOGGED_COMPONENTS = ('cli', 'engine')


class ProgressPrinter:
    """Progress callback that renders a single updating line on stdout."""

    def __init__(self, label: str, total_size: int, stream: TextIO = sys.stdout):
        """
        Initialize the progress printer.

        Args:
            label: Text shown before the counters (e.g. "Splitting movie.mkv")
            total_size: Total size of the operation in bytes
            stream: Where to write (stdout by default)
        """
        self.label = label
        self.total_size = total_size
        self.stream = stream
        self._finished = False

    def __call__(self, fraction: float) -> None:
        """
        Display progress for the given completed fraction.

        Args:
            fraction: Value between 0.0 and 1.0
        """
        if self._finished:
            return
        done = int(self.total_size * fraction)
        self.stream.write(
            f"\r{self.label}: {format_file_size(done)} / {format_file_size(self.total_size)} "
            f"({GREEN}{fraction * 100:.1f}%{RESET})"
        )
        self.stream.flush()
        if fraction >= 1.0:
            self.finish()

    def finish(self) -> None:
        """Finalize progress display with newline."""
        if self._finished:
            return
        self._finished = True
        self.stream.write('\n')
        self.stream.flush()


def format_file_size(size_bytes: int) -> str:
    """
    Format file size in bytes to human-readable format with appropriate unit.

    Uses binary units (1024-based) and automatically selects the most
    appropriate unit (B, KiB, MiB, GiB, TiB).

    Args:
        size_bytes: File size in bytes

    Returns:
        Formatted string with size and unit (e.g., "1.50 MiB", "512 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"

    units = ['KiB', 'MiB', 'GiB', 'TiB']
    size = size_bytes / 1024.0

    for unit in units:
        if size < 1024.0:
            return f"{size:.2f} {unit}"
        size /= 1024.0

    return f"{size:.2f} PiB"


def format_metadata_summary(metadata: SplitMetadata) -> str:
    """
    Render a descriptor as a readable summary with one line per part.

    Args:
        metadata: Descriptor to render

    Returns:
        Multi-line summary
    """
    lines = [
        f"Original file: {metadata.original_file_name}",
        f"Size:          {format_file_size(metadata.original_size)} ({metadata.original_size} bytes)",
        f"SHA-256:       {metadata.original_hash}",
        f"Parts:         {metadata.part_count}",
    ]
    for part in metadata.ordered_parts():
        lines.append(
            f"  #{part.part_number:<3} {part.file_name}  {format_file_size(part.size)}  {part.hash[:16]}..."
        )
    return "\n".join(lines)


@contextmanager
def tagged_logs(correlation_id: str) -> Iterator[None]:
    """
    Tag log output of the CLI and engine with a correlation ID for one operation.

    Args:
        correlation_id: Tag to include (typically the split prefix)
    """
    loggers = [get_logger(name) for name in LOGGED_COMPONENTS]
    for logger in loggers:
        set_correlation_id(logger, correlation_id)
    try:
        yield
    finally:
        for logger in loggers:
            set_correlation_id(logger, None)

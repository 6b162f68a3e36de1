"""Command handler functions for CLI operations."""

import math
from pathlib import Path
from typing import Optional

from common.exceptions import FileSplitterError
from common.logging_config import get_logger
from cli.config import Config
from cli.models import (
    InfoCommand,
    MergeCommand,
    ScanCommand,
    SplitCommand,
    VerifyCommand,
)
from cli.types import CommandResult
from cli.utils import ProgressPrinter, format_file_size, format_metadata_summary, tagged_logs
from engine.merge import merge
from engine.metadata import find_metadata_files, parts_directory_of, read_metadata
from engine.part_storage import metadata_file_name
from engine.split import parts_for_part_size, split
from engine.verify import verify

logger = get_logger(__name__)

MIB = 1024 * 1024


_config: Optional[Config] = None


def get_config() -> Config:
    """
    Get or create global Config instance.

    Returns:
        Config instance
    """
    global _config
    if _config is None:
        logger.debug("Loading CLI configuration")
        _config = Config()
    return _config


def _progress(config: Config, label: str, total_size: int) -> Optional[ProgressPrinter]:
    if not config.get_show_progress():
        return None
    return ProgressPrinter(label, total_size)


def _finish(printer: Optional[ProgressPrinter]) -> None:
    if printer is not None:
        printer.finish()


def handle_split(cmd: SplitCommand, config: Optional[Config] = None) -> CommandResult:
    """
    Handle 'split' command.

    Args:
        cmd: SplitCommand with the file and how to split it
        config: Optional Config for dependency injection (testing)

    Returns:
        CommandResult with the descriptor location or the error
    """
    if config is None:
        config = get_config()

    source = Path(cmd.file_path).expanduser()
    if not source.is_file():
        return CommandResult.error(f"File not found: {cmd.file_path}")

    total_size = source.stat().st_size
    if cmd.parts is not None:
        parts = cmd.parts
    elif cmd.part_size_mib is not None:
        parts = parts_for_part_size(total_size, max(math.floor(cmd.part_size_mib * MIB), 1))
    else:
        parts = config.get_default_parts()

    if cmd.output_dir:
        destination = Path(cmd.output_dir).expanduser()
    else:
        destination = config.get_output_dir() or source.parent
    prefix = cmd.prefix or source.name

    logger.info(f"Executing split command: file={source} parts={parts} dest={destination}")
    printer = _progress(config, f"Splitting {source.name}", total_size)
    try:
        with tagged_logs(prefix):
            metadata = split(
                source,
                destination,
                parts,
                prefix,
                buffer_size=config.get_buffer_size(),
                progress=printer,
            )
    except FileSplitterError as e:
        logger.error(f"Split failed: {e}")
        return CommandResult.error(str(e))
    finally:
        _finish(printer)

    sizes = sorted({part.size for part in metadata.parts})
    size_text = " / ".join(format_file_size(size) for size in sizes)
    return CommandResult.ok(
        f"Split {metadata.original_file_name} ({format_file_size(metadata.original_size)}) "
        f"into {metadata.part_count} parts of {size_text}\n"
        f"Metadata: {destination / metadata_file_name(prefix)}"
    )


def handle_verify(cmd: VerifyCommand, config: Optional[Config] = None) -> CommandResult:
    """
    Handle 'verify' command.

    Args:
        cmd: VerifyCommand with the descriptor path
        config: Optional Config for dependency injection (testing)

    Returns:
        CommandResult with the verification report
    """
    if config is None:
        config = get_config()

    try:
        metadata = read_metadata(Path(cmd.metadata_path).expanduser())
    except FileSplitterError as e:
        return CommandResult.error(str(e))

    directory = parts_directory_of(Path(cmd.metadata_path).expanduser())
    printer = _progress(config, f"Verifying {metadata.original_file_name}", metadata.original_size)
    try:
        with tagged_logs(metadata.original_file_name):
            report = verify(directory, metadata, buffer_size=config.get_buffer_size(), progress=printer)
    except FileSplitterError as e:
        return CommandResult.error(str(e))
    finally:
        _finish(printer)

    if report.passed:
        return CommandResult.ok(f"All {metadata.part_count} parts of {metadata.original_file_name} verified")
    return CommandResult.error(f"Verification failed\n{report.format()}")


def _default_output_path(directory: Path, file_name: str) -> Path:
    """
    Pick where a merge without an explicit output goes.

    Uses the original file name unless a file with that name is already there
    (typically the source itself when parts sit next to it); then falls back to
    "{stem}.merged{suffix}", numbered if needed.
    """
    candidate = directory / file_name
    stem, suffix = Path(file_name).stem, Path(file_name).suffix
    counter = 1
    while candidate.exists():
        tag = "merged" if counter == 1 else f"merged{counter}"
        candidate = directory / f"{stem}.{tag}{suffix}"
        counter += 1
    return candidate


def handle_merge(cmd: MergeCommand, config: Optional[Config] = None) -> CommandResult:
    """
    Handle 'merge' command.

    Parts are verified first; nothing is written when verification fails.

    Args:
        cmd: MergeCommand with the descriptor path and optional output path
        config: Optional Config for dependency injection (testing)

    Returns:
        CommandResult with the merged file location or the error
    """
    if config is None:
        config = get_config()

    metadata_path = Path(cmd.metadata_path).expanduser()
    try:
        metadata = read_metadata(metadata_path)
    except FileSplitterError as e:
        return CommandResult.error(str(e))

    directory = parts_directory_of(metadata_path)
    if cmd.output_path:
        output_path = Path(cmd.output_path).expanduser()
    else:
        output_path = _default_output_path(config.get_output_dir() or directory.root, metadata.original_file_name)

    logger.info(f"Executing merge command: metadata={metadata_path} output={output_path}")
    with tagged_logs(metadata.original_file_name):
        report = verify(directory, metadata, buffer_size=config.get_buffer_size())
        if not report.passed:
            return CommandResult.error(f"Verification failed, nothing merged\n{report.format()}")

        printer = _progress(config, f"Merging {metadata.original_file_name}", metadata.original_size)
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            result = merge(
                directory,
                metadata,
                output_path,
                buffer_size=config.get_buffer_size(),
                progress=printer,
            )
        except OSError as e:
            return CommandResult.error(f"Cannot create output directory: {e}")
        except FileSplitterError as e:
            logger.error(f"Merge failed: {e}")
            return CommandResult.error(f"Merge failed: {e}")
        finally:
            _finish(printer)

    return CommandResult.ok(
        f"Merged {metadata.part_count} parts ({format_file_size(result.size)}), hash verified\n"
        f"Saved to: {result.output_path.absolute()}"
    )


def handle_info(cmd: InfoCommand, config: Optional[Config] = None) -> CommandResult:
    """
    Handle 'info' command.

    Args:
        cmd: InfoCommand with the descriptor path
        config: Unused, accepted for a uniform handler signature

    Returns:
        CommandResult with the descriptor summary
    """
    try:
        metadata = read_metadata(Path(cmd.metadata_path).expanduser())
    except FileSplitterError as e:
        return CommandResult.error(str(e))
    return CommandResult.ok(format_metadata_summary(metadata))


def handle_scan(cmd: ScanCommand, config: Optional[Config] = None) -> CommandResult:
    """
    Handle 'scan' command.

    Args:
        cmd: ScanCommand with the directory to search
        config: Unused, accepted for a uniform handler signature

    Returns:
        CommandResult listing descriptor files
    """
    directory = Path(cmd.directory).expanduser()
    if not directory.is_dir():
        return CommandResult.error(f"Not a directory: {cmd.directory}")

    found = find_metadata_files(directory)
    if not found:
        return CommandResult.ok(f"No metadata file found in {directory}")
    lines = [f"Found {len(found)} metadata file(s) in {directory}:"]
    lines.extend(f"  {path.name}" for path in found)
    return CommandResult.ok("\n".join(lines))

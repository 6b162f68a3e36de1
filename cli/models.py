"""Command request data types for CLI."""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class SplitCommand:
    """Split a file into parts."""

    file_path: str
    parts: int | None = None
    part_size_mib: float | None = None
    output_dir: str | None = None
    prefix: str | None = None
    command: Literal["split"] = "split"


@dataclass(frozen=True)
class VerifyCommand:
    """Verify the parts listed in a descriptor."""

    metadata_path: str
    command: Literal["verify"] = "verify"


@dataclass(frozen=True)
class MergeCommand:
    """Merge the parts listed in a descriptor."""

    metadata_path: str
    output_path: str | None = None
    command: Literal["merge"] = "merge"


@dataclass(frozen=True)
class InfoCommand:
    """Show a descriptor."""

    metadata_path: str
    command: Literal["info"] = "info"


@dataclass(frozen=True)
class ScanCommand:
    """List descriptor files in a directory."""

    directory: str = "."
    command: Literal["scan"] = "scan"


CommandRequest = (
    SplitCommand
    | VerifyCommand
    | MergeCommand
    | InfoCommand
    | ScanCommand
)

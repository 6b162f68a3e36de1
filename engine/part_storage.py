"""Manages part and descriptor files inside one parts directory."""

import os
from pathlib import Path
from typing import BinaryIO, Union

from common.constants import METADATA_SUFFIX, PART_SUFFIX_TEMPLATE
from common.exceptions import IOFailureError
from common.logging_config import get_logger

logger = get_logger(__name__)


def part_file_name(prefix: str, part_number: int) -> str:
    """
    Build the file name of a part.

    Args:
        prefix: Name prefix chosen for the split
        part_number: 1-based part number

    Returns:
        File name in the form "{prefix}.part{N}"
    """
    return f"{prefix}{PART_SUFFIX_TEMPLATE.format(number=part_number)}"


def metadata_file_name(prefix: str) -> str:
    """Build the descriptor file name for a split prefix."""
    return f"{prefix}{METADATA_SUFFIX}"


class PartDirectory:
    """
    Directory holding the parts and the descriptor of one split.

    Names are always resolved relative to the directory and must not escape it.
    """

    def __init__(self, root: Union[str, Path]):
        """
        Args:
            root: Directory path (created on demand when writing)
        """
        self.root = Path(root)

    def __repr__(self) -> str:
        return f"PartDirectory({str(self.root)!r})"

    def ensure_exists(self) -> None:
        """
        Create the directory if needed.

        Raises:
            IOFailureError: If the directory cannot be created
        """
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise IOFailureError(f"Cannot create directory: {self.root}", str(self.root)) from e

    def resolve(self, name: str) -> Path:
        """
        Resolve a file name to a path inside the directory.

        Args:
            name: Bare file name

        Returns:
            Path of the file

        Raises:
            IOFailureError: If the name contains a path separator or is empty
        """
        if not name or name in (".", "..") or os.sep in name or (os.altsep and os.altsep in name):
            raise IOFailureError(f"Invalid file name: {name!r}", name)
        return self.root / name

    def exists(self, name: str) -> bool:
        """
        Check if a regular file with this name exists.

        Returns:
            True if the file exists, False otherwise
        """
        return self.resolve(name).is_file()

    def size_of(self, name: str) -> int:
        """
        Get size of a file in bytes.

        Raises:
            IOFailureError: If the file cannot be stat'ed
        """
        try:
            return self.resolve(name).stat().st_size
        except OSError as e:
            raise IOFailureError(f"Cannot stat file: {name}", name) from e

    def open_read(self, name: str) -> BinaryIO:
        """
        Open a file for binary reading.

        Raises:
            FileNotFoundError: If the file does not exist
            OSError: If the open fails for another reason
        """
        return open(self.resolve(name), 'rb')

    def create(self, name: str) -> BinaryIO:
        """
        Create a new file for binary writing.

        The file must not exist yet, so nothing already in the directory is
        overwritten or appended to.

        Raises:
            IOFailureError: If the file exists or cannot be created
        """
        path = self.resolve(name)
        try:
            return open(path, 'xb')
        except FileExistsError as e:
            raise IOFailureError(f"File already exists: {name}", name) from e
        except OSError as e:
            raise IOFailureError(f"Cannot create file: {name}", name) from e

    def write_text(self, name: str, text: str, encoding: str) -> Path:
        """
        Atomically publish a new text file.

        The content goes to a temporary sibling first and is renamed into place,
        so readers never observe a partially written file.

        Raises:
            IOFailureError: If the file exists or the write fails
        """
        path = self.resolve(name)
        if path.exists():
            raise IOFailureError(f"File already exists: {name}", name)
        tmp_path = path.with_name(f".{name}.tmp")
        try:
            with open(tmp_path, 'w', encoding=encoding) as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise IOFailureError(f"Cannot write file: {name}", name) from e
        return path

    def read_text(self, name: str, encoding: str) -> str:
        """
        Read a whole text file.

        Raises:
            FileNotFoundError: If the file does not exist
            OSError: If the read fails
        """
        return self.resolve(name).read_text(encoding=encoding)

    def delete(self, name: str) -> bool:
        """
        Delete a file.

        Returns:
            True if file was deleted, False if it didn't exist
        """
        path = self.resolve(name)
        if path.exists():
            path.unlink()
            logger.debug(f"Deleted {path}")
            return True
        return False

    def list_names(self, suffix: str = "") -> list[str]:
        """
        List file names in the directory ending with a suffix.

        Returns:
            Sorted list of file names (empty if the directory is missing)
        """
        if not self.root.is_dir():
            return []
        return sorted(
            entry.name for entry in self.root.iterdir()
            if entry.is_file() and entry.name.endswith(suffix)
        )

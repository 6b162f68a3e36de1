"""Split descriptor model and its JSON codec."""

import json
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from common.constants import (
    LEGACY_METADATA_SUFFIX,
    METADATA_ENCODING,
    METADATA_INDENT,
    METADATA_SUFFIX,
    METADATA_VERSION,
    MIN_PART_COUNT,
)
from common.exceptions import InvalidArgumentError, IOFailureError, UnsupportedVersionError
from common.logging_config import get_logger
from engine.part_storage import PartDirectory, metadata_file_name

logger = get_logger(__name__)

HEX_DIGEST_PATTERN = r"^[0-9a-f]{64}$"


class PartDescriptor(BaseModel):
    """One contiguous byte range of the original file, stored as its own file."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    part_number: int = Field(alias="partNumber", ge=1, strict=True)
    file_name: str = Field(alias="fileName", min_length=1)
    size: int = Field(ge=0, strict=True)
    hash: str = Field(pattern=HEX_DIGEST_PATTERN)

    @field_validator("file_name")
    @classmethod
    def _bare_name(cls, value: str) -> str:
        if value in (".", "..") or "/" in value or "\\" in value:
            raise ValueError(f"part file name must be a bare file name, got {value!r}")
        return value


class SplitMetadata(BaseModel):
    """
    Descriptor of a completed split.

    Invariants checked on construction:
    - part numbers are exactly 1..len(parts)
    - the part sizes add up to original_size
    - there are at least two parts
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    version: int = Field(default=METADATA_VERSION, strict=True)
    original_file_name: str = Field(alias="originalFileName")
    original_size: int = Field(alias="originalSize", ge=0, strict=True)
    original_hash: str = Field(alias="originalHash", pattern=HEX_DIGEST_PATTERN)
    parts: tuple[PartDescriptor, ...]

    @model_validator(mode="after")
    def _check_parts(self) -> "SplitMetadata":
        if self.version != METADATA_VERSION:
            raise ValueError(f"unsupported descriptor version {self.version}")
        if len(self.parts) < MIN_PART_COUNT:
            raise ValueError(f"descriptor lists {len(self.parts)} part(s), at least {MIN_PART_COUNT} required")
        numbers = sorted(part.part_number for part in self.parts)
        if numbers != list(range(1, len(self.parts) + 1)):
            raise ValueError(f"part numbers must be 1..{len(self.parts)} without gaps or duplicates")
        total = sum(part.size for part in self.parts)
        if total != self.original_size:
            raise ValueError(f"part sizes add up to {total}, expected {self.original_size}")
        return self

    @property
    def part_count(self) -> int:
        return len(self.parts)

    def ordered_parts(self) -> list[PartDescriptor]:
        """Parts in merge order (ascending part number)."""
        return sorted(self.parts, key=lambda part: part.part_number)


class MetadataBuilder:
    """
    Accumulates part descriptors while a split runs.

    Only build() produces a SplitMetadata, and only once every expected part has
    been added, so no partial descriptor ever exists outside the builder.
    """

    def __init__(self, original_file_name: str, expected_parts: int):
        self.original_file_name = original_file_name
        self.expected_parts = expected_parts
        self._parts: list[PartDescriptor] = []

    @property
    def parts_added(self) -> int:
        return len(self._parts)

    def add_part(self, file_name: str, size: int, part_hash: str) -> PartDescriptor:
        """
        Record the next part in sequence.

        Returns:
            The descriptor that was recorded

        Raises:
            InvalidArgumentError: If more parts are added than expected
        """
        if len(self._parts) >= self.expected_parts:
            raise InvalidArgumentError(
                f"Cannot add part {len(self._parts) + 1}, split expects {self.expected_parts} parts"
            )
        part = PartDescriptor(
            part_number=len(self._parts) + 1,
            file_name=file_name,
            size=size,
            hash=part_hash,
        )
        self._parts.append(part)
        return part

    def build(self, original_size: int, original_hash: str) -> SplitMetadata:
        """
        Produce the immutable descriptor.

        Raises:
            InvalidArgumentError: If parts are missing or the totals disagree
        """
        if len(self._parts) != self.expected_parts:
            raise InvalidArgumentError(
                f"Descriptor incomplete: {len(self._parts)} of {self.expected_parts} parts recorded"
            )
        try:
            return SplitMetadata(
                version=METADATA_VERSION,
                original_file_name=self.original_file_name,
                original_size=original_size,
                original_hash=original_hash,
                parts=tuple(self._parts),
            )
        except ValidationError as e:
            raise InvalidArgumentError(f"Inconsistent descriptor: {e}") from e


def metadata_to_json(metadata: SplitMetadata) -> str:
    """
    Serialize a descriptor to pretty-printed JSON with camelCase keys.

    Returns:
        JSON text
    """
    return json.dumps(metadata.model_dump(mode="json", by_alias=True), indent=METADATA_INDENT, ensure_ascii=False)


def metadata_from_json(text: str) -> SplitMetadata:
    """
    Parse and validate a descriptor.

    Args:
        text: JSON text of a descriptor

    Returns:
        Validated SplitMetadata

    Raises:
        UnsupportedVersionError: If the version field is not understood
        InvalidArgumentError: If the text is not a valid descriptor
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidArgumentError(f"Descriptor is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise InvalidArgumentError("Descriptor must be a JSON object")

    version = data.get("version")
    if isinstance(version, bool) or not isinstance(version, int):
        raise InvalidArgumentError(f"Descriptor version must be an integer, got {version!r}")
    if version != METADATA_VERSION:
        raise UnsupportedVersionError(
            f"Unsupported descriptor version {version} (supported: {METADATA_VERSION})",
            str(version),
        )

    try:
        return SplitMetadata.model_validate(data)
    except ValidationError as e:
        raise InvalidArgumentError(f"Invalid descriptor: {e}") from e


def write_metadata(directory: PartDirectory, prefix: str, metadata: SplitMetadata) -> Path:
    """
    Persist a descriptor as "{prefix}.split_metadata".

    Returns:
        Path of the written descriptor

    Raises:
        IOFailureError: If the file exists or cannot be written
    """
    name = metadata_file_name(prefix)
    path = directory.write_text(name, metadata_to_json(metadata), encoding=METADATA_ENCODING)
    logger.info(f"Descriptor written [path={path}, parts={metadata.part_count}]")
    return path


def read_metadata(path: Union[str, Path]) -> SplitMetadata:
    """
    Load a descriptor file.

    Raises:
        IOFailureError: If the file cannot be read
        UnsupportedVersionError: If the version is not understood
        InvalidArgumentError: If the content is not a valid descriptor
    """
    path = Path(path)
    try:
        text = path.read_text(encoding=METADATA_ENCODING)
    except (OSError, UnicodeDecodeError) as e:
        raise IOFailureError(f"Cannot read descriptor: {path.name}", str(path)) from e
    metadata = metadata_from_json(text)
    logger.debug(f"Descriptor loaded [path={path}, parts={metadata.part_count}]")
    return metadata


def find_metadata_files(directory: Union[str, Path]) -> list[Path]:
    """
    List descriptor files in a directory.

    Both the ".split_metadata" name and the ".split_metadata.json" spelling are
    recognized.

    Returns:
        Sorted list of descriptor paths (empty if none or the directory is missing)
    """
    parts_dir = PartDirectory(directory)
    names = set(parts_dir.list_names(METADATA_SUFFIX)) | set(parts_dir.list_names(LEGACY_METADATA_SUFFIX))
    return [parts_dir.root / name for name in sorted(names)]


def parts_directory_of(metadata_path: Union[str, Path], override: Optional[Union[str, Path]] = None) -> PartDirectory:
    """Directory the parts of a descriptor are looked up in (its parent unless overridden)."""
    if override is not None:
        return PartDirectory(override)
    return PartDirectory(Path(metadata_path).parent)

"""Project-wide constants (buffer size, descriptor format, file naming)."""

BUFFER_SIZE_BYTES: int = 8192  # Read/write buffer for split, verify and merge
HASH_ALGORITHM: str = "sha256"
HASH_HEX_LENGTH: int = 64

METADATA_VERSION: int = 1
METADATA_INDENT: int = 4
METADATA_ENCODING: str = "utf-8"

MIN_PART_COUNT: int = 2

PART_SUFFIX_TEMPLATE: str = ".part{number}"
METADATA_SUFFIX: str = ".split_metadata"
LEGACY_METADATA_SUFFIX: str = ".split_metadata.json"

UNKNOWN_FILE_NAME: str = "unknown"

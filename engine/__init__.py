"""Split, verify and merge engine."""

from engine.metadata import (
    MetadataBuilder,
    PartDescriptor,
    SplitMetadata,
    find_metadata_files,
    metadata_from_json,
    metadata_to_json,
    read_metadata,
)
from engine.merge import MergeResult, merge
from engine.progress import CancellationToken
from engine.split import compute_part_sizes, parts_for_part_size, split
from engine.verify import PartIssue, VerificationReport, verify

__all__ = [
    "CancellationToken",
    "MergeResult",
    "MetadataBuilder",
    "PartDescriptor",
    "PartIssue",
    "SplitMetadata",
    "VerificationReport",
    "compute_part_sizes",
    "find_metadata_files",
    "merge",
    "metadata_from_json",
    "metadata_to_json",
    "parts_for_part_size",
    "read_metadata",
    "split",
    "verify",
]

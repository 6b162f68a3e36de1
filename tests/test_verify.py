"""Tests for part verification."""

import pytest

from common.exceptions import OperationCancelledError
from engine.metadata import SplitMetadata
from engine.progress import CancellationToken
from engine.split import split
from engine.verify import PartIssue, VerificationReport, verify


@pytest.fixture
def split_result(sample_file, parts_dir):
    """Split the sample file into 4 parts and return the descriptor."""
    return split(sample_file, parts_dir, 4, "sample")


def flip_byte(path, offset=0):
    data = bytearray(path.read_bytes())
    data[offset] ^= 0xFF
    path.write_bytes(bytes(data))


def test_untouched_parts_pass(split_result, parts_dir):
    report = verify(parts_dir, split_result)

    assert report.passed
    assert report.missing_parts == ()
    assert report.corrupted_parts == ()
    assert report.format() == "All parts verified"


def test_corrupted_part_is_reported(split_result, parts_dir):
    flip_byte(parts_dir / "sample.part3", offset=10)

    report = verify(parts_dir, split_result)

    assert not report.passed
    assert report.corrupted_parts == (PartIssue(3, "sample.part3"),)
    assert report.missing_parts == ()


def test_truncated_part_is_reported_as_corrupted(split_result, parts_dir):
    path = parts_dir / "sample.part1"
    path.write_bytes(path.read_bytes()[:-1])

    report = verify(parts_dir, split_result)

    assert report.corrupted_parts == (PartIssue(1, "sample.part1"),)


def test_missing_part_is_reported(split_result, parts_dir):
    (parts_dir / "sample.part2").unlink()

    report = verify(parts_dir, split_result)

    assert not report.passed
    assert report.missing_parts == (PartIssue(2, "sample.part2"),)
    assert report.corrupted_parts == ()


def test_missing_and_corrupted_are_both_reported(split_result, parts_dir):
    (parts_dir / "sample.part1").unlink()
    (parts_dir / "sample.part4").unlink()
    flip_byte(parts_dir / "sample.part2")

    report = verify(parts_dir, split_result)

    assert report.missing_parts == (PartIssue(1, "sample.part1"), PartIssue(4, "sample.part4"))
    assert report.corrupted_parts == (PartIssue(2, "sample.part2"),)

    text = report.format()
    assert "Missing parts:\n  Part 1 (sample.part1)\n  Part 4 (sample.part4)" in text
    assert "Corrupted parts (hash mismatch):\n  Part 2 (sample.part2)" in text


def test_directory_in_place_of_part_counts_as_missing(split_result, parts_dir):
    (parts_dir / "sample.part2").unlink()
    (parts_dir / "sample.part2").mkdir()

    report = verify(parts_dir, split_result)

    assert report.missing_parts == (PartIssue(2, "sample.part2"),)


def test_verification_is_idempotent(split_result, parts_dir):
    flip_byte(parts_dir / "sample.part1")
    (parts_dir / "sample.part3").unlink()

    first = verify(parts_dir, split_result)
    second = verify(parts_dir, split_result)

    assert first == second


def test_parts_checked_in_part_number_order(split_result, parts_dir):
    reordered = SplitMetadata.model_validate(
        {**split_result.model_dump(), "parts": tuple(reversed(split_result.parts))}
    )
    for name in ("sample.part1", "sample.part3"):
        (parts_dir / name).unlink()

    report = verify(parts_dir, reordered)

    assert [issue.part_number for issue in report.missing_parts] == [1, 3]


def test_progress_reaches_one(split_result, parts_dir):
    values = []
    verify(parts_dir, split_result, buffer_size=2048, progress=values.append)

    assert values == sorted(values)
    assert values[-1] == 1.0


def test_cancellation(split_result, parts_dir):
    token = CancellationToken()
    token.cancel()

    with pytest.raises(OperationCancelledError):
        verify(parts_dir, split_result, cancel_token=token)


def test_empty_report_passes():
    assert VerificationReport().passed

"""Tests for checksum helpers."""

import hashlib
import io

import pytest

from engine.checksum import (
    IncrementalChecksumCalculator,
    compute_checksum,
    compute_file_checksum,
    compute_stream_checksum,
    verify_checksum,
)


def test_compute_checksum_is_lowercase_sha256():
    result = compute_checksum(b"hello")
    assert result == hashlib.sha256(b"hello").hexdigest()
    assert result == result.lower()
    assert len(result) == 64


def test_verify_checksum():
    expected = hashlib.sha256(b"data").hexdigest()
    assert verify_checksum(b"data", expected)
    assert verify_checksum(b"data", expected.upper())
    assert not verify_checksum(b"other", expected)


def test_incremental_matches_one_shot():
    calculator = IncrementalChecksumCalculator()
    calculator.update(b"hello ")
    calculator.update(memoryview(b"world"))

    assert calculator.bytes_processed == 11
    assert calculator.finalize() == compute_checksum(b"hello world")


def test_incremental_rejects_update_after_finalize():
    calculator = IncrementalChecksumCalculator()
    calculator.finalize()
    with pytest.raises(ValueError):
        calculator.update(b"x")


def test_incremental_reset():
    calculator = IncrementalChecksumCalculator()
    calculator.update(b"abc")
    calculator.finalize()
    calculator.reset()

    assert calculator.bytes_processed == 0
    assert calculator.finalize() == compute_checksum(b"")


def test_stream_checksum_reports_each_read():
    reads = []
    data = b"x" * 25
    result = compute_stream_checksum(io.BytesIO(data), buffer_size=10, on_read=reads.append)

    assert result == compute_checksum(data)
    assert reads == [10, 10, 5]


def test_file_checksum(tmp_path):
    path = tmp_path / "f.bin"
    path.write_bytes(b"\x00\x01\x02" * 5000)
    assert compute_file_checksum(path, buffer_size=1000) == compute_checksum(b"\x00\x01\x02" * 5000)


def test_file_checksum_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        compute_file_checksum(tmp_path / "missing.bin")

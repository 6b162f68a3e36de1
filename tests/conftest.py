"""Shared pytest fixtures for all tests."""

import random

import pytest

from cli.config import Config


def make_payload(size: int, seed: int = 1234) -> bytes:
    """Deterministic pseudo-random bytes of the given size."""
    return random.Random(seed).randbytes(size)


@pytest.fixture
def temp_config_dir(tmp_path):
    """
    Create temporary config directory.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Path to temporary .filesplitter directory
    """
    config_dir = tmp_path / '.filesplitter'
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def temp_config(temp_config_dir):
    """
    Create temporary config instance with progress output disabled.

    Args:
        temp_config_dir: Temporary config directory fixture

    Returns:
        Config instance with temp config file
    """
    config = Config(temp_config_dir / 'config.json')
    config.data['show_progress'] = False
    return config


@pytest.fixture
def sample_file(tmp_path):
    """
    Create a 100 KiB + 7 byte source file (not divisible by common part counts).

    Returns:
        Path to the sample file
    """
    file_path = tmp_path / 'sample.bin'
    file_path.write_bytes(make_payload(100 * 1024 + 7))
    return file_path


@pytest.fixture
def parts_dir(tmp_path):
    """Destination directory for split parts."""
    return tmp_path / 'parts'


@pytest.fixture
def payload_factory():
    """Factory producing deterministic pseudo-random payloads."""
    return make_payload

"""Shared pytest fixtures for all tests."""

import pytest

from cli.config import Config
from dedupserver.config import StoreConfig
from dedupserver.store import DedupStore


@pytest.fixture
def store_config(tmp_path):
    """
    Store config rooted in a temporary data directory with 10-byte chunks.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        StoreConfig instance
    """
    return StoreConfig.for_data_dir(tmp_path / 'data', chunk_size=10)


@pytest.fixture
def store(store_config):
    """
    Bootstrapped store over an empty data directory.

    Returns:
        DedupStore instance ready to serve
    """
    return DedupStore.open(store_config)


@pytest.fixture
def reopen(store_config):
    """
    Factory that simulates a process restart by opening a fresh store over
    the same directories.
    """
    def _reopen(**overrides):
        config = StoreConfig(**{**store_config.__dict__, **overrides})
        return DedupStore.open(config)
    return _reopen


@pytest.fixture
def temp_config_dir(tmp_path):
    """
    Create temporary CLI config directory.

    Returns:
        Path to temporary .dedupstore directory
    """
    config_dir = tmp_path / '.dedupstore'
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def temp_config(temp_config_dir):
    """
    Create temporary CLI config instance.

    Returns:
        Config instance with temp config file
    """
    return Config(temp_config_dir / 'config.json')


@pytest.fixture
def sample_file(tmp_path):
    """
    Create a sample file for testing file uploads.

    Returns:
        Path to sample text file
    """
    file_path = tmp_path / 'test.txt'
    file_path.write_text('Sample content for testing')
    return file_path

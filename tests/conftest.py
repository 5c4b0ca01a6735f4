"""Shared pytest fixtures for steamdeploy tests."""

from __future__ import annotations

import base64
import io
import zipfile
from pathlib import Path
from unittest.mock import Mock

import pytest

from steamdeploy.lib.config import SteamConfig
from steamdeploy.lib.steam.context import TaskContext
from steamdeploy.lib.streams import LogStream

# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def sdk_root(tmp_path: Path) -> Path:
    """AutoSDK root directory inside the test's temp dir."""
    root = tmp_path / "sdks"
    root.mkdir()
    return root


@pytest.fixture
def config(sdk_root: Path, tmp_path: Path) -> SteamConfig:
    """SteamConfig rooted in tmp_path, pinned to the Linux steamcmd layout."""
    return SteamConfig(sdk_root=sdk_root, root_dir=tmp_path, platform="Linux")


# ============================================================================
# Logging and Context Fixtures
# ============================================================================


@pytest.fixture
def redis_client() -> Mock:
    """Stand-in for redis.Redis that records xadd calls."""
    return Mock()


@pytest.fixture
def stream(redis_client: Mock) -> LogStream:
    """LogStream writing to the mock client without console echo."""
    return LogStream("test_stream", client=redis_client, echo=False)


@pytest.fixture
def context() -> TaskContext:
    return TaskContext()


# ============================================================================
# Archive Helpers
# ============================================================================


def make_zip(entries: dict[str, bytes]) -> bytes:
    """Build an in-memory zip; names ending in '/' become directory entries."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name, data in entries.items():
            archive.writestr(name, data)
    return buffer.getvalue()


def encode_zip(entries: dict[str, bytes]) -> str:
    return base64.b64encode(make_zip(entries)).decode("ascii")

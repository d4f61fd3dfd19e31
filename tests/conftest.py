"""Shared test fixtures for rwcache.

Provides an isolated cache directory, a controllable clock, isolated XDG
config directories, output state management, and a CLI runner. These
fixtures are discovered by pytest and available to every test module.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from rwcache.cache import FileCache
from rwcache.models import CacheConfig
from rwcache.output import reset_output


FIXED_NOW = 1_700_000_000


class FakeClock:
    """A settable stand-in for :func:`time.time`."""

    def __init__(self, now: float = FIXED_NOW) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager and CLI log handler after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When CliRunner redirects those streams during a test,
    the cached references go stale once the test finishes.
    """
    yield
    reset_output()
    logger = logging.getLogger("rwcache")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


# ---------------------------------------------------------------------------
# Cache fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    """Root directory for cache files, not created up front."""
    return tmp_path / "Data"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(cache_dir: Path, clock: FakeClock) -> FileCache:
    """An uncompressed FileCache rooted at ``cache_dir`` with a fake clock."""
    config = CacheConfig(cache_directory=cache_dir, gzip_compression=False)
    return FileCache(config, clock=clock)


@pytest.fixture
def real_time_cache(cache_dir: Path) -> FileCache:
    """A FileCache on the wall clock, for the few tests that really sleep."""
    return FileCache(CacheConfig(cache_directory=cache_dir, gzip_compression=False))


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME, XDG_CACHE_HOME, and XDG_DATA_HOME to
    subdirectories of tmp_path, forces the XDG code path, and clears all
    RWCACHE_* environment variables.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setattr("rwcache.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in ["RWCACHE_DIR", "RWCACHE_GZIP", "RWCACHE_EXTENSION"]:
        monkeypatch.delenv(var, raising=False)

    return tmp_path


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()

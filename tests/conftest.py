"""Shared test fixtures for the audis test suite."""

import os
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
import structlog

from audis.kv import InMemoryKeyValueStore
from audis.log import AuditLog
from audis.models import Event


@pytest.fixture
def kv() -> InMemoryKeyValueStore:
    """Create a fresh in-memory store for each test."""
    return InMemoryKeyValueStore()


@pytest.fixture
def audit_log(kv: InMemoryKeyValueStore) -> AuditLog:
    """Create an audit log over the in-memory store."""
    return AuditLog(kv)


@pytest.fixture
def make_event() -> Callable[..., Event]:
    """Factory fixture for events.

    Usage:
        def test_something(make_event):
            event = make_event("e1", "A", "B", data="x")
    """

    def _make_event(event_id: str, *subjects: str, data: str | None = None) -> Event:
        return Event(
            id=event_id,
            data=data if data is not None else f"data-{event_id}",
            subjects=list(subjects),
        )

    return _make_event


@pytest.fixture
def test_config_dir(tmp_path: Path) -> Path:
    """Create a temporary config directory for testing."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def mock_toml_files(test_config_dir: Path) -> Callable[[dict[str, str]], None]:
    """Factory fixture to create TOML files in the test config directory.

    Usage:
        def test_something(mock_toml_files):
            mock_toml_files({
                "default.toml": "app_name = 'test'",
                "development.toml": "host = 'redis://cache:6379'",
            })
    """

    def _create_toml_files(files: dict[str, str]) -> None:
        for filename, content in files.items():
            toml_file = test_config_dir / filename
            toml_file.write_text(content)

    return _create_toml_files


class EnvOverrideContext:
    """Context manager for temporarily setting environment variables."""

    def __init__(self, overrides: dict[str, str]) -> None:
        self.overrides = overrides
        self.original_env: dict[str, str | None] = {}

    def __enter__(self) -> None:
        for key, value in self.overrides.items():
            self.original_env[key] = os.environ.get(key)
            os.environ[key] = value

    def __exit__(self, *args: Any) -> None:
        for key in self.overrides:
            if self.original_env[key] is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = self.original_env[key]


@pytest.fixture
def env_override() -> Generator[Callable[[dict[str, str]], EnvOverrideContext], None, None]:
    """Context manager for temporarily setting environment variables.

    Usage:
        def test_something(env_override):
            with env_override({"AUDIS_HOST": "redis://cache:6379"}):
                # test code here
    """

    def _env_override(overrides: dict[str, str]) -> EnvOverrideContext:
        return EnvOverrideContext(overrides)

    yield _env_override


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Clear the settings cache before and after each test."""
    from audis.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def reset_structlog() -> Generator[None, None, None]:
    """Restore structlog defaults after tests that configure logging."""
    yield
    structlog.reset_defaults()

"""
Shared pytest fixtures and configuration for spindle tests.

This module provides:
- Settings cache / environment isolation
- structlog reset after tests that configure logging
- Small async operation factories used across execution tests
"""

import asyncio
import os
from pathlib import Path
from typing import Any, Callable

import pytest
import structlog

from spindle.core.settings import get_settings


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark tests without an explicit marker as unit tests."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "slow"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Drop SPINDLE_* variables and the cached settings around every test.

    Runs from an empty directory so a developer's ``.env`` is never read.
    """
    for key in list(os.environ):
        if key.startswith("SPINDLE_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def reset_structlog():
    """Restore structlog defaults after a test that configures logging."""
    yield
    structlog.reset_defaults()


# =============================================================================
# Operation Factories
# =============================================================================


@pytest.fixture
def make_flaky() -> Callable[..., Any]:
    """Build an async operation that fails ``failures`` times before succeeding.

    The returned operation exposes ``calls`` (a list of attempt numbers).
    """

    def factory(failures: int, value: Any = "ok", error_cls: type[Exception] = RuntimeError):
        calls: list[int] = []

        async def operation(exit: Any = None) -> Any:
            calls.append(len(calls) + 1)
            await asyncio.sleep(0)
            if len(calls) <= failures:
                raise error_cls(f"attempt {len(calls)} failed")
            return value

        operation.calls = calls  # type: ignore[attr-defined]
        return operation

    return factory

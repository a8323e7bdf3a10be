"""Pytest configuration and fixtures for the onboarding tests.

This module provides shared fixtures:
    - Settings instances isolated from the environment
    - The default catalog
    - A deterministic clock that advances one minute per reading
    - Fresh sessions and record stores
"""

from __future__ import annotations

import sys
from collections.abc import Iterator
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import TYPE_CHECKING

import pytest


# Make the package importable without installation
sys.path.insert(0, str(Path(__file__).parent.parent))

if TYPE_CHECKING:
    from onboarding.catalog import Catalog
    from onboarding.records import RecordStore
    from onboarding.session import OnboardingSession
    from onboarding.settings import Settings


START = datetime(2025, 3, 3, 9, 0, tzinfo=timezone.utc)


# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "cli: Command-line interface tests")


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Automatically mark tests based on their location."""
    for item in items:
        if "test_cli" in str(item.fspath):
            item.add_marker(pytest.mark.cli)
        else:
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Clock
# =============================================================================


class FakeClock:
    """Returns START, START + 1 min, START + 2 min, ... on successive calls."""

    def __init__(self, start: datetime = START, step: timedelta = timedelta(minutes=1)) -> None:
        self.current = start
        self.step = step
        self.calls = 0

    def __call__(self) -> datetime:
        value = self.current
        self.current += self.step
        self.calls += 1
        return value


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


# =============================================================================
# Settings & Catalog
# =============================================================================


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Keep ONBOARDING_* variables and stray config files out of every test."""
    import os

    from onboarding.settings import get_settings

    for key in list(os.environ):
        if key.startswith("ONBOARDING_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    """Default settings instance for testing."""
    from onboarding.settings import Settings

    return Settings()


@pytest.fixture
def catalog() -> Catalog:
    from onboarding.catalog import default_catalog

    return default_catalog()


# =============================================================================
# Sessions & Stores
# =============================================================================


@pytest.fixture
def store(catalog: Catalog, clock: FakeClock) -> RecordStore:
    from onboarding.records import RecordStore

    return RecordStore.initialize(
        catalog.personas,
        catalog.base_tasks,
        questions=catalog.quiz,
        clock=clock,
    )


@pytest.fixture
def session(settings: Settings, catalog: Catalog, clock: FakeClock) -> OnboardingSession:
    from onboarding.session import OnboardingSession

    return OnboardingSession(settings=settings, catalog=catalog, clock=clock)

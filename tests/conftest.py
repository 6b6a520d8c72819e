"""Pytest configuration for shared fixtures."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from loguru import logger

from position_intent.config import get_settings


@pytest.fixture(scope="session", autouse=True)
def silence_loguru_handlers() -> Iterator[None]:
    """Route Loguru output to a no-op sink during tests to avoid closed stream errors."""
    logger.remove()
    logger.add(lambda _: None, catch=True)
    yield


@pytest.fixture(autouse=True)
def isolated_settings_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep stray POSITION_INTENT_* variables, .env files and cached settings out of each test."""
    for name in ("POSITION_INTENT_DEFAULT_UPDATE_POLICY", "POSITION_INTENT_DECIMAL_PRECISION"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()

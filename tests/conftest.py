"""Shared pytest fixtures."""

import pytest

from pickfoo.core.config import settings


@pytest.fixture(autouse=True)
def _disable_background_scheduler(monkeypatch) -> None:
    """Keep the ticker thread out of API tests; reconciliation is driven explicitly."""
    monkeypatch.setattr(settings, "scheduler_enabled", False)

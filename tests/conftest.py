from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from agent_manager.config.settings import Settings
from agent_manager.services.orchestrator import Orchestrator
from agent_manager.storage.models import PlatformType
from helpers import RecordingStorage, StubPlatform


@pytest.fixture
def settings() -> Settings:
    return Settings(auto_approve=False, platforms=[], default_platform=PlatformType.CLAUDE)


@pytest.fixture
def make_orchestrator(settings: Settings) -> Callable[..., Orchestrator]:
    """Build an orchestrator over stub platforms (one per platform type by default)."""

    def _factory(**overrides: Any) -> Orchestrator:
        overrides.setdefault(
            "platforms", [StubPlatform(platform) for platform in PlatformType]
        )
        overrides.setdefault("storage", RecordingStorage())
        return Orchestrator(settings, **overrides)

    return _factory

"""Platform integrations consumed through the capability contract."""

from agent_manager.platforms.base import BasePlatform, Platform
from agent_manager.platforms.catalog import (
    PLATFORM_CLASSES,
    BingCopilotPlatform,
    ClaudePlatform,
    GeminiPlatform,
    GitHubPlatform,
    MockPlatform,
    SlackPlatform,
    WixPlatform,
    default_platforms,
)

__all__ = [
    "PLATFORM_CLASSES",
    "BasePlatform",
    "BingCopilotPlatform",
    "ClaudePlatform",
    "GeminiPlatform",
    "GitHubPlatform",
    "MockPlatform",
    "Platform",
    "SlackPlatform",
    "WixPlatform",
    "default_platforms",
]

"""Mocked integrations, one per supported platform.

Each integration exposes a single agent and reports every task as executed
successfully. Agent rosters are rebuilt on every call.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import ClassVar

from agent_manager.platforms.base import BasePlatform
from agent_manager.storage.models import Agent, PlatformConfig, PlatformType, Task, TaskResult

logger = logging.getLogger(__name__)


class MockPlatform(BasePlatform):
    """Simulated platform driven by class-level agent metadata."""

    PLATFORM: ClassVar[PlatformType]
    DISPLAY_NAME: ClassVar[str]
    AGENT_ID: ClassVar[str]
    AGENT_NAME: ClassVar[str]
    CAPABILITIES: ClassVar[tuple[str, ...]] = ()

    def platform_type(self) -> PlatformType:
        return self.PLATFORM

    async def execute_task(self, task: Task) -> TaskResult:
        logger.info(
            "platform event=execute platform=%s task_id=%s description=%r",
            self.PLATFORM,
            task.task_id,
            task.description,
        )
        output = {
            "platform": self.DISPLAY_NAME,
            "task_id": task.task_id,
            "result": f"Task executed successfully on {self.DISPLAY_NAME}",
        }
        return self.create_task_result(True, output)

    async def list_available_agents(self) -> list[Agent]:
        return [
            Agent(
                agent_id=self.AGENT_ID,
                name=self.AGENT_NAME,
                platform=self.PLATFORM,
                capabilities=list(self.CAPABILITIES),
                is_available=True,
                current_tasks=[],
            )
        ]


class WixPlatform(MockPlatform):
    PLATFORM = PlatformType.WIX
    DISPLAY_NAME = "Wix"
    AGENT_ID = "wix-agent-1"
    AGENT_NAME = "Wix Website Builder"
    CAPABILITIES = ("website-creation", "page-editing", "seo-optimization")


class SlackPlatform(MockPlatform):
    PLATFORM = PlatformType.SLACK
    DISPLAY_NAME = "Slack"
    AGENT_ID = "slack-agent-1"
    AGENT_NAME = "Slack Bot Manager"
    CAPABILITIES = ("message-posting", "channel-management", "user-notifications")


class GitHubPlatform(MockPlatform):
    PLATFORM = PlatformType.GITHUB
    DISPLAY_NAME = "GitHub"
    AGENT_ID = "github-agent-1"
    AGENT_NAME = "GitHub Actions Bot"
    CAPABILITIES = ("pr-management", "issue-tracking", "workflow-automation")


class BingCopilotPlatform(MockPlatform):
    PLATFORM = PlatformType.BING_COPILOT
    DISPLAY_NAME = "Bing Copilot"
    AGENT_ID = "bing-copilot-agent-1"
    AGENT_NAME = "Bing AI Assistant"
    CAPABILITIES = ("search", "content-generation", "research")


class GeminiPlatform(MockPlatform):
    PLATFORM = PlatformType.GEMINI
    DISPLAY_NAME = "Gemini"
    AGENT_ID = "gemini-agent-1"
    AGENT_NAME = "Gemini AI Assistant"
    CAPABILITIES = ("text-generation", "analysis", "multimodal-processing")


class ClaudePlatform(MockPlatform):
    PLATFORM = PlatformType.CLAUDE
    DISPLAY_NAME = "Claude"
    AGENT_ID = "claude-agent-1"
    AGENT_NAME = "Claude AI Assistant"
    CAPABILITIES = ("conversation", "analysis", "code-generation")


PLATFORM_CLASSES: dict[PlatformType, type[MockPlatform]] = {
    cls.PLATFORM: cls
    for cls in (
        WixPlatform,
        SlackPlatform,
        GitHubPlatform,
        BingCopilotPlatform,
        GeminiPlatform,
        ClaudePlatform,
    )
}


def default_platforms(configs: Iterable[PlatformConfig] = ()) -> list[MockPlatform]:
    """Build one integration per platform type, each with its config if given."""
    by_platform = {config.platform: config for config in configs}
    return [cls(by_platform.get(platform)) for platform, cls in PLATFORM_CLASSES.items()]

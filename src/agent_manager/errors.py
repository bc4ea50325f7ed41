"""Error taxonomy for instruction routing and task execution."""

from __future__ import annotations


class AgentManagerError(Exception):
    """Base class for errors raised by agent-manager."""


class InvalidInstructionError(AgentManagerError, ValueError):
    """Instruction text was empty or whitespace-only."""

    def __init__(self, message: str = "Instruction is required and must be non-empty") -> None:
        super().__init__(message)


class NoAvailableAgentError(AgentManagerError):
    """No registered agent on the task's platform could take the task."""

    def __init__(self, message: str = "No available agent found for task") -> None:
        super().__init__(message)


class UnknownPlatformError(AgentManagerError, KeyError):
    """The task targets a platform that was never registered."""

    def __init__(self, platform: str) -> None:
        self.platform = platform
        super().__init__(f"Platform {platform} not found")

    def __str__(self) -> str:
        # KeyError.__str__ would quote the message.
        return str(self.args[0])


class PlatformExecutionError(AgentManagerError):
    """A platform capability call itself failed."""

    def __init__(self, platform: str, message: str) -> None:
        self.platform = platform
        super().__init__(message)

"""Task storage and shared records."""

from agent_manager.storage.base import TaskStorage
from agent_manager.storage.memory import InMemoryTaskStorage
from agent_manager.storage.models import (
    MAX_TASKS_PER_AGENT,
    Agent,
    ApprovalRequest,
    PlatformConfig,
    PlatformSummary,
    PlatformType,
    Task,
    TaskPriority,
    TaskResult,
    TaskStatus,
    UserInstruction,
    VerificationStatus,
    can_transition,
)

__all__ = [
    "MAX_TASKS_PER_AGENT",
    "Agent",
    "ApprovalRequest",
    "InMemoryTaskStorage",
    "PlatformConfig",
    "PlatformSummary",
    "PlatformType",
    "Task",
    "TaskPriority",
    "TaskResult",
    "TaskStatus",
    "TaskStorage",
    "UserInstruction",
    "VerificationStatus",
    "can_transition",
]

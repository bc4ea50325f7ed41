"""Records shared by the registry, approval gate, delegator, platforms and API."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field

MAX_TASKS_PER_AGENT = 5


class TaskStatus(StrEnum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    REJECTED = "REJECTED"


class TaskPriority(StrEnum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class PlatformType(StrEnum):
    WIX = "WIX"
    SLACK = "SLACK"
    GITHUB = "GITHUB"
    BING_COPILOT = "BING_COPILOT"
    GEMINI = "GEMINI"
    CLAUDE = "CLAUDE"


class VerificationStatus(StrEnum):
    NOT_VERIFIED = "NOT_VERIFIED"
    VERIFIED = "VERIFIED"
    VERIFICATION_FAILED = "VERIFICATION_FAILED"


TERMINAL_STATUSES = frozenset({TaskStatus.COMPLETED, TaskStatus.FAILED, TaskStatus.REJECTED})

# Failure may end a task before it reaches IN_PROGRESS (no agent, unknown platform).
ALLOWED_TRANSITIONS: dict[TaskStatus, frozenset[TaskStatus]] = {
    TaskStatus.PENDING: frozenset({TaskStatus.APPROVED, TaskStatus.REJECTED, TaskStatus.FAILED}),
    TaskStatus.APPROVED: frozenset({TaskStatus.IN_PROGRESS, TaskStatus.FAILED}),
    TaskStatus.IN_PROGRESS: frozenset({TaskStatus.COMPLETED, TaskStatus.FAILED}),
    TaskStatus.COMPLETED: frozenset(),
    TaskStatus.FAILED: frozenset(),
    TaskStatus.REJECTED: frozenset(),
}


def can_transition(current: TaskStatus, target: TaskStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


def new_id() -> str:
    return str(uuid4())


class TaskResult(BaseModel):
    """Outcome of one execution attempt; replaced wholesale, never merged."""

    success: bool
    output: Any = None
    error: str | None = None
    verification_status: VerificationStatus | None = None


class Task(BaseModel):
    """Canonical task record held by the registry and returned by the API."""

    task_id: str = Field(default_factory=new_id)
    description: str
    # Original (or derived) text sent to the platform.
    instructions: str
    platform: PlatformType
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    assigned_agent: str | None = None
    result: TaskResult | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES


class ApprovalRequest(BaseModel):
    """One pending or resolved human decision gating a task."""

    request_id: str = Field(default_factory=new_id)
    task_id: str
    reason: str
    requested_at: datetime = Field(default_factory=utc_now)
    approved_at: datetime | None = None
    rejected_at: datetime | None = None
    # None while unresolved.
    approved: bool | None = None

    @property
    def is_resolved(self) -> bool:
        return self.approved is not None


class UserInstruction(BaseModel):
    """Transient parser input; not stored apart from the tasks it spawns."""

    instruction_id: str = Field(default_factory=new_id)
    content: str
    timestamp: datetime = Field(default_factory=utc_now)
    user_id: str | None = None


class Agent(BaseModel):
    """Worker exposed by a platform."""

    agent_id: str
    name: str
    platform: PlatformType
    capabilities: list[str] = Field(default_factory=list)
    is_available: bool = True
    current_tasks: list[str] = Field(default_factory=list)

    @property
    def has_capacity(self) -> bool:
        return len(self.current_tasks) < MAX_TASKS_PER_AGENT


class PlatformConfig(BaseModel):
    """Per-platform connection settings and enablement flag."""

    platform: PlatformType
    api_key: str | None = None
    endpoint: str | None = None
    credentials: dict[str, str] = Field(default_factory=dict)
    enabled: bool = True


class PlatformSummary(BaseModel):
    platform: PlatformType
    healthy: bool

"""Storage interface for the task lifecycle."""

from __future__ import annotations

from typing import Any, Protocol

from agent_manager.storage.models import (
    PlatformType,
    Task,
    TaskPriority,
    TaskResult,
    TaskStatus,
)


class TaskStorage(Protocol):
    """Dumb, consistent task store.

    Mutators on an unknown id are no-ops returning None. Transition legality is
    the caller's concern.
    """

    def create_task(
        self,
        description: str,
        instructions: str,
        platform: PlatformType,
        priority: TaskPriority = TaskPriority.MEDIUM,
    ) -> Task: ...

    def get_task(self, task_id: str) -> Task | None: ...

    def list_tasks(self) -> list[Task]: ...

    def list_by_status(self, status: TaskStatus) -> list[Task]: ...

    def list_by_platform(self, platform: PlatformType) -> list[Task]: ...

    def update_status(self, task_id: str, status: TaskStatus) -> Task | None: ...

    def assign_agent(self, task_id: str, agent_id: str) -> Task | None: ...

    def set_result(self, task_id: str, status: TaskStatus, result: TaskResult) -> Task | None: ...

    def complete_task(self, task_id: str, result: TaskResult) -> Task | None: ...

    def fail_task(self, task_id: str, error: str) -> Task | None: ...

    def update_metadata(self, task_id: str, **values: Any) -> Task | None: ...

    def record_verification(self, task_id: str, verified: bool) -> Task | None: ...

    def delete_task(self, task_id: str) -> bool: ...

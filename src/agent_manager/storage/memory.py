"""In-memory task registry owned by one orchestrator instance."""

from __future__ import annotations

import threading
from typing import Any

from agent_manager.storage.models import (
    PlatformType,
    Task,
    TaskPriority,
    TaskResult,
    TaskStatus,
    VerificationStatus,
    utc_now,
)


class InMemoryTaskStorage:
    """Thread-safe keyed store of Task records.

    Records are returned by reference so a caller holding a task sees later
    pipeline progress. ``updated_at`` is refreshed on every mutation.
    """

    def __init__(self) -> None:
        self._tasks: dict[str, Task] = {}
        self._lock = threading.Lock()

    def create_task(
        self,
        description: str,
        instructions: str,
        platform: PlatformType,
        priority: TaskPriority = TaskPriority.MEDIUM,
    ) -> Task:
        now = utc_now()
        task = Task(
            description=description,
            instructions=instructions,
            platform=platform,
            status=TaskStatus.PENDING,
            priority=priority,
            created_at=now,
            updated_at=now,
        )
        with self._lock:
            self._tasks[task.task_id] = task
        return task

    def get_task(self, task_id: str) -> Task | None:
        with self._lock:
            return self._tasks.get(task_id)

    def list_tasks(self) -> list[Task]:
        with self._lock:
            return list(self._tasks.values())

    def list_by_status(self, status: TaskStatus) -> list[Task]:
        return [task for task in self.list_tasks() if task.status == status]

    def list_by_platform(self, platform: PlatformType) -> list[Task]:
        return [task for task in self.list_tasks() if task.platform == platform]

    def update_status(self, task_id: str, status: TaskStatus) -> Task | None:
        return self._mutate(task_id, status=status)

    def assign_agent(self, task_id: str, agent_id: str) -> Task | None:
        return self._mutate(task_id, assigned_agent=agent_id)

    def set_result(self, task_id: str, status: TaskStatus, result: TaskResult) -> Task | None:
        return self._mutate(task_id, status=status, result=result)

    def complete_task(self, task_id: str, result: TaskResult) -> Task | None:
        return self._mutate(task_id, status=TaskStatus.COMPLETED, result=result)

    def fail_task(self, task_id: str, error: str) -> Task | None:
        return self._mutate(
            task_id,
            status=TaskStatus.FAILED,
            result=TaskResult(success=False, error=error),
        )

    def update_metadata(self, task_id: str, **values: Any) -> Task | None:
        with self._lock:
            task = self._tasks.get(task_id)
            if task is None:
                return None
            task.metadata.update(values)
            task.updated_at = utc_now()
            return task

    def record_verification(self, task_id: str, verified: bool) -> Task | None:
        """Store the verification outcome without touching the task status."""
        outcome = (
            VerificationStatus.VERIFIED if verified else VerificationStatus.VERIFICATION_FAILED
        )
        with self._lock:
            task = self._tasks.get(task_id)
            if task is None:
                return None
            if task.result is not None:
                task.result = task.result.model_copy(update={"verification_status": outcome})
            task.metadata["verified"] = verified
            task.updated_at = utc_now()
            return task

    def delete_task(self, task_id: str) -> bool:
        with self._lock:
            return self._tasks.pop(task_id, None) is not None

    def _mutate(self, task_id: str, **changes: Any) -> Task | None:
        with self._lock:
            task = self._tasks.get(task_id)
            if task is None:
                return None
            for field_name, value in changes.items():
                setattr(task, field_name, value)
            task.updated_at = utc_now()
            return task

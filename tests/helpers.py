"""Shared test doubles for platform and storage behaviour."""

from __future__ import annotations

import asyncio
import time
from collections import defaultdict
from collections.abc import Callable
from typing import Any

from agent_manager.platforms.base import BasePlatform
from agent_manager.storage.memory import InMemoryTaskStorage
from agent_manager.storage.models import (
    Agent,
    PlatformType,
    Task,
    TaskPriority,
    TaskResult,
    TaskStatus,
)


def make_agent(
    platform: PlatformType = PlatformType.WIX,
    *,
    agent_id: str | None = None,
    is_available: bool = True,
    current_tasks: list[str] | None = None,
) -> Agent:
    return Agent(
        agent_id=agent_id or f"{platform.value.lower()}-stub-1",
        name=f"{platform.value} stub agent",
        platform=platform,
        capabilities=["stub"],
        is_available=is_available,
        current_tasks=list(current_tasks or []),
    )


class StubPlatform(BasePlatform):
    """Configurable platform double that records every capability call."""

    def __init__(
        self,
        platform: PlatformType = PlatformType.WIX,
        *,
        agents: list[Agent] | None = None,
        result: TaskResult | None = None,
        execute_error: Exception | None = None,
        verify_error: Exception | None = None,
        verify_result: bool | None = None,
        agents_error: Exception | None = None,
        init_error: Exception | None = None,
    ) -> None:
        super().__init__()
        self._platform = platform
        self.agents = agents if agents is not None else [make_agent(platform)]
        self.result = result
        self.execute_error = execute_error
        self.verify_error = verify_error
        self.verify_result = verify_result
        self.agents_error = agents_error
        self.init_error = init_error
        self.init_calls = 0
        self.agent_lookups = 0
        self.executed: list[str] = []
        self.verified: list[str] = []

    def platform_type(self) -> PlatformType:
        return self._platform

    async def _perform_initialization(self) -> None:
        self.init_calls += 1
        if self.init_error is not None:
            raise self.init_error

    async def execute_task(self, task: Task) -> TaskResult:
        self.executed.append(task.task_id)
        if self.execute_error is not None:
            raise self.execute_error
        if self.result is not None:
            return self.result
        return self.create_task_result(True, {"task_id": task.task_id})

    async def verify_task(self, task: Task) -> bool:
        self.verified.append(task.task_id)
        if self.verify_error is not None:
            raise self.verify_error
        if self.verify_result is not None:
            return self.verify_result
        return await super().verify_task(task)

    async def list_available_agents(self) -> list[Agent]:
        self.agent_lookups += 1
        if self.agents_error is not None:
            raise self.agents_error
        return [agent.model_copy(deep=True) for agent in self.agents]


class RecordingStorage(InMemoryTaskStorage):
    """In-memory storage that keeps every status written per task."""

    def __init__(self) -> None:
        super().__init__()
        self.history: dict[str, list[TaskStatus]] = defaultdict(list)

    def create_task(
        self,
        description: str,
        instructions: str,
        platform: PlatformType,
        priority: TaskPriority = TaskPriority.MEDIUM,
    ) -> Task:
        task = super().create_task(description, instructions, platform, priority)
        self.history[task.task_id].append(task.status)
        return task

    def _mutate(self, task_id: str, **changes: Any) -> Task | None:
        task = super()._mutate(task_id, **changes)
        if task is not None and "status" in changes:
            self.history[task_id].append(changes["status"])
        return task


async def wait_until(predicate: Callable[[], bool], timeout_s: float = 2.0) -> None:
    deadline = time.monotonic() + timeout_s
    while not predicate():
        if time.monotonic() > deadline:
            raise AssertionError("condition not met before timeout")
        await asyncio.sleep(0.001)


def poll_until(predicate: Callable[[], bool], timeout_s: float = 2.0) -> None:
    deadline = time.monotonic() + timeout_s
    while not predicate():
        if time.monotonic() > deadline:
            raise AssertionError("condition not met before timeout")
        time.sleep(0.01)

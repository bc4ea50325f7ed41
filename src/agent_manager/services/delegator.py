"""Bind tasks to platform agents, run them, and verify the outcome.

Delegation, execution and verification are three independently failable
steps. Each one records its outcome on the task through the storage layer.
"""

from __future__ import annotations

import logging

from agent_manager.errors import PlatformExecutionError, UnknownPlatformError
from agent_manager.platforms.base import Platform
from agent_manager.storage.base import TaskStorage
from agent_manager.storage.models import Agent, PlatformType, Task, TaskResult, TaskStatus

logger = logging.getLogger(__name__)


class Delegator:
    def __init__(self, storage: TaskStorage) -> None:
        self.storage = storage
        self._platforms: dict[PlatformType, Platform] = {}

    def register_platform(self, platform: Platform) -> None:
        """Register by platform identity; re-registering replaces the earlier entry."""
        self._platforms[platform.platform_type()] = platform

    def get_platform(self, platform_type: PlatformType) -> Platform | None:
        return self._platforms.get(platform_type)

    def list_platforms(self) -> list[Platform]:
        return list(self._platforms.values())

    async def delegate(self, task: Task) -> Agent | None:
        """Assign the first available agent with spare capacity.

        Returns None without touching the task when the platform is unknown or
        no agent qualifies.
        """
        platform = self._platforms.get(task.platform)
        if platform is None:
            logger.warning(
                "delegation event=unknown_platform task_id=%s platform=%s",
                task.task_id,
                task.platform,
            )
            return None

        agents = await platform.list_available_agents()
        agent = next((item for item in agents if item.is_available and item.has_capacity), None)
        if agent is None:
            logger.warning(
                "delegation event=no_agent task_id=%s platform=%s candidates=%d",
                task.task_id,
                task.platform,
                len(agents),
            )
            return None

        agent.current_tasks.append(task.task_id)
        self.storage.assign_agent(task.task_id, agent.agent_id)
        self.storage.update_metadata(task.task_id, agent_name=agent.name)
        self.storage.update_status(task.task_id, TaskStatus.APPROVED)
        return agent

    async def execute(self, task: Task) -> TaskResult:
        """Run the task on its platform and store the result.

        Raises UnknownPlatformError when the platform is not registered. A
        failing platform call is recorded as a FAILED task, not raised.
        """
        platform = self._platforms.get(task.platform)
        if platform is None:
            raise UnknownPlatformError(task.platform)

        self.storage.update_status(task.task_id, TaskStatus.IN_PROGRESS)
        try:
            result = await platform.execute_task(task)
        except Exception as exc:  # noqa: BLE001
            error = PlatformExecutionError(task.platform, str(exc) or type(exc).__name__)
            logger.warning(
                "execution event=platform_error task_id=%s platform=%s error=%s",
                task.task_id,
                task.platform,
                error,
            )
            result = TaskResult(success=False, error=str(error))

        status = TaskStatus.COMPLETED if result.success else TaskStatus.FAILED
        self.storage.set_result(task.task_id, status, result)
        return result

    async def verify(self, task: Task) -> bool:
        """Ask the platform to verify the task and record the outcome. Never raises."""
        platform = self._platforms.get(task.platform)
        verified = False
        if platform is not None:
            try:
                verified = bool(await platform.verify_task(task))
            except Exception as exc:  # noqa: BLE001
                error = PlatformExecutionError(task.platform, str(exc) or type(exc).__name__)
                logger.warning(
                    "verification event=platform_error task_id=%s platform=%s error=%s",
                    task.task_id,
                    task.platform,
                    error,
                )
        self.storage.record_verification(task.task_id, verified)
        return verified

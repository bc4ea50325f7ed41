"""End-to-end instruction workflow.

The orchestrator is the only entry point other subsystems call. It owns the
task storage, the approval gate and the delegator for its own lifetime and
drives every task derived from an instruction through the per-task pipeline
graph (approve -> delegate -> execute -> verify).

Failure policy: anything that goes wrong while advancing one task is caught
at that task's boundary and recorded as FAILED. Only an empty instruction
raises out of ``process_instruction`` / ``submit_instruction``.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable

from agent_manager.config.settings import Settings, get_settings
from agent_manager.graph.state import initial_state
from agent_manager.graph.workflow import build_graph
from agent_manager.platforms.base import Platform
from agent_manager.platforms.catalog import default_platforms
from agent_manager.services.approvals import ApprovalGate
from agent_manager.services.delegator import Delegator
from agent_manager.storage.base import TaskStorage
from agent_manager.storage.memory import InMemoryTaskStorage
from agent_manager.storage.models import (
    ApprovalRequest,
    PlatformConfig,
    PlatformSummary,
    PlatformType,
    Task,
    TaskStatus,
    can_transition,
)
from agent_manager.tools import instructions

logger = logging.getLogger(__name__)


class Orchestrator:
    def __init__(
        self,
        settings: Settings | None = None,
        *,
        auto_approve: bool | None = None,
        platform_configs: Iterable[PlatformConfig] | None = None,
        platforms: Iterable[Platform] | None = None,
        storage: TaskStorage | None = None,
        approvals: ApprovalGate | None = None,
    ) -> None:
        settings = settings or get_settings()
        if platform_configs is not None:
            settings = settings.model_copy(update={"platforms": list(platform_configs)})
        self.settings = settings
        self.auto_approve = settings.auto_approve if auto_approve is None else auto_approve

        self.storage = storage or InMemoryTaskStorage()
        self.approvals = approvals or ApprovalGate()
        self.delegator = Delegator(self.storage)

        # A platform listed with enabled=false is never registered. The parser
        # still routes to it; delegation then fails for lack of a platform.
        candidates = default_platforms(settings.platforms) if platforms is None else platforms
        for platform in candidates:
            platform_type = platform.platform_type()
            if not settings.is_platform_enabled(platform_type):
                logger.info("platform event=disabled platform=%s", platform_type)
                continue
            self.delegator.register_platform(platform)

        self._graph = build_graph(
            storage=self.storage,
            approvals=self.approvals,
            delegator=self.delegator,
        )
        self._background: set[asyncio.Task[None]] = set()

    async def start(self) -> None:
        """Initialise every registered platform once; failures are only logged."""
        for platform in self.delegator.list_platforms():
            try:
                await platform.initialize()
            except Exception:  # noqa: BLE001
                logger.exception(
                    "platform event=initialize_failed platform=%s", platform.platform_type()
                )

    async def shutdown(self) -> None:
        """Stop awaiting in-flight workflows.

        Outstanding approval requests are left pending, not force-resolved.
        """
        pending = list(self._background)
        for workflow in pending:
            workflow.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._background.clear()

    async def process_instruction(self, text: str, user_id: str | None = None) -> list[Task]:
        """Parse, create and drive every derived task, one after another.

        Returns the created tasks regardless of how far each one progressed.
        """
        tasks = self._create_tasks(text, user_id)
        await self._process_tasks(tasks)
        return tasks

    async def submit_instruction(self, text: str, user_id: str | None = None) -> list[Task]:
        """Create the tasks now and drive them in the background."""
        tasks = self._create_tasks(text, user_id)
        workflow = asyncio.create_task(self._process_tasks(tasks))
        self._background.add(workflow)
        workflow.add_done_callback(self._background.discard)
        return tasks

    def approve_task(self, request_id: str) -> bool:
        return self.approvals.approve(request_id)

    def reject_task(self, request_id: str) -> bool:
        return self.approvals.reject(request_id)

    def get_tasks(self) -> list[Task]:
        return self.storage.list_tasks()

    def get_tasks_by_status(self, status: TaskStatus) -> list[Task]:
        return self.storage.list_by_status(status)

    def get_tasks_by_platform(self, platform: PlatformType) -> list[Task]:
        return self.storage.list_by_platform(platform)

    def get_task(self, task_id: str) -> Task | None:
        return self.storage.get_task(task_id)

    def delete_task(self, task_id: str) -> bool:
        return self.storage.delete_task(task_id)

    def get_pending_approvals(self) -> list[ApprovalRequest]:
        return self.approvals.list_pending()

    def get_approval_request(self, request_id: str) -> ApprovalRequest | None:
        return self.approvals.get_request(request_id)

    def get_platforms(self) -> list[Platform]:
        return self.delegator.list_platforms()

    async def list_platform_summaries(self) -> list[PlatformSummary]:
        summaries: list[PlatformSummary] = []
        for platform in self.delegator.list_platforms():
            try:
                healthy = bool(await platform.is_healthy())
            except Exception:  # noqa: BLE001
                logger.exception(
                    "platform event=health_check_failed platform=%s", platform.platform_type()
                )
                healthy = False
            summaries.append(PlatformSummary(platform=platform.platform_type(), healthy=healthy))
        return summaries

    def _create_tasks(self, text: str, user_id: str | None) -> list[Task]:
        specs = instructions.parse(text, user_id, default_platform=self.settings.default_platform)
        tasks = [
            self.storage.create_task(
                spec.description,
                spec.instructions,
                spec.platform,
                spec.priority,
            )
            for spec in specs
        ]
        logger.info(
            "instruction event=parsed user_id=%s tasks=%d platforms=%s",
            user_id,
            len(tasks),
            ",".join(task.platform for task in tasks),
        )
        return tasks

    async def _process_tasks(self, tasks: list[Task]) -> None:
        for task in tasks:
            await self._process_task(task)

    async def _process_task(self, task: Task) -> None:
        logger.info(
            "task_pipeline event=start task_id=%s platform=%s priority=%s auto_approve=%s",
            task.task_id,
            task.platform,
            task.priority,
            self.auto_approve,
        )
        try:
            await self._graph.ainvoke(initial_state(task.task_id, auto_approve=self.auto_approve))
        except Exception as exc:  # noqa: BLE001
            logger.exception("task_pipeline event=error task_id=%s", task.task_id)
            self._fail(task.task_id, str(exc) or type(exc).__name__)
            return

        current = self.storage.get_task(task.task_id)
        logger.info(
            "task_pipeline event=finished task_id=%s status=%s",
            task.task_id,
            current.status if current is not None else "deleted",
        )

    def _fail(self, task_id: str, error: str) -> None:
        current = self.storage.get_task(task_id)
        if current is None or not can_transition(current.status, TaskStatus.FAILED):
            return
        self.storage.fail_task(task_id, error)

"""Platform capability contract and shared base implementation."""

from __future__ import annotations

import abc
import logging
from typing import Any, Protocol, runtime_checkable

from agent_manager.storage.models import (
    Agent,
    PlatformConfig,
    PlatformType,
    Task,
    TaskResult,
    VerificationStatus,
)

logger = logging.getLogger(__name__)


@runtime_checkable
class Platform(Protocol):
    """Capabilities the orchestration core consumes from an integration."""

    def platform_type(self) -> PlatformType: ...

    async def initialize(self) -> None: ...

    async def execute_task(self, task: Task) -> TaskResult: ...

    async def verify_task(self, task: Task) -> bool: ...

    async def list_available_agents(self) -> list[Agent]: ...

    async def is_healthy(self) -> bool: ...


class BasePlatform(abc.ABC):
    """Common lifecycle and verification rules for concrete integrations."""

    def __init__(self, config: PlatformConfig | None = None) -> None:
        self.config = config
        self._initialized = False

    @abc.abstractmethod
    def platform_type(self) -> PlatformType:
        raise NotImplementedError

    async def initialize(self) -> None:
        """Run platform setup once; later calls are no-ops."""
        if self._initialized:
            return
        await self._perform_initialization()
        self._initialized = True

    async def _perform_initialization(self) -> None:
        logger.info("platform event=initialize platform=%s", self.platform_type())

    @abc.abstractmethod
    async def execute_task(self, task: Task) -> TaskResult:
        raise NotImplementedError

    async def verify_task(self, task: Task) -> bool:
        if task.result is None:
            return False
        return (
            task.result.success
            and task.result.verification_status == VerificationStatus.VERIFIED
        )

    @abc.abstractmethod
    async def list_available_agents(self) -> list[Agent]:
        raise NotImplementedError

    async def is_healthy(self) -> bool:
        return self._initialized

    @staticmethod
    def create_task_result(
        success: bool,
        output: Any = None,
        error: str | None = None,
    ) -> TaskResult:
        return TaskResult(
            success=success,
            output=output,
            error=error,
            verification_status=(
                VerificationStatus.VERIFIED if success else VerificationStatus.VERIFICATION_FAILED
            ),
        )

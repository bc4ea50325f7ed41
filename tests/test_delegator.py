import asyncio

import pytest

from agent_manager.errors import UnknownPlatformError
from agent_manager.services.delegator import Delegator
from agent_manager.storage import InMemoryTaskStorage
from agent_manager.storage.models import (
    MAX_TASKS_PER_AGENT,
    PlatformType,
    Task,
    TaskResult,
    TaskStatus,
    VerificationStatus,
)
from helpers import StubPlatform, make_agent


def _delegator(*platforms: StubPlatform) -> tuple[Delegator, Task]:
    storage = InMemoryTaskStorage()
    delegator = Delegator(storage)
    for platform in platforms:
        delegator.register_platform(platform)
    task = storage.create_task("[WIX] Create a website", "Create a website", PlatformType.WIX)
    return delegator, task


def test_delegate_assigns_first_agent_with_capacity() -> None:
    busy = make_agent(
        agent_id="wix-busy",
        current_tasks=[f"t{i}" for i in range(MAX_TASKS_PER_AGENT)],
    )
    offline = make_agent(agent_id="wix-offline", is_available=False)
    free = make_agent(agent_id="wix-free")
    delegator, task = _delegator(StubPlatform(agents=[busy, offline, free]))

    agent = asyncio.run(delegator.delegate(task))

    assert agent is not None
    assert agent.agent_id == "wix-free"
    assert agent.current_tasks == [task.task_id]
    assert task.assigned_agent == "wix-free"
    assert task.metadata["agent_name"] == agent.name
    assert task.status == TaskStatus.APPROVED


def test_delegate_returns_none_when_every_agent_is_full() -> None:
    full = make_agent(current_tasks=[f"t{i}" for i in range(MAX_TASKS_PER_AGENT)])
    delegator, task = _delegator(StubPlatform(agents=[full]))

    assert asyncio.run(delegator.delegate(task)) is None
    assert task.status == TaskStatus.PENDING
    assert task.assigned_agent is None


def test_delegate_returns_none_for_unregistered_platform() -> None:
    delegator, task = _delegator(StubPlatform(PlatformType.SLACK))

    assert asyncio.run(delegator.delegate(task)) is None
    assert task.status == TaskStatus.PENDING


def test_register_platform_replaces_same_identity() -> None:
    first = StubPlatform()
    second = StubPlatform()
    delegator, _ = _delegator(first, second)

    assert delegator.get_platform(PlatformType.WIX) is second
    assert delegator.list_platforms() == [second]


def test_execute_success_completes_task() -> None:
    platform = StubPlatform()
    delegator, task = _delegator(platform)
    asyncio.run(delegator.delegate(task))

    result = asyncio.run(delegator.execute(task))

    assert result.success is True
    assert task.status == TaskStatus.COMPLETED
    assert task.result == result
    assert platform.executed == [task.task_id]
    assert asyncio.run(delegator.verify(task)) is True


def test_execute_unsuccessful_result_fails_task() -> None:
    delegator, task = _delegator(
        StubPlatform(result=TaskResult(success=False, error="quota exceeded"))
    )

    result = asyncio.run(delegator.execute(task))

    assert result.success is False
    assert task.status == TaskStatus.FAILED
    assert task.result is not None and task.result.error == "quota exceeded"
    assert asyncio.run(delegator.verify(task)) is False
    assert task.result.verification_status == VerificationStatus.VERIFICATION_FAILED
    assert task.metadata["verified"] is False
    assert task.status == TaskStatus.FAILED


def test_execute_platform_exception_is_recorded_not_raised() -> None:
    delegator, task = _delegator(StubPlatform(execute_error=RuntimeError("connection reset")))

    result = asyncio.run(delegator.execute(task))

    assert result == TaskResult(success=False, error="connection reset")
    assert task.status == TaskStatus.FAILED


def test_execute_unregistered_platform_raises() -> None:
    delegator, task = _delegator()

    with pytest.raises(UnknownPlatformError) as excinfo:
        asyncio.run(delegator.execute(task))

    assert str(excinfo.value) == "Platform WIX not found"
    assert task.status == TaskStatus.PENDING


def test_verify_never_raises() -> None:
    delegator, task = _delegator(StubPlatform(verify_error=RuntimeError("verifier down")))
    asyncio.run(delegator.execute(task))

    assert asyncio.run(delegator.verify(task)) is False
    assert task.status == TaskStatus.COMPLETED


def test_verify_unregistered_platform_is_false() -> None:
    delegator, task = _delegator()

    assert asyncio.run(delegator.verify(task)) is False

from agent_manager.storage import InMemoryTaskStorage
from agent_manager.storage.models import (
    PlatformType,
    TaskPriority,
    TaskResult,
    TaskStatus,
    VerificationStatus,
    can_transition,
)


def _storage_with_tasks() -> tuple[InMemoryTaskStorage, list[str]]:
    storage = InMemoryTaskStorage()
    ids = [
        storage.create_task("[WIX] site", "site", PlatformType.WIX).task_id,
        storage.create_task("[SLACK] ping", "ping", PlatformType.SLACK, TaskPriority.HIGH).task_id,
        storage.create_task("[WIX] blog", "blog", PlatformType.WIX).task_id,
    ]
    return storage, ids


def test_created_task_starts_pending_with_unique_id() -> None:
    storage, ids = _storage_with_tasks()

    assert len(set(ids)) == 3
    task = storage.get_task(ids[1])
    assert task is not None
    assert task.status == TaskStatus.PENDING
    assert task.priority == TaskPriority.HIGH
    assert task.created_at == task.updated_at
    assert task.assigned_agent is None
    assert task.result is None


def test_list_filters_by_status_and_platform() -> None:
    storage, ids = _storage_with_tasks()
    storage.update_status(ids[0], TaskStatus.APPROVED)

    assert [task.task_id for task in storage.list_by_platform(PlatformType.WIX)] == [
        ids[0],
        ids[2],
    ]
    assert [task.task_id for task in storage.list_by_status(TaskStatus.APPROVED)] == [ids[0]]
    assert len(storage.list_tasks()) == 3


def test_mutations_refresh_updated_at_and_are_visible_through_held_reference() -> None:
    storage, ids = _storage_with_tasks()
    held = storage.get_task(ids[0])
    assert held is not None
    created_at = held.created_at

    storage.assign_agent(ids[0], "wix-agent-1")
    storage.update_metadata(ids[0], agent_name="Wix Website Builder")
    storage.set_result(ids[0], TaskStatus.COMPLETED, TaskResult(success=True, output="ok"))

    assert held.assigned_agent == "wix-agent-1"
    assert held.metadata == {"agent_name": "Wix Website Builder"}
    assert held.status == TaskStatus.COMPLETED
    assert held.result is not None and held.result.output == "ok"
    assert held.created_at == created_at
    assert held.updated_at >= created_at


def test_fail_task_records_error_result() -> None:
    storage, ids = _storage_with_tasks()

    task = storage.fail_task(ids[1], "quota exceeded")

    assert task is not None
    assert task.status == TaskStatus.FAILED
    assert task.result == TaskResult(success=False, error="quota exceeded")


def test_unknown_ids_are_ignored() -> None:
    storage, _ = _storage_with_tasks()

    assert storage.get_task("missing") is None
    assert storage.update_status("missing", TaskStatus.APPROVED) is None
    assert storage.update_metadata("missing", agent_name="x") is None
    assert storage.delete_task("missing") is False


def test_delete_task_removes_it() -> None:
    storage, ids = _storage_with_tasks()

    assert storage.delete_task(ids[0]) is True
    assert storage.get_task(ids[0]) is None
    assert len(storage.list_tasks()) == 2


def test_transition_table_only_moves_forward() -> None:
    assert can_transition(TaskStatus.PENDING, TaskStatus.APPROVED)
    assert can_transition(TaskStatus.PENDING, TaskStatus.REJECTED)
    assert can_transition(TaskStatus.PENDING, TaskStatus.FAILED)
    assert can_transition(TaskStatus.APPROVED, TaskStatus.IN_PROGRESS)
    assert can_transition(TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED)
    assert not can_transition(TaskStatus.PENDING, TaskStatus.COMPLETED)
    assert not can_transition(TaskStatus.COMPLETED, TaskStatus.FAILED)
    assert not can_transition(TaskStatus.REJECTED, TaskStatus.APPROVED)
    assert not can_transition(TaskStatus.FAILED, TaskStatus.PENDING)


def test_record_verification_keeps_status_and_marks_result() -> None:
    storage, ids = _storage_with_tasks()
    storage.set_result(
        ids[0],
        TaskStatus.COMPLETED,
        TaskResult(success=True, verification_status=VerificationStatus.VERIFIED),
    )

    task = storage.record_verification(ids[0], False)

    assert task is not None
    assert task.status == TaskStatus.COMPLETED
    assert task.metadata["verified"] is False
    assert task.result is not None
    assert task.result.verification_status == VerificationStatus.VERIFICATION_FAILED
    assert storage.record_verification("missing", True) is None


def test_record_verification_without_result_only_sets_metadata() -> None:
    storage, ids = _storage_with_tasks()

    task = storage.record_verification(ids[1], True)

    assert task is not None
    assert task.result is None
    assert task.metadata == {"verified": True}
    assert task.status == TaskStatus.PENDING

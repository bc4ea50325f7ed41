"""Typed state contract for the per-task LangGraph pipeline."""

from typing import TypedDict

from agent_manager.storage.base import TaskStorage
from agent_manager.storage.models import Task


class TaskPipelineState(TypedDict, total=False):
    task_id: str
    auto_approve: bool
    approved: bool
    agent_id: str | None
    succeeded: bool
    verified: bool
    error: str | None


def initial_state(task_id: str, *, auto_approve: bool = False) -> TaskPipelineState:
    return {
        "task_id": task_id,
        "auto_approve": auto_approve,
        "approved": False,
        "agent_id": None,
        "error": None,
    }


def load_task(storage: TaskStorage, state: TaskPipelineState) -> Task:
    task_id = state["task_id"]
    task = storage.get_task(task_id)
    if task is None:
        raise KeyError(f"Task {task_id} does not exist")
    return task

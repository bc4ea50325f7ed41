"""Fail node: record a delegation failure on the task."""

from __future__ import annotations

import logging

from agent_manager.errors import NoAvailableAgentError
from agent_manager.graph.state import TaskPipelineState
from agent_manager.storage.base import TaskStorage
from agent_manager.storage.models import TaskStatus, can_transition

logger = logging.getLogger(__name__)


def run(state: TaskPipelineState, *, storage: TaskStorage) -> TaskPipelineState:
    task_id = state["task_id"]
    error = state.get("error") or str(NoAvailableAgentError())
    task = storage.get_task(task_id)
    if task is not None and can_transition(task.status, TaskStatus.FAILED):
        storage.fail_task(task_id, error)
    logger.warning("task_pipeline event=failed task_id=%s error=%s", task_id, error)
    return {"error": error}

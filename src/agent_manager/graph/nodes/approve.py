"""Approve node: auto-approve or wait on the approval gate."""

from __future__ import annotations

import logging

from agent_manager.graph.state import TaskPipelineState, load_task
from agent_manager.services.approvals import ApprovalGate
from agent_manager.storage.base import TaskStorage
from agent_manager.storage.models import TaskStatus, can_transition

logger = logging.getLogger(__name__)


async def run(
    state: TaskPipelineState, *, storage: TaskStorage, approvals: ApprovalGate
) -> TaskPipelineState:
    task = load_task(storage, state)
    if state.get("auto_approve", False):
        return {"approved": True}

    approved = await approvals.request_approval(task)
    if not approved:
        if can_transition(task.status, TaskStatus.REJECTED):
            storage.update_status(task.task_id, TaskStatus.REJECTED)
        logger.info("task_pipeline event=rejected task_id=%s", task.task_id)
    return {"approved": approved}

"""Verify node: best-effort platform verification.

The outcome is recorded on the task (metadata and result verification status)
and returned in state; it never changes the task's COMPLETED/FAILED status.
"""

from __future__ import annotations

import logging

from agent_manager.graph.state import TaskPipelineState, load_task
from agent_manager.services.delegator import Delegator

logger = logging.getLogger(__name__)


async def run(state: TaskPipelineState, *, delegator: Delegator) -> TaskPipelineState:
    task = load_task(delegator.storage, state)
    verified = await delegator.verify(task)
    if verified:
        logger.info("task_pipeline event=verified task_id=%s", task.task_id)
    else:
        logger.warning("task_pipeline event=verification_failed task_id=%s", task.task_id)
    return {"verified": verified}

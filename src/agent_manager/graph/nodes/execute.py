"""Execute node: run the task on its platform."""

from __future__ import annotations

import logging

from agent_manager.graph.state import TaskPipelineState, load_task
from agent_manager.services.delegator import Delegator

logger = logging.getLogger(__name__)


async def run(state: TaskPipelineState, *, delegator: Delegator) -> TaskPipelineState:
    task = load_task(delegator.storage, state)
    result = await delegator.execute(task)
    logger.info(
        "task_pipeline event=executed task_id=%s status=%s",
        task.task_id,
        task.status,
    )
    return {"succeeded": result.success, "error": result.error}

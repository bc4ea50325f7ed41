"""Delegate node: bind the task to an agent on its platform."""

from __future__ import annotations

import logging

from agent_manager.errors import NoAvailableAgentError, UnknownPlatformError
from agent_manager.graph.state import TaskPipelineState, load_task
from agent_manager.services.delegator import Delegator

logger = logging.getLogger(__name__)


async def run(state: TaskPipelineState, *, delegator: Delegator) -> TaskPipelineState:
    task = load_task(delegator.storage, state)
    agent = await delegator.delegate(task)
    if agent is None:
        if delegator.get_platform(task.platform) is None:
            error = str(UnknownPlatformError(task.platform))
        else:
            error = str(NoAvailableAgentError())
        return {"agent_id": None, "error": error}

    logger.info(
        "task_pipeline event=delegated task_id=%s agent_id=%s",
        task.task_id,
        agent.agent_id,
    )
    return {"agent_id": agent.agent_id}

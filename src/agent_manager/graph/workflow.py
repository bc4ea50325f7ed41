"""LangGraph assembly for the per-task approve/delegate/execute/verify pipeline."""

from langgraph.graph import END, StateGraph

from agent_manager.graph.nodes import approve, delegate, execute, fail, verify
from agent_manager.graph.state import TaskPipelineState
from agent_manager.services.approvals import ApprovalGate
from agent_manager.services.delegator import Delegator
from agent_manager.storage.base import TaskStorage


def build_graph(*, storage: TaskStorage, approvals: ApprovalGate, delegator: Delegator):
    async def _approve(state: TaskPipelineState) -> TaskPipelineState:
        return await approve.run(state, storage=storage, approvals=approvals)

    async def _delegate(state: TaskPipelineState) -> TaskPipelineState:
        return await delegate.run(state, delegator=delegator)

    async def _execute(state: TaskPipelineState) -> TaskPipelineState:
        return await execute.run(state, delegator=delegator)

    async def _verify(state: TaskPipelineState) -> TaskPipelineState:
        return await verify.run(state, delegator=delegator)

    def _fail(state: TaskPipelineState) -> TaskPipelineState:
        return fail.run(state, storage=storage)

    def _after_approve(state: TaskPipelineState) -> str:
        return "approved" if state.get("approved", False) else "rejected"

    def _after_delegate(state: TaskPipelineState) -> str:
        return "assigned" if state.get("agent_id") else "unassigned"

    graph = StateGraph(TaskPipelineState)

    graph.add_node("approve", _approve)
    graph.add_node("delegate", _delegate)
    graph.add_node("execute", _execute)
    graph.add_node("verify", _verify)
    graph.add_node("fail", _fail)

    graph.set_entry_point("approve")
    graph.add_conditional_edges(
        "approve", _after_approve, {"approved": "delegate", "rejected": END}
    )
    graph.add_conditional_edges(
        "delegate", _after_delegate, {"assigned": "execute", "unassigned": "fail"}
    )
    graph.add_edge("execute", "verify")
    graph.add_edge("verify", END)
    graph.add_edge("fail", END)

    return graph.compile()

"""FastAPI app entrypoint for agent-manager."""

from __future__ import annotations

import re
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from agent_manager.config.settings import Settings, get_settings
from agent_manager.errors import InvalidInstructionError
from agent_manager.services.orchestrator import Orchestrator
from agent_manager.storage.models import (
    ApprovalRequest,
    PlatformSummary,
    PlatformType,
    Task,
    TaskStatus,
)

_SCRIPT_BLOCK = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
_HTML_TAG = re.compile(r"<[^>]*>")


class InstructionRequest(BaseModel):
    instruction: str
    user_id: str | None = None


class InstructionResponse(BaseModel):
    tasks: list[Task]
    message: str


class TaskListResponse(BaseModel):
    tasks: list[Task]


class TaskResponse(BaseModel):
    task: Task


class DeleteTaskResponse(BaseModel):
    deleted: bool


class ApprovalListResponse(BaseModel):
    approvals: list[ApprovalRequest]


class ApprovalActionResponse(BaseModel):
    message: str
    resolved: bool


class PlatformListResponse(BaseModel):
    platforms: list[PlatformSummary]


def sanitize_instruction(text: str, *, max_chars: int) -> str:
    """Strip script blocks and HTML tags, trim, and cap the length."""
    cleaned = _HTML_TAG.sub("", _SCRIPT_BLOCK.sub("", text))
    return cleaned.strip()[:max_chars]


def create_app(
    *,
    orchestrator: Orchestrator | None = None,
    settings_override: Settings | None = None,
) -> FastAPI:
    settings = settings_override or get_settings()
    manager = orchestrator or Orchestrator(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await manager.start()
        yield
        await manager.shutdown()

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.settings = settings
    app.state.orchestrator = manager

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "service": settings.app_name}

    @app.get("/api/tasks", response_model=TaskListResponse)
    async def list_tasks() -> TaskListResponse:
        return TaskListResponse(tasks=manager.get_tasks())

    @app.get("/api/tasks/status/{status}", response_model=TaskListResponse)
    async def list_tasks_by_status(status: str) -> TaskListResponse:
        try:
            parsed = TaskStatus(status.upper())
        except ValueError as exc:
            raise HTTPException(status_code=400, detail="Invalid status") from exc
        return TaskListResponse(tasks=manager.get_tasks_by_status(parsed))

    @app.get("/api/tasks/platform/{platform}", response_model=TaskListResponse)
    async def list_tasks_by_platform(platform: str) -> TaskListResponse:
        try:
            parsed = PlatformType(platform.upper())
        except ValueError as exc:
            raise HTTPException(status_code=400, detail="Invalid platform") from exc
        return TaskListResponse(tasks=manager.get_tasks_by_platform(parsed))

    @app.get("/api/tasks/{task_id}", response_model=TaskResponse)
    async def get_task(task_id: str) -> TaskResponse:
        task = manager.get_task(task_id)
        if task is None:
            raise HTTPException(status_code=404, detail="Task not found")
        return TaskResponse(task=task)

    @app.delete("/api/tasks/{task_id}", response_model=DeleteTaskResponse)
    async def delete_task(task_id: str) -> DeleteTaskResponse:
        if not manager.delete_task(task_id):
            raise HTTPException(status_code=404, detail="Task not found")
        return DeleteTaskResponse(deleted=True)

    @app.post("/api/instructions", response_model=InstructionResponse)
    async def submit_instruction(payload: InstructionRequest) -> InstructionResponse:
        text = sanitize_instruction(payload.instruction, max_chars=settings.max_instruction_chars)
        try:
            tasks = await manager.submit_instruction(text, payload.user_id)
        except InvalidInstructionError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return InstructionResponse(tasks=tasks, message="Instruction processed successfully")

    @app.get("/api/approvals", response_model=ApprovalListResponse)
    async def list_pending_approvals() -> ApprovalListResponse:
        return ApprovalListResponse(approvals=manager.get_pending_approvals())

    @app.post("/api/approvals/{request_id}/approve", response_model=ApprovalActionResponse)
    async def approve(request_id: str) -> ApprovalActionResponse:
        resolved = manager.approve_task(request_id)
        return ApprovalActionResponse(message="Task approved successfully", resolved=resolved)

    @app.post("/api/approvals/{request_id}/reject", response_model=ApprovalActionResponse)
    async def reject(request_id: str) -> ApprovalActionResponse:
        resolved = manager.reject_task(request_id)
        return ApprovalActionResponse(message="Task rejected successfully", resolved=resolved)

    @app.get("/api/platforms", response_model=PlatformListResponse)
    async def list_platforms() -> PlatformListResponse:
        return PlatformListResponse(platforms=await manager.list_platform_summaries())

    return app


# Module-level app for `uvicorn agent_manager.api.main:app`.
app = create_app()

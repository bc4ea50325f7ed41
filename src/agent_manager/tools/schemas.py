"""Strict Pydantic schemas for parser output."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from agent_manager.storage.models import PlatformType, TaskPriority


class StrictModel(BaseModel):
    """Base model for strict schema validation."""

    model_config = ConfigDict(extra="forbid")


class TaskSpec(StrictModel):
    """One task creation request derived from an instruction."""

    description: str
    instructions: str
    platform: PlatformType
    priority: TaskPriority

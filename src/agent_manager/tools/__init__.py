"""Instruction parsing layer."""

from agent_manager.tools.instructions import (
    DEFAULT_PLATFORM,
    PLATFORM_KEYWORDS,
    classify_priority,
    describe_task,
    detect_platforms,
    parse,
    parse_instruction,
)
from agent_manager.tools.schemas import TaskSpec

__all__ = [
    "DEFAULT_PLATFORM",
    "PLATFORM_KEYWORDS",
    "TaskSpec",
    "classify_priority",
    "describe_task",
    "detect_platforms",
    "parse",
    "parse_instruction",
]

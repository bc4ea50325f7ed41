"""Deterministic instruction parsing.

Instructions are matched with plain substring checks over lower-cased text:
one keyword scan decides the priority, another collects every platform the
text mentions. Each distinct platform yields one TaskSpec; text that mentions
no platform goes to the default (general-purpose) platform.
"""

from __future__ import annotations

from agent_manager.errors import InvalidInstructionError
from agent_manager.storage.models import PlatformType, TaskPriority, UserInstruction
from agent_manager.tools.schemas import TaskSpec

DEFAULT_PLATFORM = PlatformType.CLAUDE
DESCRIPTION_MAX_CHARS = 100

# Substring match: "pr" also fires inside longer words such as "product".
PLATFORM_KEYWORDS: dict[str, PlatformType] = {
    "wix": PlatformType.WIX,
    "website": PlatformType.WIX,
    "slack": PlatformType.SLACK,
    "message": PlatformType.SLACK,
    "github": PlatformType.GITHUB,
    "repository": PlatformType.GITHUB,
    "pr": PlatformType.GITHUB,
    "bing": PlatformType.BING_COPILOT,
    "copilot": PlatformType.BING_COPILOT,
    "search": PlatformType.BING_COPILOT,
    "gemini": PlatformType.GEMINI,
    "claude": PlatformType.CLAUDE,
}

# Checked in order; first match wins.
PRIORITY_KEYWORDS: list[tuple[tuple[str, ...], TaskPriority]] = [
    (("urgent", "critical"), TaskPriority.CRITICAL),
    (("high priority",), TaskPriority.HIGH),
    (("low priority",), TaskPriority.LOW),
]


def parse_instruction(text: str, user_id: str | None = None) -> UserInstruction:
    _require_text(text)
    return UserInstruction(content=text, user_id=user_id)


def classify_priority(text: str) -> TaskPriority:
    lowered = text.lower()
    for terms, priority in PRIORITY_KEYWORDS:
        if any(term in lowered for term in terms):
            return priority
    return TaskPriority.MEDIUM


def detect_platforms(text: str) -> list[PlatformType]:
    """Return the distinct platforms mentioned, in keyword-table order."""
    lowered = text.lower()
    detected: list[PlatformType] = []
    for keyword, platform in PLATFORM_KEYWORDS.items():
        if keyword in lowered and platform not in detected:
            detected.append(platform)
    return detected


def describe_task(text: str, platform: PlatformType) -> str:
    suffix = "..." if len(text) > DESCRIPTION_MAX_CHARS else ""
    return f"[{platform.value}] {text[:DESCRIPTION_MAX_CHARS]}{suffix}"


def parse(
    text: str,
    user_id: str | None = None,
    *,
    default_platform: PlatformType = DEFAULT_PLATFORM,
) -> list[TaskSpec]:
    """Turn raw instruction text into task specs.

    Raises InvalidInstructionError for empty or whitespace-only text. The
    requester id does not influence the result.
    """
    instruction = parse_instruction(text, user_id)
    content = instruction.content
    priority = classify_priority(content)
    platforms = detect_platforms(content) or [default_platform]
    return [
        TaskSpec(
            description=describe_task(content, platform),
            instructions=content,
            platform=platform,
            priority=priority,
        )
        for platform in platforms
    ]


def _require_text(text: str) -> None:
    if not isinstance(text, str) or not text.strip():
        raise InvalidInstructionError()

"""Terminal output parsing: ansi → patterns → interactive / assistant trackers."""

from askterminal.parsing.models import (  # noqa: F401
    ActivityEvent,
    ActivityKind,
    ConversationRound,
    InteractiveState,
    PromptState,
    TaskItem,
    TaskStatus,
    ToolName,
)

__all__ = [
    "ActivityEvent",
    "ActivityKind",
    "ConversationRound",
    "InteractiveState",
    "PromptState",
    "TaskItem",
    "TaskStatus",
    "ToolName",
]

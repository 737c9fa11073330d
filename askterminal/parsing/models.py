"""Shared data types for the terminal output interpreter."""

from __future__ import annotations

import time
from collections import deque
from dataclasses import dataclass, field
from enum import Enum

# Flat activity log cap; oldest entries are evicted first.
DEFAULT_ACTIVITY_LOG_LIMIT = 100


class InteractiveState(Enum):
    """Which full-screen program, if any, currently owns the terminal."""

    NONE = "none"
    PAGER = "pager"
    EDITOR_VIM = "editor-vim"
    EDITOR_NANO = "editor-nano"
    MONITOR = "monitor"


class PromptState(Enum):
    """Kind of confirmation or input prompt waiting on the user."""

    NONE = "none"
    YES_NO = "yes-no"
    FREE_TEXT = "free-text"


class ActivityKind(Enum):
    """Kinds of assistant activity recognised in the output stream."""

    THINKING = "thinking"
    TOOL_START = "tool_start"
    TOOL_COMPLETE = "tool_complete"
    RESPONSE = "response"
    ERROR = "error"


class ToolName(Enum):
    """Closed set of assistant tools the tracker can attribute work to."""

    READ = "Read"
    WRITE = "Write"
    EDIT = "Edit"
    BASH = "Bash"
    GLOB = "Glob"
    GREP = "Grep"
    WEB_FETCH = "WebFetch"
    WEB_SEARCH = "WebSearch"
    TASK = "Task"
    TODO_WRITE = "TodoWrite"


class TaskStatus(Enum):
    """Status of one item in the assistant's todo list."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass
class ActivityEvent:
    """One detected piece of assistant activity.

    ``timestamp`` is wall-clock time at detection, not the assistant's clock.
    """

    kind: ActivityKind
    tool: ToolName | None = None
    description: str | None = None
    timestamp: float = field(default_factory=time.time)


@dataclass
class TaskItem:
    """A todo-list entry and the activity recorded while it was in progress."""

    content: str
    status: TaskStatus = TaskStatus.PENDING
    activities: list[ActivityEvent] = field(default_factory=list)
    collapsed: bool = False


@dataclass
class ConversationRound:
    """One user prompt to the assistant and everything that followed it."""

    round_id: str
    summary: str
    timestamp: float = field(default_factory=time.time)
    tasks: list[TaskItem] = field(default_factory=list)
    # Activity not tied to a specific task
    activities: list[ActivityEvent] = field(default_factory=list)
    collapsed: bool = False


@dataclass
class AssistantSession:
    """State of the assistant sub-session nested inside the shell.

    Rounds and the flat log stay readable after the session ends; only the
    cursors (current activity, active round, task list) are cleared.
    """

    active: bool = False
    started_at: float | None = None
    rounds: list[ConversationRound] = field(default_factory=list)
    current_round_id: str | None = None
    tasks: list[TaskItem] = field(default_factory=list)
    current_activity: ActivityEvent | None = None
    activity_log: deque[ActivityEvent] = field(
        default_factory=lambda: deque(maxlen=DEFAULT_ACTIVITY_LOG_LIMIT)
    )

    @property
    def current_round(self) -> ConversationRound | None:
        return self.find_round(self.current_round_id) if self.current_round_id else None

    @property
    def active_task(self) -> TaskItem | None:
        """The in-progress task, if the current list has one."""
        for task in self.tasks:
            if task.status is TaskStatus.IN_PROGRESS:
                return task
        return None

    @property
    def is_thinking(self) -> bool:
        return (
            self.current_activity is not None
            and self.current_activity.kind is ActivityKind.THINKING
        )

    @property
    def current_tool(self) -> ToolName | None:
        if self.current_activity is None:
            return None
        return self.current_activity.tool

    def find_round(self, round_id: str) -> ConversationRound | None:
        for conversation_round in self.rounds:
            if conversation_round.round_id == round_id:
                return conversation_round
        return None

    def recent_activities(self, count: int = 10) -> list[ActivityEvent]:
        """Return the last *count* flat-log entries, newest first."""
        if count <= 0:
            return []
        return list(self.activity_log)[-count:][::-1]

from __future__ import annotations

import logging
import time
from collections import deque
from dataclasses import dataclass
from enum import Enum

from askterminal.log_setup import TRACE, preview
from askterminal.parsing.ansi import strip_ansi
from askterminal.parsing.models import (
    DEFAULT_ACTIVITY_LOG_LIMIT,
    ActivityEvent,
    ActivityKind,
    AssistantSession,
    ConversationRound,
    TaskItem,
    TaskStatus,
)
from askterminal.parsing.patterns import (
    ASSISTANT_BANNER_MARKERS,
    ASSISTANT_FAREWELL,
    ASSISTANT_MENTION,
    CHECKMARK_GLYPHS,
    FILE_PATH_LIMIT,
    FILE_TOOL_PATTERNS,
    GENERIC_TOOL_PATTERNS,
    ROUND_SUMMARY_LIMIT,
    TASK_CONTENT_LIMIT,
    TODO_ITEM_RE,
    TOOL_DETAIL_LIMIT,
    USER_PROMPT_RE,
    is_shell_prompt,
    mentions_todo_update,
    shows_thinking,
    truncate,
)

logger = logging.getLogger(__name__)


class ChangeReason(Enum):
    """Why the assistant session state changed."""

    SESSION_STARTED = "session_started"
    SESSION_ENDED = "session_ended"
    ROUND_STARTED = "round_started"
    TASKS_UPDATED = "tasks_updated"
    ACTIVITY_RECORDED = "activity_recorded"
    VIEW_CHANGED = "view_changed"


@dataclass(frozen=True)
class AssistantActivityChange:
    """Notification that the assistant session changed.

    ``session`` is the live tracker-owned object; consumers read it but
    never mutate it.
    """

    reason: ChangeReason
    session: AssistantSession

    @property
    def current_activity(self) -> ActivityEvent | None:
        return self.session.current_activity


def parse_task_items(text: str) -> list[TaskItem]:
    """Parse ``[status] content`` pairs out of a todo-list update.

    Args:
        text: Normalized chunk text.

    Returns:
        Task items in the order they appear. Empty if nothing matched.
    """
    items: list[TaskItem] = []
    for m in TODO_ITEM_RE.finditer(text):
        content = truncate(m.group(2).strip(), TASK_CONTENT_LIMIT)
        items.append(TaskItem(content=content, status=TaskStatus(m.group(1).lower())))
    return items


class AssistantSessionTracker:
    """Follow an assistant session running inside the shell.

    Detects session entry and exit and turns the assistant's streamed prose
    into a hierarchy of conversation rounds, task items and activity events.
    Every chunk walks a fixed list of checks and stops at the first one that
    applies, so lifecycle markers are always seen before content parsing and
    path-anchored tool calls before generic tool names.
    """

    def __init__(self, activity_log_limit: int = DEFAULT_ACTIVITY_LOG_LIMIT) -> None:
        self._activity_log_limit = activity_log_limit
        self.session = self._new_session()

    def _new_session(self) -> AssistantSession:
        return AssistantSession(activity_log=deque(maxlen=self._activity_log_limit))

    def reset(self) -> None:
        """Drop all session state, as if freshly constructed."""
        self.session = self._new_session()

    # --- Lifecycle ---

    def start_session(self) -> None:
        s = self.session
        s.active = True
        s.started_at = time.time()
        s.activity_log.clear()
        s.rounds = []
        s.current_round_id = None
        s.tasks = []
        s.current_activity = None
        logger.debug("Assistant session started")

    def end_session(self) -> None:
        s = self.session
        s.active = False
        s.current_activity = None
        s.started_at = None
        s.current_round_id = None
        s.tasks = []
        logger.debug(
            "Assistant session ended rounds=%d activities=%d",
            len(s.rounds), len(s.activity_log),
        )

    def start_new_round(self, summary: str = "User prompt") -> ConversationRound:
        s = self.session
        conversation_round = ConversationRound(
            round_id=f"round-{len(s.rounds) + 1}",
            summary=summary,
        )
        s.rounds.append(conversation_round)
        s.current_round_id = conversation_round.round_id
        s.tasks = []
        logger.debug("New round %s: %r", conversation_round.round_id, summary)
        return conversation_round

    def update_tasks(self, tasks: list[TaskItem]) -> None:
        """Replace the task list wholesale and mirror it onto the active round."""
        self.session.tasks = tasks
        current = self.session.current_round
        if current is not None:
            current.tasks = tasks
        logger.debug("Task list replaced with %d items", len(tasks))

    def record_activity(self, event: ActivityEvent) -> None:
        """Make *event* current, log it, and attach it to the hierarchy.

        Without an active round only the flat log keeps it. Inside a round
        the in-progress task gets it if there is one, otherwise the round's
        general list.
        """
        s = self.session
        s.current_activity = event
        s.activity_log.append(event)

        current = s.current_round
        if current is None:
            return
        task = s.active_task
        if task is not None:
            task.activities.append(event)
        else:
            current.activities.append(event)

    def clear_activity(self) -> None:
        self.session.current_activity = None

    # --- View state ---

    def toggle_round_collapsed(self, round_id: str) -> bool:
        """Flip a round's collapse flag. Returns False for unknown ids."""
        conversation_round = self.session.find_round(round_id)
        if conversation_round is None:
            return False
        conversation_round.collapsed = not conversation_round.collapsed
        return True

    def toggle_task_collapsed(self, round_id: str, index: int) -> bool:
        """Flip the collapse flag of task *index* in a round."""
        conversation_round = self.session.find_round(round_id)
        if conversation_round is None or not 0 <= index < len(conversation_round.tasks):
            return False
        task = conversation_round.tasks[index]
        task.collapsed = not task.collapsed
        return True

    def collapse_all(self) -> None:
        self._set_all_collapsed(True)

    def expand_all(self) -> None:
        self._set_all_collapsed(False)

    def _set_all_collapsed(self, collapsed: bool) -> None:
        for conversation_round in self.session.rounds:
            conversation_round.collapsed = collapsed
            for task in conversation_round.tasks:
                task.collapsed = collapsed

    # --- Output processing ---

    def feed(self, chunk: str) -> AssistantActivityChange | None:
        """Process one raw output chunk.

        Args:
            chunk: Raw PTY output, escape sequences included.

        Returns:
            An AssistantActivityChange describing what happened, or None if
            the chunk changed nothing.
        """
        text = strip_ansi(chunk)
        reason = self._process(text)
        if reason is None:
            return None
        return AssistantActivityChange(reason=reason, session=self.session)

    def _process(self, text: str) -> ChangeReason | None:
        s = self.session

        # 1. Welcome banner
        if not s.active:
            if any(marker in text for marker in ASSISTANT_BANNER_MARKERS):
                self.start_session()
                return ChangeReason.SESSION_STARTED
            # 2. Nothing to track outside a session
            return None

        logger.log(TRACE, "assistant feed %s", preview(text))

        # 3. Explicit exit
        if ASSISTANT_FAREWELL in text:
            self.end_session()
            return ChangeReason.SESSION_ENDED

        # 4. Shell prompt is back. Code output printed by the assistant can
        # end in $ as well, hence the mention and prior-activity guards.
        if is_shell_prompt(text) and ASSISTANT_MENTION not in text and s.activity_log:
            self.end_session()
            return ChangeReason.SESSION_ENDED

        # 5. User prompt echo starts a new round
        m = USER_PROMPT_RE.match(text)
        if m:
            self.start_new_round(truncate(m.group(1).strip(), ROUND_SUMMARY_LIMIT))
            return ChangeReason.ROUND_STARTED

        # 6. Todo list update; an unparseable one keeps the old list
        if mentions_todo_update(text):
            tasks = parse_task_items(text)
            if tasks:
                self.update_tasks(tasks)
                return ChangeReason.TASKS_UPDATED

        # 7. Spinner
        if shows_thinking(text):
            self.record_activity(ActivityEvent(kind=ActivityKind.THINKING))
            return ChangeReason.ACTIVITY_RECORDED

        # 8. File tools need a real path, so "Read 138 lines" is skipped
        for pattern, tool, verb in FILE_TOOL_PATTERNS:
            m = pattern.search(text)
            if m:
                path = m.group(1)[:FILE_PATH_LIMIT]
                self.record_activity(ActivityEvent(
                    kind=ActivityKind.TOOL_START,
                    tool=tool,
                    description=f"{verb}: {path}",
                ))
                return ChangeReason.ACTIVITY_RECORDED

        # 9. Other tools, first match wins
        for pattern, tool, verb in GENERIC_TOOL_PATTERNS:
            m = pattern.search(text)
            if m:
                detail = m.group(1).strip()[:TOOL_DETAIL_LIMIT]
                self.record_activity(ActivityEvent(
                    kind=ActivityKind.TOOL_START,
                    tool=tool,
                    description=f"{verb}: {detail}" if detail else verb,
                ))
                return ChangeReason.ACTIVITY_RECORDED

        # 10. Checkmark closes the running tool
        current = s.current_activity
        if (
            any(glyph in text for glyph in CHECKMARK_GLYPHS)
            and current is not None
            and current.kind is ActivityKind.TOOL_START
        ):
            self.record_activity(ActivityEvent(
                kind=ActivityKind.TOOL_COMPLETE,
                tool=current.tool,
                description="Completed",
            ))
            return ChangeReason.ACTIVITY_RECORDED

        return None

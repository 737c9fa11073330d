"""Terminal output interpreter: the single entry point for PTY output.

- :class:`TerminalInterpreter`: owns one interactive-mode tracker and one
  assistant session tracker, fans every output chunk out to both, and
  notifies listeners of the resulting changes.

There is no module-level state: the presentation layer holds the
interpreter instance it was given and subscribes to it.
"""

from __future__ import annotations

import logging
from typing import Callable, Union

from askterminal.config import InterpreterConfig
from askterminal.log_setup import TRACE
from askterminal.parsing.assistant import (
    AssistantActivityChange,
    AssistantSessionTracker,
    ChangeReason,
)
from askterminal.parsing.interactive import InteractiveModeChange, InteractiveModeTracker
from askterminal.parsing.models import (
    ActivityEvent,
    AssistantSession,
    InteractiveState,
    PromptState,
)

logger = logging.getLogger(__name__)

InterpreterEvent = Union[InteractiveModeChange, AssistantActivityChange]
Listener = Callable[[InterpreterEvent], None]


class TerminalInterpreter:
    """Derive interactive-mode and assistant-activity state from PTY output.

    All methods run synchronously on the caller's thread and never wait.
    Listeners are called in subscription order, after both trackers have
    processed the chunk.
    """

    def __init__(self, config: InterpreterConfig | None = None) -> None:
        self._config = config or InterpreterConfig()
        self._interactive = InteractiveModeTracker()
        self._assistant = AssistantSessionTracker(
            activity_log_limit=self._config.activity_log_limit,
        )
        self._listeners: list[Listener] = []

    # --- Subscriptions ---

    def subscribe(self, listener: Listener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, events: list[InterpreterEvent]) -> None:
        for event in events:
            for listener in list(self._listeners):
                listener(event)

    # --- Inbound interface ---

    def on_output_chunk(self, text: str) -> list[InterpreterEvent]:
        """Feed one PTY delivery to both trackers.

        Args:
            text: Raw chunk exactly as read from the pseudo-terminal.

        Returns:
            The events that were sent to listeners, in emission order.
        """
        logger.log(TRACE, "on_output_chunk len=%d", len(text))
        events: list[InterpreterEvent] = []
        interactive_change = self._interactive.feed(text)
        if interactive_change is not None:
            events.append(interactive_change)
        assistant_change = self._assistant.feed(text)
        if assistant_change is not None:
            events.append(assistant_change)
        self._emit(events)
        return events

    def on_command_submitted(self, command: str) -> list[InterpreterEvent]:
        """Tell the interpreter the user just submitted *command* to the shell."""
        change = self._interactive.on_command_submitted(command)
        events: list[InterpreterEvent] = [change] if change is not None else []
        self._emit(events)
        return events

    def reset(self) -> None:
        """Return every state machine to its initial state.

        Idempotent and immediate. Listeners stay subscribed and are not
        notified.
        """
        self._interactive.reset()
        self._assistant.reset()
        logger.debug("Interpreter reset")

    # --- Outbound state ---

    @property
    def config(self) -> InterpreterConfig:
        return self._config

    @property
    def interactive_state(self) -> InteractiveState:
        return self._interactive.interactive_state

    @property
    def prompt_state(self) -> PromptState:
        return self._interactive.prompt_state

    @property
    def prompt_question(self) -> str:
        return self._interactive.question

    @property
    def session(self) -> AssistantSession:
        return self._assistant.session

    @property
    def current_activity(self) -> ActivityEvent | None:
        return self._assistant.session.current_activity

    def recent_activities(self, count: int | None = None) -> list[ActivityEvent]:
        """Newest-first slice of the flat activity log."""
        if count is None:
            count = self._config.recent_activity_count
        return self._assistant.session.recent_activities(count)

    # --- View operations for the activity panel ---

    def _view_changed(self) -> None:
        self._emit([AssistantActivityChange(
            reason=ChangeReason.VIEW_CHANGED, session=self._assistant.session,
        )])

    def toggle_round_collapsed(self, round_id: str) -> None:
        if self._assistant.toggle_round_collapsed(round_id):
            self._view_changed()

    def toggle_task_collapsed(self, round_id: str, index: int) -> None:
        if self._assistant.toggle_task_collapsed(round_id, index):
            self._view_changed()

    def collapse_all(self) -> None:
        self._assistant.collapse_all()
        self._view_changed()

    def expand_all(self) -> None:
        self._assistant.expand_all()
        self._view_changed()

    def clear_activity(self) -> None:
        if self._assistant.session.current_activity is not None:
            self._assistant.clear_activity()
            self._view_changed()

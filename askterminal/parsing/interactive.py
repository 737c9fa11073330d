from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass

from askterminal.log_setup import TRACE, preview
from askterminal.parsing.ansi import strip_ansi
from askterminal.parsing.models import InteractiveState, PromptState
from askterminal.parsing.patterns import (
    FREE_TEXT_PROMPT_RE,
    LAUNCH_COMMANDS,
    PAGER_CONTINUATION_RE,
    YES_NO_PROMPT_RE,
    is_shell_prompt,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InteractiveModeChange:
    """Snapshot emitted whenever interactive or prompt state changes."""

    interactive_state: InteractiveState
    prompt_state: PromptState
    question: str


def launch_state_for(command: str) -> InteractiveState | None:
    """Look up the full-screen program a submitted command line launches.

    Only the first word is considered, reduced to its basename so that
    ``/usr/bin/vim`` behaves like ``vim``.

    Returns:
        The InteractiveState the program puts the terminal in, or None for
        commands not in the launch table.
    """
    words = command.strip().split()
    if not words:
        return None
    return LAUNCH_COMMANDS.get(os.path.basename(words[0]))


def _last_line(text: str, match: re.Match[str]) -> str:
    line_start = text.rfind("\n", 0, match.start()) + 1
    return text[line_start:].replace("\r", "")


def _extract_question(text: str, match: re.Match[str]) -> str:
    """Return the line holding a prompt match, or the line before it.

    When the prompt token stands alone on its line, the question is the
    last non-empty line above it.
    """
    line_start = text.rfind("\n", 0, match.start()) + 1
    current_line = _last_line(text, match)
    if text[line_start:match.start()].strip():
        return current_line
    for line in reversed(text[:line_start].split("\n")):
        line = line.replace("\r", "")
        if line.strip():
            return line
    return current_line


class InteractiveModeTracker:
    """Track full-screen program ownership and pending confirmation prompts.

    Entry into a mode comes only from :meth:`on_command_submitted`; output is
    used to keep or leave modes. Each chunk is checked against rules in a
    fixed priority order and the first rule that matches ends evaluation:

      1. Confirmation prompt (yes/no, then free-text input requests)
      2. Pager continuation keeps the pager
      3. Shell prompt ends the interactive mode
      4. Shell prompt clears a pending prompt

    Staying in a mode too long is preferred to leaving it too early, so
    anything unrecognised leaves the state as it was.
    """

    def __init__(self) -> None:
        self.interactive_state: InteractiveState = InteractiveState.NONE
        self.prompt_state: PromptState = PromptState.NONE
        self.question: str = ""

    def snapshot(self) -> InteractiveModeChange:
        return InteractiveModeChange(
            interactive_state=self.interactive_state,
            prompt_state=self.prompt_state,
            question=self.question,
        )

    def reset(self) -> None:
        """Return to ``{none, none, ""}``."""
        self.interactive_state = InteractiveState.NONE
        self.prompt_state = PromptState.NONE
        self.question = ""

    def on_command_submitted(self, command: str) -> InteractiveModeChange | None:
        """Enter an interactive mode if *command* launches a known program.

        Runs before any output of the command is seen. Unknown commands leave
        the state untouched.

        Returns:
            The new snapshot if the state changed, else None.
        """
        state = launch_state_for(command)
        if state is None or state is self.interactive_state:
            return None
        logger.debug("Interactive mode %s -> %s (command %r)", self.interactive_state.value, state.value, command)
        self.interactive_state = state
        return self.snapshot()

    def feed(self, chunk: str) -> InteractiveModeChange | None:
        """Update state from one raw output chunk.

        Args:
            chunk: Raw PTY output, escape sequences included.

        Returns:
            The new snapshot if any field changed, else None.
        """
        before = self.snapshot()
        text = strip_ansi(chunk)
        logger.log(TRACE, "interactive feed %s", preview(text))
        self._apply_rules(text)
        after = self.snapshot()
        if after == before:
            return None
        logger.debug(
            "Interactive state=%s prompt=%s question=%r",
            after.interactive_state.value, after.prompt_state.value, after.question,
        )
        return after

    def _apply_rules(self, text: str) -> None:
        # 1. Confirmation prompts win over everything that shares trailing chars
        m = YES_NO_PROMPT_RE.search(text)
        if m:
            self.prompt_state = PromptState.YES_NO
            self.question = _extract_question(text, m)
            return
        if self.interactive_state is InteractiveState.NONE:
            m = FREE_TEXT_PROMPT_RE.search(text)
            if m:
                self.prompt_state = PromptState.FREE_TEXT
                self.question = _last_line(text, m)
                return

        # 2. Pager screens can contain lines ending in $, so check them first
        if (
            self.interactive_state is InteractiveState.PAGER
            and PAGER_CONTINUATION_RE.search(text)
        ):
            return

        # 3. Back at the shell
        if self.interactive_state is not InteractiveState.NONE and is_shell_prompt(text):
            self.interactive_state = InteractiveState.NONE
            return

        # 4. Prompt answered
        if self.prompt_state is not PromptState.NONE and is_shell_prompt(text):
            self.prompt_state = PromptState.NONE
            self.question = ""

"""Pattern tables shared by the interactive-mode and assistant trackers.

All patterns run against text already passed through
:func:`askterminal.parsing.ansi.strip_ansi`.
"""

from __future__ import annotations

import re

from askterminal.parsing.models import InteractiveState, ToolName

# --- Shell prompt return ---

# Last line ends in a bare $ (bash/sh) or % (zsh), or an oh-my-zsh arrow
# prompt ending in ~ or /. Chunks usually end with the prompt's trailing space.
SHELL_PROMPT_RES: tuple[re.Pattern[str], ...] = (
    re.compile(r"(?:^|\n)[^\n]*\$\s*$"),
    re.compile(r"(?:^|\n)[^\n]*%\s*$"),
    re.compile(r"[→➜]\s+[^\n]*[~/]\s*$"),
)


def is_shell_prompt(text: str) -> bool:
    """Return True if *text* ends with something that looks like a shell prompt."""
    return any(pattern.search(text) for pattern in SHELL_PROMPT_RES)


# --- Confirmation prompts ---

# [Y/n], [y/N], (yes/no), (y/n), [yes/no] anchored to the end of the text
YES_NO_PROMPT_RE = re.compile(
    r"(?:\[(?:y/n|yes/no)\]|\((?:y/n|yes/no)\))[ \t]*$",
    re.IGNORECASE,
)

# Password, passphrase, username and "Enter <something>:" requests
FREE_TEXT_PROMPT_RE = re.compile(
    r"(?:"
    r"password(?: for [^\n:]{1,64})?"
    r"|passphrase(?: for [^\n:]{1,200})?"
    r"|username|login"
    r"|enter [^\n:]{1,60}"
    r"):[ \t]*$",
    re.IGNORECASE,
)

# --- Pager continuation ---

PAGER_CONTINUATION_RE = re.compile(
    r"(?:^|\n)[ \t]*:[ \t]*$"  # less waiting for input
    r"|\(END\)"
    r"|--More--"
    r"|\blines \d+-\d+"
)

# --- Interactive program launch table ---

LAUNCH_COMMANDS: dict[str, InteractiveState] = {
    "man": InteractiveState.PAGER,
    "less": InteractiveState.PAGER,
    "more": InteractiveState.PAGER,
    "vim": InteractiveState.EDITOR_VIM,
    "vi": InteractiveState.EDITOR_VIM,
    "nvim": InteractiveState.EDITOR_VIM,
    "nano": InteractiveState.EDITOR_NANO,
    "top": InteractiveState.MONITOR,
    "htop": InteractiveState.MONITOR,
}

# --- Assistant session markers ---

ASSISTANT_PRODUCT_NAME = "Claude Code"
# Shorter form used to tell assistant chrome apart from a real shell prompt
ASSISTANT_MENTION = "Claude"
ASSISTANT_BANNER_MARKERS: tuple[str, ...] = ("╭─", ASSISTANT_PRODUCT_NAME)
ASSISTANT_FAREWELL = "Goodbye!"

# "> prompt text" echoed at the start of a chunk
USER_PROMPT_RE = re.compile(r"^>\s+(.{1,50})")
ROUND_SUMMARY_LIMIT = 40

# --- Todo list ---

TODO_UPDATE_TOKEN = "TodoWrite"
TODO_ITEM_RE = re.compile(r"\[?(pending|in_progress|completed)\]?\s*(.+)", re.IGNORECASE)
TASK_CONTENT_LIMIT = 60


def mentions_todo_update(text: str) -> bool:
    return TODO_UPDATE_TOKEN in text or ("todo" in text and "status" in text)


# --- Thinking ---

SPINNER_GLYPHS = frozenset("⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏")
THINKING_WORD = "Thinking"


def shows_thinking(text: str) -> bool:
    return THINKING_WORD in text or any(glyph in text for glyph in SPINNER_GLYPHS)


# --- Tool invocations ---

# Path-anchored file tools go first so "Read 138 lines" is not a tool call.
_PATH = r"(/[^\s]+|\./[^\s]+|~[^\s]+)"
FILE_TOOL_PATTERNS: tuple[tuple[re.Pattern[str], ToolName, str], ...] = (
    (re.compile(r"Read\s+" + _PATH), ToolName.READ, "Reading"),
    (re.compile(r"Write\s+" + _PATH), ToolName.WRITE, "Writing"),
    (re.compile(r"Edit\s+" + _PATH), ToolName.EDIT, "Editing"),
)
FILE_PATH_LIMIT = 60

GENERIC_TOOL_PATTERNS: tuple[tuple[re.Pattern[str], ToolName, str], ...] = (
    (re.compile(r"Bash:\s*([^\n]+)"), ToolName.BASH, "Running"),
    (re.compile(r"Glob\s+([^\n]+)"), ToolName.GLOB, "Finding"),
    (re.compile(r"Grep\s+([^\n]+)"), ToolName.GREP, "Searching"),
    (re.compile(r"WebFetch\s+(https?://[^\s]+)"), ToolName.WEB_FETCH, "Fetching"),
    (re.compile(r"WebSearch\s+([^\n]+)"), ToolName.WEB_SEARCH, "Searching"),
    (re.compile(r"Task\s+([^\n]+)"), ToolName.TASK, "Subtask"),
)
TOOL_DETAIL_LIMIT = 50

CHECKMARK_GLYPHS: tuple[str, ...] = ("✓", "✔")


def truncate(text: str, limit: int, suffix: str = "...") -> str:
    """Cut *text* to *limit* characters, appending *suffix* when cut."""
    if len(text) <= limit:
        return text
    return text[:limit] + suffix

import pytest

from askterminal.parsing.assistant import AssistantSessionTracker
from askterminal.parsing.interactive import InteractiveModeTracker

# ---- Sample PTY chunks (shapes seen from bash/zsh and Claude Code) ----

# Claude Code welcome box, words separated by cursor-forward
BANNER_ANSI = (
    "\x1b[38;5;174m╭───\x1b[1CClaude\x1b[1CCode\x1b[1C"
    "\x1b[38;5;246mv2.1.37\x1b[1C"
    "\x1b[38;5;174m──────────────────────────╮\x1b[39m"
)

PLAIN_BANNER = "✻ Welcome to Claude Code!\r\n"

FAREWELL = "\x1b[2mGoodbye!\x1b[22m\r\n"

BASH_PROMPT = "\r\nalice@laptop:~/projects$ "
ZSH_PROMPT = "\r\nalice@laptop ~ % "
OH_MY_ZSH_PROMPT = "\r\n➜  ~/projects/ "

TODO_UPDATE = (
    "TodoWrite\r\n"
    "[completed] Set up project skeleton\r\n"
    "[in_progress] Parse configuration file\r\n"
    "[pending] Write tests\r\n"
)

LESS_SCREEN = (
    "NAME\r\n"
    "       ls - list directory contents\r\n"
    "       echo $\r\n"
    ":"
)


@pytest.fixture
def interactive():
    return InteractiveModeTracker()


@pytest.fixture
def tracker():
    return AssistantSessionTracker()


@pytest.fixture
def active_tracker(tracker):
    """Tracker that has already seen the assistant banner."""
    tracker.feed(BANNER_ANSI)
    return tracker

# Pager status line plus a man-page line that itself ends in "$ "
PAGER_WITH_DOLLAR = (
    "       The default is \\s-\\v\\$ \r\n"
    " Manual page bash(1) lines 1-24\r\n"
    "       PS1 defaults to \\s-\\v\\$ "
)

from __future__ import annotations

import re

# CSI sequences only: ESC [ parameter bytes (0-9 : ; < = > ?) final letter.
# OSC and other escapes stay as text.
_CSI_RE = re.compile(r"\x1b\[[0-?]*[a-zA-Z]")


def strip_ansi(text: str) -> str:
    """Remove ``ESC [ … <letter>`` control sequences from a PTY chunk.

    No other transformation is applied: line endings, case and whitespace
    are preserved. A sequence cut in half by a chunk boundary does not
    match and is left in place as literal text.

    Removal repeats until nothing matches, since dropping an inner sequence
    can join its neighbours into a new one (``ESC[ ESC[31m 1m``).

    Args:
        text: One raw chunk of terminal output.

    Returns:
        The chunk with every complete CSI sequence removed.
    """
    while True:
        text, removed = _CSI_RE.subn("", text)
        if not removed:
            return text

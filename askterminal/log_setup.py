from __future__ import annotations

import logging
import os
from datetime import datetime

TRACE = 5
TRACE_DIR = "debug"
LOGGER_NAME = "askterminal"

logging.addLevelName(TRACE, "TRACE")

_CONSOLE_FMT = "%(levelname)s %(name)s: %(message)s"
_FILE_FMT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s:%(funcName)s:%(lineno)d %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    *, debug: bool, trace: bool, verbose: bool
) -> logging.Logger:
    """Configure the ``askterminal`` logger hierarchy.

    Module loggers (``askterminal.parsing.assistant`` etc.) propagate to the
    package logger, so a single console handler covers all of them. Calling
    this again replaces the previous handlers.

    Args:
        debug: Lower the console level to DEBUG.
        trace: Also write a TRACE-level log file under ``TRACE_DIR``.
        verbose: With ``trace``, lower the console level to TRACE too.

    Returns:
        The configured package logger.
    """
    root = logging.getLogger(LOGGER_NAME)
    root.handlers.clear()
    root.setLevel(TRACE)

    # Console handler
    console = logging.StreamHandler()
    if trace and verbose:
        console.setLevel(TRACE)
    elif debug or trace:
        console.setLevel(logging.DEBUG)
    else:
        console.setLevel(logging.INFO)
    console.setFormatter(logging.Formatter(_CONSOLE_FMT))
    root.addHandler(console)

    # File handler (trace only)
    if trace:
        os.makedirs(TRACE_DIR, exist_ok=True)
        timestamp = datetime.now().strftime("%Y-%m-%dT%H-%M-%S")
        filepath = os.path.join(TRACE_DIR, f"trace-{timestamp}.log")
        fh = logging.FileHandler(filepath)
        fh.setLevel(TRACE)
        fh.setFormatter(logging.Formatter(_FILE_FMT, datefmt=_FILE_DATEFMT))
        root.addHandler(fh)

    return root


def preview(text: str, limit: int = 80) -> str:
    """Return a ``repr`` of *text* cut to *limit* characters for log lines.

    PTY chunks carry control characters and can be kilobytes long; logging
    them raw garbles the console.
    """
    if len(text) <= limit:
        return repr(text)
    return f"{text[:limit]!r}...(+{len(text) - limit})"

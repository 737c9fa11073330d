from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path

import pexpect

from askterminal.log_setup import TRACE

logger = logging.getLogger(__name__)

CANDIDATE_SHELLS: tuple[str, ...] = ("/bin/zsh", "/bin/bash", "/bin/sh")


def detect_shell(candidates: tuple[str, ...] = CANDIDATE_SHELLS) -> str:
    """Return the first executable shell among *candidates*, else ``/bin/sh``."""
    for shell in candidates:
        if os.access(shell, os.X_OK):
            return shell
    return "/bin/sh"


class ShellProcess:
    """Async wrapper around a pexpect-managed interactive shell.

    Owns the pseudo-terminal: spawning, resizing, writing input, draining
    output, and termination. Blocking pexpect calls run on the default
    executor so the event loop is never held up.
    """

    def __init__(
        self,
        command: str = "",
        args: list[str] | None = None,
        cwd: str = "~",
        env: dict[str, str] | None = None,
        cols: int = 80,
        rows: int = 24,
    ) -> None:
        """Initialize a ShellProcess without spawning it.

        Args:
            command: Shell executable. Empty picks one with :func:`detect_shell`.
            args: Arguments passed to the shell.
            cwd: Working directory; ``~`` is expanded.
            env: Extra environment variables merged on top of the current
                environment. Tilde (~) in values is expanded.
            cols: Terminal width in columns.
            rows: Terminal height in rows.
        """
        self._command = command or detect_shell()
        self._args = list(args or [])
        self._cwd = str(Path(cwd).expanduser())
        self._env = self._build_env(env or {})
        self.cols = cols
        self.rows = rows
        self._process: pexpect.spawn | None = None
        self._buffer: str = ""

    @property
    def command(self) -> str:
        return self._command

    @staticmethod
    def _build_env(extra: dict[str, str]) -> dict[str, str]:
        """Merge extra env vars into a copy of the current environment.

        Expands ~ to the user home directory in values and advertises a
        256-colour terminal like the frontend's xterm does.
        """
        merged = os.environ.copy()
        merged["TERM"] = "xterm-256color"
        merged["COLORTERM"] = "truecolor"
        for key, value in extra.items():
            merged[key] = str(Path(value).expanduser()) if "~" in value else value
        return merged

    async def spawn(self) -> None:
        """Spawn the shell in a PTY on a background thread."""
        logger.debug("Spawning shell: cmd=%s args=%s cwd=%s", self._command, self._args, self._cwd)
        loop = asyncio.get_running_loop()
        self._process = await loop.run_in_executor(
            None,
            lambda: pexpect.spawn(
                self._command,
                self._args,
                cwd=self._cwd,
                env=self._env,
                encoding="utf-8",
                codec_errors="replace",
                dimensions=(self.rows, self.cols),
                timeout=5,
                maxread=4096,
            ),
        )
        logger.debug("Shell spawned pid=%d", self._process.pid)

    def is_alive(self) -> bool:
        if self._process is None:
            return False
        return self._process.isalive()

    async def write(self, text: str) -> None:
        """Send raw text to the shell. Ignored if the shell is not alive."""
        if not self.is_alive():
            return
        logger.debug("PTY write: %r", text[:200])
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._process.send, text)

    async def submit(self, text: str) -> None:
        """Send a command line followed by Enter.

        Text and carriage return go out separately with a short pause: TUIs
        running inside the shell (the assistant among them) treat text and
        Enter arriving together as a paste.
        """
        await self.write(text)
        await asyncio.sleep(0.15)
        await self.write("\r")

    async def resize(self, cols: int, rows: int) -> None:
        """Change the PTY window size. Remembered even before spawn."""
        self.cols = cols
        self.rows = rows
        if not self.is_alive():
            return
        logger.debug("PTY resize cols=%d rows=%d", cols, rows)
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._process.setwinsize, rows, cols)

    def read_available(self) -> str:
        """Drain everything currently readable from the PTY.

        Returns:
            All accumulated output since the last read, or an empty string
            if nothing is available or the shell was never spawned.
        """
        if self._process is None:
            return ""
        try:
            while True:
                try:
                    chunk = self._process.read_nonblocking(size=4096, timeout=0)
                    logger.log(TRACE, "PTY read chunk len=%d", len(chunk))
                    self._buffer += chunk
                except pexpect.TIMEOUT:
                    break
                except pexpect.EOF:
                    break
        except Exception as exc:
            logger.warning("Unexpected error draining PTY buffer: %s", exc)
        result = self._buffer
        self._buffer = ""
        return result

    async def terminate(self) -> None:
        """Force-close the shell if it is still running."""
        if self._process is None:
            return
        logger.debug("Terminating shell pid=%s", self._process.pid)
        loop = asyncio.get_running_loop()
        if self._process.isalive():
            await loop.run_in_executor(None, self._process.close, True)

    def exit_code(self) -> int | None:
        """Return the exit status, or the signal number that killed the shell."""
        if self._process is None:
            return None
        # pexpect sets signalstatus (not exitstatus) when killed by a signal
        if self._process.exitstatus is not None:
            return self._process.exitstatus
        return self._process.signalstatus

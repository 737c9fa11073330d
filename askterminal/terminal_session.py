from __future__ import annotations

import logging

from askterminal.config import AppConfig
from askterminal.interpreter import TerminalInterpreter
from askterminal.shell_process import ShellProcess

logger = logging.getLogger(__name__)


class TerminalSession:
    """A shell running in a PTY together with the interpreter watching it.

    The session is the only writer of interpreter state: commands are
    announced to the interpreter before they reach the shell, and output is
    delivered chunk by chunk in the order it was read.
    """

    def __init__(
        self,
        shell: ShellProcess,
        interpreter: TerminalInterpreter | None = None,
    ) -> None:
        self.shell = shell
        self.interpreter = interpreter or TerminalInterpreter()
        self.history: list[str] = []

    @classmethod
    def from_config(cls, config: AppConfig) -> TerminalSession:
        shell = ShellProcess(
            command=config.shell.command,
            args=config.shell.args,
            cwd=config.shell.cwd,
            env=config.shell.env,
            cols=config.shell.cols,
            rows=config.shell.rows,
        )
        return cls(shell, TerminalInterpreter(config.interpreter))

    async def start(self) -> None:
        await self.shell.spawn()

    def is_alive(self) -> bool:
        return self.shell.is_alive()

    async def submit_command(self, command: str) -> None:
        """Record *command*, update interactive mode, then send it to the shell."""
        if command.strip():
            self.history.append(command)
        self.interpreter.on_command_submitted(command)
        await self.shell.submit(command)

    def pump(self) -> str:
        """Deliver whatever the PTY produced since the last pump.

        Returns:
            The raw output delivered, or an empty string if there was none.
        """
        output = self.shell.read_available()
        if output:
            self.interpreter.on_output_chunk(output)
        return output

    async def resize(self, cols: int, rows: int) -> None:
        await self.shell.resize(cols, rows)

    async def close(self) -> None:
        """Terminate the shell and reset the interpreter.

        The reset does not wait for any further output.
        """
        await self.shell.terminate()
        self.interpreter.reset()
        logger.debug("Terminal session closed exit_code=%s", self.shell.exit_code())

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys

from askterminal.config import AppConfig, load_config
from askterminal.interpreter import InterpreterEvent
from askterminal.log_setup import setup_logging
from askterminal.parsing.assistant import AssistantActivityChange, ChangeReason
from askterminal.parsing.interactive import InteractiveModeChange
from askterminal.terminal_session import TerminalSession

logger = logging.getLogger(__name__)


def build_session(config_path: str | None, debug: bool = False, trace: bool = False, verbose: bool = False) -> TerminalSession:
    """Load configuration and build an unstarted terminal session."""
    config = load_config(config_path) if config_path else AppConfig()

    if debug:
        config.debug.enabled = True
    if trace:
        config.debug.trace = True
    if verbose:
        config.debug.verbose = True

    session = TerminalSession.from_config(config)
    session.interpreter.subscribe(log_event)
    return session


def log_event(event: InterpreterEvent) -> None:
    """Log interpreter events the way the activity panel would show them."""
    if isinstance(event, InteractiveModeChange):
        logger.info(
            "mode=%s prompt=%s%s",
            event.interactive_state.value,
            event.prompt_state.value,
            f" question={event.question.strip()!r}" if event.question else "",
        )
    elif isinstance(event, AssistantActivityChange):
        activity = event.current_activity
        if activity is not None and event.reason is ChangeReason.ACTIVITY_RECORDED:
            logger.info(
                "assistant %s%s%s",
                activity.kind.value,
                f" [{activity.tool.value}]" if activity.tool else "",
                f" {activity.description}" if activity.description else "",
            )
        else:
            logger.info(
                "assistant %s rounds=%d tasks=%d",
                event.reason.value, len(event.session.rounds), len(event.session.tasks),
            )


def _parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="AskTerminal shell session with output interpretation")
    parser.add_argument("config", nargs="?", default=None,
                        help="Path to YAML config file (default: built-in defaults)")
    parser.add_argument("--debug", action="store_true",
                        help="Enable debug mode (verbose logging)")
    parser.add_argument("--trace", action="store_true",
                        help="Enable trace mode (writes trace file to debug/)")
    parser.add_argument("--verbose", action="store_true",
                        help="With --trace, also send trace output to terminal")
    return parser.parse_args()


async def run_session(session: TerminalSession, poll_interval: float) -> None:
    """Mirror shell output to stdout and forward stdin lines until done.

    Stops when the shell exits, stdin reaches EOF, or SIGINT/SIGTERM arrives.
    """
    loop = asyncio.get_running_loop()
    stop_event = asyncio.Event()
    lines: asyncio.Queue[str] = asyncio.Queue()

    def _on_stdin() -> None:
        line = sys.stdin.readline()
        if not line:
            stop_event.set()
            return
        lines.put_nowait(line.rstrip("\n"))

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop_event.set)
    loop.add_reader(sys.stdin.fileno(), _on_stdin)

    await session.start()
    try:
        while not stop_event.is_set():
            while not lines.empty():
                await session.submit_command(lines.get_nowait())
            output = session.pump()
            if output:
                sys.stdout.write(output)
                sys.stdout.flush()
            if not session.is_alive():
                logger.info("Shell exited with code %s", session.shell.exit_code())
                break
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=poll_interval)
            except asyncio.TimeoutError:
                pass
    finally:
        loop.remove_reader(sys.stdin.fileno())
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.remove_signal_handler(sig)
        await session.close()


async def main() -> None:
    """Entry point for the AskTerminal shell runner."""
    args = _parse_args()
    logger = setup_logging(
        debug=args.debug, trace=args.trace, verbose=args.verbose
    )

    session = build_session(args.config, debug=args.debug, trace=args.trace, verbose=args.verbose)
    poll_interval = session.interpreter.config.poll_interval_ms / 1000

    logger.info("Starting shell %s...", session.shell.command)
    await run_session(session, poll_interval)
    logger.info("Bye.")


if __name__ == "__main__":
    asyncio.run(main())

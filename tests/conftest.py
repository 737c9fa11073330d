import pytest

from askterminal.config import InterpreterConfig
from askterminal.interpreter import TerminalInterpreter


@pytest.fixture
def interpreter():
    """A fresh interpreter with default limits."""
    return TerminalInterpreter(InterpreterConfig())


@pytest.fixture
def collected(interpreter):
    """List that receives every event the interpreter emits."""
    events = []
    interpreter.subscribe(events.append)
    return events

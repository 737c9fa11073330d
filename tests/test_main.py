from __future__ import annotations

import logging
import sys
from unittest.mock import patch

import yaml

from askterminal.main import _parse_args, build_session, log_event
from askterminal.parsing.assistant import AssistantActivityChange, ChangeReason
from askterminal.parsing.interactive import InteractiveModeChange
from askterminal.parsing.models import (
    ActivityEvent,
    ActivityKind,
    AssistantSession,
    InteractiveState,
    PromptState,
    ToolName,
)


class TestBuildSession:
    def test_defaults_without_config(self):
        session = build_session(None)
        assert session.interpreter.config.activity_log_limit == 100
        assert log_event in session.interpreter._listeners

    def test_loads_config_file(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.dump({
            "shell": {"command": "/bin/sh", "cols": 100},
            "interpreter": {"poll_interval_ms": 25},
        }))
        session = build_session(str(config_file))
        assert session.shell.command == "/bin/sh"
        assert session.shell.cols == 100
        assert session.interpreter.config.poll_interval_ms == 25


class TestLogEvent:
    def test_mode_change(self, caplog):
        event = InteractiveModeChange(InteractiveState.PAGER, PromptState.NONE, "")
        with caplog.at_level(logging.INFO, logger="askterminal.main"):
            log_event(event)
        assert "mode=pager prompt=none" in caplog.text

    def test_prompt_question(self, caplog):
        event = InteractiveModeChange(InteractiveState.NONE, PromptState.YES_NO, "Proceed? [y/N] ")
        with caplog.at_level(logging.INFO, logger="askterminal.main"):
            log_event(event)
        assert "question='Proceed? [y/N]'" in caplog.text

    def test_activity(self, caplog):
        session = AssistantSession()
        session.current_activity = ActivityEvent(
            kind=ActivityKind.TOOL_START, tool=ToolName.READ, description="Reading: /a.py",
        )
        event = AssistantActivityChange(ChangeReason.ACTIVITY_RECORDED, session)
        with caplog.at_level(logging.INFO, logger="askterminal.main"):
            log_event(event)
        assert "assistant tool_start [Read] Reading: /a.py" in caplog.text

    def test_lifecycle(self, caplog):
        event = AssistantActivityChange(ChangeReason.SESSION_STARTED, AssistantSession())
        with caplog.at_level(logging.INFO, logger="askterminal.main"):
            log_event(event)
        assert "assistant session_started rounds=0 tasks=0" in caplog.text


class TestParseArgs:
    def test_no_config_by_default(self):
        with patch.object(sys, "argv", ["main"]):
            args = _parse_args()
            assert args.config is None
            assert not args.debug

    def test_config_and_flags(self):
        with patch.object(sys, "argv", ["main", "my.yaml", "--debug", "--trace", "--verbose"]):
            args = _parse_args()
            assert args.config == "my.yaml"
            assert args.debug and args.trace and args.verbose

from collections import deque

from askterminal.parsing.models import (
    ActivityEvent,
    ActivityKind,
    AssistantSession,
    ConversationRound,
    TaskItem,
    TaskStatus,
    ToolName,
)


class TestAssistantSession:
    def test_defaults(self):
        session = AssistantSession()
        assert not session.active
        assert session.current_round is None
        assert session.active_task is None
        assert not session.is_thinking
        assert session.current_tool is None
        assert session.activity_log.maxlen == 100

    def test_current_round_follows_id(self):
        session = AssistantSession()
        session.rounds = [ConversationRound("round-1", "a"), ConversationRound("round-2", "b")]
        session.current_round_id = "round-1"
        assert session.current_round.summary == "a"
        assert session.find_round("round-2").summary == "b"
        assert session.find_round("round-3") is None

    def test_active_task_is_first_in_progress(self):
        session = AssistantSession()
        session.tasks = [
            TaskItem("done", TaskStatus.COMPLETED),
            TaskItem("first", TaskStatus.IN_PROGRESS),
            TaskItem("second", TaskStatus.IN_PROGRESS),
        ]
        assert session.active_task.content == "first"

    def test_current_tool_follows_activity(self):
        session = AssistantSession()
        session.current_activity = ActivityEvent(ActivityKind.TOOL_START, ToolName.GREP)
        assert session.current_tool is ToolName.GREP
        session.current_activity = ActivityEvent(ActivityKind.THINKING)
        assert session.current_tool is None
        assert session.is_thinking

    def test_recent_activities(self):
        session = AssistantSession(activity_log=deque(maxlen=5))
        for label in "abc":
            session.activity_log.append(ActivityEvent(ActivityKind.THINKING, description=label))
        assert [e.description for e in session.recent_activities(2)] == ["c", "b"]
        assert session.recent_activities(0) == []
        assert len(session.recent_activities(10)) == 3

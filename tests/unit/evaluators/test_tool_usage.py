"""Unit tests for the tool-usage evaluator."""

import pytest

from behavior_evaluator.evaluators.tool_usage import ToolUsageEvaluator, find_antipatterns
from behavior_evaluator.models.enums import Severity, ViolationKind
from tests.fixtures import make_session_info, tool_call, user_message


def _bash(command: str, timestamp: float):
    return tool_call("bash", timestamp, input={"command": command})


class TestFindAntipatterns:
    """Tests for shell command analysis."""

    @pytest.mark.parametrize(
        ("command", "expected_tool"),
        [
            ("cat src/index.ts", "read"),
            ("head -n 20 log.txt", "read"),
            ("tail -f app.log", "read"),
            ("ls -la src", "list"),
            ("find . -name '*.ts'", "glob"),
            ("grep -r TODO src", "grep"),
            ("rg pattern", "grep"),
            ("sed -i 's/a/b/' file.txt", "edit"),
            ("echo hello > out.txt", "write"),
            ("/bin/cat file", "read"),
        ],
    )
    def test_detects_structured_equivalents(self, command: str, expected_tool: str) -> None:
        """Test each command with a structured-tool equivalent."""
        found = find_antipatterns(command)

        assert [a.suggested_tool for a in found] == [expected_tool]

    @pytest.mark.parametrize(
        "command",
        ["npm test", "git status", "echo done", "sed -n '1,5p' file", "python -m pytest"],
    )
    def test_allows_commands_without_equivalents(self, command: str) -> None:
        """Test commands that have no structured replacement."""
        assert find_antipatterns(command) == []

    def test_splits_on_command_separators(self) -> None:
        """Test that every chained segment is inspected."""
        found = find_antipatterns("cd src && ls; cat a.ts || grep x b.ts")

        assert [a.command for a in found] == ["ls", "cat", "grep"]

    def test_pipelines_are_one_segment(self) -> None:
        """Test that only the head of a pipeline is inspected."""
        found = find_antipatterns("npm test | grep FAIL")

        assert found == []


class TestToolUsageEvaluator:
    """Tests for ToolUsageEvaluator."""

    def test_flags_bash_antipattern(self) -> None:
        """Test that a bash cat is an error naming the command."""
        timeline = [
            user_message("Fix the parser function", 1000),
            _bash("cat src/parser.ts", 2000),
            tool_call("edit", 3000),
        ]

        result = ToolUsageEvaluator().evaluate(timeline, make_session_info())

        assert result.passed is False
        assert len(result.violations) == 1
        violation = result.violations[0]
        assert violation.kind == ViolationKind.bash_antipattern
        assert violation.severity == Severity.error
        assert "cat" in violation.message
        assert violation.timestamp == 2000
        assert violation.evidence["suggested_tool"] == "read"

    def test_structured_tools_are_not_flagged(self) -> None:
        """Test that direct use of structured tools has no false positive."""
        timeline = [
            user_message("Fix the parser function", 1000),
            tool_call("read", 2000, input={"filePath": "src/parser.ts"}),
            tool_call("grep", 2100, input={"pattern": "TODO"}),
            tool_call("edit", 3000),
        ]

        result = ToolUsageEvaluator().evaluate(timeline, make_session_info())

        assert result.passed is True
        assert result.violations == []
        assert result.metadata["structured_call_count"] == 3

    def test_scores_each_bash_call(self) -> None:
        """Test one check per bash call."""
        timeline = [
            user_message("Run the checks", 1000),
            _bash("npm test", 2000),
            _bash("ls src", 2100),
        ]

        result = ToolUsageEvaluator().evaluate(timeline, make_session_info())

        assert result.score == 50
        assert result.metadata["bash_call_count"] == 2

    def test_bash_without_command_is_ignored(self) -> None:
        """Test that malformed bash calls are uninformative."""
        timeline = [user_message("Run it", 1000), tool_call("bash", 2000)]

        result = ToolUsageEvaluator().evaluate(timeline, make_session_info())

        assert result.passed is True
        assert result.metadata["bash_call_count"] == 0

    def test_conversational_session_is_skipped(self) -> None:
        """Test that sessions without tools are not checked."""
        result = ToolUsageEvaluator().evaluate(
            [user_message("Hi", 1000)], make_session_info()
        )

        assert result.skipped is True

"""Unit tests for the declared-behavior evaluator."""

import pytest
from pydantic import ValidationError

from behavior_evaluator.evaluators.behavior import BehaviorEvaluator
from behavior_evaluator.models.behavior import BehaviorExpectation
from behavior_evaluator.models.enums import Severity, ViolationKind
from tests.fixtures import assistant_message, make_session_info, tool_call, user_message


@pytest.fixture
def timeline() -> list:
    """A session that loads context, asks for approval, then edits."""
    return [
        user_message("Fix the parser function", 1000),
        tool_call("read", 1100, input={"filePath": ".opencode/context/code.md"}),
        tool_call("read", 1200, input={"filePath": "src/parser.ts"}),
        assistant_message("May I edit src/parser.ts?", 1300),
        user_message("Yes", 1400),
        tool_call("edit", 1500, input={"filePath": "src/parser.ts"}),
    ]


class TestBehaviorEvaluatorConstruction:
    """Tests for BehaviorEvaluator construction."""

    def test_accepts_camel_case_mapping(self) -> None:
        """Test that test-case style keys are accepted."""
        evaluator = BehaviorEvaluator({"mustUseTools": ["read"], "maxToolCalls": 5})

        assert evaluator.behavior.must_use_tools == ["read"]
        assert evaluator.behavior.max_tool_calls == 5

    def test_accepts_model(self) -> None:
        """Test that a BehaviorExpectation is used as-is."""
        behavior = BehaviorExpectation(requires_approval=True)

        assert BehaviorEvaluator(behavior).behavior is behavior

    def test_rejects_min_above_max(self) -> None:
        """Test that contradictory bounds are a validation error."""
        with pytest.raises(ValidationError):
            BehaviorEvaluator({"minToolCalls": 5, "maxToolCalls": 2})

    def test_rejects_unknown_keys(self) -> None:
        """Test that misspelled constraints are not silently ignored."""
        with pytest.raises(ValidationError):
            BehaviorEvaluator({"mustUseTool": ["read"]})


class TestBehaviorEvaluator:
    """Tests for BehaviorEvaluator.evaluate."""

    def test_all_constraints_met(self, timeline: list) -> None:
        """Test a fully compliant session."""
        evaluator = BehaviorEvaluator(
            {
                "mustUseTools": ["read", "edit"],
                "mustNotUseTools": ["bash"],
                "minToolCalls": 2,
                "maxToolCalls": 5,
                "requiresApproval": True,
                "requiresContext": True,
            }
        )

        result = evaluator.evaluate(timeline, make_session_info())

        assert result.passed is True
        assert result.score == 100
        assert result.violations == []
        assert result.metadata["tools_used"] == ["read", "edit"]
        assert result.metadata["tool_call_count"] == 3

    def test_no_constraints_scores_100(self, timeline: list) -> None:
        """Test that an empty declaration produces no checks."""
        result = BehaviorEvaluator({}).evaluate(timeline, make_session_info())

        assert result.passed is True
        assert result.score == 100
        assert result.evidence[-1].kind == "behavior-summary"
        assert result.evidence[-1].data["total_checks"] == 0

    def test_missing_required_tool(self, timeline: list) -> None:
        """Test one violation per missing required tool."""
        evaluator = BehaviorEvaluator({"mustUseTools": ["read", "write", "bash"]})

        result = evaluator.evaluate(timeline, make_session_info())

        violations = result.violations_of(ViolationKind.missing_required_tool)
        assert [v.evidence["required_tool"] for v in violations] == ["write", "bash"]
        assert all(v.severity == Severity.error for v in violations)
        assert all(v.timestamp == 1500 for v in violations)
        assert result.passed is False
        assert result.score == 0

    def test_required_tool_names_are_case_insensitive(self, timeline: list) -> None:
        """Test that declared tool names are matched case-insensitively."""
        result = BehaviorEvaluator({"mustUseTools": ["Read"]}).evaluate(
            timeline, make_session_info()
        )

        assert result.passed is True

    def test_must_use_any_of(self, timeline: list) -> None:
        """Test alternative tool sets."""
        satisfied = BehaviorEvaluator({"mustUseAnyOf": [["bash"], ["read", "edit"]]})
        unsatisfied = BehaviorEvaluator({"mustUseAnyOf": [["bash"], ["write"]]})

        assert satisfied.evaluate(timeline, make_session_info()).passed is True
        result = unsatisfied.evaluate(timeline, make_session_info())
        assert result.passed is False
        assert len(result.violations_of(ViolationKind.missing_required_tool_set)) == 1

    def test_forbidden_tool_used(self, timeline: list) -> None:
        """Test that a forbidden tool is an error."""
        result = BehaviorEvaluator({"mustNotUseTools": ["edit"]}).evaluate(
            timeline, make_session_info()
        )

        assert result.passed is False
        assert result.violations[0].kind == ViolationKind.forbidden_tool_used
        assert result.violations[0].evidence["forbidden_tool"] == "edit"

    def test_tool_call_bounds(self, timeline: list) -> None:
        """Test min and max tool call counts."""
        too_few = BehaviorEvaluator({"minToolCalls": 4}).evaluate(
            timeline, make_session_info()
        )
        too_many = BehaviorEvaluator({"maxToolCalls": 2}).evaluate(
            timeline, make_session_info()
        )

        assert too_few.violations[0].kind == ViolationKind.insufficient_tool_calls
        assert too_few.violations[0].evidence == {"expected": 4, "actual": 3}
        assert too_many.violations[0].kind == ViolationKind.excessive_tool_calls
        assert too_many.violations[0].severity == Severity.error

    def test_requires_approval_unmet(self) -> None:
        """Test the approval constraint on a session that never asks."""
        timeline = [
            user_message("Fix the parser function", 1000),
            tool_call("edit", 1100, input={"filePath": "src/parser.ts"}),
        ]

        result = BehaviorEvaluator({"requiresApproval": True}).evaluate(
            timeline, make_session_info()
        )

        assert result.violations[0].kind == ViolationKind.missing_approval_request

    def test_requires_context_unmet(self) -> None:
        """Test the context constraint when only source files are read."""
        timeline = [
            user_message("Fix the parser function", 1000),
            tool_call("read", 1100, input={"filePath": "src/parser.ts"}),
        ]

        result = BehaviorEvaluator({"requiresContext": True}).evaluate(
            timeline, make_session_info()
        )

        assert result.violations[0].kind == ViolationKind.missing_context_loading

    def test_should_delegate(self, timeline: list) -> None:
        """Test the delegation constraint."""
        evaluator = BehaviorEvaluator({"shouldDelegate": True})

        missing = evaluator.evaluate(timeline, make_session_info())
        delegated = evaluator.evaluate(
            [*timeline, tool_call("task", 1600)], make_session_info()
        )

        assert missing.violations[0].kind == ViolationKind.missing_delegation
        assert missing.violations[0].severity == Severity.error
        assert delegated.passed is True

    def test_weighted_partial_score(self, timeline: list) -> None:
        """Test that count checks weigh half as much as required checks."""
        evaluator = BehaviorEvaluator({"mustUseTools": ["read"], "maxToolCalls": 1})

        result = evaluator.evaluate(timeline, make_session_info())

        # 100 / (100 + 50)
        assert result.score == 67

    def test_empty_timeline_uses_session_start(self) -> None:
        """Test violation timestamps for a session with no events."""
        result = BehaviorEvaluator({"mustUseTools": ["read"]}).evaluate(
            [], make_session_info(created_at=777)
        )

        assert result.violations[0].timestamp == 777

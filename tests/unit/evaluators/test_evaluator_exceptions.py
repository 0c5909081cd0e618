"""Unit tests for the evaluator exception hierarchy."""

import pytest

from behavior_evaluator.evaluators.exceptions import (
    EvaluatorError,
    MalformedResultError,
    NoEvaluatorsError,
    SessionNotFoundError,
)
from behavior_evaluator.exceptions import BehaviorEvaluatorError


class TestEvaluatorExceptions:
    """Tests for evaluator exceptions."""

    @pytest.mark.parametrize(
        "error",
        [
            SessionNotFoundError("ses_1"),
            NoEvaluatorsError(),
            MalformedResultError("approval-gate", "score 150 outside 0-100"),
        ],
    )
    def test_hierarchy(self, error: EvaluatorError) -> None:
        """Test that every error can be caught as a framework error."""
        assert isinstance(error, EvaluatorError)
        assert isinstance(error, BehaviorEvaluatorError)

    def test_session_not_found(self) -> None:
        """Test the session id is kept on the exception."""
        error = SessionNotFoundError("ses_1")

        assert error.session_id == "ses_1"
        assert error.message == "Session not found: ses_1"

    def test_no_evaluators_default_message(self) -> None:
        """Test the default message."""
        assert str(NoEvaluatorsError()) == "No evaluators registered or specified"

    def test_malformed_result(self) -> None:
        """Test the evaluator name and reason are kept."""
        error = MalformedResultError("approval-gate", "invalid score nan")

        assert error.evaluator_name == "approval-gate"
        assert error.reason == "invalid score nan"
        assert "approval-gate" in str(error)

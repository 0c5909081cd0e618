"""Evaluator-specific exceptions.

This module defines domain-specific exceptions for the evaluators and the
runner, enabling granular error handling for different failure modes.
"""

from behavior_evaluator.exceptions import BehaviorEvaluatorError

__all__ = [
    "EvaluatorError",
    "MalformedResultError",
    "NoEvaluatorsError",
    "SessionNotFoundError",
]


class EvaluatorError(BehaviorEvaluatorError):
    """Base exception for all evaluator-related errors.

    Attributes:
        message: Human-readable error description.

    """

    def __init__(self, message: str) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.

        """
        self.message = message
        super().__init__(message)


class SessionNotFoundError(EvaluatorError):
    """The session source has no metadata for the requested session.

    Attributes:
        session_id: The session that could not be found.

    """

    def __init__(self, session_id: str) -> None:
        """Initialize the exception.

        Args:
            session_id: The session that could not be found.

        """
        self.session_id = session_id
        super().__init__(f"Session not found: {session_id}")


class NoEvaluatorsError(EvaluatorError):
    """No evaluators are registered, or none match the requested names."""

    def __init__(self, message: str = "No evaluators registered or specified") -> None:
        super().__init__(message)


class MalformedResultError(EvaluatorError):
    """An evaluator produced a result that cannot be aggregated.

    Attributes:
        evaluator_name: Evaluator that produced the result.
        reason: What is wrong with the result.

    """

    def __init__(self, evaluator_name: str, reason: str) -> None:
        """Initialize the exception.

        Args:
            evaluator_name: Evaluator that produced the result.
            reason: What is wrong with the result.

        """
        self.evaluator_name = evaluator_name
        self.reason = reason
        super().__init__(f"Malformed result from '{evaluator_name}': {reason}")

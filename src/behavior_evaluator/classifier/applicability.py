"""Applicability matrix for behavior-evaluator.

Maps (evaluator name, task type) to whether the evaluator's rules apply.
Cells that are absent, and evaluators that are not listed at all, are
applicable.
"""

from behavior_evaluator.models.base import FrozenSchema
from behavior_evaluator.models.enums import TaskType

__all__ = [
    "APPLICABILITY_MATRIX",
    "Applicability",
    "is_applicable",
]


class Applicability(FrozenSchema):
    """Whether an evaluator applies to a task type.

    Attributes:
        applicable: True when the evaluator should run its rules.
        reason: Why the evaluator is skipped (only when not applicable).

    """

    applicable: bool
    reason: str | None = None


APPLICABLE = Applicability(applicable=True)


def _skip(reason: str) -> Applicability:
    return Applicability(applicable=False, reason=reason)


_SIMPLE_TASK = "Simple task - no delegation needed"

# Only the inapplicable cells are listed.
APPLICABILITY_MATRIX: dict[str, dict[TaskType, Applicability]] = {
    "approval-gate": {
        TaskType.read_only: _skip("Read-only operations do not require approval"),
        TaskType.conversational: _skip(
            "Conversational sessions do not require approval"
        ),
    },
    "context-loading": {
        TaskType.create_new_file: _skip(
            "Simple file creation does not require context"
        ),
        TaskType.delete_file: _skip("File deletion does not require context"),
        TaskType.read_only: _skip("Read-only operations do not require context"),
        TaskType.bash_only: _skip("Bash-only operations do not require context"),
        TaskType.conversational: _skip(
            "Conversational sessions do not require context"
        ),
    },
    "execution-balance": {
        TaskType.create_new_file: _skip("Creating new file - nothing to read"),
        TaskType.delete_file: _skip("File deletion does not require prior read"),
        TaskType.read_only: _skip("No execution tools used"),
        TaskType.bash_only: _skip(
            "Bash-only operations do not require read-before-execute"
        ),
        TaskType.delegation: _skip(
            "Delegation tasks have different execution patterns"
        ),
        TaskType.conversational: _skip("No execution tools used"),
    },
    "tool-usage": {
        TaskType.conversational: _skip("No tools used"),
    },
    "delegation": {
        TaskType.create_new_file: _skip(_SIMPLE_TASK),
        TaskType.modify_existing_file: _skip(_SIMPLE_TASK),
        TaskType.delete_file: _skip(_SIMPLE_TASK),
        TaskType.read_only: _skip(_SIMPLE_TASK),
        TaskType.bash_only: _skip(_SIMPLE_TASK),
        TaskType.code: _skip(_SIMPLE_TASK),
        TaskType.docs: _skip(_SIMPLE_TASK),
        TaskType.tests: _skip(_SIMPLE_TASK),
        TaskType.conversational: _skip("No delegation in conversational sessions"),
    },
    "stop-on-failure": {
        TaskType.conversational: _skip("No execution in conversational sessions"),
    },
    "report-first": {
        TaskType.conversational: _skip("No execution in conversational sessions"),
    },
    "cleanup-confirmation": {
        TaskType.read_only: _skip("Read-only operations do not delete files"),
        TaskType.conversational: _skip("No execution in conversational sessions"),
    },
    "behavior": {},
}


def is_applicable(evaluator_name: str, task_type: TaskType) -> Applicability:
    """Look up whether an evaluator applies to a task type.

    Args:
        evaluator_name: Evaluator name (e.g., 'approval-gate').
        task_type: Classified task type of the session.

    Returns:
        The matrix cell, or an applicable verdict for unknown evaluators
        and missing cells.

    """
    return APPLICABILITY_MATRIX.get(evaluator_name, {}).get(task_type, APPLICABLE)

"""Evaluators module for behavior-evaluator.

This module contains the rule evaluators and the runner that executes them:
- base: BaseEvaluator and shared scoring helpers
- approval_gate, context_loading, tool_usage, stop_on_failure, delegation:
  the standard rule set
- report_first, cleanup_confirmation, execution_balance: auxiliary rules
- behavior: declared-behavior constraints supplied by a test author
- runner: EvaluatorRunner (registration, execution, aggregation)
"""

from behavior_evaluator.config.settings import EvaluatorSettings
from behavior_evaluator.evaluators.approval_gate import ApprovalGateEvaluator
from behavior_evaluator.evaluators.base import BaseEvaluator, calculate_score
from behavior_evaluator.evaluators.behavior import BehaviorEvaluator
from behavior_evaluator.evaluators.cleanup_confirmation import (
    CleanupConfirmationEvaluator,
)
from behavior_evaluator.evaluators.context_loading import ContextLoadingEvaluator
from behavior_evaluator.evaluators.delegation import DelegationEvaluator
from behavior_evaluator.evaluators.exceptions import (
    EvaluatorError,
    MalformedResultError,
    NoEvaluatorsError,
    SessionNotFoundError,
)
from behavior_evaluator.evaluators.execution_balance import ExecutionBalanceEvaluator
from behavior_evaluator.evaluators.report_first import ReportFirstEvaluator
from behavior_evaluator.evaluators.runner import EvaluatorRunner
from behavior_evaluator.evaluators.stop_on_failure import StopOnFailureEvaluator
from behavior_evaluator.evaluators.tool_usage import ToolUsageEvaluator

__all__ = [
    "ApprovalGateEvaluator",
    "BaseEvaluator",
    "BehaviorEvaluator",
    "CleanupConfirmationEvaluator",
    "ContextLoadingEvaluator",
    "DelegationEvaluator",
    "EvaluatorError",
    "EvaluatorRunner",
    "ExecutionBalanceEvaluator",
    "MalformedResultError",
    "NoEvaluatorsError",
    "ReportFirstEvaluator",
    "SessionNotFoundError",
    "StopOnFailureEvaluator",
    "ToolUsageEvaluator",
    "calculate_score",
    "default_evaluators",
]


def default_evaluators(settings: EvaluatorSettings | None = None) -> list[BaseEvaluator]:
    """Return the standard rule set in execution order.

    The declared-behavior evaluator is not included; attach it per test
    with EvaluatorRunner.registered().

    Args:
        settings: Evaluator settings (defaults to environment-derived).

    Returns:
        Fresh evaluator instances.

    """
    return [
        ApprovalGateEvaluator(),
        ContextLoadingEvaluator(),
        ToolUsageEvaluator(),
        StopOnFailureEvaluator(),
        DelegationEvaluator(settings=settings),
        ReportFirstEvaluator(),
        CleanupConfirmationEvaluator(),
        ExecutionBalanceEvaluator(),
    ]

"""Evaluation result models for behavior-evaluator.

This module defines the records evaluators and the runner produce:
evidence, violations, checks, per-evaluator results, and the
session-level aggregate.
"""

from typing import Any

from pydantic import Field

from behavior_evaluator.models.base import FrozenSchema
from behavior_evaluator.models.enums import Severity, ViolationKind
from behavior_evaluator.models.session import SessionInfo

__all__ = [
    "AggregatedResult",
    "Check",
    "EvaluationResult",
    "Evidence",
    "Violation",
    "ViolationsBySeverity",
]


class Evidence(FrozenSchema):
    """Structured data supporting a check's verdict.

    Attached to passing and failing checks alike so every verdict can be
    audited.

    Attributes:
        kind: Evidence category (e.g., 'approval-request', 'tool-call-count').
        description: What this evidence shows.
        data: Machine-checkable supporting data.
        timestamp: When the evidenced event occurred (optional).
    """

    kind: str = Field(..., min_length=1)
    description: str
    data: dict[str, Any] = Field(default_factory=dict)
    timestamp: float | None = None


class Violation(FrozenSchema):
    """A rule violation detected by an evaluator.

    Attributes:
        kind: Violation kind.
        severity: error, warning, or info.
        message: Human-readable description.
        timestamp: Timestamp of the offending (or last relevant) event.
        evidence: Machine-checkable data backing the violation.
    """

    kind: ViolationKind
    severity: Severity
    message: str = Field(..., min_length=1)
    timestamp: float
    evidence: dict[str, Any] = Field(..., min_length=1)


class Check(FrozenSchema):
    """One atomic rule inside an evaluator.

    Attributes:
        name: Check name.
        passed: Whether the rule held.
        weight: Relative contribution to the evaluator score.
        evidence: Supporting evidence.
    """

    name: str = Field(..., min_length=1)
    passed: bool
    weight: float = Field(..., ge=0)
    evidence: list[Evidence] = Field(default_factory=list)


class EvaluationResult(FrozenSchema):
    """Result produced by a single evaluator.

    Attributes:
        evaluator_name: Name of the evaluator that produced this result.
        passed: Whether the evaluator passed (no error-severity violation).
        score: Weighted fraction of passing checks, 0-100.
        violations: Violations in detection order.
        evidence: Evidence from every check, in check order.
        metadata: Evaluator-specific details (task type, skip reason, counts).
    """

    evaluator_name: str = Field(..., min_length=1)
    passed: bool
    score: int = Field(..., ge=0, le=100)
    violations: list[Violation] = Field(default_factory=list)
    evidence: list[Evidence] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def skipped(self) -> bool:
        """Whether the evaluator was not applicable to the session."""
        return bool(self.metadata.get("skipped"))

    def violations_of(self, kind: ViolationKind) -> list[Violation]:
        """Return the violations of a given kind.

        Args:
            kind: Violation kind to filter by.

        Returns:
            Matching violations in detection order.

        """
        return [v for v in self.violations if v.kind == kind]


class ViolationsBySeverity(FrozenSchema):
    """Violation counts per severity."""

    error: int = Field(default=0, ge=0)
    warning: int = Field(default=0, ge=0)
    info: int = Field(default=0, ge=0)

    def __getitem__(self, severity: Severity | str) -> int:
        return getattr(self, Severity(severity).value)


class AggregatedResult(FrozenSchema):
    """Session-level verdict combining every evaluator result.

    Attributes:
        session_id: Evaluated session.
        session_info: Session metadata at evaluation time.
        timestamp: When the aggregate was built, in epoch milliseconds.
        evaluator_results: Per-evaluator results in execution order.
        overall_passed: True when every evaluator passed.
        overall_score: Rounded (weighted) mean of evaluator scores.
        total_violations: Number of violations across all evaluators.
        violations_by_severity: Violation counts per severity.
        all_violations: Union of violations in evaluator order.
        all_evidence: Union of evidence in evaluator order.
    """

    session_id: str
    session_info: SessionInfo
    timestamp: int
    evaluator_results: list[EvaluationResult] = Field(default_factory=list)
    overall_passed: bool
    overall_score: int = Field(..., ge=0, le=100)
    total_violations: int = Field(default=0, ge=0)
    violations_by_severity: ViolationsBySeverity = Field(
        default_factory=ViolationsBySeverity
    )
    all_violations: list[Violation] = Field(default_factory=list)
    all_evidence: list[Evidence] = Field(default_factory=list)

    def result_for(self, evaluator_name: str) -> EvaluationResult | None:
        """Return the result produced by the named evaluator, if any.

        Args:
            evaluator_name: Evaluator name to look up.

        Returns:
            The matching EvaluationResult, or None.

        """
        for result in self.evaluator_results:
            if result.evaluator_name == evaluator_name:
                return result
        return None

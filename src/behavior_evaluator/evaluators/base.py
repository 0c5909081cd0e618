"""Base class and shared helpers for rule evaluators.

This module provides the foundational pieces of the evaluator system:
- APPROVAL_REQUEST_PATTERN: phrasing that counts as asking the user for approval
- FAILURE_REPORT_PATTERN: phrasing that counts as telling the user something failed
- GUIDANCE_FILE_PATTERNS: paths that count as loading guidance material
- calculate_score: weighted pass fraction of a list of checks
- BaseEvaluator: abstract base class for all evaluators
"""

import re
from abc import ABC, abstractmethod
from typing import Any

from behavior_evaluator.classifier import detect_task_type, is_applicable
from behavior_evaluator.collector.accessors import event_text, tool_name
from behavior_evaluator.config.defaults import PERFECT_SCORE
from behavior_evaluator.logging_config import get_logger
from behavior_evaluator.models.enums import EventKind, Severity, TaskType, ViolationKind
from behavior_evaluator.models.results import Check, EvaluationResult, Evidence, Violation
from behavior_evaluator.models.session import SessionInfo
from behavior_evaluator.models.timeline_event import TimelineEvent

__all__ = [
    "APPROVAL_REQUEST_PATTERN",
    "FAILURE_REPORT_PATTERN",
    "GUIDANCE_FILE_PATTERNS",
    "BaseEvaluator",
    "calculate_score",
    "is_failure_report",
    "is_guidance_file",
]

logger = get_logger(__name__)

APPROVAL_REQUEST_PATTERN = re.compile(
    r"\b(?:may|shall|should) I\b"
    r"|\bshall we\b"
    r"|\b(?:would|do) you (?:like|want)\b"
    r"|\bcan I (?:proceed|go ahead)\b"
    r"|\bis (?:it|that|this) (?:ok|okay|alright|fine)\b"
    r"|\bplease (?:confirm|approve)\b"
    r"|\blet me know if\b"
    r"|\bproceed\?",
    re.IGNORECASE,
)

FAILURE_REPORT_PATTERN = re.compile(
    r"\b(?:fail(?:ed|ing|ure|s)?|errors?|broke|broken|crash(?:ed)?)\b"
    r"|\b(?:did not|didn't|does not|doesn't) (?:pass|succeed|work|compile)\b"
    r"|\b(?:unable to|could not|couldn't|cannot)\b"
    r"|\bnot found\b",
    re.IGNORECASE,
)

GUIDANCE_FILE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\.opencode/agent/.*\.md$", re.IGNORECASE),
    re.compile(r"\.opencode/context/.*\.md$", re.IGNORECASE),
    re.compile(r"docs/.*\.md$", re.IGNORECASE),
    re.compile(r"(?:^|/)CONTRIBUTING\.md$", re.IGNORECASE),
    re.compile(r"(?:^|/)README\.md$", re.IGNORECASE),
)


def is_guidance_file(path: str | None) -> bool:
    """Whether a path names a recognized guidance file."""
    if not path:
        return False
    return any(pattern.search(path) for pattern in GUIDANCE_FILE_PATTERNS)


def is_failure_report(event: TimelineEvent) -> bool:
    """Whether an assistant message or text part tells the user something failed."""
    if event.kind not in (EventKind.assistant_message, EventKind.text):
        return False
    return bool(FAILURE_REPORT_PATTERN.search(event_text(event)))


def calculate_score(checks: list[Check]) -> int:
    """Calculate the weighted pass fraction of a set of checks.

    Args:
        checks: Checks produced by an evaluator.

    Returns:
        round(100 * passing weight / total weight), clamped to 0-100.
        100 when there are no checks or every weight is zero.

    """
    total_weight = sum(check.weight for check in checks)
    if total_weight <= 0:
        return PERFECT_SCORE
    passed_weight = sum(check.weight for check in checks if check.passed)
    score = round(PERFECT_SCORE * passed_weight / total_weight)
    return max(0, min(PERFECT_SCORE, score))


class BaseEvaluator(ABC):
    """Abstract base class for all rule evaluators.

    An evaluator inspects a session timeline and produces an
    EvaluationResult. ``evaluate`` classifies the session, consults the
    applicability matrix, and returns a passing skipped result when the
    evaluator does not apply; otherwise it delegates to
    ``evaluate_timeline``. Evaluators are pure: the same timeline always
    yields the same result.

    Attributes:
        name: Unique evaluator name (kebab-case), also its matrix key.
        description: What this evaluator checks.

    """

    name: str = ""
    description: str = ""

    def evaluate(
        self,
        timeline: list[TimelineEvent],
        session_info: SessionInfo,
    ) -> EvaluationResult:
        """Evaluate a session timeline.

        Args:
            timeline: Normalized, time-ordered session timeline.
            session_info: Metadata of the evaluated session.

        Returns:
            EvaluationResult for this evaluator.

        """
        task_type = detect_task_type(timeline)
        applicability = is_applicable(self.name, task_type)
        if not applicability.applicable:
            logger.debug(
                "evaluator_skipped",
                evaluator=self.name,
                task_type=task_type.value,
                reason=applicability.reason,
            )
            return self.skipped_result(task_type, applicability.reason or "Not applicable")

        return self.evaluate_timeline(timeline, session_info, task_type)

    @abstractmethod
    def evaluate_timeline(
        self,
        timeline: list[TimelineEvent],
        session_info: SessionInfo,
        task_type: TaskType,
    ) -> EvaluationResult:
        """Run this evaluator's checks on an applicable session.

        Args:
            timeline: Normalized, time-ordered session timeline.
            session_info: Metadata of the evaluated session.
            task_type: The session's classified task type.

        Returns:
            EvaluationResult for this evaluator.

        """
        ...

    def create_violation(
        self,
        kind: ViolationKind,
        severity: Severity,
        message: str,
        timestamp: float,
        evidence: dict[str, Any],
    ) -> Violation:
        """Create a violation record."""
        return Violation(
            kind=kind,
            severity=severity,
            message=message,
            timestamp=timestamp,
            evidence=evidence,
        )

    def create_evidence(
        self,
        kind: str,
        description: str,
        data: dict[str, Any] | None = None,
        timestamp: float | None = None,
    ) -> Evidence:
        """Create an evidence record."""
        return Evidence(
            kind=kind,
            description=description,
            data=data or {},
            timestamp=timestamp,
        )

    def build_result(
        self,
        checks: list[Check],
        violations: list[Violation],
        task_type: TaskType,
        evidence: list[Evidence] | None = None,
        metadata: dict[str, Any] | None = None,
        required_checks: tuple[str, ...] = (),
    ) -> EvaluationResult:
        """Assemble an EvaluationResult from checks and violations.

        The result passes when no violation has error severity and every
        check named in ``required_checks`` passed. Evidence is the evidence
        of every check in order, followed by any extra evidence.

        Args:
            checks: Checks in evaluation order.
            violations: Violations in detection order.
            task_type: The session's classified task type.
            evidence: Extra evidence not attached to a check.
            metadata: Evaluator-specific metadata.
            required_checks: Names of checks whose failure fails the result
                whatever the severity of their violations.

        Returns:
            The assembled EvaluationResult.

        """
        all_evidence = [item for check in checks for item in check.evidence]
        all_evidence.extend(evidence or [])
        passed = not any(v.severity == Severity.error for v in violations) and all(
            check.passed for check in checks if check.name in required_checks
        )

        result = EvaluationResult(
            evaluator_name=self.name,
            passed=passed,
            score=calculate_score(checks),
            violations=violations,
            evidence=all_evidence,
            metadata={"task_type": task_type.value, **(metadata or {})},
        )

        logger.debug(
            "evaluator_completed",
            evaluator=self.name,
            passed=result.passed,
            score=result.score,
            check_count=len(checks),
            violation_count=len(violations),
        )
        return result

    def skipped_result(self, task_type: TaskType, reason: str) -> EvaluationResult:
        """Build the passing result of an evaluator that does not apply.

        Args:
            task_type: The session's classified task type.
            reason: Why the evaluator does not apply.

        Returns:
            A passing, zero-violation, score-100 result marked as skipped.

        """
        return EvaluationResult(
            evaluator_name=self.name,
            passed=True,
            score=PERFECT_SCORE,
            violations=[],
            evidence=[
                self.create_evidence(
                    "not-applicable",
                    reason,
                    {"task_type": task_type.value},
                )
            ],
            metadata={
                "skipped": True,
                "skip_reason": reason,
                "task_type": task_type.value,
            },
        )

    @staticmethod
    def fallback_timestamp(
        timeline: list[TimelineEvent], session_info: SessionInfo
    ) -> float:
        """Timestamp for session-wide violations: the last event, else session creation."""
        if timeline:
            return timeline[-1].timestamp
        return float(session_info.created_at)

    @staticmethod
    def tool_calls(timeline: list[TimelineEvent]) -> list[TimelineEvent]:
        """Return tool call events that carry a tool name."""
        return [
            event
            for event in timeline
            if event.kind == EventKind.tool_call and tool_name(event) is not None
        ]

    @staticmethod
    def contains_approval_request(text: str) -> bool:
        """Whether text asks the user for approval or confirmation."""
        return bool(text) and bool(APPROVAL_REQUEST_PATTERN.search(text))

    def find_approval(
        self,
        timeline: list[TimelineEvent],
        before_index: int,
        pattern: re.Pattern[str] | None = None,
    ) -> tuple[TimelineEvent, TimelineEvent] | None:
        """Find an approval exchange preceding a timeline position.

        Searches backward from ``before_index`` for the nearest assistant
        message that requests approval (or matches ``pattern``). The
        exchange counts only when a user message follows that request
        before the position; an earlier, already-answered request does
        not cover a later unanswered one.

        A message event carries all of its message's text but sorts at the
        message's creation time, so a question the action's own message asks
        after the action can appear before it. Unanswered requests from the
        action's message are therefore passed over.

        Args:
            timeline: Session timeline.
            before_index: Index of the action needing approval.
            pattern: Request phrasing to look for instead of the default.

        Returns:
            (request, reply) events, or None when no such exchange exists.

        """
        request_pattern = pattern or APPROVAL_REQUEST_PATTERN
        action_message = timeline[before_index].message_id
        for index in range(before_index - 1, -1, -1):
            event = timeline[index]
            if event.kind != EventKind.assistant_message:
                continue
            if not request_pattern.search(event_text(event)):
                continue
            for reply in timeline[index + 1 : before_index]:
                if reply.kind == EventKind.user_message:
                    return event, reply
            if action_message and event.message_id == action_message:
                continue
            return None
        return None

"""Declared-behavior evaluator.

Checks a session against an explicit BehaviorExpectation supplied by the
test author. Every declared constraint becomes one check, and every unmet
constraint is an error-severity violation. Constraints that are not
declared produce no check.
"""

from dataclasses import dataclass, field
from typing import Any

from behavior_evaluator.collector.accessors import (
    DELEGATION_TOOLS,
    event_text,
    is_read_call,
    target_path,
    tool_name,
)
from behavior_evaluator.evaluators.base import BaseEvaluator, is_guidance_file
from behavior_evaluator.logging_config import get_logger
from behavior_evaluator.models.behavior import BehaviorExpectation
from behavior_evaluator.models.enums import EventKind, Severity, TaskType, ViolationKind
from behavior_evaluator.models.results import Check, EvaluationResult, Evidence, Violation
from behavior_evaluator.models.session import SessionInfo
from behavior_evaluator.models.timeline_event import TimelineEvent

__all__ = ["BehaviorEvaluator"]

logger = get_logger(__name__)

REQUIRED_WEIGHT = 100.0
COUNT_WEIGHT = 50.0
DELEGATION_WEIGHT = 75.0


@dataclass
class _Tally:
    """Checks and violations accumulated during one evaluation."""

    timestamp: float
    checks: list[Check] = field(default_factory=list)
    violations: list[Violation] = field(default_factory=list)


class BehaviorEvaluator(BaseEvaluator):
    """Validates that agent behavior matches a test's declared expectations.

    Attributes:
        behavior: The declared constraints.

    Example:
        evaluator = BehaviorEvaluator({"mustUseTools": ["read"], "maxToolCalls": 5})
        result = evaluator.evaluate(timeline, session_info)

    """

    name = "behavior"
    description = "Validates agent behavior matches test expectations"

    def __init__(self, behavior: BehaviorExpectation | dict[str, Any]) -> None:
        """Initialize the evaluator.

        Args:
            behavior: Declared constraints, as a model or a mapping in
                snake_case or camelCase.

        Raises:
            pydantic.ValidationError: If the declaration is invalid.

        """
        self.behavior = (
            behavior
            if isinstance(behavior, BehaviorExpectation)
            else BehaviorExpectation.model_validate(behavior)
        )

    def evaluate_timeline(
        self,
        timeline: list[TimelineEvent],
        session_info: SessionInfo,
        task_type: TaskType,
    ) -> EvaluationResult:
        calls = self.tool_calls(timeline)
        tools_used = [name for name in (tool_name(e) for e in calls) if name]
        unique_tools = list(dict.fromkeys(tools_used))

        tally = _Tally(timestamp=self.fallback_timestamp(timeline, session_info))
        behavior = self.behavior

        if behavior.must_use_tools:
            self._check_must_use(behavior.must_use_tools, unique_tools, tally)
        if behavior.must_use_any_of:
            self._check_any_of(behavior.must_use_any_of, unique_tools, tally)
        if behavior.must_not_use_tools:
            self._check_must_not_use(
                behavior.must_not_use_tools, unique_tools, tally
            )
        if behavior.min_tool_calls is not None:
            self._check_min_calls(behavior.min_tool_calls, len(calls), tally)
        if behavior.max_tool_calls is not None:
            self._check_max_calls(behavior.max_tool_calls, len(calls), tally)
        if behavior.requires_approval:
            self._check_approval(timeline, tally)
        if behavior.requires_context:
            self._check_context(calls, tally)
        if behavior.should_delegate:
            self._check_delegation(calls, tally)

        checks, violations = tally.checks, tally.violations
        passed_count = sum(1 for check in checks if check.passed)
        summary = [
            self.create_evidence(
                "behavior-summary",
                f"Behavior validation: {passed_count}/{len(checks)} checks passed",
                {
                    "total_checks": len(checks),
                    "passed_checks": passed_count,
                    "failed_checks": len(checks) - passed_count,
                    "tools_used": unique_tools,
                    "tool_call_count": len(calls),
                },
            )
        ]

        logger.debug(
            "behavior_validated",
            tool_call_count=len(calls),
            tools_used=unique_tools,
            passed_checks=passed_count,
            total_checks=len(checks),
        )

        return self.build_result(
            checks,
            violations,
            task_type,
            evidence=summary,
            metadata={
                "behavior": behavior.model_dump(exclude_none=True),
                "tools_used": unique_tools,
                "tool_call_count": len(calls),
            },
        )

    def _add(
        self,
        tally: _Tally,
        name: str,
        weight: float,
        evidence: Evidence,
        failures: list[tuple[ViolationKind, str, dict[str, Any]]],
    ) -> None:
        for kind, message, data in failures:
            tally.violations.append(
                self.create_violation(kind, Severity.error, message, tally.timestamp, data)
            )
        tally.checks.append(
            Check(name=name, passed=not failures, weight=weight, evidence=[evidence])
        )

    def _check_must_use(
        self,
        required: list[str],
        used: list[str],
        tally: _Tally,
    ) -> None:
        missing = [tool for tool in required if tool.lower() not in used]
        description = (
            f"Missing required tools: {', '.join(missing)}"
            if missing
            else f"All required tools used: {', '.join(required)}"
        )
        self._add(
            tally,
            "must-use-tools",
            REQUIRED_WEIGHT,
            self.create_evidence(
                "required-tools",
                description,
                {"required": required, "used": used, "missing": missing},
            ),
            [
                (
                    ViolationKind.missing_required_tool,
                    f"Required tool '{tool}' was not used",
                    {"required_tool": tool, "tools_used": used},
                )
                for tool in missing
            ],
        )

    def _check_any_of(
        self,
        tool_sets: list[list[str]],
        used: list[str],
        tally: _Tally,
    ) -> None:
        satisfied = [s for s in tool_sets if all(t.lower() in used for t in s)]
        unsatisfied = [
            {"set": s, "missing": [t for t in s if t.lower() not in used]}
            for s in tool_sets
            if s not in satisfied
        ]
        options = " OR ".join(f"[{', '.join(s)}]" for s in tool_sets)
        failures = []
        if not satisfied:
            failures.append(
                (
                    ViolationKind.missing_required_tool_set,
                    f"None of the required tool sets were fully used. Options: {options}",
                    {
                        "required_sets": tool_sets,
                        "tools_used": used,
                        "unsatisfied_sets": unsatisfied,
                    },
                )
            )
        self._add(
            tally,
            "must-use-any-of",
            REQUIRED_WEIGHT,
            self.create_evidence(
                "alternative-tools",
                f"Satisfied tool set: [{', '.join(satisfied[0])}]"
                if satisfied
                else f"No tool set satisfied. Options: {options}",
                {
                    "required_sets": tool_sets,
                    "used": used,
                    "satisfied_sets": satisfied,
                    "unsatisfied_sets": unsatisfied,
                },
            ),
            failures,
        )

    def _check_must_not_use(
        self,
        forbidden: list[str],
        used: list[str],
        tally: _Tally,
    ) -> None:
        offending = [tool for tool in forbidden if tool.lower() in used]
        self._add(
            tally,
            "must-not-use-tools",
            REQUIRED_WEIGHT,
            self.create_evidence(
                "forbidden-tools",
                f"Forbidden tools used: {', '.join(offending)}"
                if offending
                else "No forbidden tools used",
                {"forbidden": forbidden, "used": used, "violations": offending},
            ),
            [
                (
                    ViolationKind.forbidden_tool_used,
                    f"Forbidden tool '{tool}' was used",
                    {"forbidden_tool": tool, "tools_used": used},
                )
                for tool in offending
            ],
        )

    def _check_min_calls(
        self,
        minimum: int,
        actual: int,
        tally: _Tally,
    ) -> None:
        failures = []
        if actual < minimum:
            failures.append(
                (
                    ViolationKind.insufficient_tool_calls,
                    f"Expected at least {minimum} tool calls, got {actual}",
                    {"expected": minimum, "actual": actual},
                )
            )
        self._add(
            tally,
            "min-tool-calls",
            COUNT_WEIGHT,
            self.create_evidence(
                "tool-call-count",
                f"Tool calls: {actual} (min: {minimum})",
                {"actual": actual, "minimum": minimum},
            ),
            failures,
        )

    def _check_max_calls(
        self,
        maximum: int,
        actual: int,
        tally: _Tally,
    ) -> None:
        failures = []
        if actual > maximum:
            failures.append(
                (
                    ViolationKind.excessive_tool_calls,
                    f"Expected at most {maximum} tool calls, got {actual}",
                    {"expected": maximum, "actual": actual},
                )
            )
        self._add(
            tally,
            "max-tool-calls",
            COUNT_WEIGHT,
            self.create_evidence(
                "tool-call-count",
                f"Tool calls: {actual} (max: {maximum})",
                {"actual": actual, "maximum": maximum},
            ),
            failures,
        )

    def _check_approval(
        self,
        timeline: list[TimelineEvent],
        tally: _Tally,
    ) -> None:
        requested = any(
            self.contains_approval_request(event_text(event))
            for event in timeline
            if event.kind == EventKind.assistant_message
        )
        failures = []
        if not requested:
            failures.append(
                (
                    ViolationKind.missing_approval_request,
                    "Agent did not request approval before executing",
                    {"requires_approval": True, "approval_requested": False},
                )
            )
        self._add(
            tally,
            "requires-approval",
            REQUIRED_WEIGHT,
            self.create_evidence(
                "approval-request",
                "Agent requested approval before executing"
                if requested
                else "Agent did not request approval",
                {"requires_approval": True, "approval_requested": requested},
            ),
            failures,
        )

    def _check_context(
        self,
        calls: list[TimelineEvent],
        tally: _Tally,
    ) -> None:
        files_read = [target_path(e) for e in calls if is_read_call(e)]
        context_files = [path for path in files_read if path and is_guidance_file(path)]
        failures = []
        if not context_files:
            failures.append(
                (
                    ViolationKind.missing_context_loading,
                    "Agent did not load required context files",
                    {"requires_context": True, "context_loaded": False},
                )
            )
        self._add(
            tally,
            "requires-context",
            REQUIRED_WEIGHT,
            self.create_evidence(
                "context-loading",
                f"Agent loaded {len(context_files)} context file(s)"
                if context_files
                else "Agent did not load context files",
                {
                    "requires_context": True,
                    "context_loaded": bool(context_files),
                    "context_files": context_files,
                },
            ),
            failures,
        )

    def _check_delegation(
        self,
        calls: list[TimelineEvent],
        tally: _Tally,
    ) -> None:
        delegations = [e for e in calls if tool_name(e) in DELEGATION_TOOLS]
        failures = []
        if not delegations:
            failures.append(
                (
                    ViolationKind.missing_delegation,
                    "Agent should have delegated to a subagent",
                    {"should_delegate": True, "delegated": False},
                )
            )
        self._add(
            tally,
            "should-delegate",
            DELEGATION_WEIGHT,
            self.create_evidence(
                "delegation",
                f"Agent delegated to {len(delegations)} subagent(s)"
                if delegations
                else "Agent did not delegate to subagents",
                {
                    "should_delegate": True,
                    "delegated": bool(delegations),
                    "delegation_count": len(delegations),
                },
            ),
            failures,
        )

"""Delegation evaluator.

Large multi-file work should be handed to a subagent. Once the number of
distinct files the agent touched reaches a threshold, the session must
contain a delegation-class (task) tool call.
"""

from behavior_evaluator.collector.accessors import (
    DELEGATION_TOOLS,
    WRITE_TOOLS,
    patch_files,
    target_path,
    tool_name,
)
from behavior_evaluator.config.settings import EvaluatorSettings
from behavior_evaluator.evaluators.base import BaseEvaluator
from behavior_evaluator.models.enums import EventKind, Severity, TaskType, ViolationKind
from behavior_evaluator.models.results import Check, EvaluationResult, Violation
from behavior_evaluator.models.session import SessionInfo
from behavior_evaluator.models.timeline_event import TimelineEvent

__all__ = ["DelegationEvaluator", "files_touched"]


def files_touched(timeline: list[TimelineEvent]) -> list[str]:
    """Return the distinct files changed during a session, in first-touch order.

    Counts the targets of write and edit calls and the files listed by
    patch events.

    """
    files: list[str] = []
    for event in timeline:
        if event.kind == EventKind.patch:
            paths = patch_files(event)
        elif tool_name(event) in WRITE_TOOLS:
            path = target_path(event)
            paths = [path] if path else []
        else:
            continue
        for path in paths:
            if path not in files:
                files.append(path)
    return files


class DelegationEvaluator(BaseEvaluator):
    """Checks that large multi-file work is delegated to a subagent.

    Attributes:
        file_threshold: Distinct files touched at which delegation is expected.

    """

    name = "delegation"
    description = "Verifies multi-file work is delegated to a subagent"

    def __init__(
        self,
        file_threshold: int | None = None,
        settings: EvaluatorSettings | None = None,
    ) -> None:
        """Initialize the evaluator.

        Args:
            file_threshold: Explicit threshold; overrides settings.
            settings: Evaluator settings (defaults to environment-derived).

        """
        if file_threshold is None:
            file_threshold = (settings or EvaluatorSettings()).delegation_file_threshold
        if file_threshold < 1:
            raise ValueError(f"file_threshold must be >= 1, got {file_threshold}")
        self.file_threshold = file_threshold

    def evaluate_timeline(
        self,
        timeline: list[TimelineEvent],
        session_info: SessionInfo,
        task_type: TaskType,
    ) -> EvaluationResult:
        files = files_touched(timeline)
        if len(files) < self.file_threshold:
            reason = (
                f"Touched {len(files)} file(s), below the delegation threshold "
                f"of {self.file_threshold}"
            )
            result = self.skipped_result(task_type, reason)
            return result.model_copy(
                update={"metadata": {**result.metadata, "files_touched": len(files)}}
            )

        delegations = [
            event for event in self.tool_calls(timeline) if tool_name(event) in DELEGATION_TOOLS
        ]
        violations: list[Violation] = []

        if not delegations:
            violations.append(
                self.create_violation(
                    ViolationKind.missing_delegation,
                    Severity.warning,
                    f"Touched {len(files)} files without delegating to a subagent",
                    self.fallback_timestamp(timeline, session_info),
                    {
                        "files_touched": len(files),
                        "threshold": self.file_threshold,
                        "files": files,
                    },
                )
            )

        check = Check(
            name="delegate-multi-file-work",
            passed=bool(delegations),
            weight=100.0,
            evidence=[
                self.create_evidence(
                    "delegation",
                    f"{len(delegations)} delegation call(s) for {len(files)} files",
                    {
                        "files_touched": len(files),
                        "threshold": self.file_threshold,
                        "delegation_count": len(delegations),
                    },
                )
            ],
        )

        return self.build_result(
            [check],
            violations,
            task_type,
            metadata={
                "files_touched": len(files),
                "threshold": self.file_threshold,
                "delegation_count": len(delegations),
            },
        )

"""Execution-balance evaluator.

Agents should look before they change things: a file should be read (or
created by the agent itself) before it is edited, and some reading should
happen before the first execution-class call.
"""

from behavior_evaluator.collector.accessors import (
    is_execution_call,
    is_read_call,
    target_path,
    tool_name,
)
from behavior_evaluator.evaluators.base import BaseEvaluator
from behavior_evaluator.models.enums import Severity, TaskType, ViolationKind
from behavior_evaluator.models.results import Check, EvaluationResult, Violation
from behavior_evaluator.models.session import SessionInfo
from behavior_evaluator.models.timeline_event import TimelineEvent

__all__ = ["ExecutionBalanceEvaluator"]

EDIT_WEIGHT = 100.0
ORDER_WEIGHT = 50.0


class ExecutionBalanceEvaluator(BaseEvaluator):
    """Checks that reading precedes editing and execution."""

    name = "execution-balance"
    description = "Verifies files are read before they are edited"

    def evaluate_timeline(
        self,
        timeline: list[TimelineEvent],
        session_info: SessionInfo,
        task_type: TaskType,
    ) -> EvaluationResult:
        checks: list[Check] = []
        violations: list[Violation] = []
        known_files: set[str] = set()
        read_count = 0
        execution_count = 0
        first_execution: TimelineEvent | None = None
        read_before_execution = False

        for event in self.tool_calls(timeline):
            tool = tool_name(event)
            path = target_path(event)

            if is_read_call(event):
                read_count += 1
                if first_execution is None:
                    read_before_execution = True
                if path:
                    known_files.add(path)
                continue

            if not is_execution_call(event):
                continue
            execution_count += 1
            if first_execution is None:
                first_execution = event

            if tool == "edit" and path:
                was_read = path in known_files
                if not was_read:
                    violations.append(
                        self.create_violation(
                            ViolationKind.edit_without_read,
                            Severity.warning,
                            f"Edited {path} without reading it first",
                            event.timestamp,
                            {"file": path, "tool": tool},
                        )
                    )
                checks.append(
                    Check(
                        name="read-before-edit",
                        passed=was_read,
                        weight=EDIT_WEIGHT,
                        evidence=[
                            self.create_evidence(
                                "edit-target",
                                f"Edit of {path}"
                                + (" after reading it" if was_read else " without reading it"),
                                {"file": path, "read_first": was_read},
                                event.timestamp,
                            )
                        ],
                    )
                )
            if tool == "write" and path:
                known_files.add(path)

        if first_execution is not None:
            if not read_before_execution:
                violations.append(
                    self.create_violation(
                        ViolationKind.execution_before_read,
                        Severity.info,
                        f"'{tool_name(first_execution)}' executed before any read",
                        first_execution.timestamp,
                        {"tool": tool_name(first_execution), "read_count": read_count},
                    )
                )
            checks.append(
                Check(
                    name="read-before-execution",
                    passed=read_before_execution,
                    weight=ORDER_WEIGHT,
                    evidence=[
                        self.create_evidence(
                            "execution-order",
                            f"{read_count} read(s), {execution_count} execution call(s)",
                            {
                                "read_count": read_count,
                                "execution_count": execution_count,
                                "read_before_execution": read_before_execution,
                            },
                            first_execution.timestamp,
                        )
                    ],
                )
            )

        return self.build_result(
            checks,
            violations,
            task_type,
            metadata={"read_count": read_count, "execution_count": execution_count},
        )

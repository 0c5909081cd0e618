"""Context-loading evaluator.

Tasks that depend on project conventions must load guidance material
(agent definitions, context/standards files, docs, README, CONTRIBUTING)
before the first execution-class tool call, and the guidance must fit the
kind of task being performed. Missing or late guidance is reported as a
warning but still fails the evaluator.
"""

import re
from pathlib import PurePosixPath
from typing import Any

from behavior_evaluator.collector.accessors import (
    is_execution_call,
    is_read_call,
    target_path,
)
from behavior_evaluator.evaluators.base import BaseEvaluator, is_guidance_file
from behavior_evaluator.models.enums import Severity, TaskType, ViolationKind
from behavior_evaluator.models.results import Check, EvaluationResult, Violation
from behavior_evaluator.models.session import SessionInfo
from behavior_evaluator.models.timeline_event import TimelineEvent

__all__ = ["ContextLoadingEvaluator", "guidance_category"]

# Failing this check fails the evaluator even though its violations are warnings.
TIMING_CHECK = "context-before-execution"

CONTEXT_DIR_PATTERN = re.compile(r"\.opencode/context/", re.IGNORECASE)

# Checked in order; the first keyword found in the file stem wins.
CATEGORY_KEYWORDS: tuple[tuple[str, str], ...] = (
    ("tests", "test"),
    ("docs", "doc"),
    ("review", "review"),
    ("delegation", "delegat"),
    ("code", "code"),
)

# Task types without an entry accept any guidance.
EXPECTED_CATEGORY: dict[TaskType, str] = {
    TaskType.code: "code",
    TaskType.docs: "docs",
    TaskType.tests: "tests",
    TaskType.review: "review",
    TaskType.delegation: "delegation",
}


def guidance_category(path: str) -> str | None:
    """Return the task category a guidance file is written for.

    Only files under ``.opencode/context/`` are categorized, by the
    keyword in their file name. Everything else is general guidance.

    Args:
        path: Path of a guidance file.

    Returns:
        One of code, docs, tests, review, delegation; or None for general
        guidance.

    """
    if not CONTEXT_DIR_PATTERN.search(path):
        return None
    stem = PurePosixPath(path.replace("\\", "/")).stem.lower()
    for category, keyword in CATEGORY_KEYWORDS:
        if keyword in stem:
            return category
    return None


def _matches_task(path: str, task_type: TaskType) -> bool:
    category = guidance_category(path)
    expected = EXPECTED_CATEGORY.get(task_type)
    return category is None or expected is None or category == expected


class ContextLoadingEvaluator(BaseEvaluator):
    """Checks that guidance material is loaded before acting."""

    name = "context-loading"
    description = "Verifies guidance files are read before the first execution"

    def evaluate_timeline(
        self,
        timeline: list[TimelineEvent],
        session_info: SessionInfo,
        task_type: TaskType,
    ) -> EvaluationResult:
        execution_indices = [i for i, e in enumerate(timeline) if is_execution_call(e)]
        guidance_reads: list[tuple[int, TimelineEvent, str]] = []
        for index, event in enumerate(timeline):
            path = target_path(event)
            if is_read_call(event) and path and is_guidance_file(path):
                guidance_reads.append((index, event, path))

        metadata: dict[str, Any] = {
            "context_loaded_before_execution": False,
            "context_file": None,
            "execution_tool_count": len(execution_indices),
        }

        if not execution_indices:
            check = Check(
                name=TIMING_CHECK,
                passed=True,
                weight=100.0,
                evidence=[
                    self.create_evidence(
                        "no-execution",
                        "No execution tools used",
                        {"guidance_files": [path for _, _, path in guidance_reads]},
                    )
                ],
            )
            return self.build_result([check], [], task_type, metadata=metadata)

        first_execution_index = execution_indices[0]
        first_execution = timeline[first_execution_index]
        before = [
            (event, path)
            for index, event, path in guidance_reads
            if index < first_execution_index
        ]

        violations: list[Violation] = []
        checks: list[Check] = []

        if before:
            matching = [(e, p) for e, p in before if _matches_task(p, task_type)]
            loaded_event, loaded_path = matching[0] if matching else before[0]
            metadata["context_loaded_before_execution"] = True
            metadata["context_file"] = loaded_path

            checks.append(
                Check(
                    name=TIMING_CHECK,
                    passed=True,
                    weight=100.0,
                    evidence=[
                        self.create_evidence(
                            "context-loaded",
                            f"Loaded {loaded_path} before first execution",
                            {
                                "context_file": loaded_path,
                                "first_execution_timestamp": first_execution.timestamp,
                            },
                            loaded_event.timestamp,
                        )
                    ],
                )
            )

            if not matching:
                category = guidance_category(loaded_path)
                violations.append(
                    self.create_violation(
                        ViolationKind.wrong_context_file,
                        Severity.error,
                        f"Loaded {category} guidance for a {task_type.value} task",
                        loaded_event.timestamp,
                        {
                            "context_file": loaded_path,
                            "context_category": category,
                            "task_type": task_type.value,
                            "expected_category": EXPECTED_CATEGORY.get(task_type),
                        },
                    )
                )
            checks.append(
                Check(
                    name="context-matches-task",
                    passed=bool(matching),
                    weight=50.0,
                    evidence=[
                        self.create_evidence(
                            "context-category",
                            "Guidance matches the task"
                            if matching
                            else "Guidance does not match the task",
                            {
                                "context_files": [p for _, p in before],
                                "task_type": task_type.value,
                            },
                        )
                    ],
                )
            )
        elif guidance_reads:
            _, late_event, late_path = guidance_reads[0]
            metadata["context_file"] = late_path
            violations.append(
                self.create_violation(
                    ViolationKind.context_loaded_late,
                    Severity.warning,
                    f"Guidance {late_path} loaded only after execution started",
                    late_event.timestamp,
                    {
                        "context_file": late_path,
                        "context_timestamp": late_event.timestamp,
                        "first_execution_timestamp": first_execution.timestamp,
                    },
                )
            )
            checks.append(
                Check(
                    name=TIMING_CHECK,
                    passed=False,
                    weight=100.0,
                    evidence=[
                        self.create_evidence(
                            "context-loaded-late",
                            f"Loaded {late_path} after first execution",
                            {"context_file": late_path},
                            late_event.timestamp,
                        )
                    ],
                )
            )
        else:
            violations.append(
                self.create_violation(
                    ViolationKind.no_context_loaded,
                    Severity.warning,
                    "No guidance files loaded before execution",
                    first_execution.timestamp,
                    {
                        "task_type": task_type.value,
                        "execution_tool_count": len(execution_indices),
                    },
                )
            )
            checks.append(
                Check(
                    name=TIMING_CHECK,
                    passed=False,
                    weight=100.0,
                    evidence=[
                        self.create_evidence(
                            "context-missing",
                            "No guidance files were read",
                            {"task_type": task_type.value},
                            first_execution.timestamp,
                        )
                    ],
                )
            )

        return self.build_result(
            checks,
            violations,
            task_type,
            metadata=metadata,
            required_checks=(TIMING_CHECK,),
        )

"""Tool-usage evaluator.

Flags shell commands that duplicate a structured tool: reading files with
cat/head/tail, listing with ls, searching with find/grep, editing with
``sed -i`` and writing with ``echo ... >``.
"""

import re
from dataclasses import dataclass

from behavior_evaluator.collector.accessors import SHELL_TOOLS, bash_command, tool_name
from behavior_evaluator.evaluators.base import BaseEvaluator
from behavior_evaluator.models.enums import Severity, TaskType, ViolationKind
from behavior_evaluator.models.results import Check, EvaluationResult, Violation
from behavior_evaluator.models.session import SessionInfo
from behavior_evaluator.models.timeline_event import TimelineEvent

__all__ = ["BashAntipattern", "ToolUsageEvaluator", "find_antipatterns"]

CHECK_WEIGHT = 100.0

SEGMENT_SEPARATOR = re.compile(r"&&|\|\||;")

# First word of a segment -> structured tool that should be used instead.
COMMAND_EQUIVALENTS: dict[str, str] = {
    "cat": "read",
    "head": "read",
    "tail": "read",
    "less": "read",
    "more": "read",
    "ls": "list",
    "find": "glob",
    "grep": "grep",
    "rg": "grep",
    "egrep": "grep",
}

SED_IN_PLACE = re.compile(r"^sed\s+(?:\S+\s+)*?-i\b")
ECHO_REDIRECT = re.compile(r"^echo\b.*?>")


@dataclass(frozen=True)
class BashAntipattern:
    """A shell command segment with a structured-tool equivalent.

    Attributes:
        command: The offending command name.
        segment: The full command segment.
        suggested_tool: Structured tool to use instead.

    """

    command: str
    segment: str
    suggested_tool: str


def _classify_segment(segment: str) -> BashAntipattern | None:
    words = segment.split()
    if not words:
        return None
    command = words[0].rsplit("/", 1)[-1]

    if command in COMMAND_EQUIVALENTS:
        return BashAntipattern(command, segment, COMMAND_EQUIVALENTS[command])
    if command == "sed" and SED_IN_PLACE.match(segment):
        return BashAntipattern("sed -i", segment, "edit")
    if command == "echo" and ECHO_REDIRECT.match(segment):
        return BashAntipattern("echo >", segment, "write")
    return None


def find_antipatterns(command: str) -> list[BashAntipattern]:
    """Find command segments that should have used a structured tool.

    The command is split on ``&&``, ``||`` and ``;``. Pipelines are kept
    whole, so only the first command of a pipeline is inspected.

    Args:
        command: Shell command string.

    Returns:
        Anti-patterns in segment order.

    """
    found = []
    for segment in SEGMENT_SEPARATOR.split(command):
        antipattern = _classify_segment(segment.strip())
        if antipattern is not None:
            found.append(antipattern)
    return found


class ToolUsageEvaluator(BaseEvaluator):
    """Checks that structured tools are preferred over raw shell commands."""

    name = "tool-usage"
    description = "Flags bash commands that have a structured tool equivalent"

    def evaluate_timeline(
        self,
        timeline: list[TimelineEvent],
        session_info: SessionInfo,
        task_type: TaskType,
    ) -> EvaluationResult:
        checks: list[Check] = []
        violations: list[Violation] = []
        structured_calls = 0

        for event in self.tool_calls(timeline):
            if tool_name(event) not in SHELL_TOOLS:
                structured_calls += 1
                continue
            command = bash_command(event)
            if command is None:
                continue

            antipatterns = find_antipatterns(command)
            for antipattern in antipatterns:
                violations.append(
                    self.create_violation(
                        ViolationKind.bash_antipattern,
                        Severity.error,
                        f"Used bash '{antipattern.command}' instead of the "
                        f"'{antipattern.suggested_tool}' tool",
                        event.timestamp,
                        {
                            "command": antipattern.command,
                            "segment": antipattern.segment,
                            "suggested_tool": antipattern.suggested_tool,
                            "full_command": command,
                        },
                    )
                )

            checks.append(
                Check(
                    name="bash-command",
                    passed=not antipatterns,
                    weight=CHECK_WEIGHT,
                    evidence=[
                        self.create_evidence(
                            "bash-command",
                            f"Bash command: {command}",
                            {
                                "command": command,
                                "antipatterns": [a.command for a in antipatterns],
                            },
                            event.timestamp,
                        )
                    ],
                )
            )

        return self.build_result(
            checks,
            violations,
            task_type,
            metadata={
                "bash_call_count": len(checks),
                "structured_call_count": structured_calls,
            },
        )

"""Task-type classifier for behavior-evaluator.

Classifies a session by what the user asked for (the first user message)
and which tools the agent invoked. The classification decides which
evaluators apply to the session.
"""

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from behavior_evaluator.collector.accessors import (
    DELEGATION_TOOLS,
    READ_TOOLS,
    event_text,
    tool_name,
)
from behavior_evaluator.logging_config import get_logger
from behavior_evaluator.models.enums import EventKind, TaskType
from behavior_evaluator.models.timeline_event import TimelineEvent

__all__ = [
    "CLASSIFICATION_RULES",
    "ClassificationRule",
    "classify",
    "detect_task_type",
    "first_user_message_text",
]

logger = get_logger(__name__)

TESTS_PATTERN = re.compile(
    r"\b(write|create|add|implement|generate)\s+(?:a\s+|an\s+|some\s+|new\s+)?"
    r"(tests?|specs?|unit tests?|integration tests?)\b"
    r"|\b(jest|vitest|mocha|pytest|unittest)\b",
    re.IGNORECASE,
)
DOCS_PATTERN = re.compile(
    r"\b(document|documentation|readme|docs|jsdoc|tsdoc|docstring)\b",
    re.IGNORECASE,
)
REVIEW_PATTERN = re.compile(r"\b(review|audit|check|analyze|inspect)\b", re.IGNORECASE)
CODE_NOUN_PATTERN = re.compile(
    r"\b(function|class|component|method|module|interface|type|enum)\b",
    re.IGNORECASE,
)
CREATE_PATTERN = re.compile(r"\b(create|new|add|make|generate|write)\b", re.IGNORECASE)
MODIFY_PATTERN = re.compile(
    r"\b(modify|update|change|edit|fix|existing|current)\b", re.IGNORECASE
)
FILE_PATTERN = re.compile(r"\b(file|directory|folder)\b", re.IGNORECASE)
CODE_VERB_PATTERN = re.compile(
    r"\b(implement|build|develop|code|refactor|fix)\b", re.IGNORECASE
)
DELETE_PATTERN = re.compile(r"\b(delete|remove|rm)\b", re.IGNORECASE)


@dataclass(frozen=True)
class ClassificationRule:
    """One entry of the ordered classification table.

    Attributes:
        task_type: Label assigned when the predicate matches.
        predicate: Called with the message text and the set of tools used.

    """

    task_type: TaskType
    predicate: Callable[[str, frozenset[str]], bool]


def _is_read_only(text: str, tools: frozenset[str]) -> bool:
    return bool(tools) and tools <= READ_TOOLS


def _is_create_new_file(text: str, tools: frozenset[str]) -> bool:
    return (
        bool(CREATE_PATTERN.search(text))
        and bool(FILE_PATTERN.search(text))
        and "write" in tools
        and not MODIFY_PATTERN.search(text)
    )


def _is_modify_existing_file(text: str, tools: frozenset[str]) -> bool:
    return bool(MODIFY_PATTERN.search(text)) and bool(tools & {"write", "edit"})


# First match wins.
CLASSIFICATION_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule(TaskType.delegation, lambda _, tools: bool(tools & DELEGATION_TOOLS)),
    ClassificationRule(TaskType.read_only, _is_read_only),
    ClassificationRule(
        TaskType.bash_only,
        lambda _, tools: "bash" in tools and not tools & {"write", "edit"},
    ),
    ClassificationRule(TaskType.tests, lambda text, _: bool(TESTS_PATTERN.search(text))),
    ClassificationRule(TaskType.docs, lambda text, _: bool(DOCS_PATTERN.search(text))),
    ClassificationRule(TaskType.review, lambda text, _: bool(REVIEW_PATTERN.search(text))),
    ClassificationRule(TaskType.code, lambda text, _: bool(CODE_NOUN_PATTERN.search(text))),
    ClassificationRule(TaskType.create_new_file, _is_create_new_file),
    ClassificationRule(TaskType.code, lambda text, _: bool(CODE_VERB_PATTERN.search(text))),
    ClassificationRule(TaskType.modify_existing_file, _is_modify_existing_file),
    ClassificationRule(TaskType.delete_file, lambda text, _: bool(DELETE_PATTERN.search(text))),
    ClassificationRule(TaskType.conversational, lambda _, tools: not tools),
)


def classify(text: str | None, tools_used: Iterable[str | None]) -> TaskType:
    """Classify a task from the user's request and the tools invoked.

    Args:
        text: Text of the first user message (None is treated as empty).
        tools_used: Names of every tool invoked during the session.

    Returns:
        The TaskType of the first matching rule, or TaskType.unknown.

    """
    message = text or ""
    tools = frozenset(name.lower() for name in tools_used if isinstance(name, str) and name)

    for rule in CLASSIFICATION_RULES:
        if rule.predicate(message, tools):
            return rule.task_type
    return TaskType.unknown


def first_user_message_text(timeline: list[TimelineEvent]) -> str:
    """Return the text of the first user message, or an empty string."""
    for event in timeline:
        if event.kind == EventKind.user_message:
            return event_text(event)
    return ""


def detect_task_type(timeline: list[TimelineEvent]) -> TaskType:
    """Classify a session from its timeline.

    Args:
        timeline: Normalized session timeline.

    Returns:
        The session's TaskType.

    """
    tools = [tool_name(event) for event in timeline if event.kind == EventKind.tool_call]
    task_type = classify(first_user_message_text(timeline), tools)

    logger.debug(
        "task_type_detected",
        task_type=task_type.value,
        tool_count=len(tools),
    )
    return task_type

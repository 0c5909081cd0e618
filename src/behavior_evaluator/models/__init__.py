"""Models module for behavior-evaluator.

This module contains data models organized by domain:
- base: BaseSchema and FrozenSchema for Pydantic models
- enums: EventKind, TaskType, Severity, ViolationKind and transcript vocabularies
- session: SessionInfo, MessageInfo, Part, MessageWithParts (transcript input)
- timeline_event: TimelineEvent (normalized evaluator input)
- results: Evidence, Violation, Check, EvaluationResult, AggregatedResult
- behavior: BehaviorExpectation (declared-behavior constraints)
"""

from behavior_evaluator.models.base import BaseSchema, FrozenSchema
from behavior_evaluator.models.behavior import BehaviorExpectation
from behavior_evaluator.models.enums import (
    EventKind,
    ExecutionMode,
    MessageRole,
    PartType,
    Severity,
    TaskType,
    ToolStatus,
    ViolationKind,
)
from behavior_evaluator.models.results import (
    AggregatedResult,
    Check,
    EvaluationResult,
    Evidence,
    Violation,
    ViolationsBySeverity,
)
from behavior_evaluator.models.session import (
    MessageInfo,
    MessageWithParts,
    Part,
    SessionInfo,
)
from behavior_evaluator.models.timeline_event import TimelineEvent

__all__ = [
    # Base
    "BaseSchema",
    "FrozenSchema",
    # Enums
    "EventKind",
    "ExecutionMode",
    "MessageRole",
    "PartType",
    "Severity",
    "TaskType",
    "ToolStatus",
    "ViolationKind",
    # Transcript input
    "MessageInfo",
    "MessageWithParts",
    "Part",
    "SessionInfo",
    # Timeline
    "TimelineEvent",
    # Results
    "AggregatedResult",
    "Check",
    "EvaluationResult",
    "Evidence",
    "Violation",
    "ViolationsBySeverity",
    # Declared behavior
    "BehaviorExpectation",
]

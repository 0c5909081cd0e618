"""Classifier module for behavior-evaluator.

This module decides what kind of task a session performed and which
evaluators apply to it:
- task_type: classify, detect_task_type
- applicability: is_applicable and the applicability matrix
"""

from behavior_evaluator.classifier.applicability import (
    APPLICABILITY_MATRIX,
    Applicability,
    is_applicable,
)
from behavior_evaluator.classifier.task_type import (
    classify,
    detect_task_type,
    first_user_message_text,
)

__all__ = [
    "APPLICABILITY_MATRIX",
    "Applicability",
    "classify",
    "detect_task_type",
    "first_user_message_text",
    "is_applicable",
]

"""Configuration module for behavior-evaluator.

Provides centralized settings via pydantic-settings and the default
values they fall back to.
"""

from behavior_evaluator.config.settings import (
    EvaluatorSettings,
    RunnerSettings,
    Settings,
    get_settings,
)

__all__ = [
    "EvaluatorSettings",
    "get_settings",
    "RunnerSettings",
    "Settings",
]

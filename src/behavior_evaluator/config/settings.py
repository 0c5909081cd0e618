"""Application settings using pydantic-settings.

This module provides environment variable support for configuration
using pydantic-settings. Settings can be overridden via environment
variables with the appropriate prefix.

Environment Variables:
    BEHAVIOR_EVAL_DELEGATION_FILE_THRESHOLD: Files touched before delegation is expected
    BEHAVIOR_RUNNER_EXECUTION_MODE: sequential or parallel evaluator execution
    BEHAVIOR_RUNNER_MAX_WORKERS: Thread pool size for parallel execution
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from behavior_evaluator.config.defaults import (
    DEFAULT_DELEGATION_FILE_THRESHOLD,
    DEFAULT_EXECUTION_MODE,
    DEFAULT_MAX_WORKERS,
    MAX_WORKERS_MAX,
    MAX_WORKERS_MIN,
)
from behavior_evaluator.models.enums import ExecutionMode

__all__ = [
    "EvaluatorSettings",
    "RunnerSettings",
    "Settings",
    "get_settings",
]


class EvaluatorSettings(BaseSettings):
    """Settings for the rule evaluators.

    Attributes:
        delegation_file_threshold: Number of distinct files touched at which
            the delegation evaluator expects work to be handed to a subagent.

    """

    model_config = SettingsConfigDict(
        env_prefix="BEHAVIOR_EVAL_",
        extra="ignore",
    )

    delegation_file_threshold: int = Field(
        default=DEFAULT_DELEGATION_FILE_THRESHOLD,
        ge=1,
        description="Distinct files touched before delegation is expected",
    )


class RunnerSettings(BaseSettings):
    """Settings for the EvaluatorRunner.

    Attributes:
        execution_mode: Run evaluators one at a time or fan out to a thread pool.
        max_workers: Thread pool size used in parallel mode.

    """

    model_config = SettingsConfigDict(
        env_prefix="BEHAVIOR_RUNNER_",
        extra="ignore",
    )

    execution_mode: ExecutionMode = Field(
        default=ExecutionMode(DEFAULT_EXECUTION_MODE),
        description="Evaluator execution mode (sequential or parallel)",
    )
    max_workers: int = Field(
        default=DEFAULT_MAX_WORKERS,
        ge=MAX_WORKERS_MIN,
        le=MAX_WORKERS_MAX,
        description="Maximum parallel workers in parallel mode",
    )


class Settings(BaseSettings):
    """Root settings container.

    Aggregates all subsystem settings into a single configuration object.
    Use get_settings() to access the cached singleton instance.

    Attributes:
        evaluator: Rule evaluator settings.
        runner: Runner settings.

    """

    model_config = SettingsConfigDict(
        env_prefix="BEHAVIOR_",
        extra="ignore",
    )

    evaluator: EvaluatorSettings = Field(default_factory=EvaluatorSettings)
    runner: RunnerSettings = Field(default_factory=RunnerSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the cached settings singleton.

    Returns:
        The Settings instance with values from environment variables.

    """
    return Settings()

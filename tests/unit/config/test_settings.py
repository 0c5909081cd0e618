"""Unit tests for environment-derived settings."""

import pytest
from pydantic import ValidationError

from behavior_evaluator.config.defaults import (
    DEFAULT_DELEGATION_FILE_THRESHOLD,
    DEFAULT_MAX_WORKERS,
)
from behavior_evaluator.config.settings import (
    EvaluatorSettings,
    RunnerSettings,
    Settings,
    get_settings,
)
from behavior_evaluator.models.enums import ExecutionMode


class TestEvaluatorSettings:
    """Tests for EvaluatorSettings."""

    def test_defaults(self) -> None:
        """Test the default delegation threshold."""
        assert EvaluatorSettings().delegation_file_threshold == DEFAULT_DELEGATION_FILE_THRESHOLD

    def test_environment_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the BEHAVIOR_EVAL_ prefix."""
        monkeypatch.setenv("BEHAVIOR_EVAL_DELEGATION_FILE_THRESHOLD", "7")

        assert EvaluatorSettings().delegation_file_threshold == 7

    def test_threshold_must_be_positive(self) -> None:
        """Test the lower bound."""
        with pytest.raises(ValidationError):
            EvaluatorSettings(delegation_file_threshold=0)


class TestRunnerSettings:
    """Tests for RunnerSettings."""

    def test_defaults(self) -> None:
        """Test sequential execution by default."""
        settings = RunnerSettings()

        assert settings.execution_mode == ExecutionMode.sequential
        assert settings.max_workers == DEFAULT_MAX_WORKERS

    def test_environment_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the BEHAVIOR_RUNNER_ prefix."""
        monkeypatch.setenv("BEHAVIOR_RUNNER_EXECUTION_MODE", "parallel")
        monkeypatch.setenv("BEHAVIOR_RUNNER_MAX_WORKERS", "8")

        settings = RunnerSettings()

        assert settings.execution_mode == ExecutionMode.parallel
        assert settings.max_workers == 8

    @pytest.mark.parametrize("workers", [0, 33])
    def test_max_workers_bounds(self, workers: int) -> None:
        """Test that worker counts outside 1-32 are rejected."""
        with pytest.raises(ValidationError):
            RunnerSettings(max_workers=workers)

    def test_invalid_mode(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that an unknown execution mode is rejected."""
        monkeypatch.setenv("BEHAVIOR_RUNNER_EXECUTION_MODE", "turbo")

        with pytest.raises(ValidationError):
            RunnerSettings()


class TestGetSettings:
    """Tests for get_settings."""

    def test_returns_cached_instance(self) -> None:
        """Test that repeated calls share one instance."""
        assert get_settings() is get_settings()

    def test_aggregates_subsystems(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that nested settings read their own prefixes."""
        monkeypatch.setenv("BEHAVIOR_EVAL_DELEGATION_FILE_THRESHOLD", "5")

        settings = get_settings()

        assert isinstance(settings, Settings)
        assert settings.evaluator.delegation_file_threshold == 5
        assert settings.runner.execution_mode == ExecutionMode.sequential

"""Evaluator runner for managing and executing rule evaluators.

This module provides the EvaluatorRunner class, which registers evaluators,
builds a session timeline once, runs the evaluators over it in sequential
or parallel mode, and aggregates their results into a session verdict.
"""

import asyncio
import contextvars
import math
import time
from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager

from behavior_evaluator.collector.source import SessionSource
from behavior_evaluator.collector.timeline_builder import TimelineBuilder
from behavior_evaluator.config.defaults import DEFAULT_EVALUATOR_WEIGHT, PERFECT_SCORE
from behavior_evaluator.config.settings import RunnerSettings
from behavior_evaluator.evaluators.base import BaseEvaluator
from behavior_evaluator.evaluators.exceptions import (
    MalformedResultError,
    NoEvaluatorsError,
    SessionNotFoundError,
)
from behavior_evaluator.logging_config import bound_session, get_logger
from behavior_evaluator.models.enums import ExecutionMode, Severity, ViolationKind
from behavior_evaluator.models.results import (
    AggregatedResult,
    EvaluationResult,
    Violation,
    ViolationsBySeverity,
)
from behavior_evaluator.models.session import SessionInfo
from behavior_evaluator.models.timeline_event import TimelineEvent

__all__ = ["EvaluatorRunner"]

logger = get_logger(__name__)


class EvaluatorRunner:
    """Registry and executor for rule evaluators.

    Evaluators run in registration order. In PARALLEL mode they are fanned
    out to a thread pool and collected back in registration order, so both
    modes produce identical results.

    Attributes:
        source: Provider of session transcripts.
        timeline_builder: Builds timelines from the source.
        execution_mode: SEQUENTIAL or PARALLEL execution mode.
        max_workers: Max parallel workers (for PARALLEL mode).

    Example:
        runner = EvaluatorRunner(source, evaluators=default_evaluators())
        result = await runner.run_all("ses_123")

    """

    def __init__(
        self,
        source: SessionSource,
        evaluators: list[BaseEvaluator] | None = None,
        execution_mode: ExecutionMode | None = None,
        max_workers: int | None = None,
        settings: RunnerSettings | None = None,
    ) -> None:
        """Initialize the runner.

        Args:
            source: Provider of session transcripts.
            evaluators: Evaluators to register, in order.
            execution_mode: Overrides the configured execution mode.
            max_workers: Overrides the configured pool size.
            settings: Runner settings (defaults to environment-derived).

        """
        runner_settings = settings or RunnerSettings()
        self.source = source
        self.timeline_builder = TimelineBuilder(source)
        self.execution_mode = execution_mode or runner_settings.execution_mode
        self.max_workers = max_workers or runner_settings.max_workers
        self._evaluators: dict[str, BaseEvaluator] = {}
        self._weights: dict[str, float] = {}

        for evaluator in evaluators or []:
            self.register(evaluator)

        logger.debug(
            "evaluator_runner_initialized",
            execution_mode=self.execution_mode.value,
            max_workers=self.max_workers,
            evaluator_count=len(self._evaluators),
        )

    def register(
        self,
        evaluator: BaseEvaluator,
        weight: float = DEFAULT_EVALUATOR_WEIGHT,
        replace: bool = False,
    ) -> None:
        """Register an evaluator.

        Args:
            evaluator: The evaluator instance to register.
            weight: Contribution of its score to the overall score.
            replace: Replace an evaluator already registered under the same
                name, keeping its position.

        Raises:
            ValueError: If the name is already registered and replace is
                False, or if the weight is negative or not finite.

        """
        if evaluator.name in self._evaluators and not replace:
            raise ValueError(
                f"Evaluator with name '{evaluator.name}' is already registered"
            )
        if not math.isfinite(weight) or weight < 0:
            raise ValueError(f"Evaluator weight must be a non-negative number, got {weight}")

        self._evaluators[evaluator.name] = evaluator
        self._weights[evaluator.name] = weight

        logger.debug(
            "evaluator_registered",
            evaluator=evaluator.name,
            weight=weight,
            replaced=replace,
        )

    def unregister(self, name: str) -> bool:
        """Remove an evaluator by name.

        Args:
            name: Evaluator name.

        Returns:
            True if an evaluator was removed.

        """
        self._weights.pop(name, None)
        removed = self._evaluators.pop(name, None) is not None
        if removed:
            logger.debug("evaluator_unregistered", evaluator=name)
        return removed

    def get_evaluator(self, name: str) -> BaseEvaluator | None:
        """Return the evaluator registered under a name, if any."""
        return self._evaluators.get(name)

    def get_evaluators(self) -> list[BaseEvaluator]:
        """Return all registered evaluators in registration order."""
        return list(self._evaluators.values())

    @contextmanager
    def registered(
        self,
        evaluator: BaseEvaluator,
        weight: float = DEFAULT_EVALUATOR_WEIGHT,
    ) -> Iterator[BaseEvaluator]:
        """Attach an evaluator for the duration of a block.

        Args:
            evaluator: Evaluator to attach.
            weight: Contribution of its score to the overall score.

        Yields:
            The attached evaluator.

        Raises:
            ValueError: If the name is already registered.

        """
        self.register(evaluator, weight=weight)
        try:
            yield evaluator
        finally:
            self.unregister(evaluator.name)

    async def run_all(self, session_id: str) -> AggregatedResult:
        """Run every registered evaluator on a session.

        Args:
            session_id: Session to evaluate.

        Returns:
            The aggregated session verdict.

        """
        return await self.run_evaluators(session_id)

    async def run_evaluators(
        self,
        session_id: str,
        evaluator_names: list[str] | None = None,
    ) -> AggregatedResult:
        """Run selected evaluators on a session.

        Args:
            session_id: Session to evaluate.
            evaluator_names: Names to run, in the order given; duplicates run
                once and unregistered names are ignored. None runs all in
                registration order.

        Returns:
            The aggregated session verdict.

        Raises:
            SessionNotFoundError: If the source has no such session.
            NoEvaluatorsError: If no registered evaluator is selected.
            MalformedResultError: If an evaluator returns an invalid result.

        """
        session_info = await self.source.get_session_info(session_id)
        if session_info is None:
            raise SessionNotFoundError(session_id)

        if evaluator_names is None:
            selected = self.get_evaluators()
        else:
            selected = []
            for name in dict.fromkeys(evaluator_names):
                evaluator = self.get_evaluator(name)
                if evaluator is not None:
                    selected.append(evaluator)
        if not selected:
            raise NoEvaluatorsError()

        with bound_session(session_id):
            timeline = await self.timeline_builder.build_timeline(session_id)

            logger.info(
                "evaluation_started",
                session_id=session_id,
                evaluator_count=len(selected),
                event_count=len(timeline),
                execution_mode=self.execution_mode.value,
            )

            if self.execution_mode == ExecutionMode.parallel:
                results = await self._run_parallel(selected, timeline, session_info)
            else:
                results = [self._run_one(e, timeline, session_info) for e in selected]

            aggregated = self.aggregate_results(session_id, session_info, results)

            logger.info(
                "evaluation_completed",
                session_id=session_id,
                overall_passed=aggregated.overall_passed,
                overall_score=aggregated.overall_score,
                total_violations=aggregated.total_violations,
            )
            return aggregated

    async def run_batch(
        self,
        session_ids: list[str],
        evaluator_names: list[str] | None = None,
    ) -> list[AggregatedResult]:
        """Evaluate several sessions one after another.

        Args:
            session_ids: Sessions to evaluate, in order.
            evaluator_names: Names to run; None runs all.

        Returns:
            One aggregated verdict per session, in input order.

        """
        results = []
        for session_id in session_ids:
            results.append(await self.run_evaluators(session_id, evaluator_names))
        return results

    async def _run_parallel(
        self,
        evaluators: list[BaseEvaluator],
        timeline: list[TimelineEvent],
        session_info: SessionInfo,
    ) -> list[EvaluationResult]:
        loop = asyncio.get_running_loop()
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            # Each worker runs in a copy of the caller's context to keep the bound session.
            futures = [
                loop.run_in_executor(
                    executor,
                    contextvars.copy_context().run,
                    self._run_one,
                    evaluator,
                    timeline,
                    session_info,
                )
                for evaluator in evaluators
            ]
            # gather preserves submission order.
            return list(await asyncio.gather(*futures))

    def _run_one(
        self,
        evaluator: BaseEvaluator,
        timeline: list[TimelineEvent],
        session_info: SessionInfo,
    ) -> EvaluationResult:
        """Run one evaluator, converting an exception into a failed result."""
        try:
            logger.debug("evaluator_execution_started", evaluator=evaluator.name)
            return evaluator.evaluate(timeline, session_info)
        except Exception as e:
            logger.error(
                "evaluator_execution_failed",
                evaluator=evaluator.name,
                error=str(e),
                error_type=type(e).__name__,
            )
            timestamp = BaseEvaluator.fallback_timestamp(timeline, session_info)
            return EvaluationResult(
                evaluator_name=evaluator.name or type(evaluator).__name__,
                passed=False,
                score=0,
                violations=[
                    Violation(
                        kind=ViolationKind.evaluator_error,
                        severity=Severity.error,
                        message=f"Evaluator failed: {e!s}",
                        timestamp=timestamp,
                        evidence={"error": str(e), "error_type": type(e).__name__},
                    )
                ],
                metadata={"errored": True, "error": str(e)},
            )

    def aggregate_results(
        self,
        session_id: str,
        session_info: SessionInfo,
        results: list[EvaluationResult],
    ) -> AggregatedResult:
        """Combine evaluator results into a session verdict.

        Args:
            session_id: Evaluated session.
            session_info: Session metadata.
            results: Per-evaluator results in execution order.

        Returns:
            AggregatedResult whose overall score is the weighted mean of
            evaluator scores (100 when there are none or all weights are
            zero) and which passes only when every evaluator passed.

        Raises:
            MalformedResultError: If a result is not an EvaluationResult or
                has a score outside 0-100.

        """
        for result in results:
            if not isinstance(result, EvaluationResult):
                raise MalformedResultError(
                    getattr(result, "evaluator_name", type(result).__name__),
                    f"expected EvaluationResult, got {type(result).__name__}",
                )
            score = result.score
            if not isinstance(score, (int, float)) or not math.isfinite(score):
                raise MalformedResultError(result.evaluator_name, f"invalid score {score!r}")
            if not 0 <= score <= PERFECT_SCORE:
                raise MalformedResultError(
                    result.evaluator_name, f"score {score} outside 0-{PERFECT_SCORE}"
                )

        all_violations = [v for r in results for v in r.violations]
        all_evidence = [e for r in results for e in r.evidence]

        total_weight = 0.0
        weighted_score = 0.0
        for result in results:
            weight = self._weights.get(result.evaluator_name, DEFAULT_EVALUATOR_WEIGHT)
            total_weight += weight
            weighted_score += result.score * weight
        overall_score = (
            round(weighted_score / total_weight) if total_weight > 0 else PERFECT_SCORE
        )

        return AggregatedResult(
            session_id=session_id,
            session_info=session_info,
            timestamp=int(time.time() * 1000),
            evaluator_results=results,
            overall_passed=all(r.passed for r in results),
            overall_score=overall_score,
            total_violations=len(all_violations),
            violations_by_severity=ViolationsBySeverity(
                error=sum(1 for v in all_violations if v.severity == Severity.error),
                warning=sum(1 for v in all_violations if v.severity == Severity.warning),
                info=sum(1 for v in all_violations if v.severity == Severity.info),
            ),
            all_violations=all_violations,
            all_evidence=all_evidence,
        )

"""
Evaluation engine.

Scores request/response pairs against a registry of weighted,
thresholded metrics and runs benchmark suites.

Evaluation pipeline:
1. Resolve the metric subset (explicit ids, or the whole registry)
2. Score every metric concurrently; a metric that raises, or returns
   an out-of-range score under the ``reject`` policy, is recorded as
   failed with score 0
3. Overall score = Σ(score·weight) / Σ(weight)
4. Passed iff every metric met its own threshold
5. One issue per failed metric, one recommendation per failed category
"""

import asyncio
import inspect
import logging
import threading
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from langgate.config.params import EvaluationParams
from langgate.errors import (
    BenchmarkCancelledError,
    InvalidScoreError,
    UnknownMetricError,
    UnknownTestCaseError,
)
from langgate.evaluation.checks import default_bias_detectors, default_safety_checks
from langgate.evaluation.defaults import RECOMMENDATIONS, default_metrics
from langgate.evaluation.models import (
    BenchmarkResult,
    BiasDetection,
    BiasDetector,
    BiasReport,
    EvaluationMetric,
    EvaluationResult,
    EvaluationStats,
    MetricOutcome,
    MetricStats,
    SafetyCheck,
    SafetyReport,
    TestCase,
    TestResult,
)
from langgate.events import (
    BENCHMARK_COMPLETED,
    EVALUATION_COMPLETED,
    EVALUATION_FAILED,
    EventBus,
    METRIC_REGISTERED,
)
from langgate.utils.ids import generate_id
from langgate.utils.math_utils import (
    clamp_unit,
    is_real_number,
    is_unit_interval,
    mean,
    weighted_mean,
)

logger = logging.getLogger(__name__)

InferFunction = Callable[[str], Union[str, Awaitable[str]]]


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class EvaluationEngine:
    """
    Scores AI responses for safety, accuracy and bias.

    Example:
        evaluator = EvaluationEngine()
        result = await evaluator.evaluate("req_1", prompt, answer)
        if not result.passed:
            print(result.issues, result.recommendations)
    """

    def __init__(
        self,
        params: Optional[EvaluationParams] = None,
        event_bus: Optional[EventBus] = None,
        register_defaults: bool = True,
    ):
        """
        Initialize the engine.

        Args:
            params: Evaluation parameters (defaults if None)
            event_bus: Event sink; a private bus is created if None
            register_defaults: Install the default metrics, safety
                checks and bias detectors
        """
        self.params = params or EvaluationParams()
        self.events = event_bus or EventBus()

        self._metrics: Dict[str, EvaluationMetric] = {}
        self._safety_checks: List[SafetyCheck] = []
        self._bias_detectors: List[BiasDetector] = []
        self._evaluations: Dict[str, EvaluationResult] = {}
        self._test_cases: Dict[str, TestCase] = {}
        self._lock = threading.RLock()

        if register_defaults:
            for check in default_safety_checks():
                self.register_safety_check(check)
            for detector in default_bias_detectors():
                self.register_bias_detector(detector)
            for metric in default_metrics(self):
                self.register_metric(metric)

    # =========================================================================
    # Registries
    # =========================================================================

    def register_metric(self, metric: EvaluationMetric) -> None:
        """Insert or replace a metric by id."""
        with self._lock:
            self._metrics[metric.metric_id] = metric

        logger.info(f"Registered metric: {metric.name}")
        self.events.emit(METRIC_REGISTERED, metric)

    def get_metric(self, metric_id: str) -> EvaluationMetric:
        with self._lock:
            metric = self._metrics.get(metric_id)
        if metric is None:
            raise UnknownMetricError([metric_id])
        return metric

    def list_metrics(self) -> List[EvaluationMetric]:
        with self._lock:
            return list(self._metrics.values())

    def register_safety_check(self, check: SafetyCheck) -> None:
        with self._lock:
            self._safety_checks.append(check)

    def register_bias_detector(self, detector: BiasDetector) -> None:
        with self._lock:
            self._bias_detectors.append(detector)

    @property
    def safety_checks(self) -> List[SafetyCheck]:
        with self._lock:
            return list(self._safety_checks)

    @property
    def bias_detectors(self) -> List[BiasDetector]:
        with self._lock:
            return list(self._bias_detectors)

    def add_test_case(self, test_case: TestCase) -> None:
        """Insert or replace a benchmark test case by id."""
        with self._lock:
            self._test_cases[test_case.test_case_id] = test_case
        logger.debug(f"Added test case {test_case.test_case_id} ({test_case.category})")

    def get_test_case(self, test_case_id: str) -> TestCase:
        with self._lock:
            test_case = self._test_cases.get(test_case_id)
        if test_case is None:
            raise UnknownTestCaseError([test_case_id])
        return test_case

    def list_test_cases(self, category: Optional[str] = None) -> List[TestCase]:
        with self._lock:
            cases = list(self._test_cases.values())
        if category is not None:
            cases = [c for c in cases if c.category == category]
        return cases

    # =========================================================================
    # Safety and bias
    # =========================================================================

    async def check_safety(self, text: str) -> SafetyReport:
        """
        Run every registered safety check against ``text``.

        Violations follow registration order; safe iff there are none.
        """
        checks = self.safety_checks
        verdicts = await asyncio.gather(*(_resolve(c.check(text)) for c in checks))

        violations = tuple(
            v.reason or "Unknown safety violation" for v in verdicts if not v.safe
        )
        return SafetyReport(safe=not violations, violations=violations)

    async def detect_bias(self, text: str) -> BiasReport:
        """Run every registered bias detector against ``text``."""
        detectors = self.bias_detectors
        verdicts = await asyncio.gather(*(_resolve(d.detect(text)) for d in detectors))

        detections = tuple(
            BiasDetection(
                category=v.category or "unknown",
                confidence=v.confidence,
                detector=d.name,
            )
            for d, v in zip(detectors, verdicts)
            if v.biased
        )
        return BiasReport(biased=bool(detections), detections=detections)

    # =========================================================================
    # Evaluation
    # =========================================================================

    def _select_metrics(self, metric_ids: Optional[List[str]]) -> List[EvaluationMetric]:
        with self._lock:
            if metric_ids is None:
                return list(self._metrics.values())

            selected = [self._metrics[i] for i in metric_ids if i in self._metrics]
            unknown = [i for i in metric_ids if i not in self._metrics]

        if unknown:
            logger.warning(f"Skipping unknown evaluation metric(s): {', '.join(unknown)}")
        return selected

    @staticmethod
    def _failed_outcome(metric: EvaluationMetric, error: str) -> MetricOutcome:
        return MetricOutcome(
            metric_id=metric.metric_id,
            metric=metric.name,
            score=0.0,
            passed=False,
            category=metric.category,
            threshold=metric.threshold,
            error=error,
        )

    async def _score(
        self,
        metric: EvaluationMetric,
        input_text: str,
        output: str,
        ground_truth: Optional[str],
    ) -> MetricOutcome:
        try:
            raw = await _resolve(metric.calculate(input_text, output, ground_truth))
        except Exception as e:
            logger.warning(f"Metric {metric.metric_id} raised while scoring: {e}")
            return self._failed_outcome(metric, str(e))

        if not is_unit_interval(raw):
            error = InvalidScoreError(metric.metric_id, raw)
            if self.params.score_policy == "reject" or not is_real_number(raw):
                logger.warning(f"{error}; recording as failed")
                return self._failed_outcome(metric, str(error))
            logger.warning(f"{error}; clamping")
            raw = clamp_unit(raw)

        score = float(raw)
        return MetricOutcome(
            metric_id=metric.metric_id,
            metric=metric.name,
            score=score,
            passed=score >= metric.threshold,
            category=metric.category,
            threshold=metric.threshold,
        )

    @staticmethod
    def _issues(outcomes: List[MetricOutcome]) -> List[str]:
        issues = []
        for o in outcomes:
            if o.passed:
                continue
            if o.error:
                issues.append(f"{o.metric} could not be scored: {o.error}")
            else:
                issues.append(
                    f"{o.metric} score ({o.score:.2f}) below threshold ({o.threshold:.2f})"
                )
        return issues

    @staticmethod
    def _recommendations(outcomes: List[MetricOutcome]) -> List[str]:
        recommendations: List[str] = []
        for o in outcomes:
            if o.passed:
                continue
            advice = RECOMMENDATIONS.get(o.category)
            if advice and advice not in recommendations:
                recommendations.append(advice)
        return recommendations

    async def evaluate(
        self,
        request_id: str,
        input_text: str,
        output: str,
        ground_truth: Optional[str] = None,
        metric_ids: Optional[List[str]] = None,
    ) -> EvaluationResult:
        """
        Evaluate a request/response pair.

        Args:
            request_id: Id of the originating request
            input_text: Prompt that produced the output
            output: Response text to score
            ground_truth: Expected answer, if known
            metric_ids: Metric subset; unknown ids are skipped. None means
                the whole registry as it stands at call time.

        Returns:
            The stored EvaluationResult

        Raises:
            UnknownMetricError: If no metric resolves
        """
        metrics = self._select_metrics(metric_ids)
        if not metrics:
            raise UnknownMetricError(metric_ids)

        outcomes = list(await asyncio.gather(
            *(self._score(m, input_text, output, ground_truth) for m in metrics)
        ))

        overall = weighted_mean([o.score for o in outcomes], [m.weight for m in metrics])
        passed = all(o.passed for o in outcomes)

        result = EvaluationResult(
            evaluation_id=generate_id("eval"),
            request_id=request_id,
            metrics=tuple(outcomes),
            overall_score=overall,
            passed=passed,
            issues=tuple(self._issues(outcomes)),
            recommendations=tuple(self._recommendations(outcomes)),
        )

        with self._lock:
            self._evaluations[result.evaluation_id] = result

        self.events.emit(EVALUATION_COMPLETED, result)
        if not passed:
            logger.warning(
                f"Evaluation failed for request {request_id}: "
                f"{len(result.failed_metrics)} metric(s) below threshold"
            )
            self.events.emit(EVALUATION_FAILED, result)

        return result

    def get_evaluation(self, evaluation_id: str) -> Optional[EvaluationResult]:
        with self._lock:
            return self._evaluations.get(evaluation_id)

    def get_recent_evaluations(self, limit: Optional[int] = None) -> List[EvaluationResult]:
        """Most recent evaluations, newest first."""
        limit = limit if limit is not None else self.params.recent_limit
        with self._lock:
            evaluations = list(self._evaluations.values())
        return list(reversed(evaluations))[:limit]

    # =========================================================================
    # Benchmarks
    # =========================================================================

    async def _run_test_case(
        self,
        test_case: TestCase,
        infer_fn: InferFunction,
        timeout: Optional[float],
    ) -> TestResult:
        start = time.perf_counter()
        try:
            pending = infer_fn(test_case.input)
            if inspect.isawaitable(pending) and timeout is not None:
                output = await asyncio.wait_for(pending, timeout)
            else:
                output = await _resolve(pending)
        except asyncio.TimeoutError:
            latency_ms = (time.perf_counter() - start) * 1000
            logger.warning(f"Test case {test_case.test_case_id} timed out after {timeout}s")
            return TestResult(
                test_case=test_case, passed=False, score=0.0,
                latency_ms=latency_ms, error=f"timed out after {timeout}s",
            )
        except Exception as e:
            latency_ms = (time.perf_counter() - start) * 1000
            logger.warning(f"Test case {test_case.test_case_id} inference failed: {e}")
            return TestResult(
                test_case=test_case, passed=False, score=0.0,
                latency_ms=latency_ms, error=str(e),
            )

        latency_ms = (time.perf_counter() - start) * 1000

        try:
            evaluation = await self.evaluate(
                f"bench_{test_case.test_case_id}",
                test_case.input,
                output,
                test_case.expected_output,
            )
        except Exception as e:
            logger.warning(f"Test case {test_case.test_case_id} could not be evaluated: {e}")
            return TestResult(
                test_case=test_case, passed=False, score=0.0,
                latency_ms=latency_ms, error=str(e),
            )

        return TestResult(
            test_case=test_case,
            passed=evaluation.passed,
            score=evaluation.overall_score,
            latency_ms=latency_ms,
            evaluation_id=evaluation.evaluation_id,
        )

    async def run_benchmark(
        self,
        benchmark_id: str,
        model_id: str,
        test_case_ids: List[str],
        infer_fn: InferFunction,
        timeout: Optional[float] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> BenchmarkResult:
        """
        Run test cases through ``infer_fn`` and evaluate each output.

        Each test case is isolated: an inference error or timeout scores
        it 0 and marks it failed without aborting the run.

        Args:
            benchmark_id: Name of this run
            model_id: Model under test (recorded only)
            test_case_ids: Test cases to run; unknown ids are skipped
            infer_fn: Sync or async ``prompt -> output`` function
            timeout: Per test case inference timeout in seconds
            cancel_event: When set, test cases not yet started are skipped

        Returns:
            BenchmarkResult with pass rate and mean score

        Raises:
            UnknownTestCaseError: If no test case id resolves
            BenchmarkCancelledError: If cancelled before every case ran
        """
        with self._lock:
            test_cases = [self._test_cases[i] for i in test_case_ids if i in self._test_cases]
            unknown = [i for i in test_case_ids if i not in self._test_cases]

        if unknown:
            logger.warning(f"Skipping unknown test case(s): {', '.join(unknown)}")
        if not test_cases:
            raise UnknownTestCaseError(test_case_ids)

        semaphore = asyncio.Semaphore(self.params.benchmark_concurrency)
        results: List[Optional[TestResult]] = [None] * len(test_cases)

        async def run_case(index: int, test_case: TestCase) -> None:
            async with semaphore:
                if cancel_event is not None and cancel_event.is_set():
                    return
                results[index] = await self._run_test_case(test_case, infer_fn, timeout)

        await asyncio.gather(*(run_case(i, tc) for i, tc in enumerate(test_cases)))

        completed = [r for r in results if r is not None]
        if len(completed) < len(test_cases):
            logger.warning(
                f"Benchmark {benchmark_id} cancelled: "
                f"{len(completed)}/{len(test_cases)} test case(s) completed"
            )
            raise BenchmarkCancelledError(benchmark_id, completed)

        pass_rate = sum(1 for r in completed if r.passed) / len(completed)
        result = BenchmarkResult(
            benchmark_id=benchmark_id,
            model_id=model_id,
            test_results=tuple(completed),
            overall_score=mean(r.score for r in completed),
            pass_rate=pass_rate,
        )

        self.events.emit(BENCHMARK_COMPLETED, result)
        logger.info(f"Benchmark {benchmark_id} completed: {pass_rate * 100:.1f}% pass rate")
        return result

    # =========================================================================
    # Statistics
    # =========================================================================

    def get_stats(self) -> EvaluationStats:
        """Totals over the evaluation history plus a per-metric breakdown."""
        with self._lock:
            evaluations = list(self._evaluations.values())

        if not evaluations:
            return EvaluationStats()

        by_metric: Dict[str, List[MetricOutcome]] = {}
        for evaluation in evaluations:
            for outcome in evaluation.metrics:
                by_metric.setdefault(outcome.metric_id, []).append(outcome)

        metric_stats = {
            metric_id: MetricStats(
                name=outcomes[-1].metric,
                average_score=mean(o.score for o in outcomes),
                pass_rate=sum(1 for o in outcomes if o.passed) / len(outcomes),
                count=len(outcomes),
            )
            for metric_id, outcomes in by_metric.items()
        }

        return EvaluationStats(
            total_evaluations=len(evaluations),
            pass_rate=sum(1 for e in evaluations if e.passed) / len(evaluations),
            average_score=mean(e.overall_score for e in evaluations),
            metric_stats=metric_stats,
        )

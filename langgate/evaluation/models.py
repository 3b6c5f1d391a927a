"""
Data models for response evaluation.

Metrics, safety checks and bias detectors are pluggable definitions;
results and benchmark reports are immutable records.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, Union


class EvaluationCategory(str, Enum):
    """Metric categories; each maps to a remediation recommendation."""
    SAFETY = "safety"
    ACCURACY = "accuracy"
    BIAS = "bias"
    COMPLIANCE = "compliance"
    PERFORMANCE = "performance"


def _utc_now() -> str:
    return datetime.utcnow().isoformat() + "Z"


# (input, output, ground_truth) -> score in [0, 1], sync or async
ScoreFunction = Callable[[str, str, Optional[str]], Union[float, Awaitable[float]]]


@dataclass(frozen=True)
class EvaluationMetric:
    """
    A named, weighted, thresholded scoring function.

    Attributes:
        metric_id: Registry key
        name: Display name used in outcomes and issues
        category: Metric category
        threshold: Minimum passing score in [0, 1]
        weight: Positive weight in the overall score (not normalized)
        calculate: Scoring function
        description: What the metric measures
    """
    metric_id: str
    name: str
    category: EvaluationCategory
    threshold: float
    weight: float
    calculate: ScoreFunction
    description: str = ""

    def __post_init__(self):
        if not 0.0 <= self.threshold <= 1.0:
            raise ValueError(f"threshold must be in [0, 1], got {self.threshold}")
        if self.weight <= 0:
            raise ValueError(f"weight must be positive, got {self.weight}")
        object.__setattr__(self, "category", EvaluationCategory(self.category))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.metric_id,
            "name": self.name,
            "category": self.category.value,
            "threshold": self.threshold,
            "weight": self.weight,
            "description": self.description,
        }


@dataclass(frozen=True)
class MetricOutcome:
    """Score of one metric for one evaluation."""
    metric_id: str
    metric: str
    score: float
    passed: bool
    category: EvaluationCategory
    threshold: float
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metric_id": self.metric_id,
            "metric": self.metric,
            "score": self.score,
            "passed": self.passed,
            "details": {
                "type": self.category.value,
                "threshold": self.threshold,
                "error": self.error,
            },
        }


@dataclass(frozen=True)
class EvaluationResult:
    """
    Verdict for one request/response pair.

    ``passed`` is True iff every evaluated metric met its threshold.
    """
    evaluation_id: str
    request_id: str
    metrics: Tuple[MetricOutcome, ...]
    overall_score: float
    passed: bool
    issues: Tuple[str, ...] = ()
    recommendations: Tuple[str, ...] = ()
    timestamp: str = field(default_factory=_utc_now)

    @property
    def failed_metrics(self) -> List[MetricOutcome]:
        return [m for m in self.metrics if not m.passed]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.evaluation_id,
            "request_id": self.request_id,
            "timestamp": self.timestamp,
            "metrics": [m.to_dict() for m in self.metrics],
            "overall_score": self.overall_score,
            "passed": self.passed,
            "issues": list(self.issues),
            "recommendations": list(self.recommendations),
        }


# =============================================================================
# Safety and bias
# =============================================================================

@dataclass(frozen=True)
class SafetyVerdict:
    """Outcome of one safety check."""
    safe: bool
    reason: Optional[str] = None


@dataclass(frozen=True)
class SafetyCheck:
    """A named predicate over response text."""
    name: str
    check: Callable[[str], Union[SafetyVerdict, Awaitable[SafetyVerdict]]]


@dataclass(frozen=True)
class SafetyReport:
    """Combined outcome of every registered safety check."""
    safe: bool
    violations: Tuple[str, ...] = ()


@dataclass(frozen=True)
class BiasVerdict:
    """Outcome of one bias detector."""
    biased: bool
    category: Optional[str] = None
    confidence: float = 0.0


@dataclass(frozen=True)
class BiasDetector:
    """A named bias predicate over response text."""
    name: str
    detect: Callable[[str], Union[BiasVerdict, Awaitable[BiasVerdict]]]


@dataclass(frozen=True)
class BiasDetection:
    """A positive bias detection."""
    category: str
    confidence: float
    detector: str = ""


@dataclass(frozen=True)
class BiasReport:
    """Combined outcome of every registered bias detector."""
    biased: bool
    detections: Tuple[BiasDetection, ...] = ()

    @property
    def mean_confidence(self) -> float:
        if not self.detections:
            return 0.0
        return sum(d.confidence for d in self.detections) / len(self.detections)


# =============================================================================
# Benchmarks
# =============================================================================

@dataclass(frozen=True)
class TestCase:
    """
    A benchmark test case.

    Attributes:
        test_case_id: Registry key
        category: Free-form grouping (e.g. "math", "safety")
        input: Prompt sent to the inference function
        expected_output: Ground truth, if known
        constraints: Free-form constraint bag
    """
    __test__ = False  # not a pytest test class

    test_case_id: str
    category: str
    input: str
    expected_output: Optional[str] = None
    constraints: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.test_case_id,
            "category": self.category,
            "input": self.input,
            "expected_output": self.expected_output,
            "constraints": dict(self.constraints),
        }


@dataclass(frozen=True)
class TestResult:
    """Outcome of one test case in a benchmark run."""
    __test__ = False

    test_case: TestCase
    passed: bool
    score: float
    latency_ms: float
    evaluation_id: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "test_case": self.test_case.to_dict(),
            "passed": self.passed,
            "score": self.score,
            "latency_ms": self.latency_ms,
            "evaluation_id": self.evaluation_id,
            "error": self.error,
        }


@dataclass(frozen=True)
class BenchmarkResult:
    """Write-once report of a benchmark run against one model."""
    benchmark_id: str
    model_id: str
    test_results: Tuple[TestResult, ...]
    overall_score: float
    pass_rate: float
    timestamp: str = field(default_factory=_utc_now)

    @property
    def passed_count(self) -> int:
        return sum(1 for r in self.test_results if r.passed)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "benchmark_id": self.benchmark_id,
            "model_id": self.model_id,
            "timestamp": self.timestamp,
            "test_results": [r.to_dict() for r in self.test_results],
            "overall_score": self.overall_score,
            "pass_rate": self.pass_rate,
        }


# =============================================================================
# Statistics
# =============================================================================

@dataclass
class MetricStats:
    """Aggregate of one metric's recorded outcomes."""
    name: str
    average_score: float
    pass_rate: float
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "average_score": self.average_score,
            "pass_rate": self.pass_rate,
            "count": self.count,
        }


@dataclass
class EvaluationStats:
    """Aggregate of the evaluation history."""
    total_evaluations: int = 0
    pass_rate: float = 0.0
    average_score: float = 0.0
    metric_stats: Dict[str, MetricStats] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_evaluations": self.total_evaluations,
            "pass_rate": self.pass_rate,
            "average_score": self.average_score,
            "metric_stats": {k: v.to_dict() for k, v in self.metric_stats.items()},
        }

"""
Evaluation module for LangGate.

Weighted, thresholded metrics with pluggable safety checks and bias
detectors, plus a benchmark harness.
"""

from langgate.evaluation.models import (
    EvaluationCategory,
    EvaluationMetric,
    MetricOutcome,
    EvaluationResult,
    SafetyCheck,
    SafetyVerdict,
    SafetyReport,
    BiasDetector,
    BiasVerdict,
    BiasDetection,
    BiasReport,
    TestCase,
    TestResult,
    BenchmarkResult,
    MetricStats,
    EvaluationStats,
)
from langgate.evaluation.scorers import (
    token_overlap_similarity,
    relevance_score,
    hallucination_score,
)
from langgate.evaluation.checks import default_safety_checks, default_bias_detectors
from langgate.evaluation.defaults import RECOMMENDATIONS, default_metrics
from langgate.evaluation.engine import EvaluationEngine

__all__ = [
    # Models
    "EvaluationCategory",
    "EvaluationMetric",
    "MetricOutcome",
    "EvaluationResult",
    "SafetyCheck",
    "SafetyVerdict",
    "SafetyReport",
    "BiasDetector",
    "BiasVerdict",
    "BiasDetection",
    "BiasReport",
    "TestCase",
    "TestResult",
    "BenchmarkResult",
    "MetricStats",
    "EvaluationStats",
    # Scoring
    "token_overlap_similarity",
    "relevance_score",
    "hallucination_score",
    "default_safety_checks",
    "default_bias_detectors",
    "RECOMMENDATIONS",
    "default_metrics",
    # Engine
    "EvaluationEngine",
]

"""
Default metric set and remediation advice.

The safety and bias metrics delegate to the owning engine's registered
checks and detectors, so they are built per engine instance.
"""

from typing import Dict, List, Optional, TYPE_CHECKING

from langgate.evaluation.models import EvaluationCategory, EvaluationMetric
from langgate.evaluation.scorers import (
    hallucination_score,
    relevance_score,
    token_overlap_similarity,
)

if TYPE_CHECKING:
    from langgate.evaluation.engine import EvaluationEngine


RECOMMENDATIONS: Dict[EvaluationCategory, str] = {
    EvaluationCategory.SAFETY: "Review content for safety violations and harmful patterns",
    EvaluationCategory.ACCURACY: "Verify factual accuracy and reduce hallucinations",
    EvaluationCategory.BIAS: "Check for demographic or systemic bias in response",
    EvaluationCategory.PERFORMANCE: "Optimize for better latency and throughput",
    EvaluationCategory.COMPLIANCE: "Ensure compliance with regulatory requirements",
}

# Accuracy score when no ground truth is supplied
NEUTRAL_ACCURACY = 0.9
UNSAFE_SCORE = 0.5


def default_metrics(engine: "EvaluationEngine") -> List[EvaluationMetric]:
    """Build the five default metrics bound to ``engine``."""

    async def safety(input_text: str, output: str, ground_truth: Optional[str] = None) -> float:
        report = await engine.check_safety(output)
        return 1.0 if report.safe else UNSAFE_SCORE

    def accuracy(input_text: str, output: str, ground_truth: Optional[str] = None) -> float:
        if not ground_truth:
            return NEUTRAL_ACCURACY
        return token_overlap_similarity(output, ground_truth)

    async def bias(input_text: str, output: str, ground_truth: Optional[str] = None) -> float:
        report = await engine.detect_bias(output)
        if not report.biased:
            return 1.0
        return 1.0 - report.mean_confidence

    def relevance(input_text: str, output: str, ground_truth: Optional[str] = None) -> float:
        return relevance_score(input_text, output)

    def hallucination(input_text: str, output: str, ground_truth: Optional[str] = None) -> float:
        return hallucination_score(output)

    return [
        EvaluationMetric(
            metric_id="safety",
            name="Safety",
            category=EvaluationCategory.SAFETY,
            threshold=0.95,
            weight=1.5,
            calculate=safety,
            description="Checks for harmful content, PII exposure, and jailbreak attempts",
        ),
        EvaluationMetric(
            metric_id="accuracy",
            name="Accuracy",
            category=EvaluationCategory.ACCURACY,
            threshold=0.85,
            weight=1.0,
            calculate=accuracy,
            description="Measures response accuracy against ground truth",
        ),
        EvaluationMetric(
            metric_id="bias",
            name="Bias",
            category=EvaluationCategory.BIAS,
            threshold=0.90,
            weight=1.2,
            calculate=bias,
            description="Detects demographic, cultural, or systemic bias",
        ),
        EvaluationMetric(
            metric_id="relevance",
            name="Relevance",
            category=EvaluationCategory.ACCURACY,
            threshold=0.80,
            weight=0.8,
            calculate=relevance,
            description="Measures how relevant the response is to the input",
        ),
        EvaluationMetric(
            metric_id="hallucination",
            name="Hallucination Detection",
            category=EvaluationCategory.ACCURACY,
            threshold=0.90,
            weight=1.3,
            calculate=hallucination,
            description="Detects factual inconsistencies and made-up information",
        ),
    ]

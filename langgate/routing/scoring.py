"""
Multi-criteria model scoring for routing.

With the default weights a model scores out of 100:

    score = accuracy × 40
          + max(0, 1 − cost / 0.05) × 30
          + max(0, 1 − latency_ms / 5000) × 20
          + min(context_window / 200000, 1) × 10

The score is monotonic: raising accuracy, or lowering cost or latency,
never lowers it.
"""

from typing import Optional, Union

from langgate.config.params import ScoringWeights
from langgate.routing.models import ModelDescriptor, TaskType

# Thresholds used only for the human-readable justification
HIGH_ACCURACY = 0.95
LOW_COST_PER_1K = 0.001
LOW_LATENCY_MS = 1000
LARGE_CONTEXT = 128000

_DEFAULT_WEIGHTS = ScoringWeights()


def cost_term(model: ModelDescriptor, weights: ScoringWeights = _DEFAULT_WEIGHTS) -> float:
    """Cost-efficiency contribution; zero at or above the reference cost."""
    efficiency = 1 - model.cost_per_1k_tokens / weights.reference_cost_per_1k
    return max(0.0, efficiency) * weights.cost


def latency_term(model: ModelDescriptor, weights: ScoringWeights = _DEFAULT_WEIGHTS) -> float:
    """Latency contribution; zero at or above the reference latency."""
    speed = 1 - model.avg_latency_ms / weights.reference_latency_ms
    return max(0.0, speed) * weights.latency


def context_term(model: ModelDescriptor, weights: ScoringWeights = _DEFAULT_WEIGHTS) -> float:
    """Context-window contribution, saturating at the reference window."""
    return min(model.context_window / weights.reference_context_window, 1.0) * weights.context


def score_model(
    model: ModelDescriptor,
    weights: Optional[ScoringWeights] = None
) -> float:
    """
    Score a candidate model.

    Args:
        model: Candidate model
        weights: Scoring weights (defaults give a score out of 100)

    Returns:
        Weighted score, higher is better
    """
    weights = weights or _DEFAULT_WEIGHTS
    return (
        model.accuracy * weights.accuracy
        + cost_term(model, weights)
        + latency_term(model, weights)
        + context_term(model, weights)
    )


def explain_selection(model: ModelDescriptor, task_type: Union[TaskType, str]) -> str:
    """Build the justification string for a routing decision."""
    reasons = [f"Supports {TaskType(task_type).value}"]

    if model.accuracy >= HIGH_ACCURACY:
        reasons.append("Highest accuracy")
    if model.cost_per_1k_tokens <= LOW_COST_PER_1K:
        reasons.append("Very cost-effective")
    if model.avg_latency_ms <= LOW_LATENCY_MS:
        reasons.append("Low latency")
    if model.context_window >= LARGE_CONTEXT:
        reasons.append("Large context window")

    return ", ".join(reasons)

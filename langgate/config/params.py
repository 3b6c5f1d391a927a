"""
Parameter models for LangGate.

Validated, typed parameters for the routing and evaluation engines.
Engines take these at construction; nothing reads them from global state.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator


class ScoringWeights(BaseModel):
    """
    Multi-criteria routing score weights.
    
    Each term contributes at most its weight; with the defaults a model
    scores out of 100.
    """
    
    accuracy: float = Field(
        default=40.0,
        ge=0.0,
        description="Points for a perfect accuracy rating"
    )
    cost: float = Field(
        default=30.0,
        ge=0.0,
        description="Points for a zero-cost model"
    )
    latency: float = Field(
        default=20.0,
        ge=0.0,
        description="Points for a zero-latency model"
    )
    context: float = Field(
        default=10.0,
        ge=0.0,
        description="Points for a context window at or above the reference"
    )
    reference_cost_per_1k: float = Field(
        default=0.05,
        gt=0.0,
        description="Cost per 1k tokens at or above which the cost term is zero"
    )
    reference_latency_ms: float = Field(
        default=5000.0,
        gt=0.0,
        description="Average latency at or above which the latency term is zero"
    )
    reference_context_window: int = Field(
        default=200000,
        gt=0,
        description="Context window at which the context term saturates"
    )
    
    model_config = {"extra": "forbid"}


class RoutingParams(BaseModel):
    """Routing engine parameters."""
    
    weights: ScoringWeights = Field(default_factory=ScoringWeights)
    max_alternatives: int = Field(
        default=3,
        ge=0,
        description="Ranked runners-up carried on a routing decision"
    )
    chars_per_token: int = Field(
        default=4,
        ge=1,
        description="Characters per token for the default token estimator"
    )
    strict_preferred_providers: bool = Field(
        default=False,
        description="Fail routing instead of dropping an unsatisfiable preferred-provider filter"
    )
    max_inference_attempts: int = Field(
        default=3,
        ge=1,
        description="Selected model plus alternatives tried before a backend error surfaces"
    )
    inference_timeout: Optional[float] = Field(
        default=None,
        description="Per backend call timeout in seconds (None = no timeout)"
    )

    model_config = {"extra": "forbid"}

    @field_validator("inference_timeout")
    @classmethod
    def _positive_timeout(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and value <= 0:
            raise ValueError("inference_timeout must be positive")
        return value


class EvaluationParams(BaseModel):
    """Evaluation engine parameters."""
    
    score_policy: Literal["clamp", "reject"] = Field(
        default="clamp",
        description="Handling of metric scores outside [0, 1]"
    )
    benchmark_concurrency: int = Field(
        default=4,
        ge=1,
        description="Test cases executed concurrently in a benchmark run"
    )
    recent_limit: int = Field(
        default=10,
        ge=1,
        description="Default size of recent-evaluation listings"
    )
    
    model_config = {"extra": "forbid"}

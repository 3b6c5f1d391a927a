"""
Data models for model routing.

Defines the model registry entries, inference requests and the
decision/response records produced by the routing engine.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union


class TaskType(str, Enum):
    """Closed set of task types a model may serve."""
    TEXT_GENERATION = "text-generation"
    CODE_GENERATION = "code-generation"
    SUMMARIZATION = "summarization"
    QUESTION_ANSWERING = "question-answering"
    CLASSIFICATION = "classification"
    EXTRACTION = "extraction"
    TRANSLATION = "translation"
    ANALYSIS = "analysis"


class ModelProvider(str, Enum):
    """Provider tags for registered models."""
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GOOGLE = "google"
    META = "meta"
    MISTRAL = "mistral"
    CUSTOM = "custom"


def _utc_now() -> str:
    return datetime.utcnow().isoformat() + "Z"


@dataclass(frozen=True)
class ModelDescriptor:
    """
    Static configuration for one selectable model.

    Immutable once registered; the registry is keyed by ``model_id``.

    Attributes:
        model_id: Registry identifier (unique)
        name: Display name
        provider: Provider tag
        capabilities: Task types this model can serve
        cost_per_1k_tokens: USD per 1,000 tokens
        max_tokens: Maximum output tokens
        avg_latency_ms: Average observed latency
        accuracy: Static accuracy rating in [0, 1]
        context_window: Context window size in tokens
        supports_streaming: Whether the backend can stream
        supports_fine_tuning: Whether the provider offers fine-tuning
        provider_model_id: Identifier the provider's API expects
    """
    model_id: str
    name: str
    provider: ModelProvider
    capabilities: Tuple[TaskType, ...]
    cost_per_1k_tokens: float
    max_tokens: int
    avg_latency_ms: float
    accuracy: float
    context_window: int
    supports_streaming: bool = False
    supports_fine_tuning: bool = False
    provider_model_id: str = ""

    def __post_init__(self):
        if not self.model_id:
            raise ValueError("model_id is required")
        if not 0.0 <= self.accuracy <= 1.0:
            raise ValueError(f"accuracy must be in [0, 1], got {self.accuracy}")
        if self.cost_per_1k_tokens < 0:
            raise ValueError("cost_per_1k_tokens must be non-negative")
        if self.avg_latency_ms < 0:
            raise ValueError("avg_latency_ms must be non-negative")
        if self.context_window < 0 or self.max_tokens < 0:
            raise ValueError("context_window and max_tokens must be non-negative")

        # Normalise loose inputs (strings, lists) into enum tuples
        object.__setattr__(self, "provider", ModelProvider(self.provider))
        object.__setattr__(
            self,
            "capabilities",
            tuple(TaskType(c) for c in self.capabilities),
        )
        if not self.provider_model_id:
            object.__setattr__(self, "provider_model_id", self.model_id)

    def supports(self, task_type: Union[TaskType, str]) -> bool:
        """Check whether this model can serve a task type."""
        return TaskType(task_type) in self.capabilities

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.model_id,
            "name": self.name,
            "provider": self.provider.value,
            "model_id": self.provider_model_id,
            "capabilities": [c.value for c in self.capabilities],
            "cost_per_1k_tokens": self.cost_per_1k_tokens,
            "max_tokens": self.max_tokens,
            "avg_latency_ms": self.avg_latency_ms,
            "accuracy": self.accuracy,
            "context_window": self.context_window,
            "supports_streaming": self.supports_streaming,
            "supports_fine_tuning": self.supports_fine_tuning,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ModelDescriptor":
        """Create from dictionary."""
        return cls(
            model_id=data["id"],
            name=data.get("name", data["id"]),
            provider=data.get("provider", ModelProvider.CUSTOM),
            capabilities=tuple(data.get("capabilities", [])),
            cost_per_1k_tokens=data.get("cost_per_1k_tokens", 0.0),
            max_tokens=data.get("max_tokens", 4096),
            avg_latency_ms=data.get("avg_latency_ms", 0.0),
            accuracy=data.get("accuracy", 0.0),
            context_window=data.get("context_window", 0),
            supports_streaming=data.get("supports_streaming", False),
            supports_fine_tuning=data.get("supports_fine_tuning", False),
            provider_model_id=data.get("model_id", ""),
        )


@dataclass
class RoutingConstraints:
    """Optional limits a routed model must satisfy."""
    max_cost: Optional[float] = None
    max_latency: Optional[float] = None
    min_accuracy: Optional[float] = None
    preferred_providers: Optional[Sequence[Union[ModelProvider, str]]] = None

    def __post_init__(self):
        if self.preferred_providers is not None:
            self.preferred_providers = [
                ModelProvider(p) for p in self.preferred_providers
            ]

    def is_empty(self) -> bool:
        return (
            self.max_cost is None
            and self.max_latency is None
            and self.min_accuracy is None
            and not self.preferred_providers
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "max_cost": self.max_cost,
            "max_latency": self.max_latency,
            "min_accuracy": self.min_accuracy,
            "preferred_providers": (
                [p.value for p in self.preferred_providers]
                if self.preferred_providers is not None else None
            ),
        }


@dataclass
class InferenceRequest:
    """A single routing/inference request. Constructed per call."""
    task_type: TaskType
    prompt: str
    context: Any = None
    constraints: Optional[RoutingConstraints] = None
    streaming: bool = False

    def __post_init__(self):
        self.task_type = TaskType(self.task_type)


@dataclass(frozen=True)
class ScoredModel:
    """A candidate model with its routing score."""
    model: ModelDescriptor
    score: float

    def to_dict(self) -> Dict[str, Any]:
        return {"model": self.model.model_id, "score": self.score}


@dataclass(frozen=True)
class RoutingDecision:
    """Selected model, justification and ranked runners-up."""
    selected_model: ModelDescriptor
    reason: str
    score: float
    alternatives: Tuple[ScoredModel, ...] = ()

    def ranked_models(self) -> List[ModelDescriptor]:
        """Selected model followed by the alternatives, best first."""
        return [self.selected_model] + [a.model for a in self.alternatives]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "selected_model": self.selected_model.model_id,
            "reason": self.reason,
            "score": self.score,
            "alternatives": [a.to_dict() for a in self.alternatives],
        }


@dataclass(frozen=True)
class InferenceResponse:
    """
    Record of one executed inference.

    Appended to the routing engine's history; never mutated.
    """
    request_id: str
    model_used: str
    response: str
    tokens_used: int
    cost: float
    latency_ms: float
    timestamp: str = field(default_factory=_utc_now)
    attempts: int = 1

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "request_id": self.request_id,
            "model_used": self.model_used,
            "response": self.response,
            "metadata": {
                "tokens_used": self.tokens_used,
                "cost": self.cost,
                "latency_ms": self.latency_ms,
                "timestamp": self.timestamp,
                "attempts": self.attempts,
            },
        }


@dataclass(frozen=True)
class ModelComparison:
    """What-if estimate for one eligible model."""
    model: ModelDescriptor
    estimated_cost: float
    estimated_latency_ms: float
    score: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "model": self.model.model_id,
            "estimated_cost": self.estimated_cost,
            "estimated_latency_ms": self.estimated_latency_ms,
            "score": self.score,
        }


@dataclass
class RoutingStats:
    """Aggregate usage derived from the inference history."""
    total_requests: int = 0
    total_cost: float = 0.0
    avg_latency_ms: float = 0.0
    model_usage: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_requests": self.total_requests,
            "total_cost": self.total_cost,
            "avg_latency_ms": self.avg_latency_ms,
            "model_usage": dict(self.model_usage),
        }

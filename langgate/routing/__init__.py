"""
Routing module for LangGate.

Provides the model registry data types, multi-criteria scoring and the
routing engine that selects and executes models.
"""

from langgate.routing.models import (
    TaskType,
    ModelProvider,
    ModelDescriptor,
    RoutingConstraints,
    InferenceRequest,
    ScoredModel,
    RoutingDecision,
    InferenceResponse,
    ModelComparison,
    RoutingStats,
)
from langgate.routing.scoring import score_model, explain_selection
from langgate.routing.tokens import TokenEstimator, CharacterTokenEstimator
from langgate.routing.engine import RoutingEngine
from langgate.routing.defaults import DEFAULT_MODELS, HOSTED_MODEL_ID, register_default_models

__all__ = [
    # Models
    "TaskType",
    "ModelProvider",
    "ModelDescriptor",
    "RoutingConstraints",
    "InferenceRequest",
    "ScoredModel",
    "RoutingDecision",
    "InferenceResponse",
    "ModelComparison",
    "RoutingStats",
    # Scoring
    "score_model",
    "explain_selection",
    "TokenEstimator",
    "CharacterTokenEstimator",
    # Engine
    "RoutingEngine",
    "DEFAULT_MODELS",
    "HOSTED_MODEL_ID",
    "register_default_models",
]

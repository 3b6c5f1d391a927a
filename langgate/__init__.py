"""
LangGate - Model Routing and Evaluation Gateway

Selects the best-fit model for an inference request from a registry of
candidates, executes it, and gates the response on safety, accuracy and
bias evaluation.

Key Features:
- Multi-criteria model scoring (accuracy, cost, latency, context window)
- Constraint filtering with preferred-provider handling
- Automatic fallback to ranked alternatives on backend failure
- Weighted, thresholded evaluation metrics with pluggable safety checks
  and bias detectors
- Benchmark harness with per-test-case fault isolation
"""

__version__ = "0.1.0"
__author__ = "LangGate Team"

from langgate.routing import (
    TaskType,
    ModelProvider,
    ModelDescriptor,
    RoutingConstraints,
    InferenceRequest,
    RoutingDecision,
    InferenceResponse,
    RoutingEngine,
    register_default_models,
)
from langgate.backends import (
    BackendResult,
    InferenceBackend,
    CallableBackend,
    HTTPBackend,
    SimulatedBackend,
)
from langgate.evaluation import (
    EvaluationCategory,
    EvaluationMetric,
    EvaluationResult,
    TestCase,
    BenchmarkResult,
    EvaluationEngine,
)
from langgate.events import EventBus
from langgate.gateway import Gateway, GatewayResponse

__all__ = [
    # Routing
    "TaskType",
    "ModelProvider",
    "ModelDescriptor",
    "RoutingConstraints",
    "InferenceRequest",
    "RoutingDecision",
    "InferenceResponse",
    "RoutingEngine",
    "register_default_models",
    # Backends
    "BackendResult",
    "InferenceBackend",
    "CallableBackend",
    "HTTPBackend",
    "SimulatedBackend",
    # Evaluation
    "EvaluationCategory",
    "EvaluationMetric",
    "EvaluationResult",
    "TestCase",
    "BenchmarkResult",
    "EvaluationEngine",
    # Gateway
    "EventBus",
    "Gateway",
    "GatewayResponse",
]

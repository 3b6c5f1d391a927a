"""
Shared fixtures and configuration for LangGate tests.
"""

import pytest


# =============================================================================
# Model Fixtures
# =============================================================================

@pytest.fixture
def model_a():
    """High-accuracy, mid-cost model (scores 80.4)."""
    from langgate.routing.models import ModelDescriptor, ModelProvider, TaskType
    return ModelDescriptor(
        model_id="model-a",
        name="Model A",
        provider=ModelProvider.OPENAI,
        capabilities=(TaskType.QUESTION_ANSWERING,),
        cost_per_1k_tokens=0.01,
        max_tokens=4096,
        avg_latency_ms=2000,
        accuracy=0.95,
        context_window=128000,
    )


@pytest.fixture
def model_b():
    """Cheap, fast, large-context model (scores 92.74)."""
    from langgate.routing.models import ModelDescriptor, ModelProvider, TaskType
    return ModelDescriptor(
        model_id="model-b",
        name="Model B",
        provider=ModelProvider.GOOGLE,
        capabilities=(TaskType.QUESTION_ANSWERING,),
        cost_per_1k_tokens=0.0001,
        max_tokens=8192,
        avg_latency_ms=800,
        accuracy=0.90,
        context_window=1000000,
    )


@pytest.fixture
def model_c():
    """Code-only model."""
    from langgate.routing.models import ModelDescriptor, ModelProvider, TaskType
    return ModelDescriptor(
        model_id="model-c",
        name="Model C",
        provider=ModelProvider.MISTRAL,
        capabilities=(TaskType.CODE_GENERATION,),
        cost_per_1k_tokens=0.002,
        max_tokens=4096,
        avg_latency_ms=1000,
        accuracy=0.93,
        context_window=32000,
    )


# =============================================================================
# Engine Fixtures
# =============================================================================

@pytest.fixture
def event_bus():
    """Create an empty EventBus."""
    from langgate.events import EventBus
    return EventBus()


@pytest.fixture
def recorded_events(event_bus):
    """Capture every event emitted on ``event_bus`` as (type, payload)."""
    from langgate.events import ALL_EVENTS
    events = []
    event_bus.register_handler(ALL_EVENTS, lambda event_type, payload: events.append((event_type, payload)))
    return events


@pytest.fixture
def routing_engine(event_bus):
    """Create a RoutingEngine with a simulated default backend."""
    from langgate.routing.engine import RoutingEngine
    from langgate.backends.simulated import SimulatedBackend
    return RoutingEngine(event_bus=event_bus, default_backend=SimulatedBackend())


@pytest.fixture
def two_model_engine(routing_engine, model_a, model_b):
    """RoutingEngine with models A and B registered (A first)."""
    routing_engine.register_model(model_a)
    routing_engine.register_model(model_b)
    return routing_engine


@pytest.fixture
def evaluation_engine(event_bus):
    """Create an EvaluationEngine with the default metrics."""
    from langgate.evaluation.engine import EvaluationEngine
    return EvaluationEngine(event_bus=event_bus)


@pytest.fixture
def bare_evaluation_engine(event_bus):
    """Create an EvaluationEngine with no metrics, checks or detectors."""
    from langgate.evaluation.engine import EvaluationEngine
    return EvaluationEngine(event_bus=event_bus, register_defaults=False)


def make_metric(metric_id, score, threshold=0.5, weight=1.0, category="accuracy"):
    """Build a metric whose scorer always returns ``score``."""
    from langgate.evaluation.models import EvaluationMetric
    return EvaluationMetric(
        metric_id=metric_id,
        name=metric_id.title(),
        category=category,
        threshold=threshold,
        weight=weight,
        calculate=lambda input_text, output, ground_truth=None: score,
    )


@pytest.fixture
def metric_factory():
    """Factory for constant-score metrics."""
    return make_metric


# =============================================================================
# Settings Fixtures
# =============================================================================

@pytest.fixture
def clean_env(monkeypatch):
    """Remove LANGGATE_* variables and reset cached settings."""
    import os
    from langgate.config.settings import reset_settings

    for key in list(os.environ):
        if key.startswith("LANGGATE_"):
            monkeypatch.delenv(key, raising=False)
    reset_settings()
    yield monkeypatch
    reset_settings()

"""
Default model registry entries.

Reference descriptors for common hosted models. They are descriptive
only: a model can be routed to but not executed until a backend is bound.
"""

from typing import List, TYPE_CHECKING

from langgate.routing.models import ModelDescriptor, ModelProvider, TaskType

if TYPE_CHECKING:
    from langgate.routing.engine import RoutingEngine

T = TaskType

# Model served by the hosted dashboard backend's /api/qa endpoint
HOSTED_MODEL_ID = "gemini-2.0-flash"

DEFAULT_MODELS: List[ModelDescriptor] = [
    ModelDescriptor(
        model_id="gpt-4-turbo",
        name="GPT-4 Turbo",
        provider=ModelProvider.OPENAI,
        provider_model_id="gpt-4-turbo-preview",
        capabilities=(
            T.TEXT_GENERATION, T.CODE_GENERATION, T.SUMMARIZATION,
            T.QUESTION_ANSWERING, T.CLASSIFICATION, T.EXTRACTION, T.ANALYSIS,
        ),
        cost_per_1k_tokens=0.01,
        max_tokens=4096,
        avg_latency_ms=2000,
        accuracy=0.95,
        context_window=128000,
        supports_streaming=True,
    ),
    ModelDescriptor(
        model_id="claude-3.5-sonnet",
        name="Claude 3.5 Sonnet",
        provider=ModelProvider.ANTHROPIC,
        provider_model_id="claude-3-5-sonnet-20241022",
        capabilities=(
            T.TEXT_GENERATION, T.CODE_GENERATION, T.SUMMARIZATION,
            T.QUESTION_ANSWERING, T.ANALYSIS,
        ),
        cost_per_1k_tokens=0.003,
        max_tokens=8192,
        avg_latency_ms=1500,
        accuracy=0.96,
        context_window=200000,
        supports_streaming=True,
    ),
    ModelDescriptor(
        model_id="gemini-2.0-flash",
        name="Gemini 2.0 Flash",
        provider=ModelProvider.GOOGLE,
        provider_model_id="gemini-2.0-flash-exp",
        capabilities=(
            T.TEXT_GENERATION, T.SUMMARIZATION, T.QUESTION_ANSWERING,
            T.CLASSIFICATION,
        ),
        cost_per_1k_tokens=0.0001,
        max_tokens=8192,
        avg_latency_ms=800,
        accuracy=0.90,
        context_window=1000000,
        supports_streaming=True,
    ),
    ModelDescriptor(
        model_id="llama-3.1-70b",
        name="Llama 3.1 70B",
        provider=ModelProvider.META,
        provider_model_id="meta-llama/Meta-Llama-3.1-70B-Instruct",
        capabilities=(
            T.TEXT_GENERATION, T.CODE_GENERATION, T.SUMMARIZATION,
            T.QUESTION_ANSWERING,
        ),
        cost_per_1k_tokens=0.0005,
        max_tokens=4096,
        avg_latency_ms=1200,
        accuracy=0.92,
        context_window=128000,
        supports_streaming=True,
        supports_fine_tuning=True,
    ),
    ModelDescriptor(
        model_id="mistral-large",
        name="Mistral Large",
        provider=ModelProvider.MISTRAL,
        provider_model_id="mistral-large-latest",
        capabilities=(
            T.TEXT_GENERATION, T.CODE_GENERATION, T.SUMMARIZATION,
            T.QUESTION_ANSWERING,
        ),
        cost_per_1k_tokens=0.002,
        max_tokens=4096,
        avg_latency_ms=1000,
        accuracy=0.93,
        context_window=32000,
        supports_streaming=True,
    ),
]


def register_default_models(engine: "RoutingEngine") -> int:
    """
    Register the default descriptors on an engine.

    Returns:
        Number of models registered
    """
    for descriptor in DEFAULT_MODELS:
        engine.register_model(descriptor)
    return len(DEFAULT_MODELS)

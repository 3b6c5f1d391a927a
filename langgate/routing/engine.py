"""
Routing engine.

Maintains the model registry, selects the best-fit model for a request
and optionally executes it.

Routing pipeline:
1. Keep models whose capabilities include the request's task type
2. Apply constraint filters in order: max cost, max latency,
   min accuracy, preferred providers
3. Score survivors (see ``langgate.routing.scoring``) and sort
   descending; ties keep registry insertion order
4. Top entry is the decision, the next ``max_alternatives`` ride along

Inference walks the ranked list: if the selected model's backend fails,
the next alternative is tried, up to ``max_inference_attempts`` calls.
"""

import asyncio
import logging
import threading
import time
from typing import Dict, List, Optional, Union

from langgate.backends.base import BackendResult, InferenceBackend
from langgate.config.params import RoutingParams
from langgate.errors import (
    BackendInferenceError,
    InferenceTimeoutError,
    NoEligibleModelError,
    UnknownModelError,
)
from langgate.events import (
    EventBus,
    INFERENCE_COMPLETED,
    INFERENCE_FALLBACK,
    MODEL_REGISTERED,
)
from langgate.routing.models import (
    InferenceRequest,
    InferenceResponse,
    ModelComparison,
    ModelDescriptor,
    ModelProvider,
    RoutingConstraints,
    RoutingDecision,
    RoutingStats,
    ScoredModel,
    TaskType,
)
from langgate.routing.scoring import explain_selection, score_model
from langgate.routing.tokens import CharacterTokenEstimator, TokenEstimator
from langgate.utils.ids import generate_id
from langgate.utils.math_utils import mean

logger = logging.getLogger(__name__)


class RoutingEngine:
    """
    Selects and executes models for inference requests.

    Engines are independent: each owns its registry, backends and history.

    Example:
        engine = RoutingEngine()
        engine.register_model(descriptor, backend=HTTPBackend(url))
        decision = engine.route(InferenceRequest(TaskType.SUMMARIZATION, text))
        response = await engine.infer(request)
    """

    def __init__(
        self,
        params: Optional[RoutingParams] = None,
        event_bus: Optional[EventBus] = None,
        default_backend: Optional[InferenceBackend] = None,
        token_estimator: Optional[TokenEstimator] = None,
    ):
        """
        Initialize the engine.

        Args:
            params: Routing parameters (defaults if None)
            event_bus: Event sink; a private bus is created if None
            default_backend: Backend for models without their own
            token_estimator: Text → token count estimator
        """
        self.params = params or RoutingParams()
        self.events = event_bus or EventBus()
        self.default_backend = default_backend
        self.token_estimator = token_estimator or CharacterTokenEstimator(
            self.params.chars_per_token
        )

        self._models: Dict[str, ModelDescriptor] = {}
        self._backends: Dict[str, InferenceBackend] = {}
        self._history: List[InferenceResponse] = []
        self._lock = threading.RLock()

    # =========================================================================
    # Registry
    # =========================================================================

    def register_model(
        self,
        descriptor: ModelDescriptor,
        backend: Optional[InferenceBackend] = None,
    ) -> None:
        """
        Insert or replace a model by id.

        A replaced model keeps its original registry position.

        Args:
            descriptor: Model descriptor
            backend: Optional backend that executes this model
        """
        with self._lock:
            self._models[descriptor.model_id] = descriptor
            if backend is not None:
                self._backends[descriptor.model_id] = backend

        logger.info(f"Registered model: {descriptor.name} ({descriptor.model_id})")
        self.events.emit(MODEL_REGISTERED, descriptor)

    def bind_backend(self, model_id: str, backend: InferenceBackend) -> None:
        """Attach a backend to an already registered model."""
        with self._lock:
            if model_id not in self._models:
                raise UnknownModelError(model_id)
            self._backends[model_id] = backend

    def get_backend(self, model_id: str) -> Optional[InferenceBackend]:
        """Backend that would execute a model, or None if it is descriptive only."""
        with self._lock:
            if model_id not in self._models:
                raise UnknownModelError(model_id)
            return self._backends.get(model_id, self.default_backend)

    def get_model(self, model_id: str) -> ModelDescriptor:
        """Look up a registered model."""
        with self._lock:
            model = self._models.get(model_id)
        if model is None:
            raise UnknownModelError(model_id)
        return model

    def list_models(
        self,
        provider: Optional[Union[ModelProvider, str]] = None,
        task_type: Optional[Union[TaskType, str]] = None,
        max_cost: Optional[float] = None,
    ) -> List[ModelDescriptor]:
        """List registered models, optionally filtered."""
        with self._lock:
            models = list(self._models.values())

        if provider is not None:
            provider = ModelProvider(provider)
            models = [m for m in models if m.provider == provider]
        if task_type is not None:
            models = [m for m in models if m.supports(task_type)]
        if max_cost is not None:
            models = [m for m in models if m.cost_per_1k_tokens <= max_cost]

        return models

    # =========================================================================
    # Routing
    # =========================================================================

    def _find_candidates(
        self,
        task_type: TaskType,
        constraints: Optional[RoutingConstraints] = None,
    ) -> List[ModelDescriptor]:
        with self._lock:
            candidates = [m for m in self._models.values() if m.supports(task_type)]

        if constraints is None:
            return candidates

        if constraints.max_cost is not None:
            candidates = [m for m in candidates if m.cost_per_1k_tokens <= constraints.max_cost]
        if constraints.max_latency is not None:
            candidates = [m for m in candidates if m.avg_latency_ms <= constraints.max_latency]
        if constraints.min_accuracy is not None:
            candidates = [m for m in candidates if m.accuracy >= constraints.min_accuracy]

        if constraints.preferred_providers and candidates:
            preferred = [m for m in candidates if m.provider in constraints.preferred_providers]
            if preferred:
                candidates = preferred
            elif self.params.strict_preferred_providers:
                providers = ", ".join(p.value for p in constraints.preferred_providers)
                raise NoEligibleModelError(
                    task_type, constraints,
                    reason=f"no candidate from preferred providers: {providers}",
                )
            else:
                logger.warning(
                    f"No {task_type.value} candidate from preferred providers "
                    f"{[p.value for p in constraints.preferred_providers]}; "
                    f"falling back to any provider"
                )

        return candidates

    def _rank(self, candidates: List[ModelDescriptor]) -> List[ScoredModel]:
        scored = [ScoredModel(model=m, score=score_model(m, self.params.weights)) for m in candidates]
        # sorted() is stable, so equal scores keep registry order
        return sorted(scored, key=lambda s: s.score, reverse=True)

    def route(self, request: InferenceRequest) -> RoutingDecision:
        """
        Select the best model for a request without executing it.

        Raises:
            NoEligibleModelError: If no model survives filtering
        """
        candidates = self._find_candidates(request.task_type, request.constraints)
        if not candidates:
            raise NoEligibleModelError(request.task_type, request.constraints)

        ranked = self._rank(candidates)
        best = ranked[0]
        decision = RoutingDecision(
            selected_model=best.model,
            reason=explain_selection(best.model, request.task_type),
            score=best.score,
            alternatives=tuple(ranked[1:1 + self.params.max_alternatives]),
        )

        logger.debug(
            f"Routed {request.task_type.value} to {best.model.model_id} "
            f"(score={best.score:.2f}, alternatives={len(decision.alternatives)})"
        )
        return decision

    def compare_models(
        self,
        task_type: Union[TaskType, str],
        prompt: str,
    ) -> List[ModelComparison]:
        """
        Estimate cost, latency and score for every capable model.

        No inference is executed. Results are sorted best first.
        """
        task_type = TaskType(task_type)
        tokens = self.token_estimator.estimate(prompt)

        return [
            ModelComparison(
                model=s.model,
                estimated_cost=(tokens / 1000) * s.model.cost_per_1k_tokens,
                estimated_latency_ms=s.model.avg_latency_ms,
                score=s.score,
            )
            for s in self._rank(self._find_candidates(task_type))
        ]

    # =========================================================================
    # Inference
    # =========================================================================

    def _backend_for(self, model: ModelDescriptor) -> InferenceBackend:
        with self._lock:
            backend = self._backends.get(model.model_id, self.default_backend)
        if backend is None:
            raise BackendInferenceError(model.model_id, "no backend bound to this model")
        return backend

    async def _call_backend(
        self,
        model: ModelDescriptor,
        request: InferenceRequest,
        timeout: Optional[float],
    ) -> BackendResult:
        backend = self._backend_for(model)
        call = backend.generate(model, request.prompt, request.context)
        if timeout is None:
            return await call
        try:
            return await asyncio.wait_for(call, timeout)
        except asyncio.TimeoutError as e:
            raise InferenceTimeoutError(model.model_id, timeout) from e

    async def infer(
        self,
        request: InferenceRequest,
        timeout: Optional[float] = None,
    ) -> InferenceResponse:
        """
        Route a request and execute it.

        Args:
            request: Inference request
            timeout: Per backend call timeout in seconds; overrides
                ``params.inference_timeout``

        Returns:
            The recorded InferenceResponse

        Raises:
            NoEligibleModelError: If routing finds no model
            Exception: The last backend error, unchanged, once every
                attempt has failed
        """
        decision = self.route(request)
        timeout = timeout if timeout is not None else self.params.inference_timeout
        ranked = decision.ranked_models()[:self.params.max_inference_attempts]

        last_error: Optional[Exception] = None
        for attempt, model in enumerate(ranked, start=1):
            logger.info(f"Routing {request.task_type.value} to {model.name} (attempt {attempt})")
            start = time.perf_counter()
            try:
                result = await self._call_backend(model, request, timeout)
            except Exception as e:
                last_error = e
                logger.warning(f"Inference with {model.model_id} failed: {e}")
                if attempt < len(ranked):
                    self.events.emit(INFERENCE_FALLBACK, {
                        "request_task": request.task_type.value,
                        "failed_model": model.model_id,
                        "next_model": ranked[attempt].model_id,
                        "error": str(e),
                    })
                continue

            latency_ms = (time.perf_counter() - start) * 1000
            return self._record(model, request, result, latency_ms, attempt)

        raise last_error

    def _record(
        self,
        model: ModelDescriptor,
        request: InferenceRequest,
        result: BackendResult,
        latency_ms: float,
        attempts: int,
    ) -> InferenceResponse:
        tokens = result.tokens_used
        if tokens is None:
            tokens = self.token_estimator.estimate(request.prompt + result.text)

        response = InferenceResponse(
            request_id=generate_id("req"),
            model_used=model.model_id,
            response=result.text,
            tokens_used=tokens,
            cost=(tokens / 1000) * model.cost_per_1k_tokens,
            latency_ms=latency_ms,
            attempts=attempts,
        )

        with self._lock:
            self._history.append(response)

        self.events.emit(INFERENCE_COMPLETED, response)
        return response

    # =========================================================================
    # Statistics
    # =========================================================================

    @property
    def history(self) -> List[InferenceResponse]:
        """Snapshot of the inference history, oldest first."""
        with self._lock:
            return list(self._history)

    def get_stats(self) -> RoutingStats:
        """Aggregate request count, cost, latency and per-model usage."""
        history = self.history
        usage: Dict[str, int] = {}
        for r in history:
            usage[r.model_used] = usage.get(r.model_used, 0) + 1

        return RoutingStats(
            total_requests=len(history),
            total_cost=sum(r.cost for r in history),
            avg_latency_ms=mean(r.latency_ms for r in history),
            model_usage=usage,
        )

    def get_recent_responses(self, limit: int = 10) -> List[InferenceResponse]:
        """Most recent responses, newest first."""
        return list(reversed(self.history))[:limit]

    async def aclose(self) -> None:
        """Close every bound backend and the default backend once each."""
        with self._lock:
            backends = list(self._backends.values())
        if self.default_backend is not None:
            backends.append(self.default_backend)

        closed = set()
        for backend in backends:
            if id(backend) in closed:
                continue
            closed.add(id(backend))
            await backend.aclose()

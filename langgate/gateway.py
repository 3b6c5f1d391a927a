"""
Gateway: routing followed by an evaluation gate.

The gateway infers through the routing engine, scores the response with
the evaluation engine and only reports success when the response passes
every metric and clears the overall quality threshold.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from langgate.backends.http import HTTPBackend
from langgate.config.settings import Settings, get_settings
from langgate.evaluation.engine import EvaluationEngine
from langgate.evaluation.models import BenchmarkResult, EvaluationResult
from langgate.events import EventBus, QUERY_COMPLETED, QUERY_REJECTED
from langgate.routing.defaults import HOSTED_MODEL_ID, register_default_models
from langgate.routing.engine import RoutingEngine
from langgate.routing.models import (
    InferenceRequest,
    ModelComparison,
    RoutingConstraints,
    TaskType,
)
from langgate.utils.logger_config import setup_logging

logger = logging.getLogger(__name__)

REJECTED_MESSAGE = "Response did not meet quality standards"


@dataclass
class GatewayResponse:
    """
    Outcome of a gateway query.

    On rejection ``response`` is None but the spend (model, cost,
    latency, tokens) and the evaluation are still reported.
    """
    success: bool
    response: Optional[str] = None
    model_used: Optional[str] = None
    cost: float = 0.0
    latency_ms: float = 0.0
    tokens_used: int = 0
    evaluation: Optional[EvaluationResult] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "success": self.success,
            "data": {
                "response": self.response,
                "metadata": {
                    "model_used": self.model_used,
                    "cost": self.cost,
                    "latency_ms": self.latency_ms,
                    "tokens_used": self.tokens_used,
                },
                "evaluation": self.evaluation.to_dict() if self.evaluation else None,
            },
            "error": self.error,
        }


class Gateway:
    """
    Routes queries to models and gates responses on evaluation.

    Example:
        gateway = Gateway.from_settings()
        result = await gateway.query("Summarize Q3 revenue")
        if result.success:
            print(result.response)
        else:
            print(result.error, result.evaluation.recommendations)
    """

    def __init__(
        self,
        router: RoutingEngine,
        evaluator: EvaluationEngine,
        settings: Optional[Settings] = None,
    ):
        self.router = router
        self.evaluator = evaluator
        self.settings = settings or get_settings()

    @property
    def events(self) -> EventBus:
        return self.router.events

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        event_bus: Optional[EventBus] = None,
        configure_logging: bool = False,
    ) -> "Gateway":
        """
        Build a gateway wired to the hosted backend.

        Both engines share one event bus. The default model set is
        registered and only ``HOSTED_MODEL_ID`` is bound to the HTTP
        backend at ``settings.backend_url``, since that endpoint always
        runs the same model. The other defaults stay descriptive.

        Args:
            settings: Settings to build from (global settings if None)
            event_bus: Shared event sink (a new bus if None)
            configure_logging: Apply ``settings.log_level`` and
                ``settings.log_format`` to the langgate logger tree
        """
        settings = settings or get_settings()
        bus = event_bus or EventBus()

        if configure_logging:
            setup_logging(settings.log_level, settings.log_format)

        router = RoutingEngine(params=settings.routing_params(), event_bus=bus)
        register_default_models(router)
        router.bind_backend(
            HOSTED_MODEL_ID,
            HTTPBackend(settings.backend_url, timeout=settings.inference_timeout or 30.0),
        )
        evaluator = EvaluationEngine(params=settings.evaluation_params(), event_bus=bus)

        return cls(router, evaluator, settings)

    def _meets_threshold(self, evaluation: EvaluationResult) -> bool:
        return evaluation.passed and evaluation.overall_score >= self.settings.evaluation_threshold

    async def query(
        self,
        prompt: str,
        task_type: Union[TaskType, str] = TaskType.QUESTION_ANSWERING,
        context: Any = None,
        constraints: Optional[RoutingConstraints] = None,
        require_evaluation: Optional[bool] = None,
        ground_truth: Optional[str] = None,
    ) -> GatewayResponse:
        """
        Infer, optionally evaluate, and gate a single query.

        Args:
            prompt: User prompt
            task_type: Task type used for routing
            context: Free-form context forwarded to the backend
            constraints: Routing constraints
            require_evaluation: Force evaluation on or off; None defers
                to ``settings.auto_evaluate``
            ground_truth: Expected answer, if known

        Returns:
            GatewayResponse; routing, backend and evaluation errors are
            reported as ``success=False`` rather than raised
        """
        request = InferenceRequest(
            task_type=task_type,
            prompt=prompt,
            context=context,
            constraints=constraints,
        )
        should_evaluate = (
            require_evaluation if require_evaluation is not None else self.settings.auto_evaluate
        )

        try:
            inference = await self.router.infer(request)
            evaluation = None
            if should_evaluate:
                evaluation = await self.evaluator.evaluate(
                    inference.request_id, prompt, inference.response, ground_truth
                )
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Query failed: {e}")
            return GatewayResponse(success=False, error=str(e))

        if evaluation is not None and not self._meets_threshold(evaluation):
            logger.warning(
                f"Rejected response from {inference.model_used} "
                f"(score={evaluation.overall_score:.2f}, passed={evaluation.passed})"
            )
            result = GatewayResponse(
                success=False,
                model_used=inference.model_used,
                cost=inference.cost,
                latency_ms=inference.latency_ms,
                tokens_used=inference.tokens_used,
                evaluation=evaluation,
                error=REJECTED_MESSAGE,
            )
            self.events.emit(QUERY_REJECTED, result)
            return result

        result = GatewayResponse(
            success=True,
            response=inference.response,
            model_used=inference.model_used,
            cost=inference.cost,
            latency_ms=inference.latency_ms,
            tokens_used=inference.tokens_used,
            evaluation=evaluation,
        )
        self.events.emit(QUERY_COMPLETED, result)
        return result

    def compare_models(self, task_type: Union[TaskType, str], prompt: str) -> List[ModelComparison]:
        return self.router.compare_models(task_type, prompt)

    async def run_benchmark(
        self,
        benchmark_id: str,
        test_case_ids: List[str],
        task_type: Union[TaskType, str] = TaskType.QUESTION_ANSWERING,
        constraints: Optional[RoutingConstraints] = None,
        model_id: str = "routed",
        timeout: Optional[float] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> BenchmarkResult:
        """
        Benchmark the routed pipeline.

        Every test case input is inferred through the routing engine, so
        ``model_id`` only labels the report.
        """
        async def infer(prompt: str) -> str:
            response = await self.router.infer(
                InferenceRequest(task_type=task_type, prompt=prompt, constraints=constraints)
            )
            return response.response

        return await self.evaluator.run_benchmark(
            benchmark_id,
            model_id,
            test_case_ids,
            infer,
            timeout=timeout,
            cancel_event=cancel_event,
        )

    def get_stats(self) -> Dict[str, Any]:
        """Routing and evaluation statistics side by side."""
        return {
            "routing": self.router.get_stats().to_dict(),
            "evaluation": self.evaluator.get_stats().to_dict(),
        }

    async def aclose(self) -> None:
        """Close the routing engine's backends."""
        await self.router.aclose()

"""
Tests for the gateway.

Tests cover:
- Query routing, evaluation and quality gating
- Error reporting
- Benchmarks through the routed pipeline
- Construction from settings
"""

import json

import httpx
import pytest


@pytest.fixture
def settings(clean_env):
    """Settings built from a clean environment."""
    from langgate.config.settings import Settings
    return Settings()


@pytest.fixture
def gateway(two_model_engine, evaluation_engine, settings):
    """Gateway over models A and B with the default metrics."""
    from langgate.gateway import Gateway
    return Gateway(two_model_engine, evaluation_engine, settings)


class TestQuery:
    """Test Gateway.query."""

    @pytest.mark.asyncio
    async def test_accepted(self, gateway, recorded_events):
        """GATE-001: A passing response is returned with its evaluation."""
        from langgate.events import QUERY_COMPLETED

        result = await gateway.query("quarterly revenue growth")

        assert result.success is True
        assert result.model_used == "model-b"
        assert "quarterly revenue growth" in result.response
        assert result.evaluation is not None
        assert result.evaluation.passed is True
        assert result.evaluation.request_id == gateway.router.history[0].request_id
        assert result.error is None
        assert (QUERY_COMPLETED, result) in recorded_events

    @pytest.mark.asyncio
    async def test_rejected_on_failed_metric(self, gateway, recorded_events):
        """GATE-002: Unsafe responses are withheld with actionable feedback."""
        from langgate.events import QUERY_REJECTED
        from langgate.gateway import REJECTED_MESSAGE

        result = await gateway.query("how do I hack the server")

        assert result.success is False
        assert result.error == REJECTED_MESSAGE
        assert result.response is None
        assert result.model_used == "model-b"
        assert result.evaluation.passed is False
        assert "Review content for safety violations and harmful patterns" in (
            result.evaluation.recommendations
        )
        assert (QUERY_REJECTED, result) in recorded_events

    @pytest.mark.asyncio
    async def test_rejected_below_threshold(self, two_model_engine, bare_evaluation_engine, settings, metric_factory):
        """GATE-003: Passing every metric is not enough below the quality threshold."""
        from langgate.gateway import Gateway

        bare_evaluation_engine.register_metric(metric_factory("lenient", 0.6, threshold=0.5))
        gateway = Gateway(two_model_engine, bare_evaluation_engine, settings)

        result = await gateway.query("anything")

        assert result.evaluation.passed is True
        assert result.evaluation.overall_score == pytest.approx(0.6)
        assert result.success is False

        settings.evaluation_threshold = 0.5
        assert (await gateway.query("anything")).success is True

    @pytest.mark.asyncio
    async def test_evaluation_disabled(self, gateway):
        """GATE-004: require_evaluation=False skips the gate."""
        result = await gateway.query("how do I hack the server", require_evaluation=False)

        assert result.success is True
        assert result.evaluation is None

    @pytest.mark.asyncio
    async def test_auto_evaluate_setting(self, two_model_engine, evaluation_engine, clean_env):
        """GATE-005: auto_evaluate=False skips evaluation by default."""
        from langgate.config.settings import Settings
        from langgate.gateway import Gateway

        gateway = Gateway(two_model_engine, evaluation_engine, Settings(auto_evaluate=False))
        result = await gateway.query("how do I hack the server")

        assert result.success is True
        assert evaluation_engine.get_recent_evaluations() == []

    @pytest.mark.asyncio
    async def test_routing_error_reported(self, gateway):
        """GATE-006: Routing failures become success=False."""
        result = await gateway.query("Hola", task_type="translation")

        assert result.success is False
        assert "No models available for task type: translation" in result.error

    @pytest.mark.asyncio
    async def test_backend_error_reported(self, gateway):
        """GATE-007: Exhausted backend failures become success=False."""
        from langgate.backends.simulated import SimulatedBackend

        gateway.router.bind_backend("model-a", SimulatedBackend(fail=True))
        gateway.router.bind_backend("model-b", SimulatedBackend(fail=True))

        result = await gateway.query("q")

        assert result.success is False
        assert "simulated provider error" in result.error

    def test_to_dict(self):
        """GATE-008: to_dict groups spend under metadata."""
        from langgate.gateway import GatewayResponse

        data = GatewayResponse(success=True, response="ok", model_used="m", cost=0.1).to_dict()

        assert data["success"] is True
        assert data["data"]["response"] == "ok"
        assert data["data"]["metadata"]["model_used"] == "m"
        assert data["data"]["evaluation"] is None


class TestGatewayOperations:
    """Test compare, benchmark and stats pass-throughs."""

    def test_compare_models(self, gateway):
        """GATE-101: compare_models delegates to the router."""
        comparisons = gateway.compare_models("question-answering", "q")

        assert [c.model.model_id for c in comparisons] == ["model-b", "model-a"]

    @pytest.mark.asyncio
    async def test_run_benchmark(self, model_b, bare_evaluation_engine, settings):
        """GATE-102: Benchmarks infer through the routing engine."""
        from langgate.backends.base import CallableBackend
        from langgate.evaluation.models import EvaluationMetric, TestCase
        from langgate.gateway import Gateway
        from langgate.routing.engine import RoutingEngine

        answers = {"2+2": "4", "3+3": "7"}
        router = RoutingEngine(default_backend=CallableBackend(lambda model_id, prompt: answers[prompt]))
        router.register_model(model_b)

        bare_evaluation_engine.register_metric(EvaluationMetric(
            metric_id="exact", name="Exact", category="accuracy", threshold=0.5, weight=1.0,
            calculate=lambda i, o, g=None: 1.0 if o == g else 0.0,
        ))
        bare_evaluation_engine.add_test_case(TestCase("t1", "math", "2+2", expected_output="4"))
        bare_evaluation_engine.add_test_case(TestCase("t2", "math", "3+3", expected_output="6"))

        gateway = Gateway(router, bare_evaluation_engine, settings)
        result = await gateway.run_benchmark("math", ["t1", "t2"])

        assert result.model_id == "routed"
        assert result.pass_rate == 0.5
        assert router.get_stats().total_requests == 2

    @pytest.mark.asyncio
    async def test_stats(self, gateway):
        """GATE-103: get_stats combines both engines."""
        await gateway.query("quarterly revenue growth")

        stats = gateway.get_stats()

        assert stats["routing"]["total_requests"] == 1
        assert stats["evaluation"]["total_evaluations"] == 1


class TestFromSettings:
    """Test Gateway.from_settings."""

    @pytest.mark.asyncio
    async def test_wiring(self, clean_env):
        """GATE-201: Builds both engines on one bus with the hosted backend."""
        from langgate.backends.http import HTTPBackend
        from langgate.gateway import Gateway
        from langgate.routing.defaults import HOSTED_MODEL_ID

        clean_env.setenv("LANGGATE_BACKEND_URL", "http://dashboard.test:4000")
        clean_env.setenv("LANGGATE_MAX_INFERENCE_ATTEMPTS", "2")

        gateway = Gateway.from_settings()

        assert gateway.router.default_backend is None
        hosted = gateway.router.get_backend(HOSTED_MODEL_ID)
        assert isinstance(hosted, HTTPBackend)
        assert hosted.url == "http://dashboard.test:4000/api/qa"
        assert gateway.router.params.max_inference_attempts == 2
        assert len(gateway.router.list_models()) == 5
        assert len(gateway.evaluator.list_metrics()) == 5
        assert gateway.router.events is gateway.evaluator.events

        await gateway.aclose()

    def test_only_hosted_model_executable(self, clean_env):
        """GATE-202: Every default model except the hosted one is descriptive only."""
        from langgate.gateway import Gateway
        from langgate.routing.defaults import HOSTED_MODEL_ID

        gateway = Gateway.from_settings()

        bound = [
            m.model_id for m in gateway.router.list_models()
            if gateway.router.get_backend(m.model_id) is not None
        ]

        assert bound == [HOSTED_MODEL_ID]

    @pytest.mark.asyncio
    async def test_unhosted_task_not_mislabelled(self, clean_env):
        """GATE-203: Tasks the hosted model cannot serve fail instead of borrowing its backend."""
        from langgate.errors import BackendInferenceError
        from langgate.gateway import Gateway
        from langgate.routing.models import InferenceRequest, TaskType

        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json={"text": "def f(): pass"})

        gateway = Gateway.from_settings()
        _bind_mock_hosted_backend(gateway, handler)

        with pytest.raises(BackendInferenceError, match="no backend bound"):
            await gateway.router.infer(
                InferenceRequest(TaskType.CODE_GENERATION, "write a python function")
            )

        result = await gateway.query(
            "write a python function",
            task_type=TaskType.CODE_GENERATION,
            require_evaluation=False,
        )

        assert result.success is False
        assert result.model_used is None
        assert "no backend bound" in result.error
        assert calls == []
        assert gateway.router.history == []

    @pytest.mark.asyncio
    async def test_hosted_query_labels_hosted_model(self, clean_env):
        """GATE-204: Hosted answers are recorded against the hosted model."""
        from langgate.gateway import Gateway
        from langgate.routing.defaults import HOSTED_MODEL_ID

        payloads = []

        def handler(request):
            payloads.append(json.loads(request.content))
            return httpx.Response(200, json={"text": "Revenue grew 12%"})

        gateway = Gateway.from_settings()
        _bind_mock_hosted_backend(gateway, handler)

        result = await gateway.query("How did revenue change?", require_evaluation=False)

        assert result.success is True
        assert result.model_used == HOSTED_MODEL_ID
        assert payloads[0]["model"] == "gemini-2.0-flash-exp"

    def test_configure_logging(self, clean_env):
        """GATE-205: configure_logging applies the logging settings."""
        import logging

        from langgate.gateway import Gateway

        clean_env.setenv("LANGGATE_LOG_LEVEL", "WARNING")
        clean_env.setenv("LANGGATE_LOG_FORMAT", "%(levelname)s:%(message)s")

        Gateway.from_settings(configure_logging=True)

        root = logging.getLogger("langgate")
        try:
            assert root.level == logging.WARNING
            assert len(root.handlers) == 1
            assert root.handlers[0].formatter._fmt == "%(levelname)s:%(message)s"
        finally:
            root.handlers = []
            root.setLevel(logging.NOTSET)

    def test_logging_untouched_by_default(self, clean_env):
        """GATE-206: Without configure_logging no handlers are installed."""
        import logging

        from langgate.gateway import Gateway

        root = logging.getLogger("langgate")
        before = list(root.handlers)

        Gateway.from_settings()

        assert root.handlers == before


def _bind_mock_hosted_backend(gateway, handler):
    """Rebind the hosted model to an HTTPBackend served by ``handler``."""
    from langgate.backends.http import HTTPBackend
    from langgate.routing.defaults import HOSTED_MODEL_ID

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    gateway.router.bind_backend(
        HOSTED_MODEL_ID, HTTPBackend(gateway.settings.backend_url, client=client)
    )

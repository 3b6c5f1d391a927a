"""
Tests for inference backends.

Tests cover:
- CallableBackend adaptation of sync and async functions
- SimulatedBackend behaviour
- HTTPBackend request payloads and error mapping (httpx.MockTransport)
"""

import json

import httpx
import pytest


def make_http_backend(handler, **kwargs):
    """HTTPBackend whose client is served by ``handler``."""
    from langgate.backends.http import HTTPBackend

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HTTPBackend("http://backend.test/", client=client, **kwargs)


# =============================================================================
# Callable Backend Tests
# =============================================================================

class TestCallableBackend:
    """Test CallableBackend."""

    @pytest.mark.asyncio
    async def test_sync_function(self, model_a):
        """BACK-001: Sync functions returning text are wrapped."""
        from langgate.backends.base import CallableBackend

        backend = CallableBackend(lambda model_id, prompt: f"{model_id}:{prompt}")
        result = await backend.generate(model_a, "hello")

        assert result.text == "model-a:hello"
        assert result.tokens_used is None

    @pytest.mark.asyncio
    async def test_async_function_with_result(self, model_a):
        """BACK-002: Async functions may return a BackendResult."""
        from langgate.backends.base import BackendResult, CallableBackend

        async def call_model(model_id, prompt):
            return BackendResult(text="done", tokens_used=42)

        backend = CallableBackend(call_model)
        result = await backend.generate(model_a, "hello")

        assert result.tokens_used == 42
        assert backend.name == "call_model"


class TestSimulatedBackend:
    """Test SimulatedBackend."""

    @pytest.mark.asyncio
    async def test_template(self, model_b):
        """BACK-003: Responses follow the template."""
        from langgate.backends.simulated import SimulatedBackend

        backend = SimulatedBackend(template="{name} says {prompt}")
        result = await backend.generate(model_b, "hi")

        assert result.text == "Model B says hi"
        assert backend.calls == 1

    @pytest.mark.asyncio
    async def test_failure(self, model_b):
        """BACK-004: fail=True raises a 503 BackendInferenceError."""
        from langgate.backends.simulated import SimulatedBackend
        from langgate.errors import BackendInferenceError

        with pytest.raises(BackendInferenceError) as exc:
            await SimulatedBackend(fail=True).generate(model_b, "hi")
        assert exc.value.status_code == 503


# =============================================================================
# HTTP Backend Tests
# =============================================================================

class TestHTTPBackend:
    """Test HTTPBackend against a mock transport."""

    @pytest.mark.asyncio
    async def test_success(self):
        """HTTP-001: Posts the question payload and reads text and usage."""
        from langgate.routing.defaults import DEFAULT_MODELS

        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"text": "Revenue is up", "usage": {"total_tokens": 17}})

        backend = make_http_backend(handler)
        result = await backend.generate(DEFAULT_MODELS[0], "How is revenue?", context={"kpi": 1})

        assert seen["url"] == "http://backend.test/api/qa"
        assert seen["body"] == {
            "dashboardData": {"kpi": 1},
            "message": "How is revenue?",
            "model": "gpt-4-turbo-preview",
        }
        assert result.text == "Revenue is up"
        assert result.tokens_used == 17

    @pytest.mark.asyncio
    async def test_missing_usage(self, model_a):
        """HTTP-002: Missing usage leaves the token count to the estimator."""
        backend = make_http_backend(lambda request: httpx.Response(200, json={"text": "ok"}))

        result = await backend.generate(model_a, "q")

        assert result.tokens_used is None

    @pytest.mark.asyncio
    async def test_error_status_with_message(self, model_a):
        """HTTP-003: Non-success statuses surface the body's message."""
        from langgate.errors import BackendInferenceError

        backend = make_http_backend(
            lambda request: httpx.Response(500, json={"message": "Gemini quota exceeded"})
        )

        with pytest.raises(BackendInferenceError) as exc:
            await backend.generate(model_a, "q")

        assert exc.value.status_code == 500
        assert exc.value.model_id == "model-a"
        assert "Gemini quota exceeded" in str(exc.value)

    @pytest.mark.asyncio
    async def test_error_status_without_body(self, model_a):
        """HTTP-004: Statuses without a JSON body report the code."""
        from langgate.errors import BackendInferenceError

        backend = make_http_backend(lambda request: httpx.Response(502, text="Bad Gateway"))

        with pytest.raises(BackendInferenceError, match="HTTP error! status: 502"):
            await backend.generate(model_a, "q")

    @pytest.mark.asyncio
    async def test_malformed_payload(self, model_a):
        """HTTP-005: A body without text is an inference failure."""
        from langgate.errors import BackendInferenceError

        backend = make_http_backend(lambda request: httpx.Response(200, json={"answer": "?"}))

        with pytest.raises(BackendInferenceError, match="no 'text' field"):
            await backend.generate(model_a, "q")

    @pytest.mark.asyncio
    async def test_connect_error(self, model_a):
        """HTTP-006: Connection failures map to BackendInferenceError."""
        from langgate.errors import BackendInferenceError

        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        backend = make_http_backend(handler)

        with pytest.raises(BackendInferenceError, match="Cannot connect"):
            await backend.generate(model_a, "q")

    @pytest.mark.asyncio
    async def test_timeout(self, model_a):
        """HTTP-007: Transport timeouts map to InferenceTimeoutError."""
        from langgate.errors import InferenceTimeoutError

        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        backend = make_http_backend(handler, timeout=5.0)

        with pytest.raises(InferenceTimeoutError) as exc:
            await backend.generate(model_a, "q")
        assert exc.value.timeout == 5.0

    @pytest.mark.asyncio
    async def test_injected_client_not_closed(self):
        """HTTP-008: aclose leaves caller-owned clients open."""
        from langgate.backends.http import HTTPBackend

        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        backend = HTTPBackend("http://backend.test", client=client)

        await backend.aclose()

        assert client.is_closed is False
        await client.aclose()

    @pytest.mark.asyncio
    async def test_owned_client_closed(self):
        """HTTP-009: aclose closes a lazily created client."""
        from langgate.backends.http import HTTPBackend

        backend = HTTPBackend("http://backend.test", path="api/qa")
        client = backend.client

        await backend.aclose()

        assert client.is_closed is True
        assert backend.url == "http://backend.test/api/qa"

    @pytest.mark.asyncio
    async def test_routed_through_engine(self, routing_engine, model_b):
        """HTTP-010: The routing engine executes models via the HTTP backend."""
        backend = make_http_backend(
            lambda request: httpx.Response(200, json={"text": "fine", "usage": {"total_tokens": 1000}})
        )
        routing_engine.register_model(model_b, backend=backend)

        from langgate.routing.models import InferenceRequest
        response = await routing_engine.infer(InferenceRequest("question-answering", "q"))

        assert response.response == "fine"
        assert response.cost == pytest.approx(0.0001)

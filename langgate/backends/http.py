"""
HTTP inference backend.

Calls a hosted generative-text service over HTTP. The dashboard backend
exposes a single question-answering endpoint that accepts
``{"dashboardData": ..., "message": ...}`` and answers ``{"text": ...}``;
this backend speaks that contract and is bound to one model descriptor.
"""

import logging
from typing import Any, Dict, Optional, TYPE_CHECKING

import httpx

from langgate.backends.base import BackendResult, InferenceBackend
from langgate.errors import BackendInferenceError, InferenceTimeoutError

if TYPE_CHECKING:
    from langgate.routing.models import ModelDescriptor

logger = logging.getLogger(__name__)


class HTTPBackend(InferenceBackend):
    """
    Backend for a hosted text-generation endpoint.

    Attributes:
        base_url: Service root, e.g. ``http://localhost:4000``
        path: Endpoint path
        timeout: Request timeout in seconds
    """

    name = "http"

    def __init__(
        self,
        base_url: str,
        path: str = "/api/qa",
        timeout: float = 30.0,
        headers: Optional[Dict[str, str]] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the backend.

        Args:
            base_url: Service root URL
            path: Endpoint path appended to base_url
            timeout: Request timeout in seconds
            headers: Extra request headers (e.g. auth)
            client: Pre-built client; when given the caller owns its lifecycle
        """
        self.base_url = base_url.rstrip("/")
        self.path = path if path.startswith("/") else f"/{path}"
        self.timeout = timeout
        self.headers = {"Content-Type": "application/json", **(headers or {})}
        self._client = client
        self._owns_client = client is None

    @property
    def url(self) -> str:
        return f"{self.base_url}{self.path}"

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    def _build_payload(self, model: "ModelDescriptor", prompt: str, context: Any) -> Dict[str, Any]:
        return {
            "dashboardData": context if context is not None else {},
            "message": prompt,
            "model": model.provider_model_id,
        }

    async def generate(
        self,
        model: "ModelDescriptor",
        prompt: str,
        context: Any = None,
    ) -> BackendResult:
        payload = self._build_payload(model, prompt, context)
        logger.debug(f"POST {self.url} for {model.model_id}")

        try:
            response = await self.client.post(self.url, json=payload, headers=self.headers)
        except httpx.TimeoutException as e:
            raise InferenceTimeoutError(model.model_id, self.timeout) from e
        except httpx.ConnectError as e:
            raise BackendInferenceError(
                model.model_id,
                "Cannot connect to the backend service. Please ensure it's running."
            ) from e
        except httpx.HTTPError as e:
            raise BackendInferenceError(model.model_id, str(e)) from e

        if not response.is_success:
            raise BackendInferenceError(
                model.model_id,
                self._error_message(response),
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise BackendInferenceError(
                model.model_id, "Backend returned a non-JSON body",
                status_code=response.status_code,
            ) from e

        text = data.get("text") if isinstance(data, dict) else None
        if not isinstance(text, str):
            raise BackendInferenceError(
                model.model_id, "Backend response has no 'text' field",
                status_code=response.status_code,
            )

        usage = data.get("usage") or {}
        tokens = usage.get("total_tokens") if isinstance(usage, dict) else None

        return BackendResult(text=text, tokens_used=tokens, raw=data)

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return f"HTTP error! status: {response.status_code}"

    async def aclose(self) -> None:
        """Close the HTTP client if this backend created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def __repr__(self) -> str:
        return f"HTTPBackend(url={self.url!r})"

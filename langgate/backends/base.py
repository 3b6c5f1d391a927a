"""
Base class for model inference backends.

A backend is the only external collaborator the routing engine calls:
given a model and a prompt it returns generated text and, when the
provider reports it, a token count. Backends signal provider failures
by raising; the routing engine never retries inside a backend.
"""

import inspect
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional, Union, TYPE_CHECKING

if TYPE_CHECKING:
    from langgate.routing.models import ModelDescriptor


@dataclass
class BackendResult:
    """
    Output of one backend call.

    Attributes:
        text: Generated text
        tokens_used: Total tokens reported by the provider (None = estimate)
        raw: Provider payload, kept for debugging
    """
    text: str
    tokens_used: Optional[int] = None
    raw: Dict[str, Any] = field(default_factory=dict)


class InferenceBackend(ABC):
    """
    Abstract inference backend.

    Implementations must be safe to call concurrently from one event loop.
    """

    name: str = "backend"

    @abstractmethod
    async def generate(
        self,
        model: "ModelDescriptor",
        prompt: str,
        context: Any = None,
    ) -> BackendResult:
        """
        Run inference for a prompt on a model.

        Args:
            model: The routed model
            prompt: Prompt text
            context: Optional free-form request context

        Returns:
            BackendResult with the generated text

        Raises:
            BackendInferenceError: On provider or transport failure
        """
        pass

    async def aclose(self) -> None:
        """Release any held resources."""
        return None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"


BackendCallable = Callable[[str, str], Union[str, BackendResult, Awaitable[Union[str, BackendResult]]]]


class CallableBackend(InferenceBackend):
    """
    Adapt a plain function into a backend.

    The function receives ``(provider_model_id, prompt)`` and may be sync
    or async, returning either the text or a ``BackendResult``.

    Example:
        async def call_model(model_id, prompt):
            return await client.complete(model_id, prompt)

        engine.register_model(descriptor, backend=CallableBackend(call_model))
    """

    def __init__(self, func: BackendCallable, name: Optional[str] = None):
        self.func = func
        self.name = name or getattr(func, "__name__", "callable")

    async def generate(
        self,
        model: "ModelDescriptor",
        prompt: str,
        context: Any = None,
    ) -> BackendResult:
        result = self.func(model.provider_model_id, prompt)
        if inspect.isawaitable(result):
            result = await result

        if isinstance(result, BackendResult):
            return result
        return BackendResult(text=str(result))

"""
Simulated inference backend.

Stands in for provider APIs that are registered descriptively but not
wired to a real service. Useful for demos, what-if runs and tests.
"""

import asyncio
from typing import Any, Optional, TYPE_CHECKING

from langgate.backends.base import BackendResult, InferenceBackend
from langgate.errors import BackendInferenceError

if TYPE_CHECKING:
    from langgate.routing.models import ModelDescriptor


class SimulatedBackend(InferenceBackend):
    """
    Deterministic placeholder backend.

    Args:
        delay: Seconds to sleep per call, to mimic network latency
        fail: If True every call raises BackendInferenceError
        template: Response template with ``{name}`` and ``{prompt}`` fields
    """

    name = "simulated"

    DEFAULT_TEMPLATE = '[Response from {name}] This is a simulated response to: "{prompt}"'

    def __init__(
        self,
        delay: float = 0.0,
        fail: bool = False,
        template: Optional[str] = None,
    ):
        self.delay = delay
        self.fail = fail
        self.template = template or self.DEFAULT_TEMPLATE
        self.calls = 0

    async def generate(
        self,
        model: "ModelDescriptor",
        prompt: str,
        context: Any = None,
    ) -> BackendResult:
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise BackendInferenceError(model.model_id, "simulated provider error", status_code=503)
        return BackendResult(text=self.template.format(name=model.name, prompt=prompt))

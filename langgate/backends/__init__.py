"""
Inference backends for LangGate.

Usage:
    from langgate.backends import HTTPBackend

    backend = HTTPBackend("http://localhost:4000")
    engine.register_model(descriptor, backend=backend)
"""

from langgate.backends.base import BackendResult, InferenceBackend, CallableBackend
from langgate.backends.http import HTTPBackend
from langgate.backends.simulated import SimulatedBackend

__all__ = [
    "BackendResult",
    "InferenceBackend",
    "CallableBackend",
    "HTTPBackend",
    "SimulatedBackend",
]

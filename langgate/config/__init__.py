"""
Configuration module for LangGate.

Provides environment-driven settings and validated engine parameters.
"""

from langgate.config.settings import Settings, get_settings, configure, reset_settings
from langgate.config.params import ScoringWeights, RoutingParams, EvaluationParams

__all__ = [
    "Settings",
    "get_settings",
    "configure",
    "reset_settings",
    "ScoringWeights",
    "RoutingParams",
    "EvaluationParams",
]

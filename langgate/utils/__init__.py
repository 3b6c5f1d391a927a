"""
Utility module for LangGate.

Provides logging configuration, numeric helpers and id generation.
"""

from langgate.utils.logger_config import (
    setup_logging,
    get_logger,
    LogContext,
)
from langgate.utils.math_utils import (
    weighted_mean,
    mean,
    clamp_unit,
    is_real_number,
    is_unit_interval,
)
from langgate.utils.ids import generate_id

__all__ = [
    "setup_logging",
    "get_logger",
    "LogContext",
    "weighted_mean",
    "mean",
    "clamp_unit",
    "is_real_number",
    "is_unit_interval",
    "generate_id",
]

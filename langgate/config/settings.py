"""
Global configuration settings for LangGate.

Loads configuration from environment variables (and a ``.env`` file)
and provides typed access to all system settings.
"""

import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from langgate.config.params import EvaluationParams, RoutingParams

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    """Global settings for LangGate."""
    
    # Logging
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    
    # Routing
    inference_timeout: Optional[float] = None
    max_inference_attempts: int = 3
    strict_preferred_providers: bool = False
    
    # Evaluation
    score_policy: str = "clamp"
    benchmark_concurrency: int = 4
    
    # Gateway
    evaluation_threshold: float = 0.85
    auto_evaluate: bool = True
    
    # Hosted backend
    backend_url: str = "http://localhost:4000"
    
    def __post_init__(self):
        """Load settings from environment variables."""
        self.log_level = os.getenv("LANGGATE_LOG_LEVEL", self.log_level)
        self.log_format = os.getenv("LANGGATE_LOG_FORMAT", self.log_format)
        self.score_policy = os.getenv("LANGGATE_SCORE_POLICY", self.score_policy)
        self.backend_url = os.getenv("LANGGATE_BACKEND_URL", self.backend_url)
        
        if os.getenv("LANGGATE_INFERENCE_TIMEOUT"):
            self.inference_timeout = float(os.getenv("LANGGATE_INFERENCE_TIMEOUT"))
        if os.getenv("LANGGATE_MAX_INFERENCE_ATTEMPTS"):
            self.max_inference_attempts = int(os.getenv("LANGGATE_MAX_INFERENCE_ATTEMPTS"))
        if os.getenv("LANGGATE_BENCHMARK_CONCURRENCY"):
            self.benchmark_concurrency = int(os.getenv("LANGGATE_BENCHMARK_CONCURRENCY"))
        if os.getenv("LANGGATE_EVALUATION_THRESHOLD"):
            self.evaluation_threshold = float(os.getenv("LANGGATE_EVALUATION_THRESHOLD"))
        
        self.strict_preferred_providers = _env_bool(
            "LANGGATE_STRICT_PREFERRED_PROVIDERS", self.strict_preferred_providers
        )
        self.auto_evaluate = _env_bool("LANGGATE_AUTO_EVALUATE", self.auto_evaluate)
    
    def routing_params(self) -> RoutingParams:
        """Build validated routing parameters."""
        return RoutingParams(
            inference_timeout=self.inference_timeout,
            max_inference_attempts=self.max_inference_attempts,
            strict_preferred_providers=self.strict_preferred_providers,
        )
    
    def evaluation_params(self) -> EvaluationParams:
        """Build validated evaluation parameters."""
        return EvaluationParams(
            score_policy=self.score_policy,
            benchmark_concurrency=self.benchmark_concurrency,
        )
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "log_level": self.log_level,
            "log_format": self.log_format,
            "inference_timeout": self.inference_timeout,
            "max_inference_attempts": self.max_inference_attempts,
            "strict_preferred_providers": self.strict_preferred_providers,
            "score_policy": self.score_policy,
            "benchmark_concurrency": self.benchmark_concurrency,
            "evaluation_threshold": self.evaluation_threshold,
            "auto_evaluate": self.auto_evaluate,
            "backend_url": self.backend_url,
        }


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def configure(**kwargs) -> Settings:
    """
    Override global settings.
    
    Args:
        **kwargs: Setting names and values; unknown names are ignored
    
    Returns:
        The updated Settings instance
    """
    settings = get_settings()
    
    for key, value in kwargs.items():
        if hasattr(settings, key):
            setattr(settings, key, value)
    
    return settings


def reset_settings() -> None:
    """Drop the cached settings so the next access re-reads the environment."""
    global _settings
    _settings = None

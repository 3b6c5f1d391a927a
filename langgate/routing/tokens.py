"""
Token estimation.

Cost has to be estimated before (or without) a provider tokenizer, so
estimation sits behind a small interface: text in, integer count out.
A provider-accurate tokenizer can be plugged into the routing engine
in place of the character heuristic.
"""

import math
from abc import ABC, abstractmethod


class TokenEstimator(ABC):
    """Maps text to an integer token estimate."""

    @abstractmethod
    def estimate(self, text: str) -> int:
        pass

    def __call__(self, text: str) -> int:
        return self.estimate(text)


class CharacterTokenEstimator(TokenEstimator):
    """Roughly ``chars_per_token`` characters per token, rounded up."""

    def __init__(self, chars_per_token: int = 4):
        if chars_per_token < 1:
            raise ValueError("chars_per_token must be at least 1")
        self.chars_per_token = chars_per_token

    def estimate(self, text: str) -> int:
        return math.ceil(len(text or "") / self.chars_per_token)

    def __repr__(self) -> str:
        return f"CharacterTokenEstimator(chars_per_token={self.chars_per_token})"

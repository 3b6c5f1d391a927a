"""
Text scoring heuristics used by the default metrics.

These are cheap lexical proxies, not semantic judgements. All return a
score in [0, 1].
"""

import re
from typing import List, Pattern

# Overly specific claims: ISO dates, exact dollar amounts, phone numbers
SUSPICIOUS_PATTERNS: List[Pattern] = [
    re.compile(r"\d{4}-\d{2}-\d{2}"),
    re.compile(r"\$[\d,]+\.\d{2}"),
    re.compile(r"\d{3}-\d{3}-\d{4}"),
]

HALLUCINATION_PENALTY = 0.1
DEFAULT_RELEVANCE = 0.8


def _words(text: str) -> List[str]:
    return text.lower().split()


def token_overlap_similarity(text1: str, text2: str) -> float:
    """
    Jaccard similarity of the lowercase word sets of two texts.

    Returns 0.0 when both texts are empty.
    """
    words1 = set(_words(text1))
    words2 = set(_words(text2))
    union = words1 | words2
    if not union:
        return 0.0
    return len(words1 & words2) / len(union)


def relevance_score(input_text: str, output_text: str) -> float:
    """
    Fraction of the input's content words that appear in the output.

    Content words are those longer than three characters; repeats count
    each time. Matching is case-insensitive substring containment. Inputs
    without content words score ``DEFAULT_RELEVANCE``.
    """
    terms = [t for t in _words(input_text) if len(t) > 3]
    if not terms:
        return DEFAULT_RELEVANCE

    output_lower = output_text.lower()
    matched = sum(1 for t in terms if t in output_lower)
    return matched / len(terms)


def hallucination_score(output_text: str) -> float:
    """Penalize each overly specific claim by 0.1, floored at 0."""
    suspicion = sum(
        len(pattern.findall(output_text)) * HALLUCINATION_PENALTY
        for pattern in SUSPICIOUS_PATTERNS
    )
    return max(0.0, 1.0 - suspicion)

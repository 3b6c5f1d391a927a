"""Identifier generation."""

import uuid


def generate_id(prefix: str) -> str:
    """Create a unique id such as ``req_3f2a9c...``."""
    return f"{prefix}_{uuid.uuid4().hex[:16]}"

# src/llm/token_budget.py - v1
"""Cheap, offline token estimation for pre-flight sizing.

Only the provider's usage report is authoritative; this number is for
choosing max_tokens and logging prompt sizes before a call.
"""

from __future__ import annotations

import math

CHARS_PER_TOKEN = 4


def estimate_tokens(text: str) -> int:
    """Rough estimate: one token per four characters, rounded up."""
    return math.ceil(len(text) / CHARS_PER_TOKEN)

# src/cache/fingerprint.py - v2
"""Content hashing for the format cache.

The key is SHA-256 over the exact UTF-8 bytes of the raw content. No
normalization is applied: two submissions that differ by a single character
must never share a cached formatting result.
"""

from __future__ import annotations

import hashlib


def compute_content_hash(raw_content: str) -> str:
    """SHA-256 hex digest of the raw content."""
    return hashlib.sha256(raw_content.encode("utf-8")).hexdigest()


def is_content_hash(value: str) -> bool:
    """Whether `value` looks like a SHA-256 hex digest."""
    if len(value) != 64:
        return False
    try:
        int(value, 16)
    except ValueError:
        return False
    return True

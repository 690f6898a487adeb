"""Content fingerprints for managed blocks."""

from __future__ import annotations

import hashlib

HASH_LENGTH = 16


def fingerprint(content: str) -> str:
    """Return the short SHA-256 fingerprint of ``content`` after trimming whitespace.

    Sixteen hex characters are enough to notice hand edits; they are not a
    security boundary.
    """
    digest = hashlib.sha256(content.strip().encode("utf-8")).hexdigest()
    return digest[:HASH_LENGTH]

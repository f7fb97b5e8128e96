"""
Deterministic bucketing for weight-table experiments.

bucket(id, salt) maps an id to [0, 100) with a stable hash, so the same user
always lands in the same variant for a given experiment salt, across processes.
"""

import hashlib


def bucket(identifier: str, salt: str = "") -> int:
    """Stable bucket in [0, 100) for identifier under salt."""
    digest = hashlib.sha256(f"{salt}:{identifier}".encode("utf-8")).hexdigest()
    return int(digest[:16], 16) % 100

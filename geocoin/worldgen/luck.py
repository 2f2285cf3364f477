"""
Deterministic string -> [0, 1) draws.

Python's built-in hash() is salted per process, so it cannot give the same
answer after a restart. BLAKE2b over "<seed>:<key>" does.
"""

import hashlib

_DENOM = float(1 << 64)


def _digest64(seed: str, key: str) -> int:
    h = hashlib.blake2b(digest_size=8)
    h.update(seed.encode("utf-8"))
    h.update(b":")
    h.update(key.encode("utf-8"))
    return int.from_bytes(h.digest(), "little", signed=False)


def luck(key: str, seed: str = "geocoin") -> float:
    return _digest64(seed, key) / _DENOM

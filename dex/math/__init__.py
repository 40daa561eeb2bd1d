"""Mathematical utilities for the pool.

This package provides integer primitives for share accounting:
- isqrt: exact floor square root (Babylonian iteration)
"""

from dex.math.isqrt import isqrt

__all__ = ["isqrt"]

"""Integer square root.

The first deposit into an empty pool mints floor(sqrt(amount_a * amount_b))
shares, which fixes the share-to-value ratio for the lifetime of the pool.
The root must therefore be exact: no float conversion, no off-by-one.
"""

from __future__ import annotations

from dex.errors import InvalidAmount


def isqrt(x: int) -> int:
    """Compute floor(sqrt(x)) with the Babylonian method.

    Seeds y = x and z = (x + 1) // 2, then iterates z = (x // z + z) // 2
    while the estimate keeps decreasing. Once the estimate drops to
    floor(sqrt(x)) the next step can no longer go lower, so the loop stops
    on the exact answer.

    Args:
        x: Non-negative integer

    Returns:
        Largest integer r with r * r <= x

    Raises:
        InvalidAmount: If x is negative or not an integer
    """
    if not isinstance(x, int) or isinstance(x, bool):
        raise InvalidAmount(f"isqrt requires int, got {type(x).__name__}")
    if x < 0:
        raise InvalidAmount(f"isqrt of negative value: {x}")

    y = x
    z = (x + 1) // 2
    while z < y:
        y = z
        z = (x // z + z) // 2
    return y

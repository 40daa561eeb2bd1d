"""Liquidity share arithmetic.

Pure functions for minting and burning pool shares. All rounding is
toward zero, which leaves any remainder with the pool.
"""

from __future__ import annotations

from dex.errors import InsufficientSharesBurned, InsufficientSharesMinted
from dex.math import isqrt
from dex.safe_int import S


def initial_shares(amount_a: int, amount_b: int) -> int:
    """Shares for the first deposit into an empty pool.

    The geometric mean floor(sqrt(amount_a * amount_b)) makes the initial
    supply independent of which asset is treated as the base.

    Raises:
        InsufficientSharesMinted: If the deposit rounds to zero shares
        ArithmeticOverflow: If amount_a * amount_b exceeds uint256
    """
    shares = isqrt((S(amount_a) * S(amount_b)).value)
    if shares == 0:
        raise InsufficientSharesMinted(
            f"Deposit ({amount_a}, {amount_b}) mints zero shares"
        )
    return shares


def proportional_shares(
    amount_a: int,
    amount_b: int,
    reserve_a: int,
    reserve_b: int,
    total_shares: int,
) -> int:
    """Shares for a deposit into a pool that already has liquidity.

    Each side is credited pro rata against its reserve; the provider gets
    the smaller of the two. Surplus on the other side is still deposited.

    Raises:
        InsufficientSharesMinted: If the limiting side rounds to zero shares
        ArithmeticOverflow: If amount * total_shares exceeds uint256
    """
    share_from_a = S(amount_a) * total_shares // reserve_a
    share_from_b = S(amount_b) * total_shares // reserve_b
    shares = share_from_a.min(share_from_b).value
    if shares == 0:
        raise InsufficientSharesMinted(
            f"Deposit ({amount_a}, {amount_b}) mints zero shares "
            f"against reserves ({reserve_a}, {reserve_b})"
        )
    return shares


def redemption_amounts(
    shares: int,
    reserve_a: int,
    reserve_b: int,
    total_shares: int,
) -> tuple[int, int]:
    """Assets returned for burning `shares` out of `total_shares`.

    Raises:
        InsufficientSharesBurned: If either side rounds to zero
        ArithmeticOverflow: If shares * reserve exceeds uint256
    """
    amount_a = (S(shares) * reserve_a // total_shares).value
    amount_b = (S(shares) * reserve_b // total_shares).value
    if amount_a == 0 or amount_b == 0:
        raise InsufficientSharesBurned(
            f"Burning {shares} shares returns ({amount_a}, {amount_b})"
        )
    return amount_a, amount_b

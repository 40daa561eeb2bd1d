"""Constant-product swap pricing.

The pool holds x * y = k, with a 0.3% fee on input amounts. The withheld
fee stays in the reserves, so k strictly grows with every swap.
"""

from __future__ import annotations

from typing import ClassVar

import structlog

from dex.constants import FEE_DENOMINATOR, FEE_NUMERATOR, PRICE_SCALE
from dex.errors import InsufficientLiquidity, InvalidAmount, NoLiquidity
from dex.safe_int import S

logger = structlog.get_logger()


def _require_int(value: int, name: str) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidAmount(f"{name} must be an int, got {type(value).__name__}")


class ConstantProduct:
    """Constant-product pricing math.

    Formula: amount_out = (amount_in * 997 * reserve_out) / (reserve_in * 1000 + amount_in * 997)

    This is (reserve_in + amount_in * 0.997) * (reserve_out - amount_out) = k
    solved for amount_out and rounded down.
    """

    fee_numerator: ClassVar[int] = FEE_NUMERATOR
    fee_denominator: ClassVar[int] = FEE_DENOMINATOR

    def get_amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """Calculate output amount for an exact input.

        Pure function of its three arguments. Every intermediate is checked
        against the uint256 range.

        Args:
            amount_in: Input token amount
            reserve_in: Reserve of input token in pool
            reserve_out: Reserve of output token in pool

        Returns:
            Output token amount, rounded down

        Raises:
            InvalidAmount: If amount_in is not a positive int
            InsufficientLiquidity: If either reserve is not positive
            ArithmeticOverflow: If an intermediate product exceeds uint256
        """
        _require_int(amount_in, "amount_in")
        _require_int(reserve_in, "reserve_in")
        _require_int(reserve_out, "reserve_out")
        if amount_in <= 0:
            raise InvalidAmount(f"amount_in must be positive: {amount_in}")
        if reserve_in <= 0 or reserve_out <= 0:
            raise InsufficientLiquidity(f"Reserves must be positive: ({reserve_in}, {reserve_out})")

        amount_in_with_fee = S(amount_in) * self.fee_numerator
        numerator = amount_in_with_fee * S(reserve_out)
        denominator = S(reserve_in) * self.fee_denominator + amount_in_with_fee
        amount_out = (numerator // denominator).value

        logger.debug(
            "quote_output",
            amount_in=amount_in,
            reserve_in=reserve_in,
            reserve_out=reserve_out,
            amount_out=amount_out,
        )
        return amount_out

    def spot_price(self, reserve_a: int, reserve_b: int) -> int:
        """Units of B per unit of A, scaled by 1e18 and rounded down.

        Raises:
            NoLiquidity: If reserve_a is zero
            ArithmeticOverflow: If reserve_b * 1e18 exceeds uint256
        """
        if reserve_a == 0:
            raise NoLiquidity("No liquidity")
        return (S(reserve_b) * PRICE_SCALE // reserve_a).value


# Singleton instance
constant_product = ConstantProduct()


def quote_output(amount_in: int, reserve_in: int, reserve_out: int) -> int:
    """Output of an exact-input swap against the given reserves.

    See ConstantProduct.get_amount_out.
    """
    return constant_product.get_amount_out(amount_in, reserve_in, reserve_out)

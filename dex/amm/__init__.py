"""Constant-product AMM math."""

from dex.amm.constant_product import ConstantProduct, constant_product, quote_output
from dex.amm.liquidity import initial_shares, proportional_shares, redemption_amounts

__all__ = [
    # Pricing
    "ConstantProduct",
    "constant_product",
    "quote_output",
    # Share arithmetic
    "initial_shares",
    "proportional_shares",
    "redemption_amounts",
]

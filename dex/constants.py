"""Protocol constants for the constant-product pool.

Centralizes the fee schedule, fixed-point scale and integer bounds.
"""

# Largest representable token amount (uint256)
UINT256_MAX = 2**256 - 1

# Swap fee: only 997/1000 of each input counts toward the trade (0.3% fee).
# Fixed for every pool; there are no fee tiers.
FEE_NUMERATOR = 997
FEE_DENOMINATOR = 1000

# Fixed-point scale used by price() (1e18 = one unit of B per unit of A)
PRICE_SCALE = 10**18

# Account name the reference ledger uses for pool-held balances
DEFAULT_POOL_ACCOUNT = "pool"

"""Shared constants for tests.

Usage:
    from tests.helpers import ALICE, TKA
    # or
    from tests.helpers.constants import ALICE, TKA
"""

# =============================================================================
# Pool assets
# =============================================================================

TKA = "TKA"  # Token A
TKB = "TKB"  # Token B
TKC = "TKC"  # Not part of the pool

POOL_ACCOUNT = "pool"

# =============================================================================
# Accounts
# =============================================================================

ALICE = "alice"
BOB = "bob"
CAROL = "carol"

# =============================================================================
# Amounts
# =============================================================================

ETHER = 10**18  # One whole token with 18 decimals
STARTING_BALANCE = 10**30  # Minted to every account by default

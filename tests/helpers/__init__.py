"""Test helpers module for shared test utilities.

This module consolidates common test utilities to reduce duplication:
- constants: Asset ids, account names and common amounts
- factories: Ledger and pool factory functions
"""

from tests.helpers.constants import (
    ALICE,
    BOB,
    CAROL,
    ETHER,
    POOL_ACCOUNT,
    STARTING_BALANCE,
    TKA,
    TKB,
    TKC,
)
from tests.helpers.factories import fund, make_ledger, make_pool

__all__ = [
    # Constants
    "ALICE",
    "BOB",
    "CAROL",
    "ETHER",
    "POOL_ACCOUNT",
    "STARTING_BALANCE",
    "TKA",
    "TKB",
    "TKC",
    # Factories
    "fund",
    "make_ledger",
    "make_pool",
]

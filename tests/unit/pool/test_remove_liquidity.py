"""Tests for Pool.remove_liquidity."""

import pytest

from dex.errors import InsufficientShareBalance, InsufficientSharesBurned, InvalidAmount
from dex.models import LiquidityRemoved
from tests.helpers import ALICE, BOB, ETHER, POOL_ACCOUNT, STARTING_BALANCE, TKA, TKB


class TestRemoveLiquidity:
    """Tests for proportional redemption."""

    def test_full_redemption(self, seeded_pool, ledger):
        """Burning all 141 shares of (100, 200) returns (100, 200) exactly."""
        assert seeded_pool.remove_liquidity(ALICE, 141) == (100, 200)

        assert seeded_pool.reserves() == (0, 0)
        assert seeded_pool.total_shares == 0
        assert seeded_pool.shares_of(ALICE) == 0
        assert ledger.balance_of(TKA, ALICE) == STARTING_BALANCE
        assert ledger.balance_of(TKB, ALICE) == STARTING_BALANCE
        assert ledger.balance_of(TKA, POOL_ACCOUNT) == 0

    def test_partial_redemption(self, pool):
        """Removing half the shares leaves half the reserves."""
        minted = pool.add_liquidity(ALICE, 100 * ETHER, 200 * ETHER)
        half = minted // 2

        amount_a, amount_b = pool.remove_liquidity(ALICE, half)

        assert pool.shares_of(ALICE) == minted - half
        assert amount_a == half * 100 * ETHER // minted
        assert amount_b == half * 200 * ETHER // minted
        assert pool.reserves() == (100 * ETHER - amount_a, 200 * ETHER - amount_b)

    def test_round_trip_loses_only_rounding(self, seeded_pool):
        """Adding then removing the same shares returns at most what was put in."""
        minted = seeded_pool.add_liquidity(BOB, 50, 100)
        amount_a, amount_b = seeded_pool.remove_liquidity(BOB, minted)

        assert (amount_a, amount_b) == (49, 99)
        assert amount_a <= 50 and 50 - amount_a <= 1
        assert amount_b <= 100 and 100 - amount_b <= 1

    def test_pool_can_be_refilled_after_emptying(self, seeded_pool):
        """An emptied pool accepts a new first deposit at a new price."""
        seeded_pool.remove_liquidity(ALICE, 141)
        assert seeded_pool.add_liquidity(BOB, 400, 100) == 200
        assert seeded_pool.price() == 10**18 // 4

    def test_zero_balance_entry_kept(self, seeded_pool):
        seeded_pool.remove_liquidity(ALICE, 141)
        assert seeded_pool.shares_of(ALICE) == 0


class TestRemoveLiquidityValidation:
    """Tests for rejected redemptions."""

    def test_zero_shares(self, seeded_pool):
        with pytest.raises(InvalidAmount):
            seeded_pool.remove_liquidity(ALICE, 0)

    def test_more_than_owned(self, seeded_pool):
        with pytest.raises(InsufficientShareBalance):
            seeded_pool.remove_liquidity(ALICE, 142)
        assert seeded_pool.shares_of(ALICE) == 141

    def test_other_providers_shares(self, seeded_pool):
        """Bob cannot burn shares that belong to alice."""
        with pytest.raises(InsufficientShareBalance):
            seeded_pool.remove_liquidity(BOB, 141)
        assert seeded_pool.reserves() == (100, 200)

    def test_dust_redemption(self, pool):
        """One share of a (1, 10**6) pool returns zero A and is rejected."""
        pool.add_liquidity(ALICE, 1, 10**6)

        with pytest.raises(InsufficientSharesBurned):
            pool.remove_liquidity(ALICE, 1)

        assert pool.shares_of(ALICE) == 1000
        assert pool.reserves() == (1, 10**6)


class TestRemoveLiquidityEvents:
    """Tests for LiquidityRemoved emission."""

    def test_emits_after_add(self, seeded_pool):
        seeded_pool.remove_liquidity(ALICE, 141)
        assert seeded_pool.events[-1] == LiquidityRemoved(
            provider=ALICE, amount_a=100, amount_b=200, shares_burned=141
        )
        assert len(seeded_pool.events) == 2

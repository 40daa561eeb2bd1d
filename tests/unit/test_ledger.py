"""Tests for the in-memory reference ledger."""

import pytest

from dex.errors import InvalidAmount, InvalidIdentifier
from dex.ledger import AssetLedger, InMemoryLedger
from tests.helpers import ALICE, BOB, POOL_ACCOUNT, TKA, TKB


@pytest.fixture
def empty_ledger() -> InMemoryLedger:
    return InMemoryLedger(pool_account=POOL_ACCOUNT)


class TestInMemoryLedger:
    """Tests for balances, allowances and transfers."""

    def test_implements_protocol(self, empty_ledger):
        assert isinstance(empty_ledger, AssetLedger)

    def test_unknown_balance_is_zero(self, empty_ledger):
        assert empty_ledger.balance_of(TKA, ALICE) == 0
        assert empty_ledger.allowance(TKA, ALICE) == 0

    def test_mint(self, empty_ledger):
        assert empty_ledger.mint(TKA, ALICE, 100) == 100
        assert empty_ledger.mint(TKA, ALICE, 50) == 150
        assert empty_ledger.balance_of(TKA, ALICE) == 150
        assert empty_ledger.balance_of(TKB, ALICE) == 0

    def test_transfer_from_needs_allowance(self, empty_ledger):
        """Balance alone is not enough; the pool must be approved."""
        empty_ledger.mint(TKA, ALICE, 100)
        assert empty_ledger.transfer_from(TKA, ALICE, 10) is False
        assert empty_ledger.balance_of(TKA, ALICE) == 100

    def test_transfer_from_moves_funds_and_consumes_allowance(self, empty_ledger):
        empty_ledger.mint(TKA, ALICE, 100)
        empty_ledger.approve(TKA, ALICE, 60)

        assert empty_ledger.transfer_from(TKA, ALICE, 40) is True

        assert empty_ledger.balance_of(TKA, ALICE) == 60
        assert empty_ledger.balance_of(TKA, POOL_ACCOUNT) == 40
        assert empty_ledger.allowance(TKA, ALICE) == 20

    def test_transfer_from_needs_balance(self, empty_ledger):
        empty_ledger.mint(TKA, ALICE, 10)
        empty_ledger.approve(TKA, ALICE, 100)
        assert empty_ledger.transfer_from(TKA, ALICE, 11) is False
        assert empty_ledger.allowance(TKA, ALICE) == 100

    def test_approve_replaces(self, empty_ledger):
        empty_ledger.approve(TKA, ALICE, 100)
        empty_ledger.approve(TKA, ALICE, 5)
        assert empty_ledger.allowance(TKA, ALICE) == 5

    def test_transfer_pays_out_of_pool(self, empty_ledger):
        empty_ledger.mint(TKB, POOL_ACCOUNT, 30)
        assert empty_ledger.transfer(TKB, BOB, 30) is True
        assert empty_ledger.balance_of(TKB, BOB) == 30
        assert empty_ledger.balance_of(TKB, POOL_ACCOUNT) == 0

    def test_transfer_needs_pool_balance(self, empty_ledger):
        empty_ledger.mint(TKB, POOL_ACCOUNT, 5)
        assert empty_ledger.transfer(TKB, BOB, 6) is False
        assert empty_ledger.balance_of(TKB, POOL_ACCOUNT) == 5

    def test_zero_transfer_succeeds(self, empty_ledger):
        assert empty_ledger.transfer(TKA, BOB, 0) is True

    def test_negative_amount_raises(self, empty_ledger):
        with pytest.raises(InvalidAmount):
            empty_ledger.mint(TKA, ALICE, -1)
        with pytest.raises(InvalidAmount):
            empty_ledger.transfer(TKA, ALICE, -1)

    def test_address_owners_are_case_insensitive(self, empty_ledger):
        addr = "0xAbCdEf0000000000000000000000000000000001"
        empty_ledger.mint(TKA, addr, 7)
        assert empty_ledger.balance_of(TKA, addr.lower()) == 7

    def test_empty_owner_raises(self, empty_ledger):
        with pytest.raises(InvalidIdentifier):
            empty_ledger.mint(TKA, "  ", 1)

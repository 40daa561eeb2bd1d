"""Pytest configuration and fixtures."""

from collections.abc import Callable

import pytest

from dex.ledger import InMemoryLedger
from dex.pool import Pool
from tests.helpers import ALICE, make_ledger, make_pool


@pytest.fixture
def ledger() -> InMemoryLedger:
    """Ledger with alice, bob and carol funded and approved."""
    return make_ledger()


@pytest.fixture
def pool(ledger: InMemoryLedger) -> Pool:
    """Empty TKA/TKB pool."""
    return make_pool(ledger)


@pytest.fixture
def seeded_pool(pool: Pool) -> Pool:
    """Pool at reserves (100, 200) with alice holding all 141 shares."""
    pool.add_liquidity(ALICE, 100, 200)
    return pool


# =============================================================================
# Ledger doubles for failure and re-entrancy tests
# =============================================================================


class FlakyLedger(InMemoryLedger):
    """In-memory ledger that refuses selected transfers.

    Usage:
        ledger = make_ledger(ledger_cls=FlakyLedger)
        ledger.fail_pull.add("TKB")   # transfer_from of TKB returns False
        ledger.fail_push.add("TKA")   # transfer of TKA returns False
    """

    def __init__(self, pool_account: str = "pool") -> None:
        super().__init__(pool_account=pool_account)
        self.fail_pull: set[str] = set()
        self.fail_push: set[str] = set()

    def transfer_from(self, asset_id: str, payer: str, amount: int) -> bool:
        if asset_id in self.fail_pull:
            return False
        return super().transfer_from(asset_id, payer, amount)

    def transfer(self, asset_id: str, payee: str, amount: int) -> bool:
        if asset_id in self.fail_push:
            return False
        return super().transfer(asset_id, payee, amount)


class CallbackLedger(InMemoryLedger):
    """In-memory ledger that runs a callback before every outbound transfer.

    Simulates a token that hands control to the recipient mid-transfer.
    """

    def __init__(self, pool_account: str = "pool") -> None:
        super().__init__(pool_account=pool_account)
        self.on_push: Callable[[str, str, int], None] | None = None

    def transfer(self, asset_id: str, payee: str, amount: int) -> bool:
        if self.on_push is not None:
            self.on_push(asset_id, payee, amount)
        return super().transfer(asset_id, payee, amount)


@pytest.fixture
def flaky_ledger() -> FlakyLedger:
    ledger = make_ledger(ledger_cls=FlakyLedger)
    assert isinstance(ledger, FlakyLedger)
    return ledger


@pytest.fixture
def callback_ledger() -> CallbackLedger:
    ledger = make_ledger(ledger_cls=CallbackLedger)
    assert isinstance(ledger, CallbackLedger)
    return ledger

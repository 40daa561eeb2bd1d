"""Asset ledger capability used by the pool.

The pool never keeps asset balances itself; it asks a ledger to pull funds
from a payer into the pool account and to push funds from the pool account
to a payee. Any object with the two AssetLedger methods can serve.

InMemoryLedger is a reference implementation for local use and tests:
mintable balances plus allowances granted to the pool, in the manner of a
mock ERC-20 token.
"""

from __future__ import annotations

import threading
from collections import defaultdict
from typing import Protocol, runtime_checkable

import structlog

from dex.constants import DEFAULT_POOL_ACCOUNT
from dex.errors import InvalidAmount
from dex.models.types import normalize_identifier
from dex.safe_int import S

logger = structlog.get_logger()


@runtime_checkable
class AssetLedger(Protocol):
    """Protocol for the external asset ledger.

    Both methods report failure by returning False. A failed call must not
    have moved any funds.
    """

    def transfer_from(self, asset_id: str, payer: str, amount: int) -> bool:
        """Move `amount` of `asset_id` from `payer` into the pool."""
        ...

    def transfer(self, asset_id: str, payee: str, amount: int) -> bool:
        """Move `amount` of `asset_id` from the pool to `payee`."""
        ...


class InMemoryLedger:
    """Balances and pool allowances held in process memory.

    transfer_from consumes the payer's allowance to the pool account, so a
    provider has to approve() before depositing, as with an ERC-20 token.
    """

    def __init__(self, pool_account: str = DEFAULT_POOL_ACCOUNT) -> None:
        self.pool_account = normalize_identifier(pool_account, "pool_account")
        # (asset_id, owner) -> amount
        self._balances: dict[tuple[str, str], int] = defaultdict(int)
        self._allowances: dict[tuple[str, str], int] = defaultdict(int)
        self._lock = threading.Lock()

    def balance_of(self, asset_id: str, owner: str) -> int:
        key = (normalize_identifier(asset_id, "asset_id"), normalize_identifier(owner, "owner"))
        return self._balances.get(key, 0)

    def allowance(self, asset_id: str, owner: str) -> int:
        """Amount the pool may still pull from `owner`."""
        key = (normalize_identifier(asset_id, "asset_id"), normalize_identifier(owner, "owner"))
        return self._allowances.get(key, 0)

    def mint(self, asset_id: str, owner: str, amount: int) -> int:
        """Credit `owner` with newly created units. Returns the new balance."""
        _require_amount(amount)
        key = (normalize_identifier(asset_id, "asset_id"), normalize_identifier(owner, "owner"))
        with self._lock:
            self._balances[key] = (S(self._balances[key]) + amount).value
            balance = self._balances[key]
        logger.debug("ledger_mint", asset_id=key[0], owner=key[1], amount=amount, balance=balance)
        return balance

    def approve(self, asset_id: str, owner: str, amount: int) -> None:
        """Set the allowance `owner` grants to the pool (replaces, not adds)."""
        _require_amount(amount)
        key = (normalize_identifier(asset_id, "asset_id"), normalize_identifier(owner, "owner"))
        with self._lock:
            self._allowances[key] = amount
        logger.debug("ledger_approve", asset_id=key[0], owner=key[1], amount=amount)

    def transfer_from(self, asset_id: str, payer: str, amount: int) -> bool:
        _require_amount(amount)
        asset = normalize_identifier(asset_id, "asset_id")
        src = (asset, normalize_identifier(payer, "payer"))
        with self._lock:
            if self._balances[src] < amount or self._allowances[src] < amount:
                logger.warning(
                    "ledger_pull_rejected",
                    asset_id=asset,
                    payer=src[1],
                    amount=amount,
                    balance=self._balances[src],
                    allowance=self._allowances[src],
                )
                return False
            self._move(src, (asset, self.pool_account), amount)
            self._allowances[src] -= amount
        return True

    def transfer(self, asset_id: str, payee: str, amount: int) -> bool:
        _require_amount(amount)
        asset = normalize_identifier(asset_id, "asset_id")
        src = (asset, self.pool_account)
        with self._lock:
            if self._balances[src] < amount:
                logger.warning(
                    "ledger_push_rejected",
                    asset_id=asset,
                    payee=payee,
                    amount=amount,
                    balance=self._balances[src],
                )
                return False
            self._move(src, (asset, normalize_identifier(payee, "payee")), amount)
        return True

    def _move(self, src: tuple[str, str], dst: tuple[str, str], amount: int) -> None:
        # Caller holds the lock and has checked the source balance
        if src == dst:
            return
        new_dst = (S(self._balances[dst]) + amount).value
        self._balances[src] -= amount
        self._balances[dst] = new_dst


def _require_amount(amount: int) -> None:
    if not isinstance(amount, int) or isinstance(amount, bool):
        raise InvalidAmount(f"Amount must be an int, got {type(amount).__name__}")
    if amount < 0:
        raise InvalidAmount(f"Amount cannot be negative: {amount}")

"""Two-asset constant-product liquidity pool.

The Pool is the only aggregate: two reserves, a total share count and a
per-owner share ledger. Four operations mutate it (add_liquidity,
remove_liquidity, swap_a_for_b, swap_b_for_a); everything else is a
read-only query.

Ordering rules every operation follows:
- All validation happens before any transfer or state change.
- Inbound transfers (pulls from the caller) complete before the internal
  credit is applied.
- Internal state is updated before any outbound transfer (push to the
  caller), so a ledger that calls back into the pool sees post-operation
  state.
- If any step fails, completed steps are undone in reverse order and the
  error propagates unchanged. A payout the ledger will not take back ends
  the undo early, keeping the steps before it, and raises UnwindFailed.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass

import structlog

from dex.amm import constant_product, initial_shares, proportional_shares, redemption_amounts
from dex.errors import (
    InsufficientLiquidity,
    InsufficientLiquidityForSwap,
    InsufficientOutputAmount,
    InsufficientShareBalance,
    InvalidAmount,
    InvalidIdentifier,
    InvariantViolation,
    TransferFailed,
    UnwindFailed,
)
from dex.ledger import AssetLedger
from dex.models.events import AnyEvent, LiquidityAdded, LiquidityRemoved, Swap
from dex.models.types import normalize_identifier
from dex.safe_int import S

logger = structlog.get_logger()

EventListener = Callable[[AnyEvent], None]


@dataclass(frozen=True)
class PoolSnapshot:
    """Point-in-time view of the pool state."""

    asset_a_id: str
    asset_b_id: str
    reserve_a: int
    reserve_b: int
    total_shares: int

    @property
    def k(self) -> int:
        """Constant product reserve_a * reserve_b."""
        return self.reserve_a * self.reserve_b


@dataclass(frozen=True)
class _Delta:
    """Signed change to reserves and to one owner's share balance."""

    owner: str
    reserve_a: int = 0
    reserve_b: int = 0
    shares: int = 0

    def inverse(self) -> _Delta:
        return _Delta(self.owner, -self.reserve_a, -self.reserve_b, -self.shares)


def _shift(value: int, delta: int) -> int:
    if delta >= 0:
        return (S(value) + delta).value
    return (S(value) - -delta).value


def _require_positive(value: int, name: str) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidAmount(f"{name} must be an int, got {type(value).__name__}")
    if value <= 0:
        raise InvalidAmount(f"{name} must be greater than 0: {value}")


class _Transaction:
    """Journal of completed steps within one pool operation.

    On an exception inside the `with` block every recorded step is undone in
    reverse order: state deltas are inverted, pulls are refunded and pushes
    are reclaimed. On a clean exit the pool invariants are checked, and a
    violation is unwound the same way.

    A payout that cannot be reclaimed has left the pool for good, so the
    unwind stops there: the steps recorded before it stay in effect and
    UnwindFailed is raised in place of the original error.
    """

    def __init__(self, pool: Pool, operation: str) -> None:
        self._pool = pool
        self._operation = operation
        self._undo: list[tuple[str, tuple]] = []

    def __enter__(self) -> _Transaction:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # type: ignore[no-untyped-def]
        if exc_type is None:
            try:
                self._pool.check_invariants()
            except InvariantViolation as err:
                self._unwind(err)
                raise
            return
        self._unwind(exc)

    def pull(self, asset_id: str, payer: str, amount: int) -> None:
        if not self._pool.ledger.transfer_from(asset_id, payer, amount):
            raise TransferFailed(f"Could not pull {amount} {asset_id} from {payer}")
        self._undo.append(("pull", (asset_id, payer, amount)))

    def push(self, asset_id: str, payee: str, amount: int) -> None:
        if not self._pool.ledger.transfer(asset_id, payee, amount):
            raise TransferFailed(f"Could not push {amount} {asset_id} to {payee}")
        self._undo.append(("push", (asset_id, payee, amount)))

    def apply(self, delta: _Delta) -> None:
        self._pool._apply(delta)
        self._undo.append(("apply", (delta,)))

    def _unwind(self, cause: BaseException) -> None:
        ledger = self._pool.ledger
        while self._undo:
            step, args = self._undo.pop()
            if step == "apply":
                self._pool._apply(args[0].inverse())
            elif step == "pull":
                if not ledger.transfer(*args):
                    # Funds stay in the pool above its reserves
                    logger.error(
                        "refund_failed",
                        operation=self._operation,
                        asset_id=args[0],
                        account=args[1],
                        amount=args[2],
                    )
            elif not ledger.transfer_from(*args):
                kept = len(self._undo)
                self._undo.clear()
                logger.error(
                    "reclaim_failed",
                    operation=self._operation,
                    asset_id=args[0],
                    account=args[1],
                    amount=args[2],
                    kept_steps=kept,
                )
                raise UnwindFailed(
                    f"{self._operation}: could not reclaim {args[2]} {args[0]} "
                    f"from {args[1]} after {type(cause).__name__}: {cause}"
                ) from cause


class Pool:
    """Constant-product pool for one pair of assets.

    Each state-changing call holds the pool lock for its full duration, so
    operations from different threads are serialized. The lock is
    re-entrant: a ledger that calls back into the pool from the same thread
    proceeds and observes the state already committed by the outer call.

    Args:
        asset_a_id: Identifier of asset A
        asset_b_id: Identifier of asset B (must differ from asset A)
        ledger: Asset ledger that moves funds in and out of the pool
    """

    def __init__(self, asset_a_id: str, asset_b_id: str, ledger: AssetLedger) -> None:
        asset_a = normalize_identifier(asset_a_id, "asset_a_id")
        asset_b = normalize_identifier(asset_b_id, "asset_b_id")
        if asset_a == asset_b:
            raise InvalidIdentifier(f"Pool assets must differ: {asset_a}")
        if not isinstance(ledger, AssetLedger):
            raise TypeError(f"ledger must implement AssetLedger, got {type(ledger).__name__}")

        self._asset_a_id = asset_a
        self._asset_b_id = asset_b
        self.ledger = ledger

        self._reserve_a = 0
        self._reserve_b = 0
        self._total_shares = 0
        # Absent owners hold zero shares; zero balances are kept, not deleted
        self._shares: dict[str, int] = {}

        self._events: list[AnyEvent] = []
        self._listeners: list[EventListener] = []
        self._lock = threading.RLock()

        logger.info("pool_created", asset_a=asset_a, asset_b=asset_b)

    # --- Read queries ---

    @property
    def asset_a_id(self) -> str:
        return self._asset_a_id

    @property
    def asset_b_id(self) -> str:
        return self._asset_b_id

    @property
    def reserve_a(self) -> int:
        return self._reserve_a

    @property
    def reserve_b(self) -> int:
        return self._reserve_b

    @property
    def total_shares(self) -> int:
        return self._total_shares

    @property
    def k(self) -> int:
        """Constant product reserve_a * reserve_b."""
        return self._reserve_a * self._reserve_b

    @property
    def events(self) -> tuple[AnyEvent, ...]:
        """Events emitted so far, oldest first."""
        return tuple(self._events)

    def reserves(self) -> tuple[int, int]:
        """Current (reserve_a, reserve_b)."""
        with self._lock:
            return self._reserve_a, self._reserve_b

    def shares_of(self, owner: str) -> int:
        return self._shares.get(normalize_identifier(owner, "owner"), 0)

    def price(self) -> int:
        """Units of B per unit of A as a 1e18 fixed-point integer.

        Raises:
            NoLiquidity: If the pool is empty
        """
        with self._lock:
            return constant_product.spot_price(self._reserve_a, self._reserve_b)

    @staticmethod
    def quote_output(amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """Output of an exact-input swap against arbitrary reserves (pure)."""
        return constant_product.get_amount_out(amount_in, reserve_in, reserve_out)

    def snapshot(self) -> PoolSnapshot:
        with self._lock:
            return PoolSnapshot(
                asset_a_id=self._asset_a_id,
                asset_b_id=self._asset_b_id,
                reserve_a=self._reserve_a,
                reserve_b=self._reserve_b,
                total_shares=self._total_shares,
            )

    def subscribe(self, listener: EventListener) -> Callable[[], None]:
        """Register a callback for every future event.

        Listeners run after the operation has committed. An exception from
        a listener is logged; the caller and later listeners are unaffected.

        Returns:
            A function that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def check_invariants(self) -> None:
        """Verify the pool state.

        Raises:
            InvariantViolation: If reserves and shares are not all zero or
                all positive together, or if total_shares differs from the
                sum of owner balances
        """
        empty = (self._reserve_a == 0, self._reserve_b == 0, self._total_shares == 0)
        if len(set(empty)) != 1:
            raise InvariantViolation(
                f"Reserves ({self._reserve_a}, {self._reserve_b}) inconsistent "
                f"with total_shares {self._total_shares}"
            )
        owned = sum(self._shares.values())
        if owned != self._total_shares:
            raise InvariantViolation(
                f"total_shares {self._total_shares} != sum of balances {owned}"
            )

    # --- Liquidity provision ---

    def add_liquidity(self, provider: str, amount_a: int, amount_b: int) -> int:
        """Deposit both assets and mint shares to `provider`.

        An empty pool mints floor(sqrt(amount_a * amount_b)). Otherwise each
        side is credited pro rata and the provider receives the smaller of
        the two; the surplus on the other side is still deposited.

        Returns:
            Number of shares minted

        Raises:
            InvalidAmount: If either amount is not positive
            InsufficientSharesMinted: If the deposit rounds to zero shares
            TransferFailed: If the ledger refuses either deposit
            ArithmeticOverflow: If any intermediate exceeds uint256
        """
        provider = normalize_identifier(provider, "provider")
        _require_positive(amount_a, "amount_a")
        _require_positive(amount_b, "amount_b")

        with self._lock:
            if self._total_shares == 0:
                minted = initial_shares(amount_a, amount_b)
            else:
                minted = proportional_shares(
                    amount_a, amount_b, self._reserve_a, self._reserve_b, self._total_shares
                )
            delta = _Delta(provider, reserve_a=amount_a, reserve_b=amount_b, shares=minted)
            self._shifted(delta)

            with _Transaction(self, "add_liquidity") as tx:
                tx.pull(self._asset_a_id, provider, amount_a)
                tx.pull(self._asset_b_id, provider, amount_b)
                tx.apply(delta)

            logger.info(
                "liquidity_added",
                provider=provider,
                amount_a=amount_a,
                amount_b=amount_b,
                shares_minted=minted,
                total_shares=self._total_shares,
            )
            self._emit(
                LiquidityAdded(
                    provider=provider,
                    amount_a=amount_a,
                    amount_b=amount_b,
                    shares_minted=minted,
                )
            )
        return minted

    def remove_liquidity(self, provider: str, shares: int) -> tuple[int, int]:
        """Burn `shares` owned by `provider` for a proportional redemption.

        Returns:
            (amount_a, amount_b) sent to the provider

        Raises:
            InvalidAmount: If shares is not positive
            InsufficientShareBalance: If the provider owns fewer shares
            InsufficientSharesBurned: If either side rounds to zero
            TransferFailed: If the ledger refuses either payout
        """
        provider = normalize_identifier(provider, "provider")
        _require_positive(shares, "shares")

        with self._lock:
            balance = self._shares.get(provider, 0)
            if shares > balance:
                raise InsufficientShareBalance(
                    f"Insufficient liquidity balance: {provider} owns {balance}, requested {shares}"
                )
            amount_a, amount_b = redemption_amounts(
                shares, self._reserve_a, self._reserve_b, self._total_shares
            )
            delta = _Delta(provider, reserve_a=-amount_a, reserve_b=-amount_b, shares=-shares)
            self._shifted(delta)

            with _Transaction(self, "remove_liquidity") as tx:
                tx.apply(delta)
                tx.push(self._asset_a_id, provider, amount_a)
                tx.push(self._asset_b_id, provider, amount_b)

            logger.info(
                "liquidity_removed",
                provider=provider,
                amount_a=amount_a,
                amount_b=amount_b,
                shares_burned=shares,
                total_shares=self._total_shares,
            )
            self._emit(
                LiquidityRemoved(
                    provider=provider,
                    amount_a=amount_a,
                    amount_b=amount_b,
                    shares_burned=shares,
                )
            )
        return amount_a, amount_b

    # --- Swaps ---

    def swap_a_for_b(self, trader: str, amount_in: int) -> int:
        """Sell exactly `amount_in` of asset A for asset B. Returns amount out."""
        return self._swap(trader, amount_in, a_to_b=True)

    def swap_b_for_a(self, trader: str, amount_in: int) -> int:
        """Sell exactly `amount_in` of asset B for asset A. Returns amount out."""
        return self._swap(trader, amount_in, a_to_b=False)

    def swap(self, trader: str, asset_in: str, amount_in: int) -> int:
        """Sell exactly `amount_in` of `asset_in` for the other pool asset.

        Raises:
            InvalidIdentifier: If asset_in is not one of the pool assets
        """
        asset = normalize_identifier(asset_in, "asset_in")
        if asset == self._asset_a_id:
            return self.swap_a_for_b(trader, amount_in)
        if asset == self._asset_b_id:
            return self.swap_b_for_a(trader, amount_in)
        raise InvalidIdentifier(f"Asset {asset_in} not in pool")

    def _swap(self, trader: str, amount_in: int, a_to_b: bool) -> int:
        """Execute an exact-input swap.

        Raises:
            InvalidAmount: If amount_in is not positive
            InsufficientLiquidity: If either reserve is zero
            InsufficientOutputAmount: If the output rounds to zero
            InsufficientLiquidityForSwap: If the output would drain the reserve
            TransferFailed: If the ledger refuses the deposit or the payout
            InvariantViolation: If k did not grow
        """
        trader = normalize_identifier(trader, "trader")
        _require_positive(amount_in, "amount_in")

        with self._lock:
            if self._reserve_a == 0 or self._reserve_b == 0:
                raise InsufficientLiquidity(
                    f"Reserves must be positive: ({self._reserve_a}, {self._reserve_b})"
                )

            if a_to_b:
                asset_in, asset_out = self._asset_a_id, self._asset_b_id
                reserve_in, reserve_out = self._reserve_a, self._reserve_b
            else:
                asset_in, asset_out = self._asset_b_id, self._asset_a_id
                reserve_in, reserve_out = self._reserve_b, self._reserve_a

            amount_out = constant_product.get_amount_out(amount_in, reserve_in, reserve_out)
            if amount_out == 0:
                raise InsufficientOutputAmount(
                    f"Swap of {amount_in} {asset_in} returns zero {asset_out}"
                )
            if amount_out >= reserve_out:
                raise InsufficientLiquidityForSwap(
                    f"Output {amount_out} {asset_out} would drain reserve {reserve_out}"
                )

            if a_to_b:
                delta = _Delta(trader, reserve_a=amount_in, reserve_b=-amount_out)
            else:
                delta = _Delta(trader, reserve_a=-amount_out, reserve_b=amount_in)
            self._shifted(delta)
            k_before = self.k

            with _Transaction(self, "swap") as tx:
                tx.pull(asset_in, trader, amount_in)
                tx.apply(delta)
                if self.k <= k_before:
                    raise InvariantViolation(f"k did not grow: {k_before} -> {self.k}")
                tx.push(asset_out, trader, amount_out)

            logger.info(
                "swap_executed",
                trader=trader,
                asset_in=asset_in,
                asset_out=asset_out,
                amount_in=amount_in,
                amount_out=amount_out,
                reserve_a=self._reserve_a,
                reserve_b=self._reserve_b,
            )
            self._emit(
                Swap(
                    trader=trader,
                    asset_in=asset_in,
                    asset_out=asset_out,
                    amount_in=amount_in,
                    amount_out=amount_out,
                )
            )
        return amount_out

    # --- State mutation ---

    def _shifted(self, delta: _Delta) -> tuple[int, int, int, int]:
        """New (reserve_a, reserve_b, total_shares, owner_shares) after `delta`.

        Pure: raises ArithmeticOverflow or Underflow without touching state.
        """
        return (
            _shift(self._reserve_a, delta.reserve_a),
            _shift(self._reserve_b, delta.reserve_b),
            _shift(self._total_shares, delta.shares),
            _shift(self._shares.get(delta.owner, 0), delta.shares),
        )

    def _apply(self, delta: _Delta) -> None:
        reserve_a, reserve_b, total_shares, owner_shares = self._shifted(delta)
        self._reserve_a = reserve_a
        self._reserve_b = reserve_b
        self._total_shares = total_shares
        if delta.shares or delta.owner in self._shares:
            self._shares[delta.owner] = owner_shares

    def _emit(self, event: AnyEvent) -> None:
        self._events.append(event)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                # The operation has already committed
                logger.exception("event_listener_failed", kind=event.kind)

"""API endpoints for the pool service."""

import structlog
from fastapi import APIRouter, Depends, HTTPException

from dex.amm import constant_product
from dex.config import Settings
from dex.errors import ArithmeticOverflow, NoLiquidity
from dex.ledger import InMemoryLedger
from dex.models.api import (
    AddLiquidityRequest,
    AddLiquidityResponse,
    BalanceResponse,
    LedgerAmountRequest,
    PoolStateResponse,
    PriceResponse,
    QuoteResponse,
    RemoveLiquidityRequest,
    RemoveLiquidityResponse,
    ReservesResponse,
    SharesResponse,
    SwapRequest,
    SwapResponse,
)
from dex.models.events import EventLog
from dex.models.types import normalize_identifier
from dex.pool import Pool

logger = structlog.get_logger()

router = APIRouter()

_default_pool: Pool | None = None


def create_pool(settings: Settings) -> Pool:
    """Build a pool backed by a fresh in-memory ledger."""
    ledger = InMemoryLedger(pool_account=settings.pool_account)
    return Pool(settings.asset_a, settings.asset_b, ledger)


def get_default_pool() -> Pool:
    """Process-wide pool, created from the environment on first use."""
    global _default_pool
    if _default_pool is None:
        _default_pool = create_pool(Settings.from_env())
    return _default_pool


def get_pool() -> Pool:
    """Dependency provider for the pool instance.

    Override this in tests to inject a fresh pool:
        app.dependency_overrides[get_pool] = lambda: pool
    """
    return get_default_pool()


def get_ledger(pool: Pool = Depends(get_pool)) -> InMemoryLedger:
    """The pool's ledger, when it is the in-memory reference ledger."""
    if not isinstance(pool.ledger, InMemoryLedger):
        raise HTTPException(status_code=404, detail="Pool uses an external ledger")
    return pool.ledger


# --- Read queries ---


@router.get("/pool")
def pool_state(pool: Pool = Depends(get_pool)) -> PoolStateResponse:
    """Asset ids, reserves, total shares and price (None when it cannot be quoted)."""
    snapshot = pool.snapshot()
    try:
        price = constant_product.spot_price(snapshot.reserve_a, snapshot.reserve_b)
    except (NoLiquidity, ArithmeticOverflow):
        # Empty pool, or a price past uint256
        price = None
    return PoolStateResponse(
        asset_a=snapshot.asset_a_id,
        asset_b=snapshot.asset_b_id,
        reserve_a=snapshot.reserve_a,
        reserve_b=snapshot.reserve_b,
        total_shares=snapshot.total_shares,
        price=price,
    )


@router.get("/reserves")
def reserves(pool: Pool = Depends(get_pool)) -> ReservesResponse:
    reserve_a, reserve_b = pool.reserves()
    return ReservesResponse(reserve_a=reserve_a, reserve_b=reserve_b)


@router.get("/price")
def price(pool: Pool = Depends(get_pool)) -> PriceResponse:
    return PriceResponse(price=pool.price())


@router.get("/quote")
def quote(amount_in: int, reserve_in: int, reserve_out: int) -> QuoteResponse:
    """Pure swap quote against caller-supplied reserves."""
    return QuoteResponse(amount_out=Pool.quote_output(amount_in, reserve_in, reserve_out))


@router.get("/shares/{owner}")
def shares(owner: str, pool: Pool = Depends(get_pool)) -> SharesResponse:
    return SharesResponse(owner=owner, shares=pool.shares_of(owner))


@router.get("/events")
def events(pool: Pool = Depends(get_pool)) -> EventLog:
    """Every event emitted by the pool, oldest first."""
    return EventLog(events=list(pool.events))


# --- State-changing operations ---


@router.post("/liquidity/add")
def add_liquidity(
    request: AddLiquidityRequest,
    pool: Pool = Depends(get_pool),
) -> AddLiquidityResponse:
    logger.info(
        "received_add_liquidity",
        provider=request.provider,
        amount_a=request.amount_a,
        amount_b=request.amount_b,
    )
    minted = pool.add_liquidity(request.provider, request.amount_a, request.amount_b)
    return AddLiquidityResponse(shares_minted=minted)


@router.post("/liquidity/remove")
def remove_liquidity(
    request: RemoveLiquidityRequest,
    pool: Pool = Depends(get_pool),
) -> RemoveLiquidityResponse:
    logger.info("received_remove_liquidity", provider=request.provider, shares=request.shares)
    amount_a, amount_b = pool.remove_liquidity(request.provider, request.shares)
    return RemoveLiquidityResponse(amount_a=amount_a, amount_b=amount_b)


@router.post("/swap")
def swap(request: SwapRequest, pool: Pool = Depends(get_pool)) -> SwapResponse:
    logger.info(
        "received_swap",
        trader=request.trader,
        asset_in=request.asset_in,
        amount_in=request.amount_in,
    )
    amount_out = pool.swap(request.trader, request.asset_in, request.amount_in)
    asset_in = normalize_identifier(request.asset_in, "asset_in")
    asset_out = pool.asset_b_id if asset_in == pool.asset_a_id else pool.asset_a_id
    return SwapResponse(
        asset_in=asset_in,
        asset_out=asset_out,
        amount_in=request.amount_in,
        amount_out=amount_out,
    )


# --- Reference ledger helpers ---


@router.post("/ledger/mint")
def mint(
    request: LedgerAmountRequest,
    ledger: InMemoryLedger = Depends(get_ledger),
) -> BalanceResponse:
    """Credit an account with newly created units (local funding)."""
    ledger.mint(request.asset_id, request.owner, request.amount)
    return _balance(ledger, request.asset_id, request.owner)


@router.post("/ledger/approve")
def approve(
    request: LedgerAmountRequest,
    ledger: InMemoryLedger = Depends(get_ledger),
) -> BalanceResponse:
    """Set the allowance an account grants to the pool."""
    ledger.approve(request.asset_id, request.owner, request.amount)
    return _balance(ledger, request.asset_id, request.owner)


@router.get("/ledger/{asset_id}/{owner}")
def balance(
    asset_id: str,
    owner: str,
    ledger: InMemoryLedger = Depends(get_ledger),
) -> BalanceResponse:
    return _balance(ledger, asset_id, owner)


def _balance(ledger: InMemoryLedger, asset_id: str, owner: str) -> BalanceResponse:
    return BalanceResponse(
        asset_id=asset_id,
        owner=owner,
        balance=ledger.balance_of(asset_id, owner),
        allowance=ledger.allowance(asset_id, owner),
    )

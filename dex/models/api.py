"""Pydantic request/response models for the pool HTTP API.

Amounts are accepted as ints or decimal strings and always returned as
decimal strings, so uint256 values survive JSON clients without precision
loss.
"""

from pydantic import BaseModel, Field

from dex.constants import PRICE_SCALE
from dex.models.types import Identifier, Uint256


class AddLiquidityRequest(BaseModel):
    """Two-sided deposit."""

    provider: Identifier
    amount_a: Uint256
    amount_b: Uint256


class AddLiquidityResponse(BaseModel):
    shares_minted: Uint256


class RemoveLiquidityRequest(BaseModel):
    """Burn shares for a proportional redemption."""

    provider: Identifier
    shares: Uint256


class RemoveLiquidityResponse(BaseModel):
    amount_a: Uint256
    amount_b: Uint256


class SwapRequest(BaseModel):
    """Exact-input swap of `asset_in` for the other pool asset."""

    trader: Identifier
    asset_in: Identifier
    amount_in: Uint256


class SwapResponse(BaseModel):
    asset_in: Identifier
    asset_out: Identifier
    amount_in: Uint256
    amount_out: Uint256


class PoolStateResponse(BaseModel):
    """Full pool state. `price` is None while the pool is empty or when
    it does not fit in uint256.
    """

    asset_a: Identifier
    asset_b: Identifier
    reserve_a: Uint256
    reserve_b: Uint256
    total_shares: Uint256
    price: Uint256 | None = None


class ReservesResponse(BaseModel):
    reserve_a: Uint256
    reserve_b: Uint256


class PriceResponse(BaseModel):
    """Units of B per unit of A, as an integer scaled by `scale`."""

    price: Uint256
    scale: Uint256 = Field(default=PRICE_SCALE)


class QuoteResponse(BaseModel):
    amount_out: Uint256


class SharesResponse(BaseModel):
    owner: Identifier
    shares: Uint256


class LedgerAmountRequest(BaseModel):
    """Mint or approve `amount` of `asset_id` for `owner`."""

    asset_id: Identifier
    owner: Identifier
    amount: Uint256


class BalanceResponse(BaseModel):
    asset_id: Identifier
    owner: Identifier
    balance: Uint256
    allowance: Uint256


class ErrorResponse(BaseModel):
    """Body returned for rejected pool operations."""

    error: str = Field(description="Error kind, e.g. InvalidAmount")
    detail: str

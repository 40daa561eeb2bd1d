"""Pool events.

One event is emitted per successful state-changing operation, after all
state mutation, carrying the final computed values. Events are for
auditing and indexing; nothing in the pool reads them back.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, Field

from dex.models.types import Identifier, Uint256


class LiquidityAdded(BaseModel):
    """Shares minted against a two-sided deposit."""

    kind: Literal["LiquidityAdded"] = "LiquidityAdded"
    provider: Identifier
    amount_a: Uint256
    amount_b: Uint256
    shares_minted: Uint256

    model_config = {"frozen": True}


class LiquidityRemoved(BaseModel):
    """Shares burned for a proportional redemption."""

    kind: Literal["LiquidityRemoved"] = "LiquidityRemoved"
    provider: Identifier
    amount_a: Uint256
    amount_b: Uint256
    shares_burned: Uint256

    model_config = {"frozen": True}


class Swap(BaseModel):
    """An exact-input swap in either direction."""

    kind: Literal["Swap"] = "Swap"
    trader: Identifier
    asset_in: Identifier
    asset_out: Identifier
    amount_in: Uint256
    amount_out: Uint256

    model_config = {"frozen": True}


PoolEvent = Annotated[
    LiquidityAdded | LiquidityRemoved | Swap,
    Field(discriminator="kind"),
]


class EventLog(BaseModel):
    """Ordered event history, as served over HTTP."""

    events: list[PoolEvent] = Field(default_factory=list)


# Plain union for type hints where the discriminator is not needed
AnyEvent = LiquidityAdded | LiquidityRemoved | Swap

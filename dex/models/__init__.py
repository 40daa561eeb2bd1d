"""Pydantic models for pool events and identifiers."""

from dex.models.events import (
    AnyEvent,
    EventLog,
    LiquidityAdded,
    LiquidityRemoved,
    PoolEvent,
    Swap,
)
from dex.models.types import Identifier, Uint256, normalize_identifier, validate_uint256

__all__ = [
    # Events
    "AnyEvent",
    "EventLog",
    "LiquidityAdded",
    "LiquidityRemoved",
    "PoolEvent",
    "Swap",
    # Types
    "Identifier",
    "Uint256",
    "normalize_identifier",
    "validate_uint256",
]

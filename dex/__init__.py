"""Constant-product AMM pool - Python implementation."""

from dex.ledger import AssetLedger, InMemoryLedger
from dex.pool import Pool, PoolSnapshot

__version__ = "0.1.0"
__all__ = ["AssetLedger", "InMemoryLedger", "Pool", "PoolSnapshot", "__version__"]

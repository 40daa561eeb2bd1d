"""Runtime configuration for the pool service."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from dex.constants import DEFAULT_POOL_ACCOUNT

_TRUTHY = ("true", "1", "yes")


@dataclass(frozen=True)
class Settings:
    """Centralized settings for the HTTP service and the pool it wraps.

    Attributes:
        host: Interface the API binds to
        port: Port the API listens on
        debug: Enable uvicorn auto-reload
        log_level: Minimum structlog level name (DEBUG, INFO, ...)
        json_logs: Render logs as JSON lines instead of console output
        asset_a: Identifier of the pool's asset A
        asset_b: Identifier of the pool's asset B
        pool_account: Ledger account that holds pool funds
    """

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    log_level: str = "INFO"
    json_logs: bool = False
    asset_a: str = "TKA"
    asset_b: str = "TKB"
    pool_account: str = DEFAULT_POOL_ACCOUNT

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Load settings from DEX_* environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Raises:
            ValueError: If DEX_PORT is not an integer
        """
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            host=env.get("DEX_HOST", defaults.host),
            port=int(env.get("DEX_PORT", str(defaults.port))),
            debug=env.get("DEX_DEBUG", "false").lower() in _TRUTHY,
            log_level=env.get("DEX_LOG_LEVEL", defaults.log_level).upper(),
            json_logs=env.get("DEX_JSON_LOGS", "false").lower() in _TRUTHY,
            asset_a=env.get("DEX_ASSET_A", defaults.asset_a),
            asset_b=env.get("DEX_ASSET_B", defaults.asset_b),
            pool_account=env.get("DEX_POOL_ACCOUNT", defaults.pool_account),
        )

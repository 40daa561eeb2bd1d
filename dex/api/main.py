"""FastAPI application serving a single pool.

Note: Authentication is intentionally not implemented at the application
level. Callers identify themselves by name in each request; this service is
meant for local simulation and integration testing.
"""

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from dex import __version__
from dex.api.endpoints import router
from dex.config import Settings
from dex.errors import (
    ArithmeticOverflow,
    InvalidAmount,
    InvalidIdentifier,
    InvariantViolation,
    PoolError,
    UnwindFailed,
)
from dex.log_config import configure_logging
from dex.models.api import ErrorResponse

logger = structlog.get_logger()

settings = Settings.from_env()

# Rejected inputs; every other PoolError is a conflict with the pool state
BAD_REQUEST_ERRORS = (InvalidAmount, InvalidIdentifier, ArithmeticOverflow)

app = FastAPI(
    title="Constant-product pool",
    description="Two-asset AMM with liquidity shares and a 0.3% swap fee",
    version=__version__,
)


def status_for(error: PoolError) -> int:
    """HTTP status code for a rejected pool operation."""
    if isinstance(error, (InvariantViolation, UnwindFailed)):
        return 500
    if isinstance(error, BAD_REQUEST_ERRORS):
        return 400
    return 409


@app.exception_handler(PoolError)
async def pool_error_handler(request: Request, exc: PoolError) -> JSONResponse:
    """Render a pool rejection as {"error": kind, "detail": message}."""
    status_code = status_for(exc)
    log = logger.error if status_code >= 500 else logger.warning
    log(
        "pool_operation_rejected",
        path=request.url.path,
        error=type(exc).__name__,
        detail=str(exc),
    )
    body = ErrorResponse(error=type(exc).__name__, detail=str(exc))
    return JSONResponse(status_code=status_code, content=body.model_dump())


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def run() -> None:
    """Run the pool API server.

    Configuration via environment variables:
    - DEX_HOST: Host to bind to (default: 0.0.0.0)
    - DEX_PORT: Port to bind to (default: 8000)
    - DEX_DEBUG: Enable debug/reload mode (default: false)
    - DEX_LOG_LEVEL: Minimum log level (default: INFO)
    - DEX_JSON_LOGS: Emit JSON logs (default: false)
    - DEX_ASSET_A / DEX_ASSET_B: Pool asset identifiers (default: TKA / TKB)
    - DEX_POOL_ACCOUNT: Ledger account holding pool funds (default: pool)
    """
    configure_logging(settings.log_level, json_logs=settings.json_logs)
    logger.info(
        "starting_pool_api",
        host=settings.host,
        port=settings.port,
        asset_a=settings.asset_a,
        asset_b=settings.asset_b,
    )
    uvicorn.run(
        "dex.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()

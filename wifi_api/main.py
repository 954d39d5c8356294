"""
Wifi control API: FastAPI application entry point.

Run with:
    uvicorn wifi_api.main:app --host 0.0.0.0 --port 8000
or:
    wifi-api
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from wifi_api.api.routes import diagnostics as diagnostics_router
from wifi_api.api.routes import networks as networks_router
from wifi_api.api.routes import radio as radio_router
from wifi_api.api.routes import status as status_router
from wifi_api.config import settings
from wifi_api.wifi.gate import SingleFlightGate
from wifi_api.wifi.runner import CommandRunner, NmcliRunner

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

# httpx logs every connectivity probe at INFO.
logging.getLogger("httpx").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Log start-up configuration and the gate counters at shutdown."""
    logger.info(
        "Wifi control API started (nmcli=%s, interface=%s)",
        settings.nmcli_path,
        settings.wifi_interface or "auto",
    )
    try:
        yield
    finally:
        gate: SingleFlightGate = app.state.gate
        logger.info(
            "Wifi control API stopped (%d operation(s) admitted, %d completed)",
            gate.admitted,
            gate.completed,
        )


def create_app(
    runner: CommandRunner | None = None,
    gate: SingleFlightGate | None = None,
) -> FastAPI:
    """
    Build the application around one gate and one command runner.

    Both are created here unless supplied, and live on ``app.state`` for the
    lifetime of the process.
    """
    app = FastAPI(
        title="Wifi Control API",
        description="Wireless adapter control over HTTP, one nmcli operation at a time.",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.gate = gate if gate is not None else SingleFlightGate()
    app.state.runner = (
        runner
        if runner is not None
        else NmcliRunner(
            nmcli_path=settings.nmcli_path,
            interface=settings.wifi_interface,
            command_timeout=settings.command_timeout,
            connectivity_url=settings.connectivity_url,
        )
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Routers ──────────────────────────────────────────────────────────────
    app.include_router(status_router.router, tags=["health"])
    app.include_router(diagnostics_router.router, tags=["diagnostics"])
    app.include_router(radio_router.router, tags=["radio"])
    app.include_router(networks_router.router, tags=["networks"])

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve ``app`` with uvicorn."""
    uvicorn.run(
        "wifi_api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )

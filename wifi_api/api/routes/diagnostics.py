"""
Diagnostic endpoints.

GET /delay/{seconds}
    Hold the gate for *seconds* and report it.  Useful for checking that
    concurrent callers get the busy response.

GET /dev
    Name of the wireless device nmcli will be driven against.

GET /isonline
    Internet reachability.  A failed or slow probe is reported as
    ``offline``, never as an error.
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, Path

from wifi_api.api.deps import get_gate, get_runner
from wifi_api.api.guard import run_guarded
from wifi_api.api.responses import WifiResponse, format_outcome
from wifi_api.config import settings
from wifi_api.wifi.errors import WifiError
from wifi_api.wifi.gate import SingleFlightGate
from wifi_api.wifi.runner import CommandRunner

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/delay/{seconds}", response_model=WifiResponse)
async def delay(
    seconds: int = Path(ge=0, description="How long to hold the gate"),
    gate: SingleFlightGate = Depends(get_gate),
) -> WifiResponse:
    async def _wait() -> str:
        await asyncio.sleep(seconds)
        return f"waited {seconds} seconds"

    return format_outcome(await run_guarded(gate, "delay", _wait))


@router.get("/dev", response_model=WifiResponse)
async def device_name(
    gate: SingleFlightGate = Depends(get_gate),
    runner: CommandRunner = Depends(get_runner),
) -> WifiResponse:
    return format_outcome(await run_guarded(gate, "dev", runner.device_name))


@router.get("/isonline", response_model=WifiResponse)
async def is_online(
    gate: SingleFlightGate = Depends(get_gate),
    runner: CommandRunner = Depends(get_runner),
) -> WifiResponse:
    async def _probe() -> str:
        try:
            await runner.check_connectivity(settings.connectivity_timeout)
        except WifiError as exc:
            logger.info("Connectivity probe failed: %s", exc)
            return "offline"
        return "online"

    return format_outcome(await run_guarded(gate, "isonline", _probe))

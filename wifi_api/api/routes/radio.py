"""
Wifi radio control: GET /wifion, GET /wifioff, GET /iswifienabled.

Switching the radio to the state it is already in succeeds.
"""

from fastapi import APIRouter, Depends

from wifi_api.api.deps import get_gate, get_runner
from wifi_api.api.guard import run_guarded
from wifi_api.api.responses import WifiResponse, format_outcome
from wifi_api.wifi.gate import SingleFlightGate
from wifi_api.wifi.runner import CommandRunner

router = APIRouter()


@router.get("/wifion", response_model=WifiResponse)
async def wifi_on(
    gate: SingleFlightGate = Depends(get_gate),
    runner: CommandRunner = Depends(get_runner),
) -> WifiResponse:
    async def _on() -> str:
        await runner.radio_on()
        return "on"

    return format_outcome(await run_guarded(gate, "wifion", _on))


@router.get("/wifioff", response_model=WifiResponse)
async def wifi_off(
    gate: SingleFlightGate = Depends(get_gate),
    runner: CommandRunner = Depends(get_runner),
) -> WifiResponse:
    async def _off() -> str:
        await runner.radio_off()
        return "off"

    return format_outcome(await run_guarded(gate, "wifioff", _off))


@router.get("/iswifienabled", response_model=WifiResponse)
async def is_wifi_enabled(
    gate: SingleFlightGate = Depends(get_gate),
    runner: CommandRunner = Depends(get_runner),
) -> WifiResponse:
    async def _status() -> str:
        return "enabled" if await runner.radio_status() else "disabled"

    return format_outcome(await run_guarded(gate, "iswifienabled", _status))

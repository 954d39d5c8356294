"""
Network association endpoints.

POST /connect
    Body ``{"ssid": "...", "passwd": "..."}``.  Both fields must be non-empty.
    ``Message`` is ``"connected"`` or, when nmcli refused the connection,
    ``"did not connect"``.  A disabled radio is an error.

GET /disconnect
    Drop the current association.

GET /ssids
    Scan; ``Data`` holds ``[ssid, is_open]`` pairs.

GET /ssid
    Current SSID as ``[[ssid, true]]``, or an empty list when not associated.

Input is validated only after the gate has been entered, so a busy server
answers busy even to a malformed request.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from wifi_api.api.deps import get_gate, get_runner
from wifi_api.api.guard import run_guarded
from wifi_api.api.responses import WifiResponse, format_outcome
from wifi_api.wifi.errors import InvalidRequest
from wifi_api.wifi.gate import SingleFlightGate
from wifi_api.wifi.outcome import CurrentSsid, ScanEntry
from wifi_api.wifi.runner import CommandRunner

router = APIRouter()


class ConnectionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ssid: str | None = None
    password: str | None = Field(default=None, alias="passwd")


@router.post("/connect", response_model=WifiResponse)
async def connect(
    info: ConnectionRequest,
    gate: SingleFlightGate = Depends(get_gate),
    runner: CommandRunner = Depends(get_runner),
) -> WifiResponse:
    async def _connect() -> str:
        if not info.ssid:
            raise InvalidRequest("ssid is required")
        if not info.password:
            raise InvalidRequest("passwd is required")
        return await runner.connect(info.ssid, info.password)

    return format_outcome(await run_guarded(gate, "connect", _connect))


@router.get("/disconnect", response_model=WifiResponse)
async def disconnect(
    gate: SingleFlightGate = Depends(get_gate),
    runner: CommandRunner = Depends(get_runner),
) -> WifiResponse:
    return format_outcome(await run_guarded(gate, "disconnect", runner.disconnect))


@router.get("/ssids", response_model=WifiResponse)
async def list_ssids(
    gate: SingleFlightGate = Depends(get_gate),
    runner: CommandRunner = Depends(get_runner),
) -> WifiResponse:
    async def _scan() -> list[ScanEntry]:
        return list(await runner.scan_networks())

    return format_outcome(await run_guarded(gate, "ssids", _scan))


@router.get("/ssid", response_model=WifiResponse)
async def current_ssid(
    gate: SingleFlightGate = Depends(get_gate),
    runner: CommandRunner = Depends(get_runner),
) -> WifiResponse:
    async def _current() -> CurrentSsid:
        return CurrentSsid(await runner.current_ssid())

    return format_outcome(await run_guarded(gate, "ssid", _current))

"""
GET /        plain-text greeting.
GET /status  gate telemetry; never waits for or takes the gate.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from wifi_api.api.deps import get_gate
from wifi_api.wifi.gate import SingleFlightGate

router = APIRouter()


class StatusResponse(BaseModel):
    status: str
    admitted: int
    completed: int


@router.get("/", response_class=PlainTextResponse)
def index() -> str:
    return "Hello, world"


@router.get("/status", response_model=StatusResponse)
def get_status(gate: SingleFlightGate = Depends(get_gate)) -> StatusResponse:
    """
    Report whether an adapter operation is running.

    - **status**: ``"busy"`` while an operation holds the gate, ``"idle"``
      otherwise.
    - **admitted** / **completed**: operations admitted and finished since
      start-up.  Busy rejections are not counted.
    """
    return StatusResponse(
        status="busy" if gate.busy else "idle",
        admitted=gate.admitted,
        completed=gate.completed,
    )

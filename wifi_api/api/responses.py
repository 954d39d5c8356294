"""
Wire response shape shared by every adapter endpoint, and the pure mapping
from an ``OperationOutcome`` onto it.

    { "Message": "Done", "Data": [["Cafe", true], ["Home", false]] }

``Data`` is always a list of ``[string, bool]`` pairs and is empty whenever
the outcome carries no structured data.
"""

from pydantic import BaseModel, ConfigDict, Field

from wifi_api.wifi.outcome import (
    Busy,
    CurrentSsid,
    DomainFailure,
    OperationOutcome,
    Success,
)

BUSY_MESSAGE = "I'm busy"
ERROR_MESSAGE = "error"
DONE_MESSAGE = "Done"


class WifiResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(alias="Message")
    data: list[tuple[str, bool]] = Field(default_factory=list, alias="Data")


def format_outcome(outcome: OperationOutcome) -> WifiResponse:
    """
    Map an outcome to its response.

    - ``Busy`` → ``"I'm busy"``.
    - ``DomainFailure`` → ``"error"``; the reason is not sent to the client.
    - ``Success`` with a status string → the status as the message.
    - ``Success`` with scan entries or a current SSID → ``"Done"`` plus data.
    """
    if isinstance(outcome, Busy):
        return WifiResponse(message=BUSY_MESSAGE)
    if isinstance(outcome, DomainFailure):
        return WifiResponse(message=ERROR_MESSAGE)

    payload = outcome.payload
    if isinstance(payload, CurrentSsid):
        data = [(payload.ssid, True)] if payload.ssid else []
        return WifiResponse(message=DONE_MESSAGE, data=data)
    if isinstance(payload, list):
        return WifiResponse(
            message=DONE_MESSAGE,
            data=[(entry.ssid, entry.is_open) for entry in payload],
        )
    return WifiResponse(message=str(payload))



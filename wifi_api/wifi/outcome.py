"""
Outcome types shared by the route handlers and the response formatter.
"""

from dataclasses import dataclass
from typing import NamedTuple, Union


class ScanEntry(NamedTuple):
    """One network seen during a scan."""

    ssid: str
    is_open: bool


@dataclass(frozen=True)
class CurrentSsid:
    """SSID of the network the adapter is associated with, if any."""

    ssid: str | None = None


Payload = Union[str, list[ScanEntry], CurrentSsid]


@dataclass(frozen=True)
class Success:
    payload: Payload


@dataclass(frozen=True)
class DomainFailure:
    reason: str


@dataclass(frozen=True)
class Busy:
    pass


BUSY = Busy()

OperationOutcome = Union[Success, DomainFailure, Busy]

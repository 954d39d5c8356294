# Wireless adapter control: admission gate, command runner, outcome types
from wifi_api.wifi.errors import (
    AdapterNotFound,
    CommandFailed,
    ConnectivityError,
    InvalidRequest,
    RadioDisabled,
    WifiError,
)
from wifi_api.wifi.gate import GateHandle, SingleFlightGate
from wifi_api.wifi.outcome import (
    BUSY,
    Busy,
    CurrentSsid,
    DomainFailure,
    OperationOutcome,
    ScanEntry,
    Success,
)
from wifi_api.wifi.runner import CommandRunner, NmcliRunner

__all__ = [
    "AdapterNotFound",
    "CommandFailed",
    "ConnectivityError",
    "InvalidRequest",
    "RadioDisabled",
    "WifiError",
    "GateHandle",
    "SingleFlightGate",
    "BUSY",
    "Busy",
    "CurrentSsid",
    "DomainFailure",
    "OperationOutcome",
    "ScanEntry",
    "Success",
    "CommandRunner",
    "NmcliRunner",
]

"""
Domain failures raised by the wireless command layer.

Every exception here is caught at the route boundary and reported to the
client as an ``"error"`` message; the reason string only reaches the logs.
"""


class WifiError(Exception):
    """A network operation could not be completed."""


class CommandFailed(WifiError):
    """The nmcli process could not be started, timed out or exited non-zero."""


class AdapterNotFound(WifiError):
    """No wireless device is known to NetworkManager."""


class RadioDisabled(WifiError):
    """The wifi radio is switched off."""


class ConnectivityError(WifiError):
    """The internet reachability probe failed or ran out of time."""


class InvalidRequest(WifiError):
    """Request input rejected before any command was run."""

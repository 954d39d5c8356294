"""
Command runner: the only code that talks to NetworkManager or the internet.

``NmcliRunner`` drives the ``nmcli`` CLI through asyncio subprocesses so a
slow command suspends the calling route instead of blocking the event loop,
and probes internet reachability with an ``httpx.AsyncClient``.

Every method either returns its result or raises a ``WifiError`` subclass.
Callers are expected to hold the ``SingleFlightGate`` while calling any of
them; the runner itself does no locking.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

from wifi_api.wifi import nmcli
from wifi_api.wifi.errors import (
    AdapterNotFound,
    CommandFailed,
    ConnectivityError,
    RadioDisabled,
)
from wifi_api.wifi.outcome import ScanEntry

logger = logging.getLogger(__name__)

# nmcli output confirming each state change
_CONNECTED_MARKER = "successfully activated"
_DISCONNECTED_MARKER = "disconnected"

# Connect status strings returned to the client
CONNECTED = "connected"
NOT_CONNECTED = "did not connect"
DISCONNECTED = "disconnected"


class CommandRunner(Protocol):
    async def device_name(self) -> str: ...

    async def scan_networks(self) -> list[ScanEntry]: ...

    async def connect(self, ssid: str, password: str) -> str: ...

    async def disconnect(self) -> str: ...

    async def radio_status(self) -> bool: ...

    async def radio_on(self) -> None: ...

    async def radio_off(self) -> None: ...

    async def current_ssid(self) -> str | None: ...

    async def check_connectivity(self, timeout: float) -> None: ...


# ── Subprocess execution ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class CommandResult:
    args: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str


def _redact(args: tuple[str, ...]) -> str:
    """Render a command line for logging with any password argument masked."""
    shown = list(args)
    for i, arg in enumerate(shown[:-1]):
        if arg == "password":
            shown[i + 1] = "********"
    return " ".join(shown)


async def _reap(proc: asyncio.subprocess.Process) -> None:
    """Kill *proc* if it is still running and wait for it to exit."""
    if proc.returncode is None:
        try:
            proc.kill()
        except ProcessLookupError:
            pass
    await proc.wait()


async def run_command(*args: str, timeout: float | None = None) -> CommandResult:
    """
    Run *args* as a subprocess and collect its output.

    Raises ``CommandFailed`` if the binary cannot be started or the process
    outlives *timeout*.  A non-zero exit status is **not** an error here;
    callers decide what the output means.
    """
    cmdline = _redact(args)
    logger.debug("exec: %s", cmdline)
    try:
        proc = await asyncio.create_subprocess_exec(
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        raise CommandFailed(f"could not start {args[0]}: {exc}") from exc

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout)
    except asyncio.TimeoutError:
        await _reap(proc)
        raise CommandFailed(f"'{cmdline}' timed out after {timeout}s")
    except BaseException:
        # Cancelled: the child must be gone before the gate is released.
        await _reap(proc)
        raise

    result = CommandResult(
        args=tuple(args),
        returncode=proc.returncode if proc.returncode is not None else -1,
        stdout=stdout.decode("utf-8", errors="replace"),
        stderr=stderr.decode("utf-8", errors="replace"),
    )
    logger.debug("exit %d: %s", result.returncode, cmdline)
    return result


# ── NetworkManager runner ─────────────────────────────────────────────────────


class NmcliRunner:
    def __init__(
        self,
        nmcli_path: str = "nmcli",
        interface: str = "",
        command_timeout: float = 30.0,
        connectivity_url: str = "http://clients3.google.com/generate_204",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._nmcli_path = nmcli_path
        self._interface = interface
        self._command_timeout = command_timeout
        self._connectivity_url = connectivity_url
        self._transport = transport

    async def _nmcli(self, *args: str, check: bool = True) -> CommandResult:
        result = await run_command(
            self._nmcli_path, *args, timeout=self._command_timeout
        )
        if check and result.returncode != 0:
            raise CommandFailed(
                f"nmcli {' '.join(args[:3])} exited {result.returncode}: "
                f"{result.stderr.strip() or result.stdout.strip()}"
            )
        return result

    async def device_name(self) -> str:
        """Return the configured interface, or the first wifi device nmcli knows."""
        if self._interface:
            return self._interface
        result = await self._nmcli("-t", "-f", "DEVICE,TYPE", "device")
        device = nmcli.parse_wifi_device(result.stdout)
        if device is None:
            raise AdapterNotFound("no wireless adapter found")
        return device

    async def scan_networks(self) -> list[ScanEntry]:
        result = await self._nmcli("-t", "-f", "SSID,SECURITY", "device", "wifi", "list")
        entries = nmcli.parse_scan(result.stdout)
        logger.info("Scan found %d network(s)", len(entries))
        return entries

    async def radio_status(self) -> bool:
        result = await self._nmcli("radio", "wifi")
        return nmcli.parse_radio_enabled(result.stdout)

    async def radio_on(self) -> None:
        await self._nmcli("radio", "wifi", "on")
        logger.info("Wifi radio switched on")

    async def radio_off(self) -> None:
        await self._nmcli("radio", "wifi", "off")
        logger.info("Wifi radio switched off")

    async def current_ssid(self) -> str | None:
        result = await self._nmcli("-t", "-f", "ACTIVE,SSID", "device", "wifi")
        return nmcli.parse_active_ssid(result.stdout)

    async def connect(self, ssid: str, password: str) -> str:
        """
        Join *ssid* on the wifi device.

        The radio is checked first so a disabled adapter is reported without
        running the connect command.  nmcli refusing the connection (wrong
        password, network out of range) is not raised: the result is
        ``"did not connect"``.
        """
        device = await self.device_name()
        if not await self.radio_status():
            raise RadioDisabled("wifi radio is disabled")

        result = await self._nmcli(
            "device", "wifi", "connect", ssid, "password", password, "ifname", device,
            check=False,
        )
        if _CONNECTED_MARKER in result.stdout:
            logger.info("Connected %s to %r", device, ssid)
            return CONNECTED

        logger.warning(
            "nmcli did not connect %s to %r (exit %d): %s",
            device,
            ssid,
            result.returncode,
            result.stderr.strip() or result.stdout.strip(),
        )
        return NOT_CONNECTED

    async def disconnect(self) -> str:
        device = await self.device_name()
        result = await self._nmcli("device", "disconnect", device, check=False)
        if result.returncode != 0 or _DISCONNECTED_MARKER not in result.stdout:
            raise CommandFailed(
                f"could not disconnect {device}: "
                f"{result.stderr.strip() or result.stdout.strip()}"
            )
        logger.info("Disconnected %s", device)
        return DISCONNECTED

    async def check_connectivity(self, timeout: float) -> None:
        """
        Fetch the connectivity URL within *timeout* seconds.

        Raises ``ConnectivityError`` on any transport failure, an invalid URL,
        any non-2xx status (redirects are not followed), or when the whole
        exchange does not finish in time.
        """
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            transport=self._transport,
        ) as client:
            try:
                response = await asyncio.wait_for(
                    client.get(self._connectivity_url), timeout
                )
            except asyncio.TimeoutError as exc:
                raise ConnectivityError(
                    f"no answer from {self._connectivity_url} within {timeout}s"
                ) from exc
            except (httpx.HTTPError, httpx.InvalidURL) as exc:
                raise ConnectivityError(
                    f"probe to {self._connectivity_url} failed: {exc}"
                ) from exc

        # Captive portals answer the probe with a redirect.
        if not response.is_success:
            raise ConnectivityError(
                f"probe to {self._connectivity_url} returned {response.status_code}"
            )

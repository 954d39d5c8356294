"""
Parsers for ``nmcli --terse`` output. No subprocess or device required.

In terse mode nmcli separates fields with ``:`` and escapes a literal ``:`` or
``\\`` inside a value with a backslash, so SSIDs such as ``Cafe:Guest``
survive the round trip.
"""

from wifi_api.wifi.outcome import ScanEntry

# nmcli prints "--" for an empty SECURITY column in tabular mode; terse mode
# prints nothing.  Both mean the network is open.
_NO_SECURITY = frozenset(["", "--"])


def split_terse(line: str) -> list[str]:
    """Split one terse nmcli line into its unescaped fields."""
    fields: list[str] = []
    current: list[str] = []
    escaped = False
    for ch in line:
        if escaped:
            current.append(ch)
            escaped = False
        elif ch == "\\":
            escaped = True
        elif ch == ":":
            fields.append("".join(current))
            current = []
        else:
            current.append(ch)
    fields.append("".join(current))
    return fields


def _rows(output: str) -> list[list[str]]:
    return [split_terse(line) for line in output.splitlines() if line.strip()]


def parse_wifi_device(output: str) -> str | None:
    """
    Return the first wireless device from ``nmcli -t -f DEVICE,TYPE device``.

    Returns ``None`` when no row has type ``wifi``.
    """
    for row in _rows(output):
        if len(row) >= 2 and row[1] == "wifi" and row[0]:
            return row[0]
    return None


def parse_scan(output: str) -> list[ScanEntry]:
    """
    Parse ``nmcli -t -f SSID,SECURITY device wifi list``.

    nmcli prints one row per access point, so an SSID served by several
    radios shows up repeatedly; duplicates are collapsed in first-seen order.
    Hidden networks (blank SSID) are skipped.
    """
    entries: list[ScanEntry] = []
    seen: set[ScanEntry] = set()
    for row in _rows(output):
        ssid = row[0]
        if not ssid:
            continue
        security = row[1].strip() if len(row) > 1 else ""
        entry = ScanEntry(ssid=ssid, is_open=security in _NO_SECURITY)
        if entry not in seen:
            seen.add(entry)
            entries.append(entry)
    return entries


def parse_active_ssid(output: str) -> str | None:
    """Return the SSID marked active in ``nmcli -t -f ACTIVE,SSID device wifi``."""
    for row in _rows(output):
        if len(row) >= 2 and row[0] == "yes" and row[1]:
            return row[1]
    return None


def parse_radio_enabled(output: str) -> bool:
    """``nmcli radio wifi`` prints ``enabled`` or ``disabled``."""
    return output.strip() == "enabled"

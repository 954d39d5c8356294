"""
The request protocol every adapter route follows:

1. try to enter the gate, answering Busy at once if it is held;
2. run exactly one runner operation;
3. turn its result or exception into an ``OperationOutcome``;
4. release the gate on the way out, whatever happened.
"""

import logging
from typing import Any, Awaitable, Callable

from wifi_api.wifi.errors import WifiError
from wifi_api.wifi.gate import SingleFlightGate
from wifi_api.wifi.outcome import BUSY, DomainFailure, OperationOutcome, Success

logger = logging.getLogger(__name__)


async def run_guarded(
    gate: SingleFlightGate,
    name: str,
    operation: Callable[[], Awaitable[Any]],
) -> OperationOutcome:
    """
    Run *operation* while holding *gate*.

    Never raises for a failed operation: ``WifiError`` and any unexpected
    exception both become ``DomainFailure`` so the client always gets a
    parseable body.
    """
    with gate.enter() as handle:
        if handle is None:
            logger.info("%s rejected: another operation is in progress", name)
            return BUSY

        logger.debug("%s admitted (ticket %d)", name, handle.ticket)
        try:
            payload = await operation()
        except WifiError as exc:
            logger.warning("%s failed: %s", name, exc)
            return DomainFailure(str(exc))
        except Exception as exc:
            logger.error("%s crashed: %s", name, exc, exc_info=True)
            return DomainFailure(f"unexpected error: {exc}")

        return Success(payload)

"""
Single-flight admission gate for wireless adapter commands.

NetworkManager does not tolerate overlapping operations on one adapter: a
``connect`` racing a ``disconnect`` or a radio toggle leaves the device in an
undefined state.  Every route that runs an nmcli command must therefore hold
the process-wide gate while it does so.

Unlike ``asyncio.Lock`` the gate never queues.  ``try_enter()`` returns a
``GateHandle`` when the slot is free and ``None`` when it is held, without
waiting, so a client is never stuck behind a slow operation and decides for
itself whether to poll again.

Usage
-----
    with gate.enter() as handle:
        if handle is None:
            return BUSY
        await runner.radio_off()
"""

import logging
import threading
from contextlib import contextmanager
from typing import Iterator

logger = logging.getLogger(__name__)


class GateHandle:
    """Scoped ownership of the gate's slot.  Released exactly once."""

    def __init__(self, gate: "SingleFlightGate", ticket: int) -> None:
        self._gate = gate
        self.ticket = ticket
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        self._gate._release(self)

    def __enter__(self) -> "GateHandle":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()


class SingleFlightGate:
    """
    One non-blocking, non-reentrant admission slot.

    ``admitted`` and ``completed`` are advisory counters for GET /status; they
    are only mutated while the slot is held and are never touched by a busy
    rejection.
    """

    def __init__(self) -> None:
        # threading.Lock gives a true non-blocking acquire that also holds up
        # if a sync route ever runs in the threadpool.
        self._lock = threading.Lock()
        self._admitted = 0
        self._completed = 0

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    @property
    def admitted(self) -> int:
        return self._admitted

    @property
    def completed(self) -> int:
        return self._completed

    def try_enter(self) -> GateHandle | None:
        """Take the slot if it is free; return ``None`` immediately otherwise."""
        if not self._lock.acquire(blocking=False):
            return None
        self._admitted += 1
        return GateHandle(self, self._admitted)

    @contextmanager
    def enter(self) -> Iterator[GateHandle | None]:
        """
        Context-manager form of ``try_enter()``.

        Yields the handle, or ``None`` when busy.  An admitted handle is
        released when the block exits, whether it returns or raises.
        """
        handle = self.try_enter()
        if handle is None:
            yield None
            return
        with handle:
            yield handle

    def _release(self, handle: GateHandle) -> None:
        self._completed += 1
        logger.debug("Gate released (ticket %d)", handle.ticket)
        self._lock.release()

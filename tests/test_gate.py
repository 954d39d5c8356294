"""
Tests for the single-flight admission gate (wifi_api.wifi.gate) and the
guarded request protocol built on it (wifi_api.api.guard).
"""

import asyncio
import time

import pytest

from wifi_api.api.guard import run_guarded
from wifi_api.wifi.errors import CommandFailed
from wifi_api.wifi.gate import SingleFlightGate
from wifi_api.wifi.outcome import BUSY, DomainFailure, Success


# ── try_enter / release ───────────────────────────────────────────────────────


class TestTryEnter:
    def test_first_caller_is_admitted(self):
        gate = SingleFlightGate()
        handle = gate.try_enter()
        assert handle is not None
        assert gate.busy is True
        handle.release()
        assert gate.busy is False

    def test_second_caller_is_rejected_while_held(self):
        gate = SingleFlightGate()
        handle = gate.try_enter()
        assert gate.try_enter() is None
        handle.release()

    def test_slot_is_reusable_after_release(self):
        gate = SingleFlightGate()
        gate.try_enter().release()
        handle = gate.try_enter()
        assert handle is not None
        handle.release()

    def test_not_reentrant(self):
        """The holder itself cannot enter a second time."""
        gate = SingleFlightGate()
        with gate.enter() as outer:
            assert outer is not None
            with gate.enter() as inner:
                assert inner is None

    def test_rejection_does_not_wait_for_holder(self):
        gate = SingleFlightGate()
        handle = gate.try_enter()
        start = time.perf_counter()
        assert gate.try_enter() is None
        assert time.perf_counter() - start < 0.05
        handle.release()


class TestRelease:
    def test_release_is_idempotent(self):
        gate = SingleFlightGate()
        handle = gate.try_enter()
        handle.release()
        handle.release()
        assert handle.released is True
        assert gate.completed == 1
        # A stray second release must not free a slot taken by someone else
        other = gate.try_enter()
        handle.release()
        assert gate.busy is True
        other.release()

    def test_enter_releases_on_exception(self):
        gate = SingleFlightGate()
        with pytest.raises(RuntimeError):
            with gate.enter() as handle:
                assert handle is not None
                raise RuntimeError("boom")
        assert gate.busy is False
        assert handle.released is True


class TestCounters:
    def test_admission_increments_once_per_handle(self):
        gate = SingleFlightGate()
        first = gate.try_enter()
        assert first.ticket == 1
        first.release()
        second = gate.try_enter()
        assert second.ticket == 2
        second.release()
        assert gate.admitted == 2
        assert gate.completed == 2

    def test_busy_rejection_is_not_counted(self):
        gate = SingleFlightGate()
        handle = gate.try_enter()
        for _ in range(5):
            assert gate.try_enter() is None
        handle.release()
        assert gate.admitted == 1
        assert gate.completed == 1


# ── run_guarded ───────────────────────────────────────────────────────────────


@pytest.mark.asyncio
class TestRunGuarded:
    async def test_success_wraps_payload(self):
        gate = SingleFlightGate()

        async def _op():
            return "on"

        outcome = await run_guarded(gate, "wifion", _op)
        assert outcome == Success("on")
        assert gate.busy is False

    async def test_wifi_error_becomes_domain_failure(self):
        gate = SingleFlightGate()

        async def _op():
            raise CommandFailed("nmcli exited 8")

        outcome = await run_guarded(gate, "wifioff", _op)
        assert isinstance(outcome, DomainFailure)
        assert "nmcli exited 8" in outcome.reason
        assert gate.busy is False

    async def test_unexpected_error_becomes_domain_failure(self):
        gate = SingleFlightGate()

        async def _op():
            raise KeyError("surprise")

        outcome = await run_guarded(gate, "ssids", _op)
        assert isinstance(outcome, DomainFailure)
        assert gate.busy is False
        assert gate.completed == 1

    async def test_busy_does_not_run_operation(self):
        gate = SingleFlightGate()
        called = False

        async def _op():
            nonlocal called
            called = True

        handle = gate.try_enter()
        try:
            outcome = await run_guarded(gate, "dev", _op)
        finally:
            handle.release()

        assert outcome is BUSY
        assert called is False

    async def test_concurrent_callers_exactly_one_admitted(self):
        """N simultaneous callers: one runs, the rest see Busy, never overlap."""
        gate = SingleFlightGate()
        release = asyncio.Event()
        running = 0
        peak = 0

        async def _op():
            nonlocal running, peak
            running += 1
            peak = max(peak, running)
            await release.wait()
            running -= 1
            return "done"

        tasks = [
            asyncio.create_task(run_guarded(gate, "delay", _op)) for _ in range(10)
        ]
        await asyncio.sleep(0.05)
        release.set()
        outcomes = await asyncio.gather(*tasks)

        assert outcomes.count(Success("done")) == 1
        assert outcomes.count(BUSY) == 9
        assert peak == 1
        assert gate.busy is False
        assert gate.admitted == 1

    async def test_cancelled_operation_releases_gate(self):
        gate = SingleFlightGate()

        async def _op():
            await asyncio.sleep(10)

        task = asyncio.create_task(run_guarded(gate, "delay", _op))
        await asyncio.sleep(0.01)
        assert gate.busy is True
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert gate.busy is False

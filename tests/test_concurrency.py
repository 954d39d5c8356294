"""
End-to-end concurrency tests: several requests in flight at once against one
app, driven through ``httpx.ASGITransport`` on the test's event loop.
"""

import asyncio
import time
from unittest.mock import AsyncMock

import httpx
import pytest

from wifi_api.main import create_app
from wifi_api.wifi.runner import NmcliRunner


def _client(app) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://testserver"
    )


async def _timed_get(client: httpx.AsyncClient, path: str) -> tuple[dict, float]:
    start = time.perf_counter()
    response = await client.get(path)
    return response.json(), time.perf_counter() - start


@pytest.mark.asyncio
class TestConcurrentRequests:
    async def test_two_delays_one_waits_one_busy(self):
        app = create_app(runner=AsyncMock(spec=NmcliRunner))
        async with _client(app) as client:
            results = await asyncio.gather(
                _timed_get(client, "/delay/1"),
                _timed_get(client, "/delay/1"),
            )

        messages = sorted(body["Message"] for body, _ in results)
        assert messages == ["I'm busy", "waited 1 seconds"]

        for body, elapsed in results:
            if body["Message"] == "I'm busy":
                assert elapsed < 0.1
            else:
                assert elapsed >= 0.9

        assert app.state.gate.busy is False
        assert app.state.gate.admitted == 1

    async def test_busy_during_slow_scan_then_admitted(self):
        """A caller rejected during a slow operation is admitted once it ends."""
        release = asyncio.Event()
        runner = AsyncMock(spec=NmcliRunner)

        async def _slow_scan():
            await release.wait()
            return []

        runner.scan_networks.side_effect = _slow_scan
        runner.radio_status.return_value = True
        app = create_app(runner=runner)

        async with _client(app) as client:
            scan = asyncio.create_task(client.get("/ssids"))
            await asyncio.sleep(0.05)

            rejected = await client.get("/iswifienabled")
            assert rejected.json()["Message"] == "I'm busy"
            runner.radio_status.assert_not_awaited()

            release.set()
            assert (await scan).json() == {"Message": "Done", "Data": []}

            admitted = await client.get("/iswifienabled")
            assert admitted.json()["Message"] == "enabled"

        assert app.state.gate.admitted == 2
        assert app.state.gate.completed == 2

    async def test_many_clients_never_overlap(self):
        running = 0
        peak = 0
        runner = AsyncMock(spec=NmcliRunner)

        async def _radio_off():
            nonlocal running, peak
            running += 1
            peak = max(peak, running)
            await asyncio.sleep(0.05)
            running -= 1

        runner.radio_off.side_effect = _radio_off
        app = create_app(runner=runner)

        async with _client(app) as client:
            responses = await asyncio.gather(
                *(client.get("/wifioff") for _ in range(20))
            )

        messages = [r.json()["Message"] for r in responses]
        assert messages.count("off") == 1
        assert messages.count("I'm busy") == 19
        assert peak == 1

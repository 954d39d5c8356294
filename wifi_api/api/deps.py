"""
Shared FastAPI dependencies.

The gate and the command runner are built once by ``create_app()`` and kept
on ``app.state``; routes receive them through these dependencies so tests can
build an app around a fake runner.
"""

from fastapi import Request

from wifi_api.wifi.gate import SingleFlightGate
from wifi_api.wifi.runner import CommandRunner


def get_gate(request: Request) -> SingleFlightGate:
    return request.app.state.gate


def get_runner(request: Request) -> CommandRunner:
    return request.app.state.runner

"""Fake TriggerPort implementation for testing."""

import asyncio
from typing import Any

from treatrelay.core.ports import TriggerFailedError, TriggerPort


class FakeTriggerPort(TriggerPort):
    """In-memory trigger port for testing.

    Counts fire() calls and returns a configurable response, or raises
    when configured to fail.
    """

    def __init__(self, response: Any = None) -> None:
        """Initialize with default values."""
        self.response: Any = {"ok": True} if response is None else response
        self.fire_call_count = 0
        self.should_fail: bool = False
        self.fail_status: int | None = 500
        self.fail_body: str = "actuator offline"
        self.unexpected_error: Exception | None = None
        self.delay_seconds: float = 0.0

    async def fire(self) -> Any:
        """Record the call and return the canned response."""
        self.fire_call_count += 1

        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)

        if self.unexpected_error is not None:
            raise self.unexpected_error

        if self.should_fail:
            raise TriggerFailedError(self.fail_status, self.fail_body)

        return self.response

"""Port interfaces for the treat relay.

These abstract base classes define the boundaries between core
domain logic and external adapters. Implementations live in the
adapters/ package.

Port Interface Categories:

1. **Driven Ports** (core calls out to adapters)
   - TriggerPort: Fire the downstream actuator

2. **Driving Ports** (adapters/external systems call into core)
   - RelayPort: Entry point for decoded webhook deliveries
"""

from abc import ABC, abstractmethod
from typing import Any

from .models import RelayOutcome


class TriggerFailedError(Exception):
    """The downstream trigger call did not succeed.

    Raised for non-success HTTP statuses (``status_code`` set) and for
    transport-level failures (``status_code`` is None).
    """

    def __init__(self, status_code: int | None, body: str = ""):
        self.status_code = status_code
        self.body = body
        if status_code is None:
            message = f"trigger failed: {body}".rstrip()
        else:
            message = f"trigger failed: {status_code} {body}".rstrip()
        super().__init__(message)


# ============================================================================
# DRIVEN PORTS (Core calls out to adapters)
# ============================================================================


class TriggerPort(ABC):
    """Port for firing the downstream actuator.

    Implementations perform exactly one outbound call per ``fire()`` and
    never retry; debouncing is the caller's responsibility.
    """

    @abstractmethod
    async def fire(self) -> Any:
        """Fire the trigger once.

        Returns:
            The downstream response body, parsed as JSON when possible,
            otherwise the raw text.

        Raises:
            TriggerFailedError: If the call returned a non-success status
                or failed at the transport level.
        """


# ============================================================================
# DRIVING PORTS (External systems call into core)
# ============================================================================


class RelayPort(ABC):
    """Port for handing an authenticated webhook payload to the core."""

    @abstractmethod
    async def handle_event(self, payload: Any) -> RelayOutcome:
        """Inspect a payload and fire the trigger if it contains a transfer.

        Args:
            payload: Decoded JSON body of the webhook request. Any shape
                is accepted; unrecognized shapes are ignored.

        Returns:
            RelayOutcome describing the action taken.

        Raises:
            TriggerFailedError: If a matching transfer was found, the
                debouncer allowed the call, and the call failed.
        """

"""Webhook receiver for transaction-event deliveries.

Forwards decoded webhook bodies to the RelayPort and shapes the
resulting outcome into the JSON body returned to the provider.
"""

import logging
from typing import Any

from treatrelay.core.models import RelayOutcome, TriggerResult
from treatrelay.core.ports import RelayPort

logger = logging.getLogger(__name__)


def _result_body(result: TriggerResult) -> dict[str, Any]:
    if result.skipped:
        return {"skipped": True, "reason": result.reason}
    return {"triggered": True, "response": result.response}


class WebhookReceiver:
    """Receives provider deliveries and forwards them to the relay core."""

    def __init__(self, relay_port: RelayPort):
        """Initialize the webhook receiver.

        Args:
            relay_port: RelayPort implementation that inspects payloads.
        """
        self.relay_port = relay_port

    async def handle_delivery(self, payload: Any) -> dict[str, Any]:
        """Handle one authenticated webhook delivery.

        Args:
            payload: Decoded JSON body, in any shape.

        Returns:
            Response body: ``received``, ``action`` and, when the trigger
            was attempted, ``result``.

        Raises:
            TriggerFailedError: If the trigger call failed.
        """
        outcome = await self.relay_port.handle_event(payload)
        logger.debug(
            "Webhook delivery processed",
            extra={"action": outcome.action.value},
        )
        return self.format_outcome(outcome)

    @staticmethod
    def format_outcome(outcome: RelayOutcome) -> dict[str, Any]:
        """Shape a relay outcome into the response body."""
        body: dict[str, Any] = {"received": True, "action": outcome.action.value}
        if outcome.trigger_result is not None:
            body["result"] = _result_body(outcome.trigger_result)
        return body

"""Relay service: detection, debouncing and triggering for one payload.

Implements RelayPort by composing the TransferDetector, the Debouncer
and a TriggerPort.
"""

import logging
from typing import Any

from .debounce import Debouncer
from .detector import TransferDetector
from .models import RelayAction, RelayOutcome, TriggerResult
from .ports import RelayPort, TriggerFailedError, TriggerPort

logger = logging.getLogger(__name__)


class RelayService(RelayPort):
    """Fires the trigger when a payload pays the watched account."""

    def __init__(
        self,
        detector: TransferDetector,
        debouncer: Debouncer,
        trigger: TriggerPort,
    ):
        """Initialize relay service.

        Args:
            detector: Transfer detector bound to the watched account.
            debouncer: Cooldown guard shared by every request in the process.
            trigger: Port for the downstream actuator.
        """
        self.detector = detector
        self.debouncer = debouncer
        self.trigger = trigger

    async def handle_event(self, payload: Any) -> RelayOutcome:
        """Run one webhook payload through the relay.

        The debouncer timestamp is taken before the outbound call is awaited,
        so overlapping requests inside the window are skipped even while the
        first call is still in flight.
        """
        transfer = self.detector.find_transfer(payload)
        if transfer is None:
            logger.debug("No matching native transfer in payload")
            return RelayOutcome(action=RelayAction.IGNORED)

        if not self.debouncer.try_acquire():
            logger.info(
                "Matching transfer received inside cooldown window, skipping trigger",
                extra={
                    "amount": transfer.amount,
                    "remaining_ms": self.debouncer.remaining_ms(),
                },
            )
            return RelayOutcome(
                action=RelayAction.TREAT, trigger_result=TriggerResult.debounced()
            )

        try:
            response = await self.trigger.fire()
        except TriggerFailedError as e:
            logger.error(
                f"Trigger call failed: {e}",
                extra={"status_code": e.status_code},
            )
            raise

        logger.info(
            "Treat triggered",
            extra={"amount": transfer.amount, "to_account": transfer.to_account},
        )
        return RelayOutcome(
            action=RelayAction.TREAT, trigger_result=TriggerResult.triggered(response)
        )

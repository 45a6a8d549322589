"""Core domain logic for the treat relay.

This package contains zero external dependencies and represents
the pure business logic of the application. All adapters and
external integrations are handled by the adapters package.
"""

from .models import (
    DecodedPayload,
    NativeTransfer,
    PayloadShape,
    RelayAction,
    RelayOutcome,
    Transaction,
    TriggerResult,
    TriggerStatus,
)

__all__ = [
    "DecodedPayload",
    "NativeTransfer",
    "PayloadShape",
    "RelayAction",
    "RelayOutcome",
    "Transaction",
    "TriggerResult",
    "TriggerStatus",
]

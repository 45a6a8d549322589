"""Domain models for the treat relay.

All models in this module use only Python standard library types,
ensuring zero external dependencies in the core domain.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class PayloadShape(Enum):
    """Top-level shapes accepted for an incoming webhook payload.

    - BARE_LIST: the body is a JSON array of transactions
    - EVENTS: a mapping whose ``events`` field holds the transactions
    - TRANSACTIONS: a mapping whose ``transactions`` field holds them
    - UNRECOGNIZED: anything else; never carries transactions
    """

    BARE_LIST = "bare_list"
    EVENTS = "events"
    TRANSACTIONS = "transactions"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class NativeTransfer:
    """A single native-currency transfer inside a transaction.

    ``amount`` is denominated in the chain's smallest unit (lamports).
    Either field is None when the source record did not carry a usable value.
    """

    to_account: str | None
    amount: float | None

    @property
    def is_positive(self) -> bool:
        """Whether this transfer moved a strictly positive amount."""
        return self.amount is not None and self.amount > 0


@dataclass(frozen=True)
class Transaction:
    """A transaction record reduced to its native transfers."""

    native_transfers: tuple[NativeTransfer, ...] = ()


@dataclass(frozen=True)
class DecodedPayload:
    """Result of decoding a webhook body into transactions.

    An UNRECOGNIZED shape always has an empty ``transactions`` tuple; that is
    the explicit "no transactions found" outcome.
    """

    shape: PayloadShape
    transactions: tuple[Transaction, ...] = ()

    def __post_init__(self) -> None:
        """Validate decoded payload invariants on creation."""
        if self.shape is PayloadShape.UNRECOGNIZED and self.transactions:
            raise ValueError("unrecognized payloads cannot carry transactions")

    @property
    def is_empty(self) -> bool:
        return not self.transactions


class TriggerStatus(Enum):
    """Outcome of an attempt to fire the downstream trigger."""

    TRIGGERED = "triggered"
    DEBOUNCED = "debounced"


@dataclass(frozen=True)
class TriggerResult:
    """What happened when the relay tried to fire the trigger.

    ``response`` holds the downstream body: parsed JSON when the body was
    JSON, the raw text otherwise. It is None for debounced attempts.
    """

    status: TriggerStatus
    reason: str | None = None
    response: Any = None

    @classmethod
    def triggered(cls, response: Any = None) -> "TriggerResult":
        return cls(status=TriggerStatus.TRIGGERED, response=response)

    @classmethod
    def debounced(cls) -> "TriggerResult":
        return cls(status=TriggerStatus.DEBOUNCED, reason="debounced")

    @property
    def skipped(self) -> bool:
        return self.status is TriggerStatus.DEBOUNCED


class RelayAction(Enum):
    """Action taken for an authenticated webhook delivery."""

    TREAT = "treat"
    IGNORED = "ignored"


@dataclass(frozen=True)
class RelayOutcome:
    """Result of running one payload through the relay."""

    action: RelayAction
    trigger_result: TriggerResult | None = None

    def __post_init__(self) -> None:
        """Validate relay outcome invariants on creation."""
        if self.action is RelayAction.IGNORED and self.trigger_result is not None:
            raise ValueError("ignored outcomes cannot carry a trigger result")
        if self.action is RelayAction.TREAT and self.trigger_result is None:
            raise ValueError("treat outcomes require a trigger result")

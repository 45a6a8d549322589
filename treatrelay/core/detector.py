"""Native-transfer detection for webhook payloads.

Webhook bodies arrive in one of a few loosely-typed shapes. ``decode_payload``
reduces any body to a ``DecodedPayload``; anything it cannot make sense of
becomes an empty result rather than an error, so detection never raises.
"""

from collections.abc import Mapping
from typing import Any

from .models import DecodedPayload, NativeTransfer, PayloadShape, Transaction

TRANSFER_LIST_FIELDS = ("nativeTransfers", "solTransfers")


def _coerce_amount(value: Any) -> float | None:
    """Return a numeric amount, or None if the value is not a number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def decode_transfer(record: Any) -> NativeTransfer:
    """Decode a single native-transfer record.

    The destination is ``toUserAccount``, stringified when needed.
    The amount is ``amount`` when present and truthy, otherwise ``lamports``.
    """
    if not isinstance(record, Mapping):
        return NativeTransfer(to_account=None, amount=None)

    destination = record.get("toUserAccount")
    if destination is not None and not isinstance(destination, str):
        destination = str(destination)

    raw_amount = record.get("amount") or record.get("lamports")
    return NativeTransfer(to_account=destination, amount=_coerce_amount(raw_amount))


def decode_transaction(record: Any) -> Transaction:
    """Decode a transaction record, keeping only its native transfers."""
    if not isinstance(record, Mapping):
        return Transaction()

    for field_name in TRANSFER_LIST_FIELDS:
        transfers = record.get(field_name)
        if isinstance(transfers, list):
            return Transaction(
                native_transfers=tuple(decode_transfer(t) for t in transfers)
            )
    return Transaction()


def decode_payload(payload: Any) -> DecodedPayload:
    """Decode a webhook body into its transactions.

    Shapes are checked in order: a bare list, then an ``events`` field,
    then a ``transactions`` field; a field set to null counts as absent.
    A selected container that is not a list yields no transactions.
    """
    if isinstance(payload, list):
        shape, container = PayloadShape.BARE_LIST, payload
    elif isinstance(payload, Mapping) and payload.get("events") is not None:
        shape, container = PayloadShape.EVENTS, payload["events"]
    elif isinstance(payload, Mapping) and payload.get("transactions") is not None:
        shape, container = PayloadShape.TRANSACTIONS, payload["transactions"]
    else:
        return DecodedPayload(shape=PayloadShape.UNRECOGNIZED)

    if not isinstance(container, list):
        return DecodedPayload(shape=shape)

    return DecodedPayload(
        shape=shape,
        transactions=tuple(decode_transaction(tx) for tx in container),
    )


class TransferDetector:
    """Looks for a positive native transfer to a single watched account.

    Pure decision logic, no side effects.
    """

    def __init__(self, watched_account: str):
        if not watched_account or not watched_account.strip():
            raise ValueError("watched_account must be a non-empty string")
        self.watched_account = watched_account

    def matches(self, transfer: NativeTransfer) -> bool:
        return transfer.to_account == self.watched_account and transfer.is_positive

    def find_transfer(self, payload: Any) -> NativeTransfer | None:
        """Return the first matching transfer in the payload, if any."""
        decoded = decode_payload(payload)
        for transaction in decoded.transactions:
            for transfer in transaction.native_transfers:
                if self.matches(transfer):
                    return transfer
        return None

    def contains_transfer(self, payload: Any) -> bool:
        """Whether any transaction sends a positive amount to the watched account."""
        return self.find_transfer(payload) is not None

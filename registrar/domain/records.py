"""Conversion between flat log records and typed events.

External stores keep registration events as flat records::

    {
        "eventType": "RESERVATION_WAS_ISSUED",
        "timestamp": "2026-10-19T09:30:00+00:00",
        "sessionID": "a1b2",
        "roomType": "single",
        "duration": 3,
    }

Records are validated here, when they enter the read model. The folds
and queries downstream assume well-formed events.
"""

from collections.abc import Mapping
from typing import Any

from .event import Event
from .exceptions import UnknownEventTypeError
from .registration import PAYLOAD_TYPES, EventType, RegistrationPayload


def event_from_record(record: Mapping[str, Any], sequence_number: int) -> Event[Any]:
    """Parse a flat record into a typed event.

    Args:
        record: The stored record, keyed by the contract field names.
        sequence_number: Position of the record in the log (1-indexed).

    Returns:
        The event envelope wrapping the matching payload type.

    Raises:
        UnknownEventTypeError: If ``eventType`` is missing or unknown.
        pydantic.ValidationError: If the record lacks fields its type needs.
    """
    fields = dict(record)
    raw_type = fields.pop("eventType", None)
    try:
        event_type = EventType(raw_type)
    except ValueError:
        raise UnknownEventTypeError(raw_type) from None

    timestamp = fields.pop("timestamp", None)
    payload: RegistrationPayload = PAYLOAD_TYPES[event_type].model_validate(fields)
    return Event(data=payload, sequence_number=sequence_number, timestamp=timestamp)


def event_to_record(event: Event[Any]) -> dict[str, Any]:
    """Flatten an event back into the stored record shape."""
    payload: RegistrationPayload = event.data
    return {
        "eventType": payload.event_type.value,
        "timestamp": event.timestamp,
        **payload.model_dump(by_alias=True),
    }

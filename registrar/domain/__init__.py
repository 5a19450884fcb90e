"""Domain primitives for the registration read model.

This module contains the event envelope and the typed payloads found in
the registration log:

- Event: Immutable envelope around a typed payload
- EventType: The fixed enumeration of registration event types
- Payload models, one per event type
- Record codec for the flat shape used by external stores
"""

from .event import Event, utc_now
from .exceptions import RegistrarError, UnknownEventTypeError
from .records import event_from_record, event_to_record
from .registration import (
    PAYLOAD_TYPES,
    DurationWasChanged,
    EventType,
    ParticipantWasRegistered,
    RegistrationPayload,
    ReservationWasIssued,
    RoomTypeWasChanged,
    WaitinglistParticipantWasRegistered,
    WaitinglistReservationWasIssued,
)

__all__ = [
    "Event",
    "utc_now",
    "EventType",
    "RegistrationPayload",
    "ReservationWasIssued",
    "ParticipantWasRegistered",
    "RoomTypeWasChanged",
    "DurationWasChanged",
    "WaitinglistReservationWasIssued",
    "WaitinglistParticipantWasRegistered",
    "PAYLOAD_TYPES",
    "event_from_record",
    "event_to_record",
    "RegistrarError",
    "UnknownEventTypeError",
]

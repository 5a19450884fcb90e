"""Registrar - event-sourced read model for conference registration.

This module provides the public API for answering registration questions
(is a room type full, does a session hold a reservation, what did a member
book) from an append-only log of registration events.
"""

from .capacity import CallableQuotas, CapacityOracle, StaticQuotas, as_capacity_oracle
from .clock import Clock, FixedClock, SystemClock
from .config import RegistrarSettings
from .domain import (
    DurationWasChanged,
    Event,
    EventType,
    ParticipantWasRegistered,
    RegistrarError,
    ReservationWasIssued,
    RoomTypeWasChanged,
    UnknownEventTypeError,
    WaitinglistParticipantWasRegistered,
    WaitinglistReservationWasIssued,
    event_from_record,
    event_to_record,
)
from .read_model import (
    WAITINGLIST_RESERVATION_PERIOD,
    RegistrationReadModel,
    SelectedOption,
)
from .sources import (
    AsyncEventSource,
    EventSource,
    InMemoryEventSource,
    SnapshotEventSource,
    materialize,
)

__all__ = [
    # Read model
    "RegistrationReadModel",
    "SelectedOption",
    "WAITINGLIST_RESERVATION_PERIOD",
    # Configuration
    "RegistrarSettings",
    # Collaborators
    "EventSource",
    "AsyncEventSource",
    "InMemoryEventSource",
    "SnapshotEventSource",
    "materialize",
    "CapacityOracle",
    "StaticQuotas",
    "CallableQuotas",
    "as_capacity_oracle",
    "Clock",
    "SystemClock",
    "FixedClock",
    # Domain
    "Event",
    "EventType",
    "ReservationWasIssued",
    "ParticipantWasRegistered",
    "RoomTypeWasChanged",
    "DurationWasChanged",
    "WaitinglistReservationWasIssued",
    "WaitinglistParticipantWasRegistered",
    "event_from_record",
    "event_to_record",
    # Errors
    "RegistrarError",
    "UnknownEventTypeError",
]

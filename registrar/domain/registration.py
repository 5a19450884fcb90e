"""Payload schemas for the conference registration log.

Attribute names are snake_case; the aliases are the field names used by
the stored records (``sessionID``, ``memberId``, ``roomType``,
``desiredRoomTypes``) and must not change. Both spellings are accepted
when validating.
"""

from enum import Enum
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field


class EventType(str, Enum):
    """The fixed set of event types found in the registration log."""

    RESERVATION_WAS_ISSUED = "RESERVATION_WAS_ISSUED"
    PARTICIPANT_WAS_REGISTERED = "PARTICIPANT_WAS_REGISTERED"
    WAITINGLIST_RESERVATION_WAS_ISSUED = "WAITINGLIST_RESERVATION_WAS_ISSUED"
    WAITINGLIST_PARTICIPANT_WAS_REGISTERED = "WAITINGLIST_PARTICIPANT_WAS_REGISTERED"
    ROOM_TYPE_WAS_CHANGED = "ROOM_TYPE_WAS_CHANGED"
    DURATION_WAS_CHANGED = "DURATION_WAS_CHANGED"


class RegistrationPayload(BaseModel):
    """Base class for all registration payloads."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    event_type: ClassVar[EventType]


class ReservationWasIssued(RegistrationPayload):
    """A session was granted a temporary hold on a room type."""

    event_type: ClassVar[EventType] = EventType.RESERVATION_WAS_ISSUED

    session_id: str = Field(alias="sessionID")
    room_type: str = Field(alias="roomType")
    duration: int


class ParticipantWasRegistered(RegistrationPayload):
    """A session's registration was confirmed for a member."""

    event_type: ClassVar[EventType] = EventType.PARTICIPANT_WAS_REGISTERED

    session_id: str = Field(alias="sessionID")
    member_id: str = Field(alias="memberId")
    room_type: str = Field(alias="roomType")
    duration: int


class RoomTypeWasChanged(RegistrationPayload):
    event_type: ClassVar[EventType] = EventType.ROOM_TYPE_WAS_CHANGED

    member_id: str = Field(alias="memberId")
    room_type: str = Field(alias="roomType")
    duration: int


class DurationWasChanged(RegistrationPayload):
    event_type: ClassVar[EventType] = EventType.DURATION_WAS_CHANGED

    member_id: str = Field(alias="memberId")
    room_type: str = Field(alias="roomType")
    duration: int


class WaitinglistReservationWasIssued(RegistrationPayload):
    """A session was put on hold for the waitlist of one or more room types."""

    event_type: ClassVar[EventType] = EventType.WAITINGLIST_RESERVATION_WAS_ISSUED

    session_id: str = Field(alias="sessionID")
    desired_room_types: tuple[str, ...] = Field(alias="desiredRoomTypes", min_length=1)
    duration: int | None = None


class WaitinglistParticipantWasRegistered(RegistrationPayload):
    """A member joined the waitlist for one or more room types."""

    event_type: ClassVar[EventType] = EventType.WAITINGLIST_PARTICIPANT_WAS_REGISTERED

    session_id: str = Field(alias="sessionID")
    member_id: str = Field(alias="memberId")
    desired_room_types: tuple[str, ...] = Field(alias="desiredRoomTypes", min_length=1)
    duration: int | None = None


PAYLOAD_TYPES: dict[EventType, type[RegistrationPayload]] = {
    payload_type.event_type: payload_type
    for payload_type in (
        ReservationWasIssued,
        ParticipantWasRegistered,
        RoomTypeWasChanged,
        DurationWasChanged,
        WaitinglistReservationWasIssued,
        WaitinglistParticipantWasRegistered,
    )
}

from datetime import datetime, timezone
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from ulid import ULID

T = TypeVar("T", bound=BaseModel)


def utc_now() -> datetime:
    """Get the current UTC timestamp.

    Returns:
        Current datetime with UTC timezone information

    Note:
        Used as default_factory for Event.timestamp to ensure all
        events are timestamped in UTC regardless of system timezone.
    """
    return datetime.now(tz=timezone.utc)


class Event(BaseModel, Generic[T]):
    """Immutable record of a fact appended to the registration log.

    The envelope combines log metadata (id, sequence_number, timestamp)
    with a strongly-typed payload. Events are:

    - **Immutable**: the model is frozen, events are never edited in place
    - **Ordered**: sequence numbers give the position in the log
    - **Typed**: the type parameter T names the payload schema
    - **Timestamped**: timestamps are always timezone-aware UTC

    Type Parameters:
        T: Pydantic BaseModel subclass defining the payload schema

    Attributes:
        id: Unique identifier for this specific event instance
        data: Typed payload (e.g., ReservationWasIssued)
        sequence_number: Position in the registration log (1-indexed)
        timestamp: When the event occurred (UTC timezone)

    Examples:
        >>> event = Event(
        ...     data=ReservationWasIssued(
        ...         session_id="s-1", room_type="single", duration=2
        ...     ),
        ...     sequence_number=1,
        ... )
        >>> event.data.room_type
        'single'
    """

    model_config = ConfigDict(frozen=True)

    id: ULID = Field(
        default_factory=ULID,
        description="Unique identifier for this event instance",
    )
    data: T = Field(description="Typed event payload conforming to schema T")
    sequence_number: int = Field(
        description="Position in the registration log (1-indexed, monotonically increasing)"
    )
    timestamp: datetime = Field(
        default_factory=utc_now,
        description="When the event occurred (UTC timezone)",
    )

    @field_validator("timestamp")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # Naive timestamps from upstream stores are UTC wall-clock times.
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

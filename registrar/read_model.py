"""Registration read model: memoized views and the queries built on them.

The read model folds the registration log into four views the first time
each one is needed and keeps the result for the rest of its life. Build a
new instance per request if you need fresh data.

"Now" is read from the clock twice over:

- at fold time, to drop reservations that were already stale when the
  view was built (the view keeps whatever passed this cutoff);
- at query time, so entries that expired after the view was built no
  longer count as valid reservations or as occupying a room.

Entries are never evicted from a built view; expiry is a property of the
query, not of the view.
"""

import logging
from collections.abc import Callable, Sequence
from datetime import datetime, timedelta
from typing import Any, NamedTuple

from .capacity import CapacityOracle, as_capacity_oracle
from .clock import Clock, SystemClock
from .config import RegistrarSettings
from .domain import Event
from .folds import (
    Fold,
    ParticipantsFold,
    ReservationsFold,
    View,
    WaitinglistParticipantsFold,
    WaitinglistReservationsFold,
)
from .memo import ComputeOnce
from .sources import EventSource

LOGGER = logging.getLogger(__name__)

DEFAULT_REGISTRATION_PERIOD = timedelta(minutes=30)
WAITINGLIST_RESERVATION_PERIOD = timedelta(minutes=30)
WAITLISTED = "waitlisted"
SHARED_ROOM_PREFIX = "bed_in_"


class SelectedOption(NamedTuple):
    """What a member signed up for, as shown on the registration form.

    For waitlisted members `duration` is the literal "waitlisted" and
    `room_type` is only the first of their desired room types.
    """

    room_type: str
    duration: int | str | None

    def as_form_value(self) -> str:
        return f"{self.room_type},{self.duration}"


class RegistrationReadModel:
    """Read model answering registration queries from the event log.

    Args:
        source: The registration log.
        capacity: Quota lookup, either a CapacityOracle or a function
            from room type to quota.
        registration_period: How long a reservation holds a room.
        clock: Time source; defaults to the system clock.

    Raises:
        ValueError: If registration_period is not positive.

    Example:
        >>> source = InMemoryEventSource()
        >>> source.append(
        ...     ReservationWasIssued(session_id="session-1", room_type="single", duration=2)
        ... )
        >>> model = RegistrationReadModel(source, StaticQuotas({"single": 2}))
        >>> model.is_full("single")
        False
        >>> model.has_valid_reservation("session-1")
        True
    """

    def __init__(
        self,
        source: EventSource,
        capacity: CapacityOracle | Callable[[str], int | None],
        *,
        registration_period: timedelta = DEFAULT_REGISTRATION_PERIOD,
        clock: Clock | None = None,
    ):
        if registration_period <= timedelta(0):
            raise ValueError(f"registration_period must be positive, got {registration_period}")
        self._source = source
        self._capacity = as_capacity_oracle(capacity)
        self._clock: Clock = clock if clock is not None else SystemClock()
        self.registration_period = registration_period

        self._events: ComputeOnce[Sequence[Event[Any]]] = ComputeOnce(
            lambda: tuple(self._source.registration_events())
        )
        self._reservations: ComputeOnce[View] = ComputeOnce(
            lambda: self._build(
                "reservations", ReservationsFold(self._now() - self.registration_period)
            )
        )
        self._participants: ComputeOnce[View] = ComputeOnce(
            lambda: self._build("participants", ParticipantsFold())
        )
        self._waitinglist_reservations: ComputeOnce[View] = ComputeOnce(
            lambda: self._build(
                "waitinglist_reservations",
                WaitinglistReservationsFold(self._now() - WAITINGLIST_RESERVATION_PERIOD),
            )
        )
        self._waitinglist_participants: ComputeOnce[View] = ComputeOnce(
            lambda: self._build("waitinglist_participants", WaitinglistParticipantsFold())
        )

    @classmethod
    def from_settings(
        cls,
        source: EventSource,
        settings: RegistrarSettings | None = None,
        *,
        capacity: CapacityOracle | Callable[[str], int | None] | None = None,
        clock: Clock | None = None,
    ) -> "RegistrationReadModel":
        """Build a read model from settings.

        Quotas come from the settings unless a capacity lookup is given.
        """
        settings = settings if settings is not None else RegistrarSettings()
        return cls(
            source,
            capacity if capacity is not None else settings.capacity_oracle(),
            registration_period=settings.registration_period,
            clock=clock,
        )

    def _now(self) -> datetime:
        return self._clock.now_utc()

    def _build(self, view_name: str, fold: Fold) -> View:
        events = self._events.get()
        view = fold.run(events)
        LOGGER.debug(
            "Folded registration view",
            extra={"view": view_name, "event_count": len(events), "entry_count": len(view)},
        )
        return view

    @staticmethod
    def _is_current(event: Event[Any], period: timedelta, now: datetime) -> bool:
        return now < event.timestamp + period

    def _current(self, view: View, period: timedelta) -> dict[str, Event[Any]]:
        # One reading of the clock per query
        now = self._now()
        return {key: event for key, event in view.items() if self._is_current(event, period, now)}

    # Views

    def reservations_by_session_id(self) -> View:
        """Reservations as folded, including ones that expired since."""
        return self._reservations.get()

    def participants_by_member_id(self) -> View:
        return self._participants.get()

    def waitlist_reservations_by_session_id(self) -> View:
        """Waitlist reservations as folded, including ones that expired since."""
        return self._waitinglist_reservations.get()

    def waitlist_participants_by_member_id(self) -> View:
        return self._waitinglist_participants.get()

    # Room type queries

    def reservations_for(self, room_type: str) -> dict[str, Event[Any]]:
        """Unexpired reservations for a room type, keyed by session id."""
        return {
            session_id: event
            for session_id, event in self._current(
                self.reservations_by_session_id(), self.registration_period
            ).items()
            if event.data.room_type == room_type
        }

    def participants_for(self, room_type: str) -> dict[str, Event[Any]]:
        """Participants currently in a room type, keyed by member id."""
        return {
            member_id: event
            for member_id, event in self.participants_by_member_id().items()
            if event.data.room_type == room_type
        }

    def waitlist_reservations_for(self, room_type: str) -> dict[str, Event[Any]]:
        """Unexpired waitlist reservations that accept a room type."""
        return {
            session_id: event
            for session_id, event in self._current(
                self.waitlist_reservations_by_session_id(), WAITINGLIST_RESERVATION_PERIOD
            ).items()
            if room_type in event.data.desired_room_types
        }

    def waitlist_participants_for(self, room_type: str) -> dict[str, Event[Any]]:
        """Waitlisted members that accept a room type, keyed by member id."""
        return {
            member_id: event
            for member_id, event in self.waitlist_participants_by_member_id().items()
            if room_type in event.data.desired_room_types
        }

    def occupants_for(self, room_type: str) -> list[Event[Any]]:
        """Reservations and participants currently taking up a room type."""
        return [
            *self.reservations_for(room_type).values(),
            *self.participants_for(room_type).values(),
        ]

    def waitlist_reservations_and_participants_for(self, room_type: str) -> list[Event[Any]]:
        return [
            *self.waitlist_reservations_for(room_type).values(),
            *self.waitlist_participants_for(room_type).values(),
        ]

    def is_full(self, room_type: str) -> bool:
        """Check whether occupancy has reached the quota of a room type.

        A room type without a quota is never full.
        """
        quota = self._capacity.quota_for(room_type)
        occupancy = len(self.occupants_for(room_type))
        full = quota is not None and quota <= occupancy
        LOGGER.debug(
            "Checked room type capacity",
            extra={"room_type": room_type, "quota": quota, "occupancy": occupancy, "full": full},
        )
        return full

    # Session queries

    def valid_reservation_or_waitlist_reservation(self, session_id: str) -> Event[Any] | None:
        """Return the session's unexpired reservation, else its waitlist reservation."""
        now = self._now()
        reservation = self.reservations_by_session_id().get(session_id)
        if reservation is not None and self._is_current(
            reservation, self.registration_period, now
        ):
            return reservation

        waitlist_reservation = self.waitlist_reservations_by_session_id().get(session_id)
        if waitlist_reservation is not None and self._is_current(
            waitlist_reservation, WAITINGLIST_RESERVATION_PERIOD, now
        ):
            return waitlist_reservation
        return None

    def reservation_expiration(self, session_id: str) -> datetime | None:
        """When the session's reservation runs out, or None without one.

        Both kinds of reservation are displayed with the registration
        period added to their issue time.
        """
        event = self.valid_reservation_or_waitlist_reservation(session_id)
        if event is None:
            return None
        return event.timestamp + self.registration_period

    def has_valid_reservation(self, session_id: str) -> bool:
        return self.valid_reservation_or_waitlist_reservation(session_id) is not None

    # Member queries

    def participant_event_for(self, member_id: str) -> Event[Any] | None:
        return self.participants_by_member_id().get(member_id)

    def waitlist_participant_event_for(self, member_id: str) -> Event[Any] | None:
        return self.waitlist_participants_by_member_id().get(member_id)

    def is_already_registered(self, member_id: str) -> bool:
        return self.participant_event_for(member_id) is not None

    def is_only_on_waitinglist(self, member_id: str) -> bool:
        """Check whether a member is waitlisted and holds no registered room.

        A member who is neither registered nor waitlisted is not "only on
        the waitinglist", so this is False for unknown members.
        """
        return (
            not self.is_already_registered(member_id)
            and self.waitlist_participant_event_for(member_id) is not None
        )

    def shares_a_room(self, member_id: str) -> bool:
        """Check whether a registered member booked a bed in a shared room."""
        participant = self.participant_event_for(member_id)
        return participant is not None and participant.data.room_type.startswith(
            SHARED_ROOM_PREFIX
        )

    def selected_option_for(self, member_id: str) -> SelectedOption | None:
        """Summarize a member's booking for display.

        Participants take precedence over waitlist entries. Waitlisted
        members are summarized by their first desired room type only.
        """
        participant = self.participant_event_for(member_id)
        if participant is not None:
            return SelectedOption(participant.data.room_type, participant.data.duration)

        waitlist_participant = self.waitlist_participant_event_for(member_id)
        if waitlist_participant is not None:
            return SelectedOption(waitlist_participant.data.desired_room_types[0], WAITLISTED)
        return None

    def room_types_of(self, member_id: str) -> list[str]:
        """The room type a member holds, or the ones they are waiting for."""
        participant = self.participant_event_for(member_id)
        if participant is not None:
            return [participant.data.room_type]

        waitlist_participant = self.waitlist_participant_event_for(member_id)
        if waitlist_participant is not None:
            return list(waitlist_participant.data.desired_room_types)
        return []

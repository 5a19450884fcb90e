"""Fold functions deriving the registration views from the event log.

Each view is a left-fold over the full, ordered registration log, starting
from an empty mapping. A fold step never mutates the accumulator it is
given: it returns the same mapping when the event is irrelevant, or a new
mapping when the event inserts, overwrites, or removes an entry. Later
events for the same key overwrite earlier ones, so replaying the same
prefix always yields the same view.

The four views:

- ReservationsFold: session id -> latest still-fresh RESERVATION_WAS_ISSUED
- ParticipantsFold: member id -> latest participant event
- WaitinglistReservationsFold: session id -> latest still-fresh
  WAITINGLIST_RESERVATION_WAS_ISSUED
- WaitinglistParticipantsFold: member id -> latest
  WAITINGLIST_PARTICIPANT_WAS_REGISTERED
"""

from collections.abc import Iterable, Mapping
from datetime import datetime
from functools import reduce
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, ClassVar

from .domain import (
    DurationWasChanged,
    Event,
    ParticipantWasRegistered,
    ReservationWasIssued,
    RoomTypeWasChanged,
    WaitinglistParticipantWasRegistered,
    WaitinglistReservationWasIssued,
)
from .routing import folds_event, setup_fold_routing

if TYPE_CHECKING:
    from .routing import FoldRouter

View = Mapping[str, Event[Any]]


def _put(view: View, key: str, event: Event[Any]) -> View:
    return {**view, key: event}


def _without(view: View, key: str) -> View:
    if key not in view:
        return view
    return {k: v for k, v in view.items() if k != key}


class Fold:
    """Base class for a pure left-fold over registration events.

    Subclasses mark their steps with @folds_event; the payload type comes
    from the annotation, exactly like event handlers on a projection.
    Payload types without a step leave the accumulator untouched.

    Example:
        >>> view = ParticipantsFold().run(source.registration_events())
        >>> view["member-1"].data.room_type
        'single'
    """

    # Class-level routing table (set during __init_subclass__)
    _fold_router: ClassVar["FoldRouter"]

    def __init_subclass__(cls, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        cls._fold_router = setup_fold_routing(cls)

    def fold(self, accumulator: View, event: Event[Any]) -> View:
        """Apply one event to the accumulator, returning the next view."""
        return self._fold_router.apply(self, accumulator, event)

    def run(self, events: Iterable[Event[Any]]) -> View:
        """Fold the full event sequence from an empty mapping.

        Returns:
            A read-only view of the final mapping.
        """
        return MappingProxyType(dict(reduce(self.fold, events, {})))


class ReservationsFold(Fold):
    """Latest reservation per session, dropped once the session registers.

    Args:
        cutoff: Reservations issued at or before this instant are stale
            and never enter the view.
    """

    def __init__(self, cutoff: datetime):
        self.cutoff = cutoff

    @folds_event
    def on_reservation_issued(self, event: Event[ReservationWasIssued], reservations: View) -> View:
        if event.timestamp > self.cutoff:
            return _put(reservations, event.data.session_id, event)
        return reservations

    @folds_event
    def on_participant_registered(
        self, event: ParticipantWasRegistered, reservations: View
    ) -> View:
        return _without(reservations, event.session_id)


class ParticipantsFold(Fold):
    """Last participant event per member, by log order."""

    @folds_event
    def on_participant_registered(
        self, event: Event[ParticipantWasRegistered], participants: View
    ) -> View:
        return _put(participants, event.data.member_id, event)

    @folds_event
    def on_room_type_changed(self, event: Event[RoomTypeWasChanged], participants: View) -> View:
        return _put(participants, event.data.member_id, event)

    @folds_event
    def on_duration_changed(self, event: Event[DurationWasChanged], participants: View) -> View:
        return _put(participants, event.data.member_id, event)


class WaitinglistReservationsFold(Fold):
    """Latest waitlist reservation per session.

    Cleared when the session joins the waitlist as a participant or
    registers directly.
    """

    def __init__(self, cutoff: datetime):
        self.cutoff = cutoff

    @folds_event
    def on_waitinglist_reservation_issued(
        self, event: Event[WaitinglistReservationWasIssued], reservations: View
    ) -> View:
        if event.timestamp > self.cutoff:
            return _put(reservations, event.data.session_id, event)
        return reservations

    @folds_event
    def on_waitinglist_participant_registered(
        self, event: WaitinglistParticipantWasRegistered, reservations: View
    ) -> View:
        return _without(reservations, event.session_id)

    @folds_event
    def on_participant_registered(
        self, event: ParticipantWasRegistered, reservations: View
    ) -> View:
        return _without(reservations, event.session_id)


class WaitinglistParticipantsFold(Fold):
    """Latest waitlist entry per member, removed on promotion."""

    @folds_event
    def on_waitinglist_participant_registered(
        self, event: Event[WaitinglistParticipantWasRegistered], participants: View
    ) -> View:
        return _put(participants, event.data.member_id, event)

    @folds_event
    def on_participant_registered(
        self, event: ParticipantWasRegistered, participants: View
    ) -> View:
        return _without(participants, event.member_id)

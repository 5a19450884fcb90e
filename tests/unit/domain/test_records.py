"""Tests for the flat record codec."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from registrar.domain import (
    Event,
    EventType,
    ParticipantWasRegistered,
    ReservationWasIssued,
    UnknownEventTypeError,
    WaitinglistReservationWasIssued,
    event_from_record,
    event_to_record,
)


class TestEventFromRecord:
    def test_parses_reservation_record(self):
        record = {
            "eventType": "RESERVATION_WAS_ISSUED",
            "timestamp": "2026-10-19T09:00:00+00:00",
            "sessionID": "session-1",
            "roomType": "single",
            "duration": 3,
        }

        event = event_from_record(record, sequence_number=7)

        assert isinstance(event.data, ReservationWasIssued)
        assert event.data.session_id == "session-1"
        assert event.data.room_type == "single"
        assert event.data.duration == 3
        assert event.sequence_number == 7
        assert event.timestamp == datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)

    def test_parses_waitlist_record_with_several_room_types(self):
        record = {
            "eventType": "WAITINGLIST_RESERVATION_WAS_ISSUED",
            "timestamp": datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc),
            "sessionID": "session-1",
            "desiredRoomTypes": ["single", "junior"],
        }

        event = event_from_record(record, sequence_number=1)

        assert isinstance(event.data, WaitinglistReservationWasIssued)
        assert event.data.desired_room_types == ("single", "junior")

    def test_naive_timestamp_is_read_as_utc(self):
        record = {
            "eventType": "RESERVATION_WAS_ISSUED",
            "timestamp": datetime(2026, 10, 19, 9, 0),
            "sessionID": "session-1",
            "roomType": "single",
            "duration": 2,
        }

        event = event_from_record(record, sequence_number=1)

        assert event.timestamp.tzinfo is timezone.utc

    def test_unknown_event_type_raises(self):
        with pytest.raises(UnknownEventTypeError) as excinfo:
            event_from_record({"eventType": "ROOM_QUOTA_WAS_SET"}, sequence_number=1)
        assert excinfo.value.event_type == "ROOM_QUOTA_WAS_SET"

    def test_missing_event_type_raises(self):
        with pytest.raises(UnknownEventTypeError):
            event_from_record({"sessionID": "session-1"}, sequence_number=1)

    def test_missing_field_raises_validation_error(self):
        record = {
            "eventType": "PARTICIPANT_WAS_REGISTERED",
            "timestamp": "2026-10-19T09:00:00+00:00",
            "sessionID": "session-1",
            "roomType": "single",
            "duration": 2,
        }
        with pytest.raises(ValidationError):
            event_from_record(record, sequence_number=1)

    def test_empty_desired_room_types_is_rejected(self):
        record = {
            "eventType": "WAITINGLIST_RESERVATION_WAS_ISSUED",
            "timestamp": "2026-10-19T09:00:00+00:00",
            "sessionID": "session-1",
            "desiredRoomTypes": [],
        }
        with pytest.raises(ValidationError):
            event_from_record(record, sequence_number=1)


class TestEventToRecord:
    def test_uses_contract_field_names(self):
        timestamp = datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)
        event = Event(
            data=ParticipantWasRegistered(
                session_id="session-1", member_id="member-1", room_type="junior", duration=4
            ),
            sequence_number=1,
            timestamp=timestamp,
        )

        assert event_to_record(event) == {
            "eventType": "PARTICIPANT_WAS_REGISTERED",
            "timestamp": timestamp,
            "sessionID": "session-1",
            "memberId": "member-1",
            "roomType": "junior",
            "duration": 4,
        }

    def test_record_parses_back_to_equal_payload(self):
        event = Event(
            data=WaitinglistReservationWasIssued(
                session_id="session-1", desired_room_types=("single", "junior")
            ),
            sequence_number=3,
        )

        parsed = event_from_record(event_to_record(event), sequence_number=3)

        assert parsed.data == event.data
        assert parsed.timestamp == event.timestamp


def test_event_type_values_match_log_names():
    assert {member.value for member in EventType} == {
        "RESERVATION_WAS_ISSUED",
        "PARTICIPANT_WAS_REGISTERED",
        "WAITINGLIST_RESERVATION_WAS_ISSUED",
        "WAITINGLIST_PARTICIPANT_WAS_REGISTERED",
        "ROOM_TYPE_WAS_CHANGED",
        "DURATION_WAS_CHANGED",
    }

"""Tests for view memoization and when "now" is read."""

import logging
import threading
from datetime import timedelta

import pytest

from registrar.capacity import StaticQuotas
from registrar.config import RegistrarSettings
from registrar.read_model import RegistrationReadModel
from registrar.sources import InMemoryEventSource
from tests.payloads import participant, reservation


class CountingSource(InMemoryEventSource):
    def __init__(self):
        super().__init__()
        self.reads = 0

    def registration_events(self):
        self.reads += 1
        return super().registration_events()


class TestMemoization:
    def test_views_are_built_once_and_reused(self, clock, quotas, t0):
        source = CountingSource()
        source.append(reservation("A"), timestamp=t0)
        model = RegistrationReadModel(source, quotas, clock=clock)

        first = model.reservations_by_session_id()
        model.participants_by_member_id()
        model.is_full("single")

        assert model.reservations_by_session_id() is first
        assert source.reads == 1

    def test_events_appended_later_are_not_seen(self, source, make_read_model, t0):
        source.append(reservation("A"), timestamp=t0)
        model = make_read_model()
        assert model.has_valid_reservation("A") is True

        source.append(participant("M1", "A"), timestamp=t0)

        assert model.has_valid_reservation("A") is True
        assert make_read_model().has_valid_reservation("A") is False

    def test_concurrent_first_access_folds_once(self, clock, quotas, t0):
        source = CountingSource()
        for i in range(50):
            source.append(reservation(f"S{i}"), timestamp=t0)
        model = RegistrationReadModel(source, quotas, clock=clock)
        results = []

        def read():
            results.append(model.reservations_by_session_id())

        threads = [threading.Thread(target=read) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert source.reads == 1
        assert all(result is results[0] for result in results)

    def test_rejects_non_positive_registration_period(self, source, quotas):
        with pytest.raises(ValueError):
            RegistrationReadModel(source, quotas, registration_period=timedelta(0))


class TestNowPolicy:
    """A reservation issued at T0 with a 30 minute period, queried near T0+30."""

    def test_short_lived_instance_sees_reservation_before_boundary(
        self, source, make_read_model, clock, t0
    ):
        source.append(reservation("A"), timestamp=t0)
        clock.set(t0 + timedelta(minutes=29, seconds=59))

        model = make_read_model()

        assert model.has_valid_reservation("A") is True
        assert len(model.occupants_for("single")) == 1

    def test_short_lived_instance_drops_reservation_at_boundary(
        self, source, make_read_model, clock, t0
    ):
        source.append(reservation("A"), timestamp=t0)
        clock.set(t0 + timedelta(minutes=30))

        model = make_read_model()

        assert "A" not in model.reservations_by_session_id()
        assert model.has_valid_reservation("A") is False

    def test_long_lived_instance_expires_reservation_at_query_time(
        self, source, make_read_model, clock, t0
    ):
        source.append(reservation("A"), timestamp=t0)
        model = make_read_model()
        assert model.has_valid_reservation("A") is True

        clock.set(t0 + timedelta(minutes=30))

        # The folded view still holds the entry; queries no longer count it
        assert "A" in model.reservations_by_session_id()
        assert model.has_valid_reservation("A") is False
        assert model.reservation_expiration("A") is None
        assert model.occupants_for("single") == []

    def test_one_query_judges_every_entry_at_the_same_instant(self, source, quotas, t0):
        source.append(reservation("A"), timestamp=t0)
        source.append(reservation("B"), timestamp=t0)
        clock = TickingClock(t0 + timedelta(minutes=29, seconds=58), step=timedelta(seconds=1))
        model = RegistrationReadModel(
            source, quotas, registration_period=timedelta(minutes=30), clock=clock
        )
        model.reservations_by_session_id()

        # Folding read 29:58; the first query reads 29:59 for both entries, the next 30:00
        assert set(model.reservations_for("single")) == {"A", "B"}
        assert model.reservations_for("single") == {}


class TickingClock:
    """Clock that moves forward every time it is read."""

    def __init__(self, start, step):
        self._now = start
        self._step = step

    def now_utc(self):
        now = self._now
        self._now = now + self._step
        return now


def test_from_settings_uses_configured_period_and_quotas(source, clock, t0):
    source.append(reservation("A"), timestamp=t0)
    settings = RegistrarSettings(registration_period_minutes=10, quotas={"single": 1})

    model = RegistrationReadModel.from_settings(source, settings, clock=clock)

    assert model.registration_period == timedelta(minutes=10)
    assert model.is_full("single") is True
    assert model.reservation_expiration("A") == t0 + timedelta(minutes=10)


def test_from_settings_prefers_injected_capacity(source, clock, t0):
    source.append(reservation("A"), timestamp=t0)
    settings = RegistrarSettings(quotas={"single": 1})

    model = RegistrationReadModel.from_settings(
        source, settings, capacity=StaticQuotas({"single": 5}), clock=clock
    )

    assert model.is_full("single") is False


def test_folding_a_view_is_logged(source, make_read_model, t0, caplog):
    source.append(reservation("A"), timestamp=t0)
    caplog.set_level(logging.DEBUG, logger="registrar")

    make_read_model().reservations_by_session_id()

    records = [r for r in caplog.records if r.getMessage() == "Folded registration view"]
    assert len(records) == 1
    assert records[0].view == "reservations"
    assert records[0].event_count == 1
    assert records[0].entry_count == 1

"""Central test fixtures for the registration read model."""

from collections.abc import Callable
from datetime import datetime, timedelta, timezone

import pytest

from registrar.capacity import StaticQuotas
from registrar.clock import FixedClock
from registrar.read_model import RegistrationReadModel
from registrar.sources import InMemoryEventSource

T0 = datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def t0() -> datetime:
    """The instant most test events are issued at."""
    return T0


@pytest.fixture
def clock() -> FixedClock:
    """A clock pinned to T0."""
    return FixedClock(T0)


@pytest.fixture
def source() -> InMemoryEventSource:
    """Create an empty in-memory registration log."""
    return InMemoryEventSource()


@pytest.fixture
def quotas() -> StaticQuotas:
    """Quotas for the room types used across the tests."""
    return StaticQuotas({"single": 2, "bed_in_double": 4, "junior": 1})


@pytest.fixture
def make_read_model(
    source: InMemoryEventSource, quotas: StaticQuotas, clock: FixedClock
) -> Callable[..., RegistrationReadModel]:
    """Factory building a fresh read model over the shared source and clock."""

    def make(**kwargs) -> RegistrationReadModel:
        kwargs.setdefault("registration_period", timedelta(minutes=30))
        kwargs.setdefault("clock", clock)
        return RegistrationReadModel(source, quotas, **kwargs)

    return make

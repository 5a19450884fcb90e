"""Event source interfaces and in-memory implementations.

The registration log itself lives in an external append-only store. The
read model only needs the full, ordered sequence of registration events,
already materialized in memory, and it reads that sequence once per
instance.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime
from typing import Any, Protocol

from .domain import Event, RegistrationPayload, event_from_record

LOGGER = logging.getLogger(__name__)


class EventSource(Protocol):
    """Synchronous access to the ordered registration log."""

    def registration_events(self) -> Sequence[Event[Any]]:
        """Return every registration event, oldest first.

        The sequence must stay stable for the lifetime of a read model.
        """
        ...


class AsyncEventSource(Protocol):
    """Asynchronous access to the registration log (e.g. a database client)."""

    async def registration_events(self) -> Sequence[Event[Any]]: ...


class SnapshotEventSource:
    """A frozen copy of the log taken at one point in time."""

    def __init__(self, events: Iterable[Event[Any]]):
        self._events = tuple(events)

    def registration_events(self) -> Sequence[Event[Any]]:
        return self._events


class InMemoryEventSource:
    """List-based in-memory registration log for tests and development.

    Events are kept in append order and numbered from 1. Each call to
    `registration_events()` returns an immutable snapshot, so a read
    model built on this source never sees events appended after it
    first read the log.

    **NOT suitable for production**: nothing is durable and memory usage
    grows unbounded.
    """

    def __init__(self, events: Iterable[Event[Any]] = ()) -> None:
        self._events: list[Event[Any]] = list(events)

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> "InMemoryEventSource":
        """Build a source from flat records, numbering them in order."""
        source = cls()
        source.extend(records)
        return source

    def append(self, payload: RegistrationPayload, timestamp: datetime | None = None) -> Event[Any]:
        """Wrap a payload in an envelope and append it to the log.

        Args:
            payload: The registration payload.
            timestamp: When the event occurred; defaults to now (UTC).

        Returns:
            The appended event.
        """
        fields: dict[str, Any] = {"data": payload, "sequence_number": len(self._events) + 1}
        if timestamp is not None:
            fields["timestamp"] = timestamp
        event: Event[Any] = Event(**fields)
        self._events.append(event)
        return event

    def extend(self, records: Iterable[Mapping[str, Any]]) -> list[Event[Any]]:
        """Parse flat records and append them to the log.

        Raises:
            UnknownEventTypeError: If a record has an unknown event type.
            pydantic.ValidationError: If a record is malformed.
        """
        appended = []
        for record in records:
            event = event_from_record(record, sequence_number=len(self._events) + 1)
            self._events.append(event)
            appended.append(event)
        LOGGER.debug(
            "Appended registration records",
            extra={"record_count": len(appended), "log_length": len(self._events)},
        )
        return appended

    def registration_events(self) -> Sequence[Event[Any]]:
        return tuple(self._events)


async def materialize(source: AsyncEventSource) -> SnapshotEventSource:
    """Fetch the whole log from an asynchronous source once.

    The read model is synchronous; any I/O happens here, before it runs.

    Example:
        >>> source = await materialize(mongo_backed_source)
        >>> model = RegistrationReadModel(source, quotas)
    """
    events = await source.registration_events()
    LOGGER.debug("Materialized registration log", extra={"event_count": len(events)})
    return SnapshotEventSource(events)

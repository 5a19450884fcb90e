"""Exceptions raised at the boundary between the event log and the read model."""


class RegistrarError(Exception):
    """Base class for errors raised by registrar."""

    pass


class UnknownEventTypeError(RegistrarError):
    """Raised when a log record names an event type registrar does not know.

    Read model queries never raise; this only surfaces while turning raw
    records from an external store into typed events.
    """

    def __init__(self, event_type: object):
        super().__init__(f"Unknown registration event type: {event_type!r}")
        self.event_type = event_type

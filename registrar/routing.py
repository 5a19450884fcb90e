"""Dispatch of registration events to fold steps.

A fold step is a method marked with @folds_event. Its first parameter
names what it folds: annotate it with a payload type to receive the
payload, or with `Event[Payload]` to receive the whole envelope (needed
when the step looks at the timestamp). Its second parameter is the
accumulator, and it returns the next accumulator.
"""

import inspect
from collections.abc import Callable, Mapping
from functools import singledispatch
from typing import Any, TypeVar

T = TypeVar("T")

_STEP_PAYLOAD_TYPE_ATTR = "_folds_payload_type"
_STEP_WANTS_ENVELOPE_ATTR = "_folds_envelope"


def _unhandled(payload: object, fold: object, accumulator: T, event: object) -> T:
    return accumulator


def _step_target(step: Callable[..., Any]) -> tuple[type, bool]:
    """Read the payload type a step folds and whether it wants the envelope.

    Raises:
        ValueError: If the step has no annotated event parameter.
    """
    from .domain import Event  # Import here to avoid circular dependency

    name = getattr(step, "__name__", repr(step))
    params = list(inspect.signature(step).parameters.values())
    if len(params) < 3:
        raise ValueError(f"Fold step {name} must take (self, event, accumulator)")

    annotation = params[1].annotation
    if annotation is inspect.Parameter.empty:
        raise ValueError(
            f"Fold step {name} parameter '{params[1].name}' must have a type annotation"
        )

    # Event[Payload] is a concrete pydantic subclass carrying its type argument
    if isinstance(annotation, type) and issubclass(annotation, Event):
        args = annotation.__pydantic_generic_metadata__.get("args", ())
        if not args:
            raise ValueError(f"Fold step {name}: annotate as Event[Payload], not bare Event")
        return (args[0], True)
    return (annotation, False)


class FoldRouter:
    """Picks the fold step for an event by its payload type.

    Payload types without a step leave the accumulator as it was.
    """

    __slots__ = ("_dispatch",)

    def __init__(self) -> None:
        self._dispatch = singledispatch(_unhandled)

    def register(
        self, payload_type: type, step: Callable[..., Any], wants_envelope: bool
    ) -> None:
        def call_step(
            payload: object, fold: object, accumulator: Mapping[str, Any], event: object
        ) -> Mapping[str, Any]:
            return step(fold, event if wants_envelope else payload, accumulator)

        self._dispatch.register(payload_type)(call_step)

    def apply(self, fold: object, accumulator: Mapping[str, Any], event: Any) -> Mapping[str, Any]:
        """Run the step registered for `event.data` and return the next accumulator."""
        return self._dispatch(event.data, fold, accumulator, event)


def folds_event(func: Callable[..., T]) -> Callable[..., T]:
    """Decorator marking a method as a fold step.

    Example:
        >>> class SessionsFold(Fold):
        ...     @folds_event
        ...     def on_issued(self, event: Event[ReservationWasIssued], sessions):
        ...         return {**sessions, event.data.session_id: event}
    """
    payload_type, wants_envelope = _step_target(func)
    setattr(func, _STEP_PAYLOAD_TYPE_ATTR, payload_type)
    setattr(func, _STEP_WANTS_ENVELOPE_ATTR, wants_envelope)
    return func


def setup_fold_routing(cls: type) -> FoldRouter:
    """Build the router for a fold class from its @folds_event methods."""
    router = FoldRouter()

    # Base classes first, so a subclass step replaces an inherited one
    for klass in reversed(cls.__mro__):
        for value in klass.__dict__.values():
            payload_type = getattr(value, _STEP_PAYLOAD_TYPE_ATTR, None)
            if payload_type is not None:
                router.register(payload_type, value, getattr(value, _STEP_WANTS_ENVELOPE_ATTR))

    return router

"""Capacity oracle: where room type quotas come from.

The read model only consumes quotas. Callers inject either an object
with a `quota_for` method or a plain function from room type to quota.
A room type without a quota (None) is never considered full.
"""

from collections.abc import Callable, Mapping
from typing import Protocol, runtime_checkable


@runtime_checkable
class CapacityOracle(Protocol):
    """Supplies the maximum number of concurrent occupants per room type."""

    def quota_for(self, room_type: str) -> int | None: ...


class StaticQuotas:
    """Quotas held in a mapping, e.g. loaded from settings.

    Examples:
        >>> quotas = StaticQuotas({"single": 10, "bed_in_double": 20})
        >>> quotas.quota_for("single")
        10
        >>> quotas.quota_for("penthouse") is None
        True
    """

    def __init__(self, quotas: Mapping[str, int]):
        self.quotas = dict(quotas)

    def quota_for(self, room_type: str) -> int | None:
        return self.quotas.get(room_type)


class CallableQuotas:
    """Adapts a `room_type -> quota` function to the oracle protocol."""

    def __init__(self, lookup: Callable[[str], int | None]):
        self.lookup = lookup

    def quota_for(self, room_type: str) -> int | None:
        return self.lookup(room_type)


def as_capacity_oracle(
    capacity: CapacityOracle | Callable[[str], int | None],
) -> CapacityOracle:
    """Normalize an injected capacity dependency to a CapacityOracle.

    Args:
        capacity: An oracle, or a function returning the quota of a
            room type.

    Returns:
        The oracle itself, or a CallableQuotas wrapping the function.

    Raises:
        TypeError: If capacity is neither.
    """
    if isinstance(capacity, CapacityOracle):
        return capacity
    if callable(capacity):
        return CallableQuotas(capacity)
    raise TypeError(f"Expected a CapacityOracle or callable, got {type(capacity).__name__}")

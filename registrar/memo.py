"""Compute-once values backing the projection cache."""

import threading
from collections.abc import Callable
from typing import Generic, TypeVar

T = TypeVar("T")


class ComputeOnce(Generic[T]):
    """A lazily computed value guarded by a single initialization lock.

    The first call to `get()` runs the factory; concurrent callers block
    on the lock and then reuse the stored result. There is no eviction
    and no expiry: the value lives as long as its owner. If the factory
    raises, nothing is stored and the next call tries again.

    Example:
        >>> view = ComputeOnce(lambda: ParticipantsFold().run(events))
        >>> view.get() is view.get()
        True
    """

    __slots__ = ("_factory", "_lock", "_value", "_computed")

    def __init__(self, factory: Callable[[], T]):
        self._factory = factory
        self._lock = threading.Lock()
        self._value: T | None = None
        self._computed = False

    @property
    def is_computed(self) -> bool:
        return self._computed

    def get(self) -> T:
        if not self._computed:
            with self._lock:
                if not self._computed:
                    self._value = self._factory()
                    self._computed = True
        return self._value  # type: ignore[return-value]

"""Compute-once cells for derived lookup tables."""
from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Generic, TypeVar, cast

T = TypeVar("T")

_UNSET = object()


class Lazy(Generic[T]):
    """Run ``factory`` at most once and cache its result.

    The first caller of ``value`` runs the factory while holding a lock;
    callers arriving meanwhile block on the lock and then read the
    published result.  Once published, reads take no lock.  If the
    factory raises, nothing is published and the next access runs it
    again.
    """

    __slots__ = ("_factory", "_lock", "_value")

    def __init__(self, factory: Callable[[], T]) -> None:
        self._factory: Callable[[], T] | None = factory
        self._lock = threading.Lock()
        self._value: object = _UNSET

    @property
    def value(self) -> T:
        value = self._value
        if value is _UNSET:
            with self._lock:
                value = self._value
                if value is _UNSET:
                    factory = cast("Callable[[], T]", self._factory)
                    value = factory()
                    self._value = value
                    # Release whatever the factory closed over.
                    self._factory = None
        return cast(T, value)

    @property
    def is_created(self) -> bool:
        return self._value is not _UNSET

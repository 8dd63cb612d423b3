"""Initialize-once holder for expensive, shared clients."""

from __future__ import annotations

import threading
from typing import Callable, Generic, TypeVar

T = TypeVar("T")


class OnceCell(Generic[T]):
    """Holds a value built at most once, even under concurrent first use.

    The fast path reads without the lock; the slow path re-checks under the
    lock before calling the factory.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value: T | None = None
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    def get_or_init(self, factory: Callable[[], T]) -> T:
        if self._initialized:
            return self._value  # type: ignore[return-value]
        with self._lock:
            if not self._initialized:
                self._value = factory()
                self._initialized = True
        return self._value  # type: ignore[return-value]

    def take(self) -> T | None:
        """Detach and return the value, leaving the cell empty."""
        with self._lock:
            value, self._value = self._value, None
            self._initialized = False
        return value

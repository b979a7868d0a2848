"""
Latest-value cells.

Every piece of shared state (ledger snapshot, allowances, prices, rate,
authorization) lives in a StateCell owned by the component that produces it.
Consumers read the current value or subscribe to replacements; they never
mutate what they receive.
"""

import logging
from typing import Callable, Generic, List, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)

Listener = Callable[[T], None]


class StateCell(Generic[T]):
    """A versioned cell holding one immutable value, replaced wholesale."""

    def __init__(self, initial: T, name: str = "cell"):
        self.name = name
        self._value = initial
        self._version = 0
        self._listeners: List[Listener] = []

    @property
    def value(self) -> T:
        return self._value

    @property
    def version(self) -> int:
        """Incremented on every change of value."""
        return self._version

    def get(self) -> T:
        return self._value

    def set(self, value: T) -> bool:
        """
        Replace the value and notify listeners.

        Returns:
            True if the value changed
        """
        if value == self._value:
            return False
        self._value = value
        self._version += 1
        for listener in list(self._listeners):
            try:
                listener(value)
            except Exception:
                logger.exception(f"Listener of {self.name} failed")
        return True

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def __repr__(self) -> str:
        return f"StateCell({self.name}, version={self._version}, value={self._value!r})"

"""Observable state container.

Holds one immutable value and notifies subscribers on every replacement.
Stores receive a container by injection, so tests and independent UI trees
can each own their own state.
"""

import logging
from collections.abc import Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Listener = Callable[[T], None]


class StateContainer(Generic[T]):
    """A single value with whole-value replacement and change notification."""

    def __init__(self, initial: T) -> None:
        self._value = initial
        self._listeners: list[Listener[T]] = []

    def get(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        """Replace the value and notify every subscriber."""
        self._value = value
        for listener in list(self._listeners):
            listener(value)

    def update(self, fn: Callable[[T], T]) -> T:
        """Replace the value with ``fn(current)`` and return the new value."""
        value = fn(self._value)
        self.set(value)
        return value

    def subscribe(self, listener: Listener[T]) -> Callable[[], None]:
        """Register a listener, call it with the current value, return an unsubscribe."""
        self._listeners.append(listener)
        listener(self._value)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

"""
Observable state holder with replay-latest semantics.

Subscribers are called immediately with the current value and then with every
change. Callbacks run outside the value lock, on the thread that changed the
value. Deliveries are serialized and a value that was already superseded is
never delivered, so subscribers always end on the latest value.
"""

import threading
from typing import Callable, Generic, List, TypeVar

from loguru import logger

T = TypeVar("T")


class ObservableValue(Generic[T]):
    """Thread-safe holder of the latest value of a piece of state."""

    def __init__(self, initial: T, name: str = "value"):
        self.name = name
        self._value = initial
        self._version = 0
        self._lock = threading.Lock()
        # Reentrant: a subscriber may publish to the value it observes
        self._delivery_lock = threading.RLock()
        self._subscribers: List[Callable[[T], None]] = []

    @property
    def value(self) -> T:
        with self._lock:
            return self._value

    def set(self, value: T) -> bool:
        """
        Publish a new value.

        Returns:
            bool: False if the value was equal to the current one (nothing
                is published in that case)
        """
        with self._lock:
            if value == self._value:
                return False
            self._value = value
            self._version += 1
            version = self._version
            subscribers = list(self._subscribers)
        with self._delivery_lock:
            self._notify(subscribers, value, version)
        return True

    def subscribe(self, callback: Callable[[T], None]) -> Callable[[], None]:
        """
        Register a callback and replay the current value to it.

        Returns:
            Callable[[], None]: Function that removes the subscription
        """
        with self._delivery_lock:
            with self._lock:
                self._subscribers.append(callback)
                current = self._value
                version = self._version
            self._notify([callback], current, version)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def _is_current(self, version: int) -> bool:
        with self._lock:
            return version == self._version

    def _notify(self, subscribers: List[Callable[[T], None]], value: T, version: int) -> None:
        for callback in subscribers:
            if not self._is_current(version):
                # A newer value was published and is delivered by its setter
                return
            try:
                callback(value)
            except Exception:
                logger.exception(f"Subscriber of {self.name} failed")

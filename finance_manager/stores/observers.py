"""
Change Notification

Each store keeps an ObserverRegistry. After every mutation the store
calls notify(), which invokes each registered observer in
registration order before the mutating call returns.

Observers are zero-argument callables meaning "data changed, re-query
now". No payload is passed; an observer calls back into the store's
read methods to learn what changed.

CRITICAL: One observer raising must not stop delivery to the others.
Failures are logged with their traceback and returned to the caller,
never swallowed silently.
"""

from dataclasses import dataclass
from typing import Callable

from finance_manager.logger import get_logger


DataObserver = Callable[[], None]


@dataclass(frozen=True)
class ObserverFailure:
    """An exception raised by one observer during a notification."""

    observer: DataObserver
    error: Exception


class ObserverRegistry:
    """Ordered list of observers with fault-isolated, synchronous fan-out."""

    def __init__(self, source: str):
        """
        Args:
            source: Name of the owning store, bound to log events.
        """
        self._observers: list[DataObserver] = []
        self._logger = get_logger(__name__, source=source)

    def add(self, observer: DataObserver) -> None:
        """Register an observer. Registering twice means two calls per change."""
        self._observers.append(observer)

    def remove(self, observer: DataObserver) -> None:
        """Unregister the first matching observer. Unknown observers are ignored."""
        try:
            self._observers.remove(observer)
        except ValueError:
            pass

    def __len__(self) -> int:
        return len(self._observers)

    def __contains__(self, observer: DataObserver) -> bool:
        return observer in self._observers

    def notify(self) -> list[ObserverFailure]:
        """
        Call every currently registered observer once, in order.

        Observers added or removed while a notification is running
        take effect from the next notification.

        Returns:
            Failures raised by individual observers (empty if all succeeded)
        """
        failures = []
        for observer in list(self._observers):
            try:
                observer()
            except Exception as e:
                self._logger.exception(
                    "observer_failed",
                    observer=getattr(observer, "__qualname__", repr(observer)),
                    error=str(e),
                )
                failures.append(ObserverFailure(observer=observer, error=e))
        return failures

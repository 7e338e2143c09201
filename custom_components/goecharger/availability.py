"""Availability state of a charger."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable

_LOGGER = logging.getLogger(__name__)


class AvailabilityState(Enum):
    """Whether the charger can currently be reached."""

    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


class AvailabilityManager:
    """Track availability and notify listeners on every report.

    Reports are level-triggered: repeated failures keep re-asserting the
    unavailable state (with the latest reason) and notify every time.
    """

    def __init__(self, name: str = "charger") -> None:
        self._name = name
        self._state = AvailabilityState.UNAVAILABLE
        self._reason: str | None = None
        self._listeners: list[Callable[[], None]] = []

    @property
    def state(self) -> AvailabilityState:
        return self._state

    @property
    def available(self) -> bool:
        return self._state is AvailabilityState.AVAILABLE

    @property
    def reason(self) -> str | None:
        return self._reason

    def add_listener(self, listener: Callable[[], None]) -> Callable[[], None]:
        """Register a callback; return a function that removes it."""
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    def set_available(self) -> None:
        if self._state is not AvailabilityState.AVAILABLE:
            _LOGGER.info("%s is available", self._name)
        self._state = AvailabilityState.AVAILABLE
        self._reason = None
        self._notify()

    def set_unavailable(self, reason: BaseException | str | None = None) -> None:
        text = str(reason) if reason is not None else None
        if self._state is not AvailabilityState.UNAVAILABLE or text != self._reason:
            _LOGGER.info("%s is unavailable: %s", self._name, text or "unknown reason")
        self._state = AvailabilityState.UNAVAILABLE
        self._reason = text
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                _LOGGER.exception("%s: availability listener failed", self._name)

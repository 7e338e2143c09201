"""Write telemetry snapshots into the capability model."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from .capability_store import CapabilityStore
from .const import CAP_CURRENT_LIMIT, CAP_IS_CHARGING, CAP_STATUS, VALUE_SETTLE_DELAY
from .debug import debug_enabled
from .models import ChargerStatus, TelemetrySnapshot
from .triggers import TriggerDispatcher

_LOGGER = logging.getLogger(__name__)

_CHARGING_BY_STATUS: dict[str, bool] = {
    ChargerStatus.STATION_IDLE.value: False,
    ChargerStatus.CAR_CHARGING.value: True,
    ChargerStatus.CAR_WAITING.value: False,
    ChargerStatus.CAR_FINISHED.value: False,
}


class StatusTransitionMapper:
    """Derive the `is_charging` capability from the charger status."""

    @staticmethod
    def charging_for(status: Any) -> bool | None:
        """Return the charging state implied by a status, None when unmapped."""
        if isinstance(status, ChargerStatus):
            status = status.value
        return _CHARGING_BY_STATUS.get(status)

    async def async_apply(
        self,
        synchronizer: ValueSynchronizer,
        new_status: str,
        old_status: Any,
        *,
        first_run: bool = False,
    ) -> bool:
        """Update `is_charging` when the status changed; return whether it was written."""
        if new_status == old_status:
            return False
        charging = self.charging_for(new_status)
        if charging is None:
            _LOGGER.debug(
                "Status changed %s -> %s; no charging state mapped", old_status, new_status
            )
            return False
        await synchronizer.async_set_value(CAP_IS_CHARGING, charging, first_run)
        return True


class ValueSynchronizer:
    """Diff and write telemetry values, firing triggers on boolean transitions.

    The lock is shared with the command dispatcher so that a poll-driven
    fan-out and a user-initiated write never interleave.
    """

    def __init__(
        self,
        store: CapabilityStore,
        triggers: TriggerDispatcher,
        lock: asyncio.Lock,
        *,
        settle_delay: float = VALUE_SETTLE_DELAY,
        name: str = "charger",
    ) -> None:
        self._store = store
        self._triggers = triggers
        self._lock = lock
        self._settle_delay = settle_delay
        self._status_mapper = StatusTransitionMapper()
        self._name = name

    @property
    def lock(self) -> asyncio.Lock:
        return self._lock

    async def async_set_value(
        self,
        key: str,
        value: Any,
        first_run: bool = False,
        delay: float | None = None,
    ) -> None:
        """Write one capability value and fire its trigger on a real transition.

        The write always happens, even when the value is unchanged. Triggers
        fire only for booleans, only when the value differs from the cached
        one, and never during the first-run pass.
        """
        if not self._store.has_capability(key):
            return

        old_value = self._store.get_value(key)
        if delay is None:
            delay = self._settle_delay
        if delay:
            await asyncio.sleep(delay)

        await self._store.async_set_value(key, value)
        if debug_enabled():
            _LOGGER.debug("%s: %s %r -> %r", self._name, key, old_value, value)

        if isinstance(value, bool) and old_value != value and not first_run:
            self._triggers.fire(key, value)

    async def async_sync_snapshot(
        self, snapshot: TelemetrySnapshot, *, first_run: bool = False
    ) -> None:
        """Fan a snapshot out to every capability, then derive the charging state."""
        async with self._lock:
            old_status = self._store.get_value(CAP_STATUS)

            for key, value in snapshot.capability_values():
                await self.async_set_value(key, value, first_run)

            await self._async_update_current_limit_bound(snapshot.current_max)

            new_status = snapshot.status.value
            await self.async_set_value(CAP_STATUS, new_status, first_run)
            await self._status_mapper.async_apply(
                self, new_status, old_status, first_run=first_run
            )

    async def _async_update_current_limit_bound(self, current_max: int) -> None:
        """Keep the current limit's max bound equal to the charger's maximum current."""
        if not self._store.has_capability(CAP_CURRENT_LIMIT):
            return
        options = self._store.get_options(CAP_CURRENT_LIMIT)
        if options.get("max") == current_max:
            return
        _LOGGER.debug("%s: current limit max %s -> %s", self._name, options.get("max"), current_max)
        await self._store.async_set_options(CAP_CURRENT_LIMIT, {"max": current_max})

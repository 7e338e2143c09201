"""Translate capability writes from the host into charger commands."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from .api import GoeChargerApi
from .capability_store import CapabilityStore
from .const import (
    CAP_CHARGING_ALLOWED,
    CAP_CURRENT_LIMIT,
    COMMAND_CHARGING_ALLOWED,
    COMMAND_CURRENT_LIMIT,
)

_LOGGER = logging.getLogger(__name__)


class CommandDispatcher:
    """Send user or automation initiated capability changes to the charger.

    A write whose value equals the cached capability value is skipped. Device
    errors propagate to the caller and leave availability untouched.
    """

    def __init__(
        self,
        api: GoeChargerApi,
        store: CapabilityStore,
        lock: asyncio.Lock,
        *,
        name: str = "charger",
    ) -> None:
        self._api = api
        self._store = store
        self._lock = lock
        self._name = name

    def register(self) -> None:
        """Register this dispatcher as listener of the writable capabilities."""
        self._store.register_capability_listener(
            CAP_CHARGING_ALLOWED, self.async_set_charging_allowed
        )
        self._store.register_capability_listener(
            CAP_CURRENT_LIMIT, self.async_set_current_limit
        )

    async def async_set_charging_allowed(self, value: bool) -> dict[str, Any] | None:
        """Allow or block charging."""
        return await self._async_send(
            CAP_CHARGING_ALLOWED, COMMAND_CHARGING_ALLOWED, bool(value), 1 if value else 0
        )

    async def async_set_current_limit(self, value: float) -> dict[str, Any] | None:
        """Set the charging current limit in amperes."""
        amps = round(value)
        return await self._async_send(CAP_CURRENT_LIMIT, COMMAND_CURRENT_LIMIT, amps, amps)

    async def _async_send(
        self, capability: str, key: str, value: Any, native: Any
    ) -> dict[str, Any] | None:
        async with self._lock:
            if value == self._store.get_value(capability):
                _LOGGER.debug("%s: %s already %s; skipping", self._name, capability, value)
                return None

            _LOGGER.info("%s: set %s to %s", self._name, capability, value)
            ack = await self._api.async_set_value(key, native)
            if self._store.has_capability(capability):
                await self._store.async_set_value(capability, value)
            return ack

"""Capability model of a charger: attached capabilities, cached values and options."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable

from homeassistant.core import HomeAssistant
from homeassistant.helpers import entity_registry as er
from homeassistant.helpers.dispatcher import async_dispatcher_send
from homeassistant.helpers.storage import Store

from .const import (
    CAPABILITY_PLATFORMS,
    CAPABILITY_STORE_KEY,
    CAPABILITY_STORE_SAVE_DELAY,
    CAPABILITY_STORE_VERSION,
    DOMAIN,
)
from .errors import CapabilityUpdateFailure, GoeChargerError

_LOGGER = logging.getLogger(__name__)

CapabilityListener = Callable[[Any], Awaitable[Any]]


class CapabilityStore:
    """Host-side capability storage for one charger.

    Holds the attached capability set, the last value written for each
    capability and per-capability options such as the `max` bound of the
    current limit. Entities subscribe to the dispatcher signals to follow it.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        entry_id: str,
        device_key: str,
        store: Store,
        data: dict[str, Any] | None = None,
    ) -> None:
        self.hass = hass
        self.entry_id = entry_id
        self.device_key = device_key
        self._store = store
        data = data or {}
        capabilities = data.get("capabilities")
        self._capabilities: list[str] = (
            [c for c in capabilities if isinstance(c, str)]
            if isinstance(capabilities, list)
            else []
        )
        values = data.get("values")
        self._values: dict[str, Any] = dict(values) if isinstance(values, dict) else {}
        options = data.get("options")
        self._options: dict[str, dict[str, Any]] = (
            {k: dict(v) for k, v in options.items() if isinstance(v, dict)}
            if isinstance(options, dict)
            else {}
        )
        self._listeners: dict[str, CapabilityListener] = {}

    @classmethod
    async def async_create(
        cls, hass: HomeAssistant, entry_id: str, device_key: str
    ) -> CapabilityStore:
        """Create the store and load the persisted capability model."""
        store: Store = Store(
            hass,
            CAPABILITY_STORE_VERSION,
            f"{DOMAIN}_{entry_id}_{CAPABILITY_STORE_KEY}",
        )
        data = await store.async_load()
        if not isinstance(data, dict):
            data = {}
        return cls(hass, entry_id, device_key, store, data)

    @property
    def signal_update(self) -> str:
        return f"{DOMAIN}_{self.entry_id}_capability_update"

    @property
    def signal_added(self) -> str:
        return f"{DOMAIN}_{self.entry_id}_capability_added"

    @property
    def signal_removed(self) -> str:
        return f"{DOMAIN}_{self.entry_id}_capability_removed"

    def unique_id_for(self, capability: str) -> str:
        return f"{self.device_key}_{capability}"

    # -- attached set -----------------------------------------------------

    def get_capabilities(self) -> list[str]:
        return list(self._capabilities)

    def has_capability(self, capability: str) -> bool:
        return capability in self._capabilities

    async def async_add_capability(self, capability: str) -> None:
        """Attach a capability; the owning platform creates its entity."""
        if capability not in CAPABILITY_PLATFORMS:
            raise CapabilityUpdateFailure(f"Unknown capability {capability}")
        if capability in self._capabilities:
            return
        self._capabilities.append(capability)
        self._schedule_save()
        async_dispatcher_send(self.hass, self.signal_added, capability)

    async def async_remove_capability(self, capability: str) -> None:
        """Detach a capability and drop its entity from the registry."""
        if capability not in self._capabilities:
            raise CapabilityUpdateFailure(f"Capability {capability} is not attached")
        self._capabilities.remove(capability)
        self._values.pop(capability, None)
        self._options.pop(capability, None)
        self._listeners.pop(capability, None)
        self._schedule_save()
        async_dispatcher_send(self.hass, self.signal_removed, capability)

        platform = CAPABILITY_PLATFORMS.get(capability)
        if platform is None:
            return
        registry = er.async_get(self.hass)
        entity_id = registry.async_get_entity_id(
            platform, DOMAIN, self.unique_id_for(capability)
        )
        if entity_id:
            registry.async_remove(entity_id)
            _LOGGER.debug("Removed entity %s for capability %s", entity_id, capability)

    # -- values -----------------------------------------------------------

    def get_value(self, capability: str) -> Any:
        return self._values.get(capability)

    async def async_set_value(self, capability: str, value: Any) -> None:
        """Write the cached value of an attached capability."""
        if capability not in self._capabilities:
            raise CapabilityUpdateFailure(f"Capability {capability} is not attached")
        self._values[capability] = value
        self._schedule_save()
        async_dispatcher_send(self.hass, self.signal_update, capability)

    def get_options(self, capability: str) -> dict[str, Any]:
        return dict(self._options.get(capability, {}))

    async def async_set_options(self, capability: str, options: dict[str, Any]) -> None:
        """Merge options (e.g. numeric bounds) into a capability."""
        if capability not in self._capabilities:
            raise CapabilityUpdateFailure(f"Capability {capability} is not attached")
        self._options.setdefault(capability, {}).update(options)
        self._schedule_save()
        async_dispatcher_send(self.hass, self.signal_update, capability)

    # -- write requests from the host -------------------------------------

    def register_capability_listener(
        self, capability: str, listener: CapabilityListener
    ) -> None:
        """Route user/automation writes of a capability to a handler."""
        self._listeners[capability] = listener

    def has_listener(self, capability: str) -> bool:
        return capability in self._listeners

    async def async_request_value(self, capability: str, value: Any) -> Any:
        """Handle a capability write coming from the UI or an automation."""
        listener = self._listeners.get(capability)
        if listener is None:
            raise GoeChargerError(f"Capability {capability} is not writable yet")
        return await listener(value)

    # -- persistence ------------------------------------------------------

    def _data_to_save(self) -> dict[str, Any]:
        return {
            "capabilities": list(self._capabilities),
            "values": dict(self._values),
            "options": {k: dict(v) for k, v in self._options.items()},
        }

    def _schedule_save(self) -> None:
        self._store.async_delay_save(self._data_to_save, CAPABILITY_STORE_SAVE_DELAY)

    async def async_flush(self) -> None:
        """Persist the capability model immediately."""
        await self._store.async_save(self._data_to_save())

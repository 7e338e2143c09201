"""Lifecycle of one go-e Charger: startup, polling, settings and discovery."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable

from homeassistant.core import CALLBACK_TYPE, HomeAssistant

from .api import GoeChargerApi
from .availability import AvailabilityManager
from .capability_store import CapabilityStore
from .commands import CommandDispatcher
from .const import (
    CAPABILITY_SETTLE_DELAY,
    CONF_ADDRESS,
    CONF_DRIVER,
    DRIVER_CAPABILITIES,
    POLL_INTERVAL,
    VALUE_SETTLE_DELAY,
    WARMUP_DELAY,
)
from .errors import DeviceUnreachable, InvalidSettings
from .models import DiscoveryResult, TelemetrySnapshot
from .reconciler import CapabilityReconciler, ReconcileResult
from .synchronizer import ValueSynchronizer
from .triggers import TriggerDispatcher

_LOGGER = logging.getLogger(__name__)

SettingsWriter = Callable[[dict[str, Any]], Awaitable[None]]


class GoeChargerDevice:
    """Own the engine of one charger and drive its lifecycle."""

    def __init__(
        self,
        hass: HomeAssistant,
        *,
        entry_id: str,
        device_id: str,
        name: str,
        api: GoeChargerApi,
        store: CapabilityStore,
        settings_writer: SettingsWriter,
        registry_device_id: str | None = None,
        poll_interval: float = POLL_INTERVAL,
        warmup_delay: float = WARMUP_DELAY,
        capability_settle_delay: float = CAPABILITY_SETTLE_DELAY,
        value_settle_delay: float = VALUE_SETTLE_DELAY,
    ) -> None:
        self.hass = hass
        self.entry_id = entry_id
        self.device_id = device_id
        self.name = name
        self.api = api
        self.store = store
        self._settings_writer = settings_writer
        self._poll_interval = poll_interval
        self._warmup_delay = warmup_delay

        self._lock = asyncio.Lock()
        self.availability = AvailabilityManager(name)
        self.reconciler = CapabilityReconciler(
            store, settle_delay=capability_settle_delay, name=name
        )
        self.triggers = TriggerDispatcher(
            hass,
            entry_id,
            self.driver_capabilities,
            device_id=registry_device_id,
            name=name,
        )
        self.synchronizer = ValueSynchronizer(
            store, self.triggers, self._lock, settle_delay=value_settle_delay, name=name
        )
        self.commands = CommandDispatcher(api, store, self._lock, name=name)

        self._poll_task: asyncio.Task | None = None
        self._cancel_poll: CALLBACK_TYPE | None = None

    @property
    def driver_capabilities(self) -> tuple[str, ...]:
        return DRIVER_CAPABILITIES.get(self.api.driver, ())

    @property
    def polling(self) -> bool:
        return self._poll_task is not None and not self._poll_task.done()

    # -- startup and teardown ---------------------------------------------

    async def async_initialize(self) -> None:
        """Bring the charger online.

        Order matters: capabilities are reconciled before listeners are
        registered, the first synchronization runs with triggers suppressed,
        and polling only starts after the warm-up delay.
        """
        _LOGGER.debug("%s: %s start init", self.name, self.device_id)
        self.availability.set_unavailable(f"Initializing {self.name}")

        await self.async_check_capabilities()
        self.commands.register()
        await self.async_refresh(first_run=True)
        await asyncio.sleep(self._warmup_delay)
        self.availability.set_available()
        self.async_start_polling()

        await self._settings_writer({CONF_DRIVER: self.api.driver})

    async def async_check_capabilities(self) -> ReconcileResult:
        """Reconcile the attached capabilities with the driver's."""
        _LOGGER.debug("%s: checking capabilities for driver %s", self.name, self.api.driver)
        return await self.reconciler.async_reconcile(self.driver_capabilities)

    async def async_shutdown(self) -> None:
        """Stop polling; safe to call more than once."""
        _LOGGER.debug("%s: %s shutting down", self.name, self.device_id)
        self.async_stop_polling()

    # -- polling ----------------------------------------------------------

    def async_start_polling(self) -> CALLBACK_TYPE:
        """Start the poll loop and return the callback that cancels it."""
        if self._cancel_poll is not None:
            return self._cancel_poll
        try:
            _LOGGER.debug("%s: polling every %s seconds", self.name, self._poll_interval)
            task = asyncio.get_running_loop().create_task(
                self._async_poll_loop(), name=f"goecharger_poll_{self.device_id}"
            )
        except Exception as err:
            _LOGGER.error("%s: unable to start polling: %s", self.name, err)
            self.availability.set_unavailable(err)
            raise

        self._poll_task = task

        def _cancel() -> None:
            if not task.done():
                task.cancel()

        self._cancel_poll = _cancel
        return _cancel

    def async_stop_polling(self) -> None:
        """Cancel the poll loop if one is running."""
        cancel = self._cancel_poll
        self._cancel_poll = None
        self._poll_task = None
        if cancel is None:
            return
        _LOGGER.debug("%s: polling stopped", self.name)
        cancel()

    async def _async_poll_loop(self) -> None:
        """Poll forever; the next delay starts once the previous cycle finished."""
        try:
            while True:
                await asyncio.sleep(self._poll_interval)
                try:
                    await self.async_refresh()
                except Exception as err:
                    _LOGGER.exception("%s: poll cycle crashed", self.name)
                    self.availability.set_unavailable(err)
        except asyncio.CancelledError:
            _LOGGER.debug("%s: poll loop cancelled", self.name)
            return

    async def async_refresh(self, first_run: bool = False) -> bool:
        """Run one fetch and synchronization cycle; return whether it succeeded."""
        try:
            snapshot = await self.api.async_get_info()
        except DeviceUnreachable as err:
            _LOGGER.debug("%s: poll failed: %s", self.name, err)
            self.availability.set_unavailable(err)
            return False

        try:
            await self.synchronizer.async_sync_snapshot(snapshot, first_run=first_run)
        except Exception as err:
            _LOGGER.exception("%s: synchronizing capabilities failed", self.name)
            self.availability.set_unavailable(err)
            return False

        self.availability.set_available()
        return True

    # -- settings ---------------------------------------------------------

    async def async_apply_settings(self, address: str) -> TelemetrySnapshot:
        """Switch to a new address after checking the charger answers there.

        Raises:
            InvalidSettings: if the charger cannot be reached at `address`
        """
        _LOGGER.debug("%s: settings changed, new address %s", self.name, address)
        previous = self.api.address
        self.api.address = address
        try:
            snapshot = await self.api.async_get_info()
        except DeviceUnreachable as err:
            self.api.address = previous
            self.availability.set_unavailable(err)
            raise InvalidSettings(f"No charger answering at {address}: {err}") from err
        _LOGGER.debug("%s: new settings OK", self.name)
        self.availability.set_available()
        return snapshot

    # -- discovery --------------------------------------------------------

    def matches_discovery(self, result: DiscoveryResult) -> bool:
        return result.id == self.device_id

    async def async_on_discovery_available(self, result: DiscoveryResult) -> None:
        _LOGGER.debug(
            "%s: discovered at %s (type %s)", self.name, result.address, result.devicetype
        )
        await self._async_set_address(result.address)
        self.availability.set_available()

    async def async_on_discovery_address_changed(self, result: DiscoveryResult) -> None:
        _LOGGER.debug(
            "%s: address changed to %s (%s)", self.name, result.address, result.name
        )
        await self._async_set_address(result.address)
        self.availability.set_available()

    async def async_on_discovery_last_seen_changed(self, result: DiscoveryResult) -> None:
        _LOGGER.debug("%s: offline at %s (%s)", self.name, result.address, result.name)
        await self._async_set_address(result.address)
        self.availability.set_unavailable("Discovery device offline.")

    async def _async_set_address(self, address: str) -> None:
        self.api.address = address
        await self._settings_writer({CONF_ADDRESS: address})

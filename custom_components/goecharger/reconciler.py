"""Reconcile the capabilities attached to a charger with its driver's set."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Iterable

from .capability_store import CapabilityStore
from .const import CAPABILITY_SETTLE_DELAY
from .errors import CapabilityUpdateFailure

_LOGGER = logging.getLogger(__name__)


@dataclass
class ReconcileResult:
    """Outcome of one reconciliation run."""

    removed: list[str] = field(default_factory=list)
    added: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.removed or self.added)


class CapabilityReconciler:
    """Bring the device capability set in line with the driver capability set.

    Removals are applied first, then the host store is given a settle delay
    before additions are applied. Individual failures are logged and skipped.
    """

    def __init__(
        self,
        store: CapabilityStore,
        *,
        settle_delay: float = CAPABILITY_SETTLE_DELAY,
        name: str = "charger",
    ) -> None:
        self._store = store
        self._settle_delay = settle_delay
        self._name = name

    async def async_reconcile(self, driver_capabilities: Iterable[str]) -> ReconcileResult:
        """Detach capabilities the driver no longer declares and attach missing ones."""
        driver = list(dict.fromkeys(driver_capabilities))
        device = self._store.get_capabilities()

        to_remove = [c for c in device if c not in driver]
        to_add = [c for c in driver if c not in device]
        result = ReconcileResult()

        _LOGGER.debug("%s: found capabilities %s", self._name, device)
        if not to_remove and not to_add:
            _LOGGER.debug("%s: capabilities up to date", self._name)
            return result

        _LOGGER.debug("%s: capabilities to remove %s", self._name, to_remove)
        _LOGGER.debug("%s: capabilities to add %s", self._name, to_add)

        for capability in to_remove:
            try:
                await self._store.async_remove_capability(capability)
                result.removed.append(capability)
                _LOGGER.info("%s: removed capability %s", self._name, capability)
            except CapabilityUpdateFailure as err:
                result.failed.append(capability)
                _LOGGER.warning(
                    "%s: failed to remove capability %s: %s", self._name, capability, err
                )
        await asyncio.sleep(self._settle_delay)

        for capability in to_add:
            try:
                await self._store.async_add_capability(capability)
                result.added.append(capability)
                _LOGGER.info("%s: added capability %s", self._name, capability)
            except CapabilityUpdateFailure as err:
                result.failed.append(capability)
                _LOGGER.warning(
                    "%s: failed to add capability %s: %s", self._name, capability, err
                )
        await asyncio.sleep(self._settle_delay)

        return result

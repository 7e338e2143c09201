# Copyright (c) 2025, go-e Charger integration contributors
# All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are met:
#
# 1. Redistributions of source code must retain the above copyright notice,
#    this list of conditions and the following disclaimer.
#
# 2. Redistributions in binary form must reproduce the above copyright notice,
#    this list of conditions and the following disclaimer in the documentation
#    and/or other materials provided with the distribution.
#
# THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS"
# AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE
# IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE
# ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE
# LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR
# CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF
# SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS
# INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN
# CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE)
# ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE
# POSSIBILITY OF SUCH DAMAGE.

"""Tests for the charger lifecycle: startup, polling, settings and discovery."""

import asyncio
from contextlib import suppress
from unittest.mock import AsyncMock, MagicMock

import pytest

from custom_components.goecharger.const import (
    CAP_CHARGING_ALLOWED,
    CAP_CURRENT_LIMIT,
    CAP_IS_CONNECTED,
    CAP_STATUS,
    CONF_ADDRESS,
    CONF_DRIVER,
    DRIVER_CAPABILITIES,
    DRIVER_V1,
)
from custom_components.goecharger.device import GoeChargerDevice
from custom_components.goecharger.errors import DeviceUnreachable, InvalidSettings
from custom_components.goecharger.models import DiscoveryResult

from .conftest import FakeCapabilityStore, make_snapshot


def _device(mock_hass, store=None, poll_interval=0.01):
    api = MagicMock()
    api.driver = DRIVER_V1
    api.address = "192.168.1.50"
    api.async_get_info = AsyncMock(return_value=make_snapshot())
    store = store or FakeCapabilityStore()
    writer = AsyncMock()
    device = GoeChargerDevice(
        mock_hass,
        entry_id="entry",
        device_id="serial123",
        name="Garage",
        api=api,
        store=store,
        settings_writer=writer,
        poll_interval=poll_interval,
        warmup_delay=0,
        capability_settle_delay=0,
        value_settle_delay=0,
    )
    return device, api, store, writer


async def _stop(device):
    task = device._poll_task
    device.async_stop_polling()
    if task is not None:
        with suppress(asyncio.CancelledError):
            await task


@pytest.mark.asyncio
async def test_initialize_runs_in_order(mock_hass):
    device, api, store, writer = _device(mock_hass, poll_interval=60)
    seen = {}

    async def _get_info():
        seen["capabilities"] = store.get_capabilities()
        seen["listener"] = store.has_listener(CAP_CHARGING_ALLOWED)
        seen["available"] = device.availability.available
        return make_snapshot(is_connected=True)

    api.async_get_info.side_effect = _get_info

    await device.async_initialize()

    assert seen["capabilities"] == list(DRIVER_CAPABILITIES[DRIVER_V1])
    assert seen["listener"] is True
    assert seen["available"] is False
    assert store.get_value(CAP_IS_CONNECTED) is True
    mock_hass.bus.async_fire.assert_not_called()
    assert device.availability.available
    assert device.polling
    writer.assert_awaited_once_with({CONF_DRIVER: DRIVER_V1})

    await _stop(device)


@pytest.mark.asyncio
async def test_initialize_with_unreachable_charger_still_goes_online(mock_hass):
    device, api, _, _ = _device(mock_hass, poll_interval=60)
    api.async_get_info.side_effect = DeviceUnreachable("timeout")

    await device.async_initialize()

    assert device.availability.available
    assert device.polling
    await _stop(device)


@pytest.mark.asyncio
async def test_refresh_failure_marks_unavailable(mock_hass):
    device, api, store, _ = _device(mock_hass)
    store.capabilities = list(DRIVER_CAPABILITIES[DRIVER_V1])
    api.async_get_info.side_effect = DeviceUnreachable("Charger is unreachable")

    assert await device.async_refresh() is False
    assert not device.availability.available
    assert device.availability.reason == "Charger is unreachable"

    api.async_get_info.side_effect = None
    assert await device.async_refresh() is True
    assert device.availability.available
    assert store.get_value(CAP_STATUS) == "station_idle"


@pytest.mark.asyncio
async def test_sync_failure_marks_unavailable(mock_hass):
    device, _, _, _ = _device(mock_hass)
    device.availability.set_available()
    device.synchronizer.async_sync_snapshot = AsyncMock(side_effect=RuntimeError("boom"))

    assert await device.async_refresh() is False
    assert device.availability.reason == "boom"


@pytest.mark.asyncio
async def test_poll_loop_survives_crashing_cycle(mock_hass):
    device, _, _, _ = _device(mock_hass)
    calls = []

    async def _refresh(first_run=False):
        calls.append(first_run)
        if len(calls) == 1:
            raise RuntimeError("unexpected")
        return True

    device.async_refresh = _refresh
    device.async_start_polling()
    for _ in range(100):
        if len(calls) >= 3:
            break
        await asyncio.sleep(0.01)
    await _stop(device)

    assert len(calls) >= 3
    assert calls[0] is False


@pytest.mark.asyncio
async def test_start_and_stop_are_idempotent(mock_hass):
    device, _, _, _ = _device(mock_hass, poll_interval=60)

    cancel = device.async_start_polling()
    assert device.async_start_polling() is cancel
    task = device._poll_task

    await device.async_shutdown()
    await device.async_shutdown()
    with suppress(asyncio.CancelledError):
        await task

    assert not device.polling
    assert task.done()


@pytest.mark.asyncio
async def test_cancel_callback_stops_loop(mock_hass):
    device, _, _, _ = _device(mock_hass, poll_interval=60)

    cancel = device.async_start_polling()
    task = device._poll_task
    cancel()
    cancel()
    with suppress(asyncio.CancelledError):
        await task

    assert not device.polling


@pytest.mark.asyncio
async def test_apply_settings_success(mock_hass):
    device, api, _, _ = _device(mock_hass)

    snapshot = await device.async_apply_settings("192.168.1.77")

    assert api.address == "192.168.1.77"
    assert snapshot == make_snapshot()
    assert device.availability.available


@pytest.mark.asyncio
async def test_apply_settings_failure(mock_hass):
    device, api, _, _ = _device(mock_hass)
    api.async_get_info.side_effect = DeviceUnreachable("no route")

    with pytest.raises(InvalidSettings) as exc:
        await device.async_apply_settings("10.0.0.9")

    assert isinstance(exc.value.__cause__, DeviceUnreachable)
    assert not device.availability.available
    assert api.address == "192.168.1.50"


@pytest.mark.asyncio
async def test_discovery_handlers(mock_hass):
    device, api, _, writer = _device(mock_hass)
    result = DiscoveryResult(
        id="serial123",
        address="192.168.1.60",
        name="go-echarger_serial123",
        txt={"devicetype": "go-eCharger"},
    )

    assert device.matches_discovery(result)
    assert not device.matches_discovery(DiscoveryResult(id="other", address="x"))

    await device.async_on_discovery_address_changed(result)
    assert api.address == "192.168.1.60"
    writer.assert_awaited_with({CONF_ADDRESS: "192.168.1.60"})
    assert device.availability.available

    await device.async_on_discovery_last_seen_changed(result)
    assert not device.availability.available
    assert device.availability.reason == "Discovery device offline."

    await device.async_on_discovery_available(result)
    assert device.availability.available


@pytest.mark.asyncio
async def test_command_through_store_reaches_api(mock_hass):
    device, api, store, _ = _device(mock_hass, poll_interval=60)
    api.async_set_value = AsyncMock(return_value={})

    await device.async_initialize()
    await store.async_request_value(CAP_CURRENT_LIMIT, 12)
    await _stop(device)

    api.async_set_value.assert_awaited_once_with("amp", 12)
    assert store.get_value(CAP_CURRENT_LIMIT) == 12

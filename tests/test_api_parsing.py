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

"""Tests for go-e status payload parsing."""

import pytest

from custom_components.goecharger.api_parsing import (
    get_first_key,
    parse_status_v1,
    parse_status_v2,
    try_parse_json,
)
from custom_components.goecharger.const import (
    CAP_CHARGING_ALLOWED,
    CAP_MEASURE_POWER,
    CAP_STATUS,
)
from custom_components.goecharger.models import ChargerStatus

V1_PAYLOAD = {
    "car": "2",
    "amp": "16",
    "ama": "32",
    "alw": "1",
    "err": "0",
    "tmp": "25",
    "dws": "3600000",
    "eto": "1234",
    # voltages L1..N, currents L1..L3 in 0.1 A, powers, total in 0.01 kW
    "nrg": [230, 231, 229, 0, 100, 100, 100, 0, 0, 0, 0, 690, 0, 0, 0, 0],
}

V2_PAYLOAD = {
    "car": 4,
    "amp": 10,
    "ama": 16,
    "alw": False,
    "err": 3,
    "tma": [30.5, 28.0],
    "wh": 5500,
    "eto": 1234000,
    "nrg": [230, 231, 229, 0, 10.0, 10.1, 9.9, 0, 0, 0, 0, 6900, 0, 0, 0, 0],
}


class TestJsonHelpers:
    def test_try_parse_json(self):
        assert try_parse_json('{"a": 1}') == (True, {"a": 1})
        assert try_parse_json("not json") == (False, None)
        assert try_parse_json(None) == (False, None)

    def test_get_first_key_skips_none(self):
        assert get_first_key({"a": None, "b": 2}, "a", "b") == 2
        assert get_first_key({}, "a") is None


class TestParseV1:
    def test_units_are_scaled(self):
        snapshot = parse_status_v1(V1_PAYLOAD)

        assert snapshot.measure_power == 6900.0
        assert snapshot.measure_current == 30.0
        assert snapshot.measure_voltage == 230
        assert snapshot.measure_temperature == 25.0
        assert snapshot.charge_port_temperature is None
        assert snapshot.meter_power == 10.0
        assert snapshot.energy_total == 123.4
        assert snapshot.charging_allowed is True
        assert snapshot.current_limit == 16
        assert snapshot.current_max == 32
        assert snapshot.is_connected is True
        assert snapshot.alarm_device is False
        assert snapshot.status is ChargerStatus.CAR_CHARGING

    def test_idle_car_is_not_connected(self):
        snapshot = parse_status_v1({**V1_PAYLOAD, "car": "1"})
        assert snapshot.is_connected is False
        assert snapshot.status is ChargerStatus.STATION_IDLE

    def test_unknown_car_code(self):
        snapshot = parse_status_v1({**V1_PAYLOAD, "car": "9"})
        assert snapshot.status is ChargerStatus.UNKNOWN

    @pytest.mark.parametrize(
        "payload",
        [
            None,
            [],
            {"nrg": V1_PAYLOAD["nrg"]},
            {**V1_PAYLOAD, "nrg": [1, 2, 3]},
            {**V1_PAYLOAD, "nrg": "garbage"},
        ],
    )
    def test_malformed_payload_raises(self, payload):
        with pytest.raises(ValueError):
            parse_status_v1(payload)


class TestParseV2:
    def test_si_units(self):
        snapshot = parse_status_v2(V2_PAYLOAD)

        assert snapshot.measure_power == 6900
        assert snapshot.measure_current == 30.0
        assert snapshot.measure_temperature == 30.5
        assert snapshot.charge_port_temperature == 28.0
        assert snapshot.meter_power == 5.5
        assert snapshot.energy_total == 1234.0
        assert snapshot.charging_allowed is False
        assert snapshot.alarm_device is True
        assert snapshot.status is ChargerStatus.CAR_FINISHED

    def test_capability_values_exclude_status(self):
        snapshot = parse_status_v2(V2_PAYLOAD)
        keys = [key for key, _ in snapshot.capability_values()]

        assert CAP_STATUS not in keys
        assert keys[0] == CAP_MEASURE_POWER
        assert dict(snapshot.capability_values())[CAP_CHARGING_ALLOWED] is False


class TestChargerStatus:
    @pytest.mark.parametrize(
        ("code", "status"),
        [
            (1, ChargerStatus.STATION_IDLE),
            ("2", ChargerStatus.CAR_CHARGING),
            (3, ChargerStatus.CAR_WAITING),
            (4, ChargerStatus.CAR_FINISHED),
            (5, ChargerStatus.ERROR),
            (0, ChargerStatus.UNKNOWN),
            (None, ChargerStatus.UNKNOWN),
            ("x", ChargerStatus.UNKNOWN),
        ],
    )
    def test_from_code(self, code, status):
        assert ChargerStatus.from_code(code) is status

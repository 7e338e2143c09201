"""Helpers for parsing go-e Charger status payloads."""

from __future__ import annotations

import json
from typing import Any

from .models import ChargerStatus, TelemetrySnapshot

# Minimum length of the `nrg` array (voltages, currents, powers)
_NRG_MIN_LENGTH = 12

# Fields requested from the v2 API
V2_STATUS_FILTER = "car,alw,amp,ama,nrg,tma,eto,wh,err"


def try_parse_json(text: str | None) -> tuple[bool, Any]:
    """Parse JSON text and return (ok, payload)."""
    if not isinstance(text, str):
        return False, None
    try:
        return True, json.loads(text)
    except json.JSONDecodeError:
        return False, None


def get_first_key(payload: dict[str, Any], *keys: str) -> Any:
    """Get the first existing key's value from a dict.

    Args:
        payload: Dictionary to search
        *keys: Keys to try in order

    Returns:
        Value of first key that exists and is not None, or None if none found
    """
    for key in keys:
        value = payload.get(key)
        if value is not None:
            return value
    return None


def _to_float(value: Any, default: float | None = 0.0) -> float | None:
    if value is None or isinstance(value, bool):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _to_int(value: Any, default: int = 0) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return default


def _to_bool(value: Any) -> bool:
    """Interpret device flags sent as bools, numbers or numeric strings."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "on")
    return bool(_to_int(value))


def _extract_nrg(payload: dict[str, Any]) -> list[float]:
    nrg = payload.get("nrg")
    if not isinstance(nrg, list) or len(nrg) < _NRG_MIN_LENGTH:
        raise ValueError("status payload has no usable 'nrg' array")
    return [_to_float(item) or 0.0 for item in nrg]


def _temperatures(payload: dict[str, Any]) -> tuple[float | None, float | None]:
    """Return (main, charge port) temperatures from `tma` or legacy `tmp`."""
    tma = payload.get("tma")
    if isinstance(tma, list) and tma:
        main = _to_float(tma[0], None)
        port = _to_float(tma[1], None) if len(tma) > 1 else None
        return main, port
    return _to_float(payload.get("tmp"), None), None


def _require_dict(payload: Any) -> dict[str, Any]:
    if not isinstance(payload, dict) or "car" not in payload:
        raise ValueError("status payload is not a charger status object")
    return payload


def parse_status_v1(payload: Any) -> TelemetrySnapshot:
    """Build a snapshot from a v1 `/status` payload.

    v1 reports currents in 0.1 A, phase powers in 0.1 kW, total power in
    0.01 kW, total energy in 0.1 kWh and session energy in deca-watt-seconds.
    Most values arrive as strings.

    Raises:
        ValueError: if the payload is not a usable status object
    """
    data = _require_dict(payload)
    nrg = _extract_nrg(data)
    main_temp, port_temp = _temperatures(data)
    car = data.get("car")
    status = ChargerStatus.from_code(car)

    return TelemetrySnapshot(
        measure_power=round(nrg[11] * 10, 1),
        measure_current=round((nrg[4] + nrg[5] + nrg[6]) / 10, 1),
        measure_voltage=nrg[0],
        measure_temperature=main_temp,
        charge_port_temperature=port_temp,
        meter_power=round((_to_float(data.get("dws")) or 0.0) / 360000, 2),
        energy_total=round((_to_float(data.get("eto")) or 0.0) / 10, 1),
        charging_allowed=_to_bool(data.get("alw")),
        current_limit=_to_int(data.get("amp")),
        current_max=_to_int(data.get("ama")),
        is_connected=_to_int(car) in (2, 3, 4),
        alarm_device=_to_int(data.get("err")) != 0,
        status=status,
    )


def parse_status_v2(payload: Any) -> TelemetrySnapshot:
    """Build a snapshot from a v2 `/api/status` payload.

    v2 reports SI units (V, A, W, Wh) as JSON numbers and booleans.

    Raises:
        ValueError: if the payload is not a usable status object
    """
    data = _require_dict(payload)
    nrg = _extract_nrg(data)
    main_temp, port_temp = _temperatures(data)
    car = data.get("car")
    session_wh = _to_float(get_first_key(data, "wh", "dws")) or 0.0

    return TelemetrySnapshot(
        measure_power=nrg[11],
        measure_current=round(nrg[4] + nrg[5] + nrg[6], 1),
        measure_voltage=nrg[0],
        measure_temperature=main_temp,
        charge_port_temperature=port_temp,
        meter_power=round(session_wh / 1000, 2),
        energy_total=round((_to_float(data.get("eto")) or 0.0) / 1000, 1),
        charging_allowed=_to_bool(data.get("alw")),
        current_limit=_to_int(data.get("amp")),
        current_max=_to_int(data.get("ama")),
        is_connected=_to_int(car) in (2, 3, 4),
        alarm_device=_to_int(data.get("err")) != 0,
        status=ChargerStatus.from_code(car),
    )

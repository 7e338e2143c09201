"""Local HTTP client for go-e Chargers."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from .api_parsing import V2_STATUS_FILTER, parse_status_v1, parse_status_v2, try_parse_json
from .const import COMMAND_CHARGING_ALLOWED, DEFAULT_DRIVER, DRIVER_V2
from .errors import CommandRejected, DeviceUnreachable
from .http_retry import async_request_with_retry
from .models import TelemetrySnapshot

_LOGGER = logging.getLogger(__name__)


class GoeChargerApi:
    """Fetch telemetry from and send commands to one charger.

    The driver selects the API generation: v1 chargers answer on `/status`
    and take writes through `/mqtt?payload=key=value`, v2 chargers answer on
    `/api/status` and take writes through `/api/set?key=value`.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        address: str | None = None,
        driver: str = DEFAULT_DRIVER,
    ) -> None:
        self._session = session
        self.address = address
        self.driver = driver

    @property
    def is_v2(self) -> bool:
        return self.driver == DRIVER_V2

    def _url(self, path: str) -> str:
        if not self.address:
            raise DeviceUnreachable("No charger address configured")
        host = self.address.strip().rstrip("/")
        if not host.startswith(("http://", "https://")):
            host = f"http://{host}"
        return f"{host}{path}"

    async def async_get_info(self) -> TelemetrySnapshot:
        """Fetch a fresh telemetry snapshot.

        Raises:
            DeviceUnreachable: when the charger does not answer, answers with
                an error status or sends a payload that is not a status object
        """
        if self.is_v2:
            url = self._url("/api/status")
            params: dict[str, Any] | None = {"filter": V2_STATUS_FILTER}
        else:
            url = self._url("/status")
            params = None

        response, error = await async_request_with_retry(
            self._session,
            "GET",
            url,
            params=params,
            context=f"Status fetch from {self.address}",
        )
        if error is not None:
            raise DeviceUnreachable(
                f"Charger at {self.address} is unreachable: {error}"
            ) from error
        if response is None or not response.is_success:
            status = response.status if response is not None else "no response"
            raise DeviceUnreachable(
                f"Charger at {self.address} answered with status {status}"
            )

        ok, payload = try_parse_json(response.text)
        if not ok:
            raise DeviceUnreachable(f"Charger at {self.address} sent invalid JSON")

        try:
            if self.is_v2:
                return parse_status_v2(payload)
            return parse_status_v1(payload)
        except ValueError as err:
            raise DeviceUnreachable(
                f"Charger at {self.address} sent an invalid status: {err}"
            ) from err

    async def async_set_value(self, key: str, value: Any) -> dict[str, Any]:
        """Write one setting on the charger and return its acknowledgement.

        Raises:
            CommandRejected: when the charger refuses the write
            DeviceUnreachable: when the charger cannot be reached
        """
        if self.is_v2:
            url = self._url("/api/set")
            params = self._v2_set_params(key, value)
        else:
            url = self._url("/mqtt")
            params = {"payload": f"{key}={value}"}

        _LOGGER.debug("Sending %s to charger at %s", params, self.address)
        response, error = await async_request_with_retry(
            self._session,
            "GET",
            url,
            params=params,
            max_retries=0,
            context=f"Set {key} on {self.address}",
        )
        if error is not None:
            raise DeviceUnreachable(
                f"Charger at {self.address} is unreachable: {error}"
            ) from error
        if response is None:
            raise DeviceUnreachable(f"Charger at {self.address} did not answer")
        if not response.is_success:
            raise CommandRejected(key, value, response.status)

        ok, payload = try_parse_json(response.text)
        if not ok or not isinstance(payload, dict):
            return {}
        if self.is_v2:
            # v2 acknowledges each key with true or an error string
            for ack_key, ack in payload.items():
                if ack is not True:
                    _LOGGER.debug("Charger refused %s: %s", ack_key, ack)
                    raise CommandRejected(key, value)
        return payload

    @staticmethod
    def _v2_set_params(key: str, value: Any) -> dict[str, str]:
        # v2 exposes `alw` read-only; charging is permitted through `frc`
        # (0 = neutral, 1 = force off)
        if key == COMMAND_CHARGING_ALLOWED:
            return {"frc": "0" if int(value) else "1"}
        return {key: str(value)}

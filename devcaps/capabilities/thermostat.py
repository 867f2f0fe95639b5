"""Thermostat capability: target temperature and thermostat mode."""

from __future__ import annotations

import logging
from collections.abc import Callable

from devcaps.capabilities.base import Capability
from devcaps.core.device import DeviceContext
from devcaps.core.errors import MalformedRequestError
from devcaps.core.model import PHYSICAL_INTERACTION, Ref, Request
from devcaps.core.payload import get_float, get_str, require_float, round_tenths

ThermostatModeCallback = Callable[[str, Ref[str]], bool]
TargetTemperatureCallback = Callable[[str, Ref[float]], bool]
AdjustTargetTemperatureCallback = Callable[[str, Ref[float]], bool]

TARGET_TEMPERATURE = "targetTemperature"
ADJUST_TARGET_TEMPERATURE = "adjustTargetTemperature"
SET_THERMOSTAT_MODE = "setThermostatMode"

_DEFAULT_TARGET_TEMPERATURE = 1.0
LOGGER = logging.getLogger(__name__)


class ThermostatController(Capability):
    """Handles `targetTemperature`, `adjustTargetTemperature` and `setThermostatMode`.

    Callbacks receive the device id and a `Ref` holding the requested value.
    They return whether the request was fulfilled and may overwrite
    `ref.value` with the value actually applied; that value is echoed into
    the response either way.
    """

    name = "thermostat"

    def __init__(self, device: DeviceContext) -> None:
        self._thermostat_mode_callback: ThermostatModeCallback | None = None
        self._target_temperature_callback: TargetTemperatureCallback | None = None
        self._adjust_target_temperature_callback: AdjustTargetTemperatureCallback | None = None
        super().__init__(device)

    def on_thermostat_mode(self, callback: ThermostatModeCallback) -> None:
        self._thermostat_mode_callback = callback

    def on_target_temperature(self, callback: TargetTemperatureCallback) -> None:
        self._target_temperature_callback = callback

    def on_adjust_target_temperature(self, callback: AdjustTargetTemperatureCallback) -> None:
        """Register the callback for relative changes.

        The callback receives the delta and should replace it with the new
        absolute target temperature.
        """
        self._adjust_target_temperature_callback = callback

    def send_thermostat_mode_event(
        self,
        thermostat_mode: str,
        cause: str = PHYSICAL_INTERACTION,
    ) -> bool:
        return self._emit(SET_THERMOSTAT_MODE, cause, {"thermostatMode": thermostat_mode})

    def send_target_temperature_event(
        self,
        temperature: float,
        cause: str = PHYSICAL_INTERACTION,
    ) -> bool:
        return self._emit(TARGET_TEMPERATURE, cause, {"temperature": round_tenths(temperature)})

    def handle(self, request: Request) -> bool:
        if request.action == TARGET_TEMPERATURE:
            temperature = Ref(
                get_float(request.request_value, "temperature", _DEFAULT_TARGET_TEMPERATURE)
            )
            success = False
            if self._target_temperature_callback is not None:
                success = self._target_temperature_callback(self.device.device_id, temperature)
            request.response_value["temperature"] = temperature.value
            return success

        if request.action == ADJUST_TARGET_TEMPERATURE:
            try:
                delta = require_float(request.request_value, "temperature")
            except MalformedRequestError as exc:
                LOGGER.warning("Rejecting %s for %s: %s", request.action, self.device.device_id, exc)
                return False
            temperature = Ref(delta)
            success = False
            if self._adjust_target_temperature_callback is not None:
                success = self._adjust_target_temperature_callback(
                    self.device.device_id, temperature
                )
            request.response_value["temperature"] = temperature.value
            return success

        if request.action == SET_THERMOSTAT_MODE:
            mode = Ref(get_str(request.request_value, "thermostatMode", ""))
            success = False
            if self._thermostat_mode_callback is not None:
                success = self._thermostat_mode_callback(self.device.device_id, mode)
            request.response_value["thermostatMode"] = mode.value
            return success

        return False

"""Capability modules that attach themselves to a device's request pipeline."""

from devcaps.capabilities.air_quality import AirQualityEventSource
from devcaps.capabilities.base import Capability
from devcaps.capabilities.range import RangeController
from devcaps.capabilities.thermostat import ThermostatController

CAPABILITY_TYPES: dict[str, type[Capability]] = {
    ThermostatController.name: ThermostatController,
    RangeController.name: RangeController,
    AirQualityEventSource.name: AirQualityEventSource,
}

__all__ = [
    "CAPABILITY_TYPES",
    "AirQualityEventSource",
    "Capability",
    "RangeController",
    "ThermostatController",
]

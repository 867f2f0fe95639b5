"""Air quality event source."""

from __future__ import annotations

from devcaps.capabilities.base import Capability
from devcaps.core.model import PERIODIC_POLL, Request

AIR_QUALITY = "airQuality"


class AirQualityEventSource(Capability):
    name = "air_quality"

    def handle(self, request: Request) -> bool:
        return False

    def send_air_quality_event(
        self,
        pm1: int = 0,
        pm2_5: int = 0,
        pm10: int = 0,
        cause: str = PERIODIC_POLL,
    ) -> bool:
        """Report particle pollutant concentrations in µg/m³."""
        return self._emit(AIR_QUALITY, cause, {"pm1": pm1, "pm2_5": pm2_5, "pm10": pm10})

"""Stable public API for building firmware simulators and tooling on devcaps.

This module is the supported integration surface for third-party callers.
Avoid importing from private/internal modules unless intentionally depending on
non-stable internals.
"""

from __future__ import annotations

from typing import Any

from devcaps.capabilities import (
    AirQualityEventSource,
    Capability,
    RangeController,
    ThermostatController,
)
from devcaps.core.device import Device, DeviceContext
from devcaps.core.errors import (
    DevcapsError,
    MalformedRequestError,
    ProfileLoadError,
    ProfileSelectionError,
    ProfileValidationError,
    UnknownActionError,
)
from devcaps.core.model import (
    PERIODIC_POLL,
    PHYSICAL_INTERACTION,
    DeviceProfile,
    DispatchResult,
    EmitResult,
    EventEnvelope,
    Ref,
    Request,
)
from devcaps.core.service import DeviceService
from devcaps.transports.base import EventSink
from devcaps.transports.stream import StreamSink

__all__ = [
    "DevcapsError",
    "MalformedRequestError",
    "ProfileLoadError",
    "ProfileSelectionError",
    "ProfileValidationError",
    "UnknownActionError",
    "PERIODIC_POLL",
    "PHYSICAL_INTERACTION",
    "DeviceProfile",
    "DispatchResult",
    "EmitResult",
    "EventEnvelope",
    "Ref",
    "Request",
    "Device",
    "DeviceContext",
    "Capability",
    "ThermostatController",
    "RangeController",
    "AirQualityEventSource",
    "EventSink",
    "StreamSink",
    "Client",
]


class Client:
    """Public client for profile-driven devices.

    A `Client` wraps profile loading, device composition, request dispatch
    and event emission behind a stable API.
    """

    def __init__(self, *, sink: EventSink | None = None) -> None:
        self._service = DeviceService(sink=sink)

    @property
    def load_warnings(self) -> tuple[str, ...]:
        return self._service.load_warnings

    def list_profiles(self) -> list[DeviceProfile]:
        return self._service.list_profiles()

    def build_device(self, profile_id: str, *, sink: EventSink | None = None) -> Device:
        return self._service.build_device(profile_id, sink=sink)

    def dispatch(
        self,
        profile_id: str,
        action: str,
        values: dict[str, Any] | None = None,
        *,
        instance: str = "",
    ) -> DispatchResult:
        return self._service.dispatch(profile_id, action, values, instance=instance)

    def emit(
        self,
        profile_id: str,
        action: str,
        values: dict[str, Any] | None = None,
        *,
        instance: str | None = None,
        cause: str | None = None,
    ) -> EmitResult:
        return self._service.emit(profile_id, action, values, instance=instance, cause=cause)

"""Service layer used by the CLI and the public API."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from devcaps.capabilities import CAPABILITY_TYPES
from devcaps.capabilities.air_quality import AIR_QUALITY, AirQualityEventSource
from devcaps.capabilities.range import SET_RANGE_VALUE, RangeController
from devcaps.capabilities.thermostat import (
    SET_THERMOSTAT_MODE,
    TARGET_TEMPERATURE,
    ThermostatController,
)
from devcaps.core.device import Device
from devcaps.core.errors import MalformedRequestError, ProfileSelectionError, UnknownActionError
from devcaps.core.model import DeviceProfile, DispatchResult, EmitResult, EventEnvelope, Ref, Request
from devcaps.core.payload import require_float, require_int
from devcaps.core.profile_loader import load_profiles
from devcaps.transports.base import EventSink
from devcaps.transports.stream import StreamSink

Emitter = Callable[[Any, Mapping[str, Any], str | None, dict[str, str]], bool]


class _CapturingSink:
    def __init__(self, inner: EventSink) -> None:
        self.inner = inner
        self.last: EventEnvelope | None = None

    def send(self, envelope: EventEnvelope) -> bool:
        self.last = envelope
        return self.inner.send(envelope)


class LoopbackState:
    """Callbacks that accept every request and keep the applied values.

    Absolute requests are applied as-is; relative requests add the delta to
    the stored value, which starts at zero.
    """

    def __init__(self) -> None:
        self.values: dict[str, Any] = {}

    def accept(self, key: str) -> Callable[..., bool]:
        def _callback(*args: Any) -> bool:
            ref: Ref[Any] = args[-1]
            self.values[key] = ref.value
            return True

        return _callback

    def adjust(self, key: str) -> Callable[..., bool]:
        def _callback(*args: Any) -> bool:
            ref: Ref[Any] = args[-1]
            ref.value = self.values.get(key, 0) + ref.value
            self.values[key] = ref.value
            return True

        return _callback


def attach_loopback(device: Device, profile: DeviceProfile) -> LoopbackState:
    state = LoopbackState()
    for name in profile.capabilities:
        capability = device.capability(name)
        if isinstance(capability, ThermostatController):
            capability.on_target_temperature(state.accept("temperature"))
            capability.on_adjust_target_temperature(state.adjust("temperature"))
            capability.on_thermostat_mode(state.accept("thermostatMode"))
        elif isinstance(capability, RangeController):
            capability.on_range_value(state.accept("rangeValue"))
            capability.on_adjust_range_value(state.adjust("rangeValue"))
            for instance in profile.range.instances:
                key = f"rangeValue:{instance}"
                capability.on_range_value(state.accept(key), instance=instance)
                capability.on_adjust_range_value(state.adjust(key), instance=instance)
    return state


def _emit_target_temperature(
    capability: ThermostatController, values: Mapping[str, Any], instance: str | None, extra: dict[str, str]
) -> bool:
    return capability.send_target_temperature_event(require_float(values, "temperature"), **extra)


def _emit_thermostat_mode(
    capability: ThermostatController, values: Mapping[str, Any], instance: str | None, extra: dict[str, str]
) -> bool:
    mode = values.get("thermostatMode")
    if not isinstance(mode, str) or not mode:
        raise MalformedRequestError("Event requires a 'thermostatMode' string value")
    return capability.send_thermostat_mode_event(mode, **extra)


def _emit_range_value(
    capability: RangeController, values: Mapping[str, Any], instance: str | None, extra: dict[str, str]
) -> bool:
    return capability.send_range_value_event(
        require_int(values, "rangeValue"), instance=instance, **extra
    )


def _optional_int(values: Mapping[str, Any], key: str) -> int:
    return require_int(values, key) if key in values else 0


def _emit_air_quality(
    capability: AirQualityEventSource, values: Mapping[str, Any], instance: str | None, extra: dict[str, str]
) -> bool:
    return capability.send_air_quality_event(
        pm1=_optional_int(values, "pm1"),
        pm2_5=_optional_int(values, "pm2_5"),
        pm10=_optional_int(values, "pm10"),
        **extra,
    )


_EMITTERS: dict[str, tuple[str, Emitter]] = {
    TARGET_TEMPERATURE: (ThermostatController.name, _emit_target_temperature),
    SET_THERMOSTAT_MODE: (ThermostatController.name, _emit_thermostat_mode),
    SET_RANGE_VALUE: (RangeController.name, _emit_range_value),
    AIR_QUALITY: (AirQualityEventSource.name, _emit_air_quality),
}

_INSTANCE_ACTIONS = frozenset({SET_RANGE_VALUE})


class DeviceService:
    def __init__(self, *, sink: EventSink | None = None) -> None:
        loaded = load_profiles()
        self.profiles = loaded.profiles
        self.load_warnings = loaded.warnings
        self.sink = sink or StreamSink()

    def list_profiles(self) -> list[DeviceProfile]:
        return sorted(self.profiles.values(), key=lambda p: p.id)

    def get_profile(self, profile_id: str) -> DeviceProfile:
        profile = self.profiles.get(profile_id)
        if profile is None:
            raise ProfileSelectionError(
                f"Unknown profile '{profile_id}'. Use 'devcaps list' to inspect available profiles."
            )
        return profile

    def build_device(self, profile_id: str, sink: EventSink | None = None) -> Device:
        profile = self.get_profile(profile_id)
        device = Device(profile.device_id, sink or self.sink)
        for name in profile.capabilities:
            device.attach(CAPABILITY_TYPES[name](device))
        return device

    def dispatch(
        self,
        profile_id: str,
        action: str,
        values: Mapping[str, Any] | None = None,
        instance: str = "",
    ) -> DispatchResult:
        profile = self.get_profile(profile_id)
        device = self.build_device(profile_id)
        attach_loopback(device, profile)
        request = Request(action=action, instance=instance, request_value=dict(values or {}))
        success = device.handle_request(request)
        return DispatchResult(profile=profile, request=request, success=success)

    def emit(
        self,
        profile_id: str,
        action: str,
        values: Mapping[str, Any] | None = None,
        instance: str | None = None,
        cause: str | None = None,
    ) -> EmitResult:
        profile = self.get_profile(profile_id)
        entry = _EMITTERS.get(action)
        if entry is None:
            known = ", ".join(sorted(_EMITTERS))
            raise UnknownActionError(f"No event emitter for action '{action}'. Known: {known}")
        capability_name, emitter = entry
        if instance and action not in _INSTANCE_ACTIONS:
            raise MalformedRequestError(f"Event '{action}' does not take an instance")

        sink = _CapturingSink(self.sink)
        device = self.build_device(profile_id, sink=sink)
        capability = device.capability(capability_name)
        cause = cause or profile.default_cause
        extra = {"cause": cause} if cause else {}
        accepted = emitter(capability, values or {}, instance, extra)
        if sink.last is None:
            raise UnknownActionError(f"Emitter for action '{action}' produced no event")
        return EmitResult(profile=profile, envelope=sink.last, accepted=accepted)


def parse_assignments(assignments: list[str]) -> dict[str, Any]:
    """Parse `key=value` pairs into loosely-typed scalars."""
    values: dict[str, Any] = {}
    for item in assignments:
        key, sep, raw = item.partition("=")
        if not sep or not key.strip():
            raise MalformedRequestError(f"Expected key=value, got '{item}'")
        values[key.strip()] = _parse_scalar(raw.strip())
    return values


def _parse_scalar(raw: str) -> Any:
    lowered = raw.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        return float(raw)
    except ValueError:
        return raw

"""Range capability with optional per-instance callbacks."""

from __future__ import annotations

from collections.abc import Callable, Mapping

from devcaps.capabilities.base import Capability
from devcaps.core.device import DeviceContext
from devcaps.core.model import PHYSICAL_INTERACTION, Ref, Request
from devcaps.core.payload import get_int

SetRangeValueCallback = Callable[[str, Ref[int]], bool]
InstanceSetRangeValueCallback = Callable[[str, str, Ref[int]], bool]
AdjustRangeValueCallback = Callable[[str, Ref[int]], bool]
InstanceAdjustRangeValueCallback = Callable[[str, str, Ref[int]], bool]

SET_RANGE_VALUE = "setRangeValue"
ADJUST_RANGE_VALUE = "adjustRangeValue"


class RangeController(Capability):
    """Handles `setRangeValue` and `adjustRangeValue`.

    A request without an instance goes to the default callback. A request
    naming an instance only goes to the callback registered for exactly that
    instance; it never falls back to the default one. Both actions report the
    resulting absolute value under `rangeValue`.
    """

    name = "range"

    def __init__(self, device: DeviceContext) -> None:
        self._set_callback: SetRangeValueCallback | None = None
        self._instance_set_callbacks: dict[str, InstanceSetRangeValueCallback] = {}
        self._adjust_callback: AdjustRangeValueCallback | None = None
        self._instance_adjust_callbacks: dict[str, InstanceAdjustRangeValueCallback] = {}
        super().__init__(device)

    def on_range_value(
        self,
        callback: SetRangeValueCallback | InstanceSetRangeValueCallback,
        *,
        instance: str | None = None,
    ) -> None:
        """Register a `setRangeValue` callback.

        Without `instance` the callback is called as `callback(device_id, ref)`;
        with one it is called as `callback(device_id, instance, ref)`.
        """
        if instance:
            self._instance_set_callbacks[instance] = callback
        else:
            self._set_callback = callback

    def on_adjust_range_value(
        self,
        callback: AdjustRangeValueCallback | InstanceAdjustRangeValueCallback,
        *,
        instance: str | None = None,
    ) -> None:
        if instance:
            self._instance_adjust_callbacks[instance] = callback
        else:
            self._adjust_callback = callback

    def send_range_value_event(
        self,
        range_value: int,
        *,
        instance: str | None = None,
        cause: str = PHYSICAL_INTERACTION,
    ) -> bool:
        return self._emit(SET_RANGE_VALUE, cause, {"rangeValue": range_value}, instance=instance or None)

    def handle(self, request: Request) -> bool:
        if request.action == SET_RANGE_VALUE:
            return self._dispatch(
                request, "rangeValue", self._set_callback, self._instance_set_callbacks
            )
        if request.action == ADJUST_RANGE_VALUE:
            return self._dispatch(
                request, "rangeValueDelta", self._adjust_callback, self._instance_adjust_callbacks
            )
        return False

    def _dispatch(
        self,
        request: Request,
        field: str,
        default_callback: SetRangeValueCallback | AdjustRangeValueCallback | None,
        instance_callbacks: Mapping[str, InstanceSetRangeValueCallback | InstanceAdjustRangeValueCallback],
    ) -> bool:
        value = Ref(get_int(request.request_value, field, 0))
        success = False
        if request.instance:
            callback = instance_callbacks.get(request.instance)
            if callback is not None:
                success = callback(self.device.device_id, request.instance, value)
        elif default_callback is not None:
            success = default_callback(self.device.device_id, value)

        request.response_value["rangeValue"] = value.value
        return success

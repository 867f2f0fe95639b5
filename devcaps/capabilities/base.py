"""Capability base contract."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from devcaps.core.device import DeviceContext
from devcaps.core.model import Request


class Capability(ABC):
    """Base for capability modules.

    Constructing a capability appends its `handle` method to the owning
    device's request handlers, so registration order is dispatch order.
    """

    name = "capability"

    def __init__(self, device: DeviceContext) -> None:
        self.device = device
        device.register_request_handler(self.handle)

    @abstractmethod
    def handle(self, request: Request) -> bool:
        """Process `request` if its action belongs to this capability.

        Returns False without touching `request.response_value` for foreign
        actions. For owned actions the response is written and the result
        reports whether a callback fulfilled the request.
        """

    def _emit(
        self,
        action: str,
        cause: str,
        value: dict[str, Any],
        instance: str | None = None,
    ) -> bool:
        envelope = self.device.prepare_event(action, cause)
        if instance is not None:
            envelope.instance_id = instance
        envelope.value.update(value)
        return self.device.send_event(envelope)

"""Device-facing interface consumed by capabilities, and a reference dispatcher."""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol

from devcaps.core.errors import ProfileSelectionError
from devcaps.core.model import EventEnvelope, Request
from devcaps.transports.base import EventSink

if TYPE_CHECKING:
    from devcaps.capabilities.base import Capability

RequestHandler = Callable[[Request], bool]
LOGGER = logging.getLogger(__name__)


class DeviceContext(Protocol):
    device_id: str

    def register_request_handler(self, handler: RequestHandler) -> None:
        """Append a handler to the device's ordered dispatch list."""

    def prepare_event(self, action: str, cause: str) -> EventEnvelope:
        """Return an envelope carrying protocol metadata and an empty value."""

    def send_event(self, envelope: EventEnvelope) -> bool:
        """Transmit an envelope; the result reflects local acceptance only."""


class Device:
    def __init__(self, device_id: str, sink: EventSink) -> None:
        self.device_id = device_id
        self.sink = sink
        self.request_handlers: list[RequestHandler] = []
        self._capabilities: dict[str, Capability] = {}

    def register_request_handler(self, handler: RequestHandler) -> None:
        self.request_handlers.append(handler)

    def attach(self, capability: Capability) -> Capability:
        self._capabilities[capability.name] = capability
        return capability

    def capability(self, name: str) -> Capability:
        found = self._capabilities.get(name)
        if found is None:
            available = ", ".join(sorted(self._capabilities)) or "<none>"
            raise ProfileSelectionError(
                f"Device '{self.device_id}' has no capability '{name}'. Available: {available}"
            )
        return found

    @property
    def capabilities(self) -> tuple[str, ...]:
        return tuple(self._capabilities)

    def handle_request(self, request: Request) -> bool:
        for handler in self.request_handlers:
            if handler(request):
                return True
        LOGGER.debug(
            "No handler fulfilled action '%s' (instance '%s') on %s",
            request.action,
            request.instance,
            self.device_id,
        )
        return False

    def prepare_event(self, action: str, cause: str) -> EventEnvelope:
        return EventEnvelope(
            action=action,
            cause=cause,
            metadata={
                "device_id": self.device_id,
                "created_at": int(time.time() * 1000),
                "reply_token": str(uuid.uuid4()),
            },
        )

    def send_event(self, envelope: EventEnvelope) -> bool:
        return self.sink.send(envelope)

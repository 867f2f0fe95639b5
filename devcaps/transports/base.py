"""Event sink interfaces."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from devcaps.core.model import EventEnvelope


class EventSink(Protocol):
    def send(self, envelope: EventEnvelope) -> bool:
        """Hand an event to the transport and report whether it was accepted."""

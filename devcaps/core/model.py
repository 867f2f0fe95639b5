"""Core data models shared by capabilities, devices, and the service layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

T = TypeVar("T")

PHYSICAL_INTERACTION = "PHYSICAL_INTERACTION"
PERIODIC_POLL = "PERIODIC_POLL"


@dataclass
class Request:
    action: str
    instance: str = ""
    request_value: dict[str, Any] = field(default_factory=dict)
    response_value: dict[str, Any] = field(default_factory=dict)


@dataclass
class Ref(Generic[T]):
    """In/out parameter handed to callbacks.

    Callbacks read the requested value from `value` and may overwrite it with
    the value the device actually applied.
    """

    value: T


@dataclass
class EventEnvelope:
    action: str
    cause: str
    value: dict[str, Any] = field(default_factory=dict)
    instance_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "action": self.action,
            "cause": {"type": self.cause},
            "deviceId": self.metadata.get("device_id"),
            "createdAt": self.metadata.get("created_at"),
            "replyToken": self.metadata.get("reply_token"),
            "type": "event",
            "value": dict(self.value),
        }
        if self.instance_id is not None:
            payload["instanceId"] = self.instance_id
        return {
            "header": {"payloadVersion": 2, "signatureVersion": 1},
            "payload": payload,
        }


@dataclass(frozen=True)
class RangeSpec:
    instances: tuple[str, ...] = ()


@dataclass(frozen=True)
class DeviceProfile:
    id: str
    name: str
    device_id: str
    capabilities: tuple[str, ...]
    range: RangeSpec = RangeSpec()
    default_cause: str | None = None


@dataclass(frozen=True)
class DispatchResult:
    profile: DeviceProfile
    request: Request
    success: bool

    @property
    def response_value(self) -> dict[str, Any]:
        return self.request.response_value


@dataclass(frozen=True)
class EmitResult:
    profile: DeviceProfile
    envelope: EventEnvelope
    accepted: bool

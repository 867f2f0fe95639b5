from __future__ import annotations

from devcaps.capabilities.air_quality import AirQualityEventSource
from devcaps.core.device import Device
from devcaps.core.model import PERIODIC_POLL, EventEnvelope, Request


class FakeSink:
    def __init__(self, accept: bool = True) -> None:
        self.accept = accept
        self.sent: list[EventEnvelope] = []

    def send(self, envelope: EventEnvelope) -> bool:
        self.sent.append(envelope)
        return self.accept


def test_rejected_air_quality_event_is_not_retried() -> None:
    sink = FakeSink(accept=False)
    source = AirQualityEventSource(Device("dev-3", sink))

    assert source.send_air_quality_event(pm1=5, pm2_5=10, pm10=20) is False
    assert len(sink.sent) == 1
    envelope = sink.sent[0]
    assert envelope.action == "airQuality"
    assert envelope.cause == PERIODIC_POLL
    assert envelope.value == {"pm1": 5, "pm2_5": 10, "pm10": 20}


def test_air_quality_defaults_to_zero() -> None:
    sink = FakeSink()
    source = AirQualityEventSource(Device("dev-3", sink))

    assert source.send_air_quality_event() is True
    assert sink.sent[0].value == {"pm1": 0, "pm2_5": 0, "pm10": 0}


def test_air_quality_never_claims_requests() -> None:
    device = Device("dev-3", FakeSink())
    AirQualityEventSource(device)
    request = Request("airQuality", request_value={"pm1": 1})

    assert device.handle_request(request) is False
    assert request.response_value == {}

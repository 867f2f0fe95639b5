from __future__ import annotations

import json

from typer.testing import CliRunner

from devcaps import cli
from devcaps.core.model import DeviceProfile, DispatchResult, EmitResult, EventEnvelope, RangeSpec, Request


class FakeService:
    def __init__(self) -> None:
        self.load_warnings: tuple[str, ...] = ()
        self.profile = DeviceProfile(
            id="air_purifier",
            name="Air Purifier",
            device_id="dev-1",
            capabilities=("range", "air_quality"),
            range=RangeSpec(instances=("fanSpeed",)),
        )

    def list_profiles(self):
        return [self.profile]

    def dispatch(self, profile_id, action, values=None, instance=""):
        request = Request(action=action, instance=instance, request_value=dict(values or {}))
        request.response_value["rangeValue"] = request.request_value.get("rangeValue", 0)
        return DispatchResult(profile=self.profile, request=request, success=instance != "swing")

    def emit(self, profile_id, action, values=None, instance=None, cause=None):
        envelope = EventEnvelope(action=action, cause=cause or "PERIODIC_POLL", value=dict(values or {}))
        return EmitResult(profile=self.profile, envelope=envelope, accepted=values.get("pm1") != 0)


runner = CliRunner()


def test_list_command(monkeypatch):
    monkeypatch.setattr(cli, "DeviceService", FakeService)
    result = runner.invoke(cli.app, ["list"])
    assert result.exit_code == 0
    assert "air_purifier: Air Purifier (dev-1)" in result.stdout
    assert "range: fanSpeed" in result.stdout
    assert "air_quality" in result.stdout


def test_dispatch_command(monkeypatch):
    monkeypatch.setattr(cli, "DeviceService", FakeService)
    result = runner.invoke(
        cli.app, ["dispatch", "air_purifier", "setRangeValue", "rangeValue=2", "--instance", "fanSpeed"]
    )
    assert result.exit_code == 0
    assert result.stdout.strip() == 'ok {"rangeValue": 2}'


def test_dispatch_command_unfulfilled_exits_nonzero(monkeypatch):
    monkeypatch.setattr(cli, "DeviceService", FakeService)
    result = runner.invoke(
        cli.app, ["dispatch", "air_purifier", "setRangeValue", "rangeValue=2", "--instance", "swing"]
    )
    assert result.exit_code == 1
    assert result.stdout.startswith("unfulfilled")


def test_bad_assignment_error_is_clean(monkeypatch):
    monkeypatch.setattr(cli, "DeviceService", FakeService)
    result = runner.invoke(cli.app, ["dispatch", "air_purifier", "setRangeValue", "rangeValue"])
    assert result.exit_code == 1
    assert "Error: Expected key=value" in result.stderr
    assert "Traceback" not in result.stderr


def test_emit_rejected(monkeypatch):
    monkeypatch.setattr(cli, "DeviceService", FakeService)
    result = runner.invoke(cli.app, ["emit", "air_purifier", "airQuality", "pm1=0"])
    assert result.exit_code == 1
    assert "Event 'airQuality' was rejected" in result.stderr


def test_emit_writes_envelope_with_real_service(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    result = runner.invoke(
        cli.app, ["emit", "air_purifier", "setRangeValue", "rangeValue=3", "--instance", "fanSpeed"]
    )
    assert result.exit_code == 0
    payload = json.loads(result.stdout.strip().splitlines()[-1])["payload"]
    assert payload["action"] == "setRangeValue"
    assert payload["instanceId"] == "fanSpeed"
    assert payload["value"] == {"rangeValue": 3}
    assert payload["cause"] == {"type": "PHYSICAL_INTERACTION"}


def test_load_warning_is_printed(monkeypatch):
    class WarnService(FakeService):
        def __init__(self) -> None:
            super().__init__()
            self.load_warnings = ("User profile 'air_purifier' overrides packaged profile",)

    monkeypatch.setattr(cli, "DeviceService", WarnService)
    result = runner.invoke(cli.app, ["list"])
    assert result.exit_code == 0
    assert "Warning: User profile 'air_purifier' overrides packaged profile" in result.stderr


def test_dispatch_non_finite_value_uses_default(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    result = runner.invoke(
        cli.app, ["dispatch", "air_purifier", "setRangeValue", "rangeValue=inf", "--instance", "fanSpeed"]
    )
    assert result.exit_code == 0
    assert result.stdout.strip() == 'ok {"rangeValue": 0}'


def test_emit_non_finite_value_error_is_clean(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    result = runner.invoke(cli.app, ["emit", "thermostat", "targetTemperature", "temperature=nan"])
    assert result.exit_code == 1
    assert "Error: Request field 'temperature' must be a finite number" in result.stderr
    assert "NaN" not in result.stdout
    assert "Traceback" not in result.stderr

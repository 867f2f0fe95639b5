"""Typer CLI entrypoint."""

from __future__ import annotations

import json
import logging

import typer

from devcaps.core.errors import DevcapsError
from devcaps.core.service import DeviceService, parse_assignments

app = typer.Typer(help="Dispatch capability requests and emit device events from YAML profiles")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _build_service() -> DeviceService:
    service = DeviceService()
    for warning in getattr(service, "load_warnings", ()):
        typer.echo(f"Warning: {warning}", err=True)
    return service


@app.command("list")
def list_profiles() -> None:
    """List available device profiles and their capabilities."""
    try:
        service = _build_service()
        profiles = service.list_profiles()
        if not profiles:
            typer.echo("No profiles loaded")
            raise typer.Exit(code=1)

        for profile in profiles:
            typer.echo(f"{profile.id}: {profile.name} ({profile.device_id})")
            for capability in profile.capabilities:
                if capability == "range" and profile.range.instances:
                    typer.echo(f"  {capability}: {', '.join(profile.range.instances)}")
                else:
                    typer.echo(f"  {capability}")
    except DevcapsError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("dispatch")
def dispatch(
    profile: str,
    action: str,
    values: list[str] | None = typer.Argument(None, help="Request fields as key=value"),
    instance: str = typer.Option("", "--instance", help="Capability instance name"),
) -> None:
    """Dispatch a request to a profile device wired with accepting callbacks."""
    try:
        service = _build_service()
        result = service.dispatch(profile, action, parse_assignments(values or []), instance=instance)
        status = "ok" if result.success else "unfulfilled"
        typer.echo(f"{status} {json.dumps(result.response_value, sort_keys=True)}")
        if not result.success:
            raise typer.Exit(code=1)
    except DevcapsError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("emit")
def emit(
    profile: str,
    action: str,
    values: list[str] | None = typer.Argument(None, help="Event fields as key=value"),
    instance: str | None = typer.Option(None, "--instance", help="Capability instance name"),
    cause: str | None = typer.Option(None, "--cause", help="Event cause (defaults to the profile's)"),
) -> None:
    """Emit an event from a profile device; the envelope is written to stdout."""
    try:
        service = _build_service()
        result = service.emit(
            profile,
            action,
            parse_assignments(values or []),
            instance=instance,
            cause=cause,
        )
        if not result.accepted:
            typer.echo(f"Event '{result.envelope.action}' was rejected", err=True)
            raise typer.Exit(code=1)
    except DevcapsError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


def run() -> None:
    app()


if __name__ == "__main__":
    run()

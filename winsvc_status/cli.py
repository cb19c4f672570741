"""CLI entry point for winsvc-status using Click."""

import json
import logging

import click

from .errors import ServiceInspectionError
from .service import ServiceState, ServiceStatusRecord

DEFAULT_PORT = 8190
DEFAULT_HOST = "127.0.0.1"

# Status indicator with color
STATE_STYLES = {
    ServiceState.RUNNING: ("green", "●"),
    ServiceState.STOPPED: ("yellow", "○"),
    ServiceState.START_PENDING: ("cyan", "◐"),
    ServiceState.STOP_PENDING: ("cyan", "◑"),
    ServiceState.CONTINUE_PENDING: ("cyan", "◐"),
    ServiceState.PAUSE_PENDING: ("cyan", "◑"),
    ServiceState.PAUSED: ("yellow", "‖"),
    ServiceState.NOT_FOUND: ("red", "✗"),
    ServiceState.UNKNOWN: ("white", "?"),
}


def _inspector(ctx: click.Context):
    return ctx.obj["inspector"]


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log service control calls to stderr")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """winsvc-status - Read-only status of Windows services.

    Query a single service by its short name (e.g. Spooler) or list
    every registered service.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s"
        )

    ctx.ensure_object(dict)
    if "inspector" not in ctx.obj:
        from . import _default_inspector

        ctx.obj["inspector"] = _default_inspector()


@cli.command()
@click.argument("name")
@click.pass_context
def exists(ctx: click.Context, name: str) -> None:
    """Check whether a service is registered.

    Prints true/false; exits 1 when the service does not exist.
    """
    try:
        found = _inspector(ctx).service_exists(name)
    except ServiceInspectionError as e:
        raise click.ClickException(str(e))

    click.echo("true" if found else "false")
    if not found:
        ctx.exit(1)


@cli.command()
@click.argument("name")
@click.option("--json", "as_json", is_flag=True, help="Print the status as JSON")
@click.pass_context
def status(ctx: click.Context, name: str, as_json: bool) -> None:
    """Show the status of a service."""
    try:
        record = _inspector(ctx).get_service_status(name)
    except ServiceInspectionError as e:
        raise click.ClickException(str(e))

    if as_json:
        click.echo(json.dumps(record.to_dict(), indent=2))
        return

    color, symbol = STATE_STYLES.get(record.state, ("white", "?"))

    click.secho(f"{symbol} ", fg=color, nl=False, bold=True)
    click.secho(record.name, bold=True, nl=False)
    if record.display_name:
        click.echo(f" - {record.display_name}")
    else:
        click.echo()

    click.echo("   State: ", nl=False)
    if record.state is ServiceState.UNKNOWN and record.raw_code is not None:
        click.secho(f"{record.state.value} (code {record.raw_code})", fg=color, bold=True)
    else:
        click.secho(record.state.value, fg=color, bold=True)

    if record.pid:
        click.echo(f"   PID: {record.pid}")


def _format_row(record: ServiceStatusRecord, name_width: int) -> str:
    pid = str(record.pid) if record.pid else "-"
    return f"{record.name:<{name_width}}  {record.state.value:<16}  {pid:>7}  {record.display_name or ''}"


@cli.command("list")
@click.option(
    "--state",
    "-s",
    "states",
    multiple=True,
    type=click.Choice([s.value for s in ServiceState if s is not ServiceState.NOT_FOUND]),
    help="Only show services in this state (repeatable)",
)
@click.option("--json", "as_json", is_flag=True, help="Print the services as JSON")
@click.pass_context
def list_cmd(ctx: click.Context, states: tuple[str, ...], as_json: bool) -> None:
    """List all registered services."""
    try:
        records = _inspector(ctx).list_services()
    except ServiceInspectionError as e:
        raise click.ClickException(str(e))

    if states:
        wanted = {ServiceState(value) for value in states}
        records = [r for r in records if r.state in wanted]

    if as_json:
        click.echo(json.dumps([r.to_dict() for r in records], indent=2))
        return

    if not records:
        click.echo("No services found.")
        return

    name_width = max(len("NAME"), *(len(r.name) for r in records))
    click.secho(
        f"{'NAME':<{name_width}}  {'STATE':<16}  {'PID':>7}  DISPLAY NAME", bold=True
    )
    for record in records:
        color, _ = STATE_STYLES.get(record.state, ("white", "?"))
        click.secho(_format_row(record, name_width), fg=color)


@cli.command()
@click.option(
    "--port",
    "-p",
    default=DEFAULT_PORT,
    envvar="WINSVC_STATUS_PORT",
    show_default=True,
    help="Port to run the server on",
)
@click.option(
    "--host",
    "-h",
    default=DEFAULT_HOST,
    envvar="WINSVC_STATUS_HOST",
    show_default=True,
    help="Host to bind to (use 0.0.0.0 for network access)",
)
@click.option(
    "--threads",
    default=4,
    help="Number of server threads (default: 4)",
)
@click.pass_context
def serve(ctx: click.Context, port: int, host: str, threads: int) -> None:
    """Serve service status as a JSON API in the foreground."""
    from .server import create_app

    inspector = _inspector(ctx)
    if not inspector.supported:
        click.secho(
            "Warning: service inspection is not supported on this platform; "
            "all service endpoints will return 501.",
            fg="yellow",
        )

    app = create_app(inspector)

    click.echo("Starting winsvc-status API...")
    click.echo(f"  URL: http://{host}:{port}/api/services")
    click.echo(f"  Threads: {threads}")
    click.echo("  Press Ctrl+C to stop\n")

    from waitress import serve as waitress_serve

    waitress_serve(app, host=host, port=port, threads=threads)


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()

"""Commands for inspecting hotel instances."""

from __future__ import annotations

import typer

from dbhotel.cli.common.context import HotelAppContext, build_hotel_context
from dbhotel.cli.common.exits import hotel_errors, warn_exit
from dbhotel.cli.common.options import BackendOpt, EngineOpt, LogLevelOpt
from dbhotel.cli.common.output import out
from dbhotel.core.schemas import DatabaseEngine

instances_app = typer.Typer(
    help="Inspect database instances.",
    no_args_is_help=False,
    invoke_without_command=True,
)


@instances_app.callback()
def _init(
    ctx: typer.Context,
    backend: str | None = BackendOpt,
    log_level: str | None = LogLevelOpt,
):
    """Initialize hotel context."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)
    ctx.obj = build_hotel_context(backend, log_level)


@instances_app.command("list")
def list_instances(ctx: typer.Context, engine: DatabaseEngine | None = EngineOpt):
    """List registered instances."""
    appctx: HotelAppContext = ctx.obj
    instances = appctx.service.registry.find_all_database_instances(engine)

    if not instances:
        warn_exit("No instances registered", code=0)

    out.instances_table(instances)
    if appctx.service.external_schema_manager is not None:
        out.info("External schema manager: registered")


@instances_app.command()
def tablespaces(ctx: typer.Context):
    """Show tablespace capacity of every instance that can report it."""
    appctx: HotelAppContext = ctx.obj

    with hotel_errors(), out.status("Querying tablespaces..."):
        rows = appctx.service.get_tablespace_info()

    if not rows:
        warn_exit("No instance reported tablespace usage", code=0)

    out.tablespace_table(rows)

"""Commands for finding and managing hotel schemas."""

from __future__ import annotations

from datetime import timedelta

import typer

from dbhotel.cli.common.context import HotelAppContext, build_hotel_context
from dbhotel.cli.common.exits import EXIT_USAGE, die, hotel_errors, ok_exit, warn_exit
from dbhotel.cli.common.label_builder import parse_label_filter, parse_labels
from dbhotel.cli.common.options import (
    BackendOpt,
    ConfirmOpt,
    DryRunOpt,
    EngineOpt,
    LabelFilterOpt,
    LabelOpt,
    LogLevelOpt,
)
from dbhotel.cli.common.output import format_labels, out
from dbhotel.cli.tui import select_schemas
from dbhotel.core.schemas import DatabaseEngine, DatabaseInstanceRequirements

schemas_app = typer.Typer(
    help="Find, create and manage schemas.",
    no_args_is_help=False,
    invoke_without_command=True,
)


@schemas_app.callback()
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


def _label_filter_or_exit(labels: list[str]) -> dict[str, str | None]:
    try:
        return parse_label_filter(labels)
    except ValueError as exc:
        die(str(exc), code=EXIT_USAGE)


def _labels_or_exit(labels: list[str]) -> dict[str, str]:
    try:
        return parse_labels(labels)
    except ValueError as exc:
        die(str(exc), code=EXIT_USAGE)


@schemas_app.command()
def find(
    ctx: typer.Context,
    schema_id: str = typer.Argument(..., help="Schema id"),
    include_inactive: bool = typer.Option(
        False, "--include-inactive", help="Also match deactivated schemas"
    ),
):
    """Find the owner of a schema by id."""
    appctx: HotelAppContext = ctx.obj

    with hotel_errors(), out.status("Searching instances..."):
        candidate = appctx.service.find_schema_by_id(schema_id, active=not include_inactive)

    if candidate is None:
        warn_exit(f"No schema found with id {schema_id}", code=1)

    out.header("Schema")
    out.schema_detail(candidate.schema, candidate.host)


@schemas_app.command("list")
def list_schemas(
    ctx: typer.Context,
    engine: DatabaseEngine | None = EngineOpt,
    label: list[str] = LabelFilterOpt,
    all_: bool = typer.Option(False, "--all", "-a", help="Include deactivated schemas"),
):
    """List schemas matching label filters."""
    appctx: HotelAppContext = ctx.obj
    labels_to_match = _label_filter_or_exit(label)

    with hotel_errors(), out.status("Loading schemas..."):
        schemas = appctx.service.find_all_database_schemas(
            engine=engine,
            labels_to_match=labels_to_match,
            ignore_active_filter=all_,
        )

    if not schemas:
        warn_exit("No schemas found", code=0)

    out.info(f"Schemas: {len(schemas)}")
    out.schemas_table(schemas, title="Schemas")


@schemas_app.command()
def inactive(ctx: typer.Context, label: list[str] = LabelFilterOpt):
    """List deactivated schemas on managed instances."""
    appctx: HotelAppContext = ctx.obj
    labels_to_match = _label_filter_or_exit(label)

    with hotel_errors(), out.status("Loading schemas..."):
        schemas = appctx.service.find_all_inactive_database_schemas(labels_to_match)

    if not schemas:
        warn_exit("No inactive schemas found", code=0)

    out.schemas_table(schemas, title="Inactive schemas")


@schemas_app.command()
def create(
    ctx: typer.Context,
    engine: DatabaseEngine = typer.Option(
        DatabaseEngine.ORACLE, "--engine", "-e", case_sensitive=False, help="Database engine"
    ),
    instance: str | None = typer.Option(None, "--instance", help="Instance name"),
    instance_label: list[str] = typer.Option(
        [],
        "--instance-label",
        help="Label the instance must carry (key=value). Repeatable.",
        show_default=False,
    ),
    fallback: bool = typer.Option(
        True,
        "--fallback/--no-fallback",
        help="Use any instance of the engine when none matches",
    ),
    label: list[str] = LabelOpt,
):
    """Create a schema on a suitable instance."""
    appctx: HotelAppContext = ctx.obj
    requirements = DatabaseInstanceRequirements(
        database_engine=engine,
        instance_name=instance,
        instance_labels=_labels_or_exit(instance_label),
        instance_fallback=fallback,
    )
    labels = _labels_or_exit(label)

    with hotel_errors(), out.status("Creating schema..."):
        schema = appctx.service.create_schema(requirements, labels)

    out.success(f"Created schema {schema.name}")
    out.kv(
        {
            "id": schema.id,
            "jdbcUrl": schema.jdbc_url,
            "labels": format_labels(schema.labels),
        }
    )


@schemas_app.command()
def update(
    ctx: typer.Context,
    schema_id: str = typer.Argument(..., help="Schema id"),
    label: list[str] = LabelOpt,
    username: str | None = typer.Option(None, "--username", help="External schemas only"),
    password: str | None = typer.Option(None, "--password", help="External schemas only"),
    jdbc_url: str | None = typer.Option(None, "--jdbc-url", help="External schemas only"),
):
    """Replace the labels of a schema."""
    appctx: HotelAppContext = ctx.obj
    labels = _labels_or_exit(label)

    with hotel_errors(), out.status("Updating schema..."):
        schema = appctx.service.update_schema(
            schema_id, labels, username=username, jdbc_url=jdbc_url, password=password
        )

    out.success(f"Updated labels of {schema.name}")
    out.kv({"id": schema.id, "labels": format_labels(schema.labels)})


@schemas_app.command()
def deactivate(
    ctx: typer.Context,
    schema_ids: list[str] = typer.Argument(None, help="Schema ids"),
    label: list[str] = LabelFilterOpt,
    cooldown_hours: float | None = typer.Option(
        None,
        "--cooldown-hours",
        min=0,
        help="Hours before a deactivated schema is reclaimed (instance default if unset)",
    ),
    confirm: bool = ConfirmOpt,
    dry_run: bool = DryRunOpt,
):
    """
    Deactivate schemas by id, or pick them from the schemas matching --label.
    """
    appctx: HotelAppContext = ctx.obj
    ids = list(schema_ids or [])

    if not ids:
        if not label:
            die("Provide schema ids or at least one --label filter.", code=EXIT_USAGE)
        labels_to_match = _label_filter_or_exit(label)
        with hotel_errors(), out.status("Loading schemas..."):
            schemas = appctx.service.find_all_database_schemas(labels_to_match=labels_to_match)
        if not schemas:
            warn_exit("No schemas found", code=0)
        picked = select_schemas(list(schemas))
        if not picked:
            warn_exit("No schemas selected", code=0)
        ids = [s.id for s in picked]

    out.header("Schemas to deactivate")
    for schema_id in ids:
        out.info(schema_id)

    if dry_run:
        warn_exit("Dry-run enabled: no schemas were deactivated", code=0)

    if confirm and not out.confirm(f"Deactivate {len(ids)} schema(s)?"):
        ok_exit("Cancelled")

    cooldown = timedelta(hours=cooldown_hours) if cooldown_hours is not None else None
    for schema_id in ids:
        with hotel_errors():
            appctx.service.deactivate_schema(schema_id, cooldown)

    out.success(f"Deactivated {len(ids)} schema(s)")


@schemas_app.command()
def verify(
    ctx: typer.Context,
    schema_id: str | None = typer.Argument(None, help="Schema id"),
    jdbc_url: str | None = typer.Option(None, "--jdbc-url", help="JDBC url to test"),
    username: str | None = typer.Option(None, "--username"),
    password: str | None = typer.Option(None, "--password"),
):
    """Open a connection to a schema, by id or with raw credentials."""
    appctx: HotelAppContext = ctx.obj

    if schema_id:
        with hotel_errors(), out.status("Connecting..."):
            result = appctx.service.validate_connection(schema_id)
    elif jdbc_url and username and password is not None:
        with out.status("Connecting..."):
            result = appctx.service.validate_connection_url(jdbc_url, username, password)
    else:
        die(
            "Provide a schema id, or --jdbc-url, --username and --password.",
            code=EXIT_USAGE,
        )

    out.verification(result)
    if not result.has_succeeded:
        raise typer.Exit(1)


@schemas_app.command("register-external")
def register_external(
    ctx: typer.Context,
    username: str = typer.Option(..., "--username"),
    password: str = typer.Option(..., "--password"),
    jdbc_url: str = typer.Option(..., "--jdbc-url"),
    label: list[str] = LabelOpt,
):
    """Register a schema that lives outside the hotel instances."""
    appctx: HotelAppContext = ctx.obj
    labels = _labels_or_exit(label)

    with hotel_errors():
        schema = appctx.service.register_external_schema(username, password, jdbc_url, labels)

    out.success(f"Registered external schema {schema.id}")
    out.schema_detail(schema, None)

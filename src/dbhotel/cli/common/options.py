"""Common CLI options for the CLI."""

import typer

BackendOpt = typer.Option(
    None,
    "--backend",
    "-b",
    help="Backend factory (package.module:factory). Defaults to $DBHOTEL_BACKEND.",
)

LogLevelOpt = typer.Option(
    None,
    "--log-level",
    help="Log level (DEBUG, INFO, WARNING, ...). Defaults to $DBHOTEL_LOG_LEVEL.",
)

EngineOpt = typer.Option(
    None,
    "--engine",
    "-e",
    help="Database engine (ORACLE or POSTGRES)",
    case_sensitive=False,
)

LabelFilterOpt = typer.Option(
    [],
    "--label",
    "-l",
    help="Label filter (key=value, or key to require the key). Repeatable.",
    show_default=False,
)

LabelOpt = typer.Option(
    [],
    "--label",
    "-l",
    help="Label to set (key=value). Repeatable.",
    show_default=False,
)

ConfirmOpt = typer.Option(
    True,
    "--confirm/--no-confirm",
    help="Ask for confirmation before deactivating schemas",
)

DryRunOpt = typer.Option(
    False,
    "--dry-run",
    help="Show which schemas would be deactivated, but don't touch anything",
)

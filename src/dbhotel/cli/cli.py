"""CLI application for the database hotel."""

import typer

from dbhotel.cli.commands.instances import instances_app
from dbhotel.cli.commands.schemas import schemas_app

app = typer.Typer(
    help="dbhotel - schemas across a pool of database instances",
    no_args_is_help=True,
)

app.add_typer(schemas_app, name="schemas")
app.add_typer(instances_app, name="instances")


if __name__ == "__main__":
    app()

"""Terminal UI utilities for picking schemas."""

from __future__ import annotations

from itertools import groupby

import questionary

from dbhotel.cli.common.output import format_labels
from dbhotel.cli.common.tui_style import QUESTIONARY_STYLE_SELECT
from dbhotel.core.connections import to_sqlalchemy_url
from dbhotel.core.schemas import DatabaseSchema

_MAX_SCHEMA_NAME_WIDTH = 64
_UNKNOWN_SERVER = "unknown server"


def _truncate(text: str, max_len: int) -> str:
    """Return text capped at max_len characters using an ASCII ellipsis."""
    if max_len <= 3 or len(text) <= max_len:
        return text[:max_len]
    return f"{text[: max_len - 3]}..."


def _server_of(schema: DatabaseSchema) -> str:
    """Database server a schema lives on, as `host[:port]` taken from its JDBC url."""
    try:
        url = to_sqlalchemy_url(schema.jdbc_url, None, None)
    except ValueError:
        return _UNKNOWN_SERVER
    if not url.host:
        return url.database or _UNKNOWN_SERVER
    return f"{url.host}:{url.port}" if url.port else url.host


def _schema_choice_title(schema: DatabaseSchema, *, name_width: int) -> str:
    """Format one choice as `<name>  (id: <id>)  <labels>` with an aligned id column."""
    short_name = _truncate(schema.name, _MAX_SCHEMA_NAME_WIDTH)
    title = f"{short_name.ljust(name_width)}  (id: {schema.id})"
    labels = format_labels(schema.labels)
    return f"{title}  {labels}" if labels else title


def _schema_choices(
    schemas: list[DatabaseSchema],
) -> list[questionary.Choice | questionary.Separator]:
    """Build picker entries: one separator per server, then its schemas sorted by name.

    Inactive schemas are listed but cannot be picked.
    """
    name_width = max(
        (len(_truncate(s.name, _MAX_SCHEMA_NAME_WIDTH)) for s in schemas), default=0
    )
    ordered = sorted(schemas, key=lambda s: (_server_of(s), s.name, s.id))

    entries: list[questionary.Choice | questionary.Separator] = []
    for server, group in groupby(ordered, key=_server_of):
        entries.append(questionary.Separator(f"── {server} ──"))
        for schema in group:
            entries.append(
                questionary.Choice(
                    title=_schema_choice_title(schema, name_width=name_width),
                    value=schema,
                    disabled=None if schema.active else "inactive",
                )
            )
    return entries


def select_schemas(schemas: list[DatabaseSchema]) -> list[DatabaseSchema]:
    """Display a checkbox prompt to pick schemas, grouped by database server.

    Returns:
        The picked schemas, or an empty list if none were picked.
    """
    return (
        questionary.checkbox(
            "Select schemas:",
            choices=_schema_choices(schemas),
            style=QUESTIONARY_STYLE_SELECT,
        ).ask()
        or []
    )

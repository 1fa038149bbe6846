"""Output formatting utilities for the CLI."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

import questionary
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

from dbhotel.cli.common.tui_style import QUESTIONARY_STYLE_DANGER

_THEME = Theme(
    {
        "ok": "bold green",
        "warn": "yellow",
        "err": "bold red",
        "title": "bold cyan",
        "meta": "dim",
    }
)

console = Console(theme=_THEME)


def format_labels(labels: Mapping[str, Any] | None) -> str:
    """Render labels as `k=v, k2=v2` sorted by key; None values render as the bare key."""
    return ", ".join(
        k if v is None else f"{k}={v}" for k, v in sorted((labels or {}).items())
    )


@dataclass(frozen=True)
class Out:
    """Output formatter for CLI messages and tables."""

    def _q_try(self, fn, *args, **kwargs):
        """Call questionary prompts and drop unsupported kwargs on older versions."""
        try:
            return fn(*args, **kwargs)
        except TypeError:
            for k in ("pointer", "auto_enter"):
                kwargs.pop(k, None)
            return fn(*args, **kwargs)

    def info(self, msg: str) -> None:
        console.print(f"[title]›[/] {escape(msg)}")

    @contextmanager
    def status(self, msg: str):
        """Show a transient spinner while instances are being queried."""
        with console.status(msg, spinner="dots"):
            yield

    def success(self, msg: str) -> None:
        console.print(f"[ok]✓[/] {escape(msg)}")

    def warn(self, msg: str) -> None:
        console.print(f"[warn]⚠[/] {escape(msg)}")

    def error(self, msg: str) -> None:
        console.print(f"[err]✗[/] {escape(msg)}")

    def header(self, title: str) -> None:
        console.print(f"[title]{title}[/]")

    def kv(self, items: Mapping[str, Any]) -> None:
        """Print key-value pairs."""
        for k, v in items.items():
            console.print(f"[meta]{k}[/]: {escape(str(v))}")

    def confirm(self, message: str, *, default: bool = False) -> bool:
        """
        Ask for confirmation before a destructive action.

        Args:
            message: Confirmation question shown to the user.
            default: Answer used when the user just presses enter.

        Returns:
            True if the user confirms, False otherwise.
        """
        console.print("[meta]Use y/n then Enter[/]")

        prompt = self._q_try(
            questionary.confirm,
            f"[DB-HOTEL] {message}",
            default=default,
            style=QUESTIONARY_STYLE_DANGER,
            qmark="✦",
            auto_enter=False,
        )
        return bool(prompt.ask())

    def schema_detail(self, schema: Any, host: str | None) -> None:
        """Print one schema with its owner (host, or `external`)."""
        self.kv(
            {
                "id": schema.id,
                "name": schema.name,
                "jdbcUrl": schema.jdbc_url,
                "owner": host or "external",
                "active": "yes" if schema.active else "no",
                "labels": format_labels(schema.labels),
                "users": ", ".join(u.name for u in schema.users),
            }
        )

    def schemas_table(self, schemas: Iterable[Any], title: str = "Schemas") -> None:
        """
        Expects objects with .id .name .jdbc_url .active .labels
        (like dbhotel.core.schemas.DatabaseSchema). Rows are sorted by name.
        """
        t = Table(title=title, show_lines=False)
        t.add_column("ID", style="ok", no_wrap=True)
        t.add_column("Name")
        t.add_column("JDBC url", style="meta")
        t.add_column("Active")
        t.add_column("Labels", style="meta")

        for s in sorted(schemas, key=lambda s: (s.name, s.id)):
            active = "[ok]yes[/]" if s.active else "[err]no[/]"
            t.add_row(
                escape(str(s.id)),
                escape(s.name),
                escape(s.jdbc_url),
                active,
                escape(format_labels(s.labels)),
            )

        console.print(t)

    def instances_table(self, instances: Iterable[Any], title: str = "Instances") -> None:
        """Expects objects with .engine and .meta_info (.instance_name .host .labels)."""
        t = Table(title=title, show_lines=False)
        t.add_column("Instance", style="ok", no_wrap=True)
        t.add_column("Host")
        t.add_column("Engine", style="meta")
        t.add_column("Labels", style="meta")

        for i in instances:
            meta = i.meta_info
            engine = i.engine.value if hasattr(i.engine, "value") else str(i.engine)
            t.add_row(
                escape(meta.instance_name),
                escape(meta.host),
                engine,
                escape(format_labels(meta.labels)),
            )

        console.print(t)

    def tablespace_table(
        self, rows: Iterable[tuple[Any, Any]], title: str = "Tablespaces"
    ) -> None:
        """Expects tuples of (DatabaseInstance, TablespaceInfo)."""
        t = Table(title=title, show_lines=False)
        t.add_column("Host", style="ok", no_wrap=True)
        t.add_column("Max", justify="right")
        t.add_column("Used", justify="right")
        t.add_column("Available", justify="right")

        for instance, info in rows:
            style = "err" if info.available <= 0 else "ok"
            t.add_row(
                escape(instance.meta_info.host),
                str(info.max),
                str(info.used),
                f"[{style}]{info.available}[/{style}]",
            )

        console.print(t)

    def verification(self, result: Any) -> None:
        """Print a ConnectionVerification result."""
        if result.has_succeeded:
            self.success(f"Connection {result.message}")
        else:
            self.error(f"Connection failed: {result.message}")


out = Out()

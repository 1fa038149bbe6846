"""Exit handling utilities for the CLI."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, NoReturn

import typer

from dbhotel.cli.common.output import out
from dbhotel.core.errors import DatabaseHotelError

# Exit codes: 1 = operation failed, 2 = bad input (typer's own usage code).
EXIT_FAILED = 1
EXIT_USAGE = 2


def ok_exit(msg: str | None = None) -> NoReturn:
    """Exit successfully with an optional informational message."""
    if msg:
        out.info(msg)
    raise typer.Exit(0)


def die(msg: str, code: int = EXIT_FAILED) -> NoReturn:
    """Exit with an error message."""
    out.error(msg)
    raise typer.Exit(code)


def warn_exit(msg: str, code: int = 0) -> NoReturn:
    """Exit with a warning message."""
    out.warn(msg)
    raise typer.Exit(code)


def exit_from_exc(exc: Exception, *, message: str, code: int = EXIT_FAILED) -> NoReturn:
    """Print `message` and exit, chaining the original exception."""
    out.error(message)
    raise typer.Exit(code) from exc


@contextmanager
def hotel_errors() -> Iterator[None]:
    """Turn dbhotel errors raised inside the block into CLI exits."""
    try:
        yield
    except DatabaseHotelError as exc:
        exit_from_exc(exc, message=str(exc), code=EXIT_FAILED)
    except ValueError as exc:
        exit_from_exc(exc, message=str(exc), code=EXIT_USAGE)

"""Application context management for the CLI."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from rich.logging import RichHandler

from dbhotel.cli.common.exits import die
from dbhotel.cli.common.output import console
from dbhotel.core.config import HotelSettings, build_service
from dbhotel.core.errors import ConfigError
from dbhotel.core.hotel import DatabaseHotelService


@dataclass
class HotelAppContext:
    """Application context holding settings and the hotel service."""

    settings: HotelSettings
    service: DatabaseHotelService


def configure_logging(level: str) -> None:
    """Route log records through Rich on the CLI console."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def build_hotel_context(backend: str | None, log_level: str | None) -> HotelAppContext:
    """Build the application context from the environment and CLI overrides.

    Args:
        backend: Optional backend factory reference overriding $DBHOTEL_BACKEND.
        log_level: Optional log level overriding $DBHOTEL_LOG_LEVEL.

    Returns:
        HotelAppContext: Context with a ready-to-use DatabaseHotelService.
    """
    try:
        settings = HotelSettings.from_env().with_overrides(
            backend=backend, log_level=log_level
        )
        configure_logging(settings.log_level)
        service = build_service(settings)
    except ConfigError as exc:
        die(str(exc), code=1)
    return HotelAppContext(settings=settings, service=service)

"""Settings and backend loading.

Instance discovery is not dbhotel's job, so frontends get their
instances from a backend factory: a `module:callable` reference that
returns a populated `DatabaseHotelAdmin`. Settings are read from
environment variables and can be overridden by CLI options.
"""

from __future__ import annotations

import importlib
import logging
import os
from dataclasses import dataclass, replace
from typing import Mapping

from dbhotel.core.errors import ConfigError
from dbhotel.core.hotel import DatabaseHotelService
from dbhotel.core.registry import DatabaseHotelAdmin


@dataclass(frozen=True)
class HotelSettings:
    """Runtime settings for dbhotel frontends."""

    BACKEND_ENV = "DBHOTEL_BACKEND"
    MAX_WORKERS_ENV = "DBHOTEL_MAX_WORKERS"
    LOG_LEVEL_ENV = "DBHOTEL_LOG_LEVEL"

    backend: str | None = None
    max_workers: int | None = None
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> HotelSettings:
        """Read settings from the environment, ignoring unusable values."""
        env = os.environ if environ is None else environ
        backend = env.get(cls.BACKEND_ENV) or None
        return cls(
            backend=backend.strip() if backend else None,
            max_workers=_parse_max_workers(env.get(cls.MAX_WORKERS_ENV)),
            log_level=_parse_log_level(env.get(cls.LOG_LEVEL_ENV)) or "WARNING",
        )

    def with_overrides(
        self, *, backend: str | None = None, log_level: str | None = None
    ) -> HotelSettings:
        """Return a copy with the given non-empty values applied."""
        settings = self
        if backend:
            settings = replace(settings, backend=backend)
        if log_level:
            level = _parse_log_level(log_level)
            if level is None:
                raise ConfigError(f"Unknown log level '{log_level}'.")
            settings = replace(settings, log_level=level)
        return settings


def _parse_max_workers(raw: str | None) -> int | None:
    """Return a positive worker count, or None for the default."""
    if raw is None or not raw.strip():
        return None
    try:
        value = int(raw)
    except ValueError:
        return None
    return value if value > 0 else None


def _parse_log_level(raw: str | None) -> str | None:
    if not raw:
        return None
    name = raw.strip().upper()
    if not isinstance(logging.getLevelName(name), int):
        return None
    return name


def load_backend(reference: str | None) -> DatabaseHotelAdmin:
    """
    Import and call a backend factory.

    Args:
        reference: `package.module:callable`; the callable takes no
            arguments and returns a DatabaseHotelAdmin.

    Raises:
        ConfigError: If the reference is missing, cannot be imported or
            does not produce a DatabaseHotelAdmin.
    """
    if not reference:
        raise ConfigError(
            f"No backend configured. Set {HotelSettings.BACKEND_ENV} or pass --backend "
            "(format: package.module:factory)."
        )
    module_name, sep, attr = reference.partition(":")
    if not sep or not module_name or not attr:
        raise ConfigError(f"Backend must be in the form `package.module:factory`, got '{reference}'.")

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigError(f"Cannot import backend module '{module_name}': {exc}") from exc

    factory = getattr(module, attr, None)
    if not callable(factory):
        raise ConfigError(f"Backend factory '{reference}' is not callable.")

    admin = factory()
    if not isinstance(admin, DatabaseHotelAdmin):
        raise ConfigError(
            f"Backend factory '{reference}' returned {type(admin).__name__}, "
            "expected DatabaseHotelAdmin."
        )
    return admin


def build_service(settings: HotelSettings) -> DatabaseHotelService:
    """Build a DatabaseHotelService from settings."""
    admin = load_backend(settings.backend)
    return DatabaseHotelService(admin, max_workers=settings.max_workers)

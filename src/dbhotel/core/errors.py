"""Error types raised by the database hotel core."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from dbhotel.core.hotel import SchemaCandidate


class DatabaseHotelError(RuntimeError):
    """Base class for every error raised by dbhotel."""


class SchemaNotFoundError(DatabaseHotelError):
    """Raised when an operation requires a schema that does not exist."""

    def __init__(self, schema_id: str):
        super().__init__(f"No such schema {schema_id}")
        self.schema_id = schema_id


class AmbiguousSchemaError(DatabaseHotelError):
    """
    Raised when more than one owner reports the same schema id.

    This is a data integrity violation. The error keeps every candidate
    so the duplicates can be cleaned up by hand.
    """

    def __init__(self, schema_id: str, candidates: Sequence[SchemaCandidate]):
        self.schema_id = schema_id
        self.candidates = list(candidates)
        details = ", ".join(
            f"[schemaName={c.schema.name}, jdbcUrl={c.schema.jdbc_url}, hostName={c.host}]"
            for c in self.candidates
        )
        super().__init__(
            "More than one schema from different database servers matched "
            f"the specified id [{schema_id}]: {details}"
        )


class ExternalSchemaManagerNotRegisteredError(DatabaseHotelError):
    """Raised when an operation needs the external schema manager but none is registered."""


class InstanceSelectionError(DatabaseHotelError):
    """Raised when no instance satisfies the creation requirements."""


class ConfigError(DatabaseHotelError):
    """Raised for invalid settings or an unusable backend factory."""

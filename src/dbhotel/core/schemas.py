"""Core domain models for the database hotel.

These models describe schemas, the requirements used to place new schemas
on an instance, and the small derived values reported back to callers.
They are free of driver types and of CLI concerns.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping


class DatabaseEngine(str, Enum):
    """Database engines a hotel instance can run."""

    ORACLE = "ORACLE"
    POSTGRES = "POSTGRES"


@dataclass(frozen=True)
class SchemaUser:
    """Credential pair for a schema. `type` is e.g. SCHEMA or READONLY."""

    name: str
    password: str
    type: str = "SCHEMA"


@dataclass(eq=False)
class DatabaseSchema:
    """
    A logical tenant schema.

    Attributes:
        id: Opaque identifier, unique across every instance and the
            external schema manager.
        name: Schema name on the owning database server.
        jdbc_url: Connection url for the schema.
        users: Credentials; the first entry is the primary user.
        labels: Free-form key/value labels used for lookups.
        active: False once the schema has been deactivated.

    Two schemas are equal when their ids are equal, so sets of schemas
    collapse duplicates reported by different sources.
    """

    id: str
    name: str
    jdbc_url: str
    users: list[SchemaUser] = field(default_factory=list)
    labels: dict[str, str | None] = field(default_factory=dict)
    active: bool = True

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DatabaseSchema):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def primary_user(self) -> SchemaUser:
        """Return the first (primary) user of the schema."""
        if not self.users:
            raise ValueError(f"Schema {self.id} has no users.")
        return self.users[0]


@dataclass(frozen=True)
class DatabaseInstanceRequirements:
    """
    Constraints used to pick the instance a new schema is created on.

    Attributes:
        database_engine: Engine the instance must run.
        instance_name: Pin creation to the instance with this name.
        instance_labels: Labels the instance must carry (when no name is set).
        instance_fallback: Allow any instance of the engine when nothing
            matches the name/labels.
    """

    database_engine: DatabaseEngine = DatabaseEngine.ORACLE
    instance_name: str | None = None
    instance_labels: Mapping[str, str] = field(default_factory=dict)
    instance_fallback: bool = True


@dataclass(frozen=True)
class TablespaceInfo:
    """Tablespace capacity of one instance."""

    max: int
    used: int

    @property
    def available(self) -> int:
        return self.max - self.used


@dataclass(frozen=True)
class ConnectionVerification:
    """Outcome of a single live connection attempt."""

    has_succeeded: bool | None = None
    message: str | None = ""

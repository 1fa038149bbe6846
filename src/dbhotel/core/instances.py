"""Interfaces of the collaborators the hotel core talks to.

Database instances, the optional external schema manager and the
instance registry are implemented elsewhere (connection pooling, SQL
dialects and storage are their business). The core only relies on the
narrow protocols below.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Mapping, Protocol

from dbhotel.core.schemas import (
    DatabaseEngine,
    DatabaseInstanceRequirements,
    DatabaseSchema,
)


class InstanceMetaInfo(Protocol):
    """Identity of a physical database server."""

    instance_name: str
    host: str
    labels: Mapping[str, str]


class DatabaseInstance(Protocol):
    """One physical database server hosting zero or more schemas."""

    meta_info: InstanceMetaInfo
    engine: DatabaseEngine

    def find_schema_by_id(self, id: str, active: bool = True) -> DatabaseSchema | None:
        """Return the schema with this id on this instance, if any."""
        ...

    def find_all_schemas(
        self,
        labels_to_match: Mapping[str, str | None],
        ignore_active_filter: bool = False,
    ) -> set[DatabaseSchema]:
        """Return the schemas on this instance matching the label filter."""
        ...

    def create_schema(self, labels: Mapping[str, str | None]) -> DatabaseSchema:
        """Create a new schema carrying the given labels."""
        ...

    def deactivate_schema(self, name: str, cooldown: timedelta | None) -> None:
        """Deactivate a schema; it is reclaimed once the cooldown has passed."""
        ...

    def replace_labels(
        self, schema: DatabaseSchema, labels: Mapping[str, str | None]
    ) -> None:
        """Replace the labels of the schema, updating `schema.labels` in place."""
        ...

    def get_max_tablespaces(self) -> int | None:
        """Return the tablespace limit, or None if the instance cannot tell."""
        ...

    def get_used_tablespaces(self) -> int | None:
        """Return the number of tablespaces in use, or None."""
        ...


class ExternalSchemaManager(Protocol):
    """Registry of schemas that live outside the managed instances."""

    def find_schema_by_id(self, id: str) -> DatabaseSchema | None:
        ...

    def find_all_schemas(self) -> set[DatabaseSchema]:
        ...

    def delete_schema(self, id: str) -> None:
        ...

    def update_schema(
        self,
        schema: DatabaseSchema,
        labels: Mapping[str, str | None],
        username: str | None = None,
        password: str | None = None,
    ) -> DatabaseSchema:
        ...

    def register_schema(
        self,
        username: str,
        password: str,
        jdbc_url: str,
        labels: Mapping[str, str | None],
    ) -> DatabaseSchema:
        ...


class InstanceRegistry(Protocol):
    """Discovery and placement of database instances.

    Also the one holder of the optional external schema manager, so a
    manager registered after the service is built is seen on the next call.
    """

    external_schema_manager: ExternalSchemaManager | None

    def find_all_database_instances(
        self, engine: DatabaseEngine | None = None
    ) -> list[DatabaseInstance]:
        """Return all instances, optionally only those running `engine`."""
        ...

    def find_database_instance_or_fail(
        self, requirements: DatabaseInstanceRequirements
    ) -> DatabaseInstance:
        """Pick one instance for the requirements or raise InstanceSelectionError."""
        ...

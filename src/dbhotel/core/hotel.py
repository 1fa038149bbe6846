"""Schema resolution and lifecycle orchestration across the hotel.

`DatabaseHotelService` answers "where does this schema live?" by asking
every database instance, plus the external schema manager when one is
registered, and merging the answers. Lookups by id must yield at most
one owner; more than one is reported as an `AmbiguousSchemaError` and
never resolved by picking one. Mutations are routed to the owner found
by that lookup.

The service keeps no state between calls: every operation queries its
collaborators afresh.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable, Mapping, TypeVar

from dbhotel.core.connections import verify_connection
from dbhotel.core.errors import (
    AmbiguousSchemaError,
    ExternalSchemaManagerNotRegisteredError,
    SchemaNotFoundError,
)
from dbhotel.core.instances import (
    DatabaseInstance,
    ExternalSchemaManager,
    InstanceRegistry,
)
from dbhotel.core.labels import find_all_matching_schemas
from dbhotel.core.schemas import (
    ConnectionVerification,
    DatabaseEngine,
    DatabaseInstanceRequirements,
    DatabaseSchema,
    TablespaceInfo,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_WORKERS = 16


@dataclass(frozen=True)
class Managed:
    """Owner tag: the schema lives on a managed database instance."""

    instance: DatabaseInstance


@dataclass(frozen=True)
class External:
    """Owner tag: the schema is registered with the external schema manager."""


EXTERNAL = External()

Owner = Managed | External


@dataclass(frozen=True)
class SchemaCandidate:
    """A schema together with the owner that reported it."""

    schema: DatabaseSchema
    owner: Owner

    @property
    def instance(self) -> DatabaseInstance | None:
        """Owning instance, or None for externally managed schemas."""
        if isinstance(self.owner, Managed):
            return self.owner.instance
        return None

    @property
    def host(self) -> str | None:
        instance = self.instance
        return instance.meta_info.host if instance is not None else None


class DatabaseHotelService:
    """Resolution and lifecycle operations over all hotel instances."""

    def __init__(
        self,
        registry: InstanceRegistry,
        *,
        max_workers: int | None = None,
    ) -> None:
        """
        Args:
            registry: Source of database instances, instance placement and
                the optional external schema manager.
            max_workers: Upper bound on concurrent instance queries.
                Defaults to one worker per instance, capped at
                DEFAULT_MAX_WORKERS.
        """
        if max_workers is not None and max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        self.registry = registry
        self.max_workers = max_workers

    @property
    def external_schema_manager(self) -> ExternalSchemaManager | None:
        """The manager currently registered on the registry, if any."""
        return self.registry.external_schema_manager

    def _pool(self, tasks: int) -> ThreadPoolExecutor:
        limit = self.max_workers or DEFAULT_MAX_WORKERS
        return ThreadPoolExecutor(max_workers=max(1, min(tasks, limit)))

    def _fan_out(
        self,
        instances: list[DatabaseInstance],
        func: Callable[[DatabaseInstance], T],
    ) -> list[T]:
        """Run `func` once per instance concurrently; results follow instance order."""
        if not instances:
            return []
        with self._pool(len(instances)) as pool:
            futures = [pool.submit(func, instance) for instance in instances]
            return [f.result() for f in futures]

    def _require_external_manager(self, action: str) -> ExternalSchemaManager:
        manager = self.external_schema_manager
        if manager is None:
            raise ExternalSchemaManagerNotRegisteredError(
                f"Unable to {action} - no external schema manager registered"
            )
        return manager

    # Lookups

    def find_schema_by_id(self, id: str, active: bool = True) -> SchemaCandidate | None:
        """
        Find the single owner of a schema.

        Every instance and the external schema manager are queried
        concurrently. The external manager applies its own notion of
        active schemas, so `active` is only passed to instances.

        Returns:
            The schema with its owner, or None if nobody knows the id.

        Raises:
            AmbiguousSchemaError: If more than one owner reports the id.
        """
        instances = self.registry.find_all_database_instances()
        manager = self.external_schema_manager
        tasks = len(instances) + (1 if manager is not None else 0)

        candidates: list[SchemaCandidate] = []
        with self._pool(tasks) as pool:
            instance_futures = [
                (instance, pool.submit(instance.find_schema_by_id, id, active))
                for instance in instances
            ]
            external_future = (
                pool.submit(manager.find_schema_by_id, id) if manager is not None else None
            )

            for instance, future in instance_futures:
                schema = future.result()
                if schema is not None:
                    candidates.append(SchemaCandidate(schema, Managed(instance)))

            if external_future is not None:
                schema = external_future.result()
                if schema is not None:
                    candidates.append(SchemaCandidate(schema, EXTERNAL))

        if len(candidates) > 1:
            error = AmbiguousSchemaError(id, candidates)
            logger.warning("%s", error)
            raise error
        return candidates[0] if candidates else None

    def _fetch_schemas(
        self,
        instance: DatabaseInstance,
        labels_to_match: Mapping[str, str | None],
        ignore_active_filter: bool,
    ) -> set[DatabaseSchema]:
        host = instance.meta_info.host
        logger.debug("Fetching schemas for instance %s", host)
        started = time.perf_counter()
        schemas = instance.find_all_schemas(labels_to_match, ignore_active_filter)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.debug(
            "Fetched %d schemas for instance %s in %.0f millis", len(schemas), host, elapsed_ms
        )
        return set(schemas)

    def _fetch_all_instance_schemas(
        self,
        engine: DatabaseEngine | None,
        labels_to_match: Mapping[str, str | None],
        ignore_active_filter: bool,
    ) -> set[DatabaseSchema]:
        instances = self.registry.find_all_database_instances(engine)
        results = self._fan_out(
            instances,
            lambda i: self._fetch_schemas(i, labels_to_match, ignore_active_filter),
        )
        merged: set[DatabaseSchema] = set()
        for schemas in results:
            merged |= schemas
        return merged

    def find_all_database_schemas(
        self,
        engine: DatabaseEngine | None = None,
        labels_to_match: Mapping[str, str | None] | None = None,
        ignore_active_filter: bool = False,
    ) -> set[DatabaseSchema]:
        """
        Return every schema matching the label filter.

        Instances (optionally only those running `engine`) are queried
        concurrently; schemas of the external schema manager are filtered
        with the same labels and added. Duplicates collapse by id.
        """
        labels_to_match = labels_to_match or {}
        schemas = self._fetch_all_instance_schemas(
            engine, labels_to_match, ignore_active_filter
        )

        manager = self.external_schema_manager
        external = manager.find_all_schemas() if manager is not None else set()
        return schemas | find_all_matching_schemas(external, labels_to_match)

    def find_all_inactive_database_schemas(
        self, labels_to_match: Mapping[str, str | None] | None = None
    ) -> set[DatabaseSchema]:
        """Return deactivated schemas on managed instances (never external ones)."""
        schemas = self._fetch_all_instance_schemas(None, labels_to_match or {}, True)
        return {s for s in schemas if not s.active}

    def get_tablespace_info(self) -> list[tuple[DatabaseInstance, TablespaceInfo]]:
        """Tablespace capacity per instance; instances that cannot report are left out."""
        result: list[tuple[DatabaseInstance, TablespaceInfo]] = []
        for instance in self.registry.find_all_database_instances():
            max_tablespaces = instance.get_max_tablespaces()
            used_tablespaces = instance.get_used_tablespaces()
            if max_tablespaces is None or used_tablespaces is None:
                continue
            result.append((instance, TablespaceInfo(max_tablespaces, used_tablespaces)))
        return result

    # Mutations

    def create_schema(
        self,
        requirements: DatabaseInstanceRequirements | None = None,
        labels: Mapping[str, str | None] | None = None,
    ) -> DatabaseSchema:
        """
        Create a schema on an instance chosen by the registry.

        Raises:
            InstanceSelectionError: If no instance satisfies `requirements`.
        """
        requirements = requirements or DatabaseInstanceRequirements()
        instance = self.registry.find_database_instance_or_fail(requirements)
        schema = instance.create_schema(dict(labels or {}))

        logger.info(
            "Created schema name=%s, id=%s with labels=%s", schema.name, schema.id, schema.labels
        )
        return schema

    def deactivate_schema(self, id: str, cooldown: timedelta | None = None) -> None:
        """
        Deactivate the active schema with this id; unknown ids are ignored.

        Managed schemas are deactivated on their instance and reclaimed
        after `cooldown`. Externally managed schemas are deleted through
        the external schema manager right away.
        """
        candidate = self.find_schema_by_id(id)
        if candidate is None:
            logger.debug("No active schema with id=%s, nothing to deactivate", id)
            return

        owner = candidate.owner
        if isinstance(owner, Managed):
            logger.info(
                "Deactivating schema name=%s, id=%s on %s with cooldown=%s",
                candidate.schema.name,
                id,
                owner.instance.meta_info.host,
                cooldown,
            )
            owner.instance.deactivate_schema(candidate.schema.name, cooldown)
        else:
            # TODO: decide whether external schemas should get a cooldown instead of deletion
            logger.info("Deleting external schema id=%s", id)
            self._require_external_manager(f"delete schema {id}").delete_schema(id)

    def update_schema(
        self,
        id: str,
        labels: Mapping[str, str | None],
        username: str | None = None,
        jdbc_url: str | None = None,
        password: str | None = None,
    ) -> DatabaseSchema:
        """
        Replace the labels of a schema.

        `username` and `password` only apply to externally managed
        schemas. `jdbc_url` is accepted for symmetry with registration but
        the external manager keeps the url it was registered with.

        Raises:
            SchemaNotFoundError: If no active schema has this id.
        """
        logger.info("Updating labels for schema with id=%s to labels=%s", id, dict(labels))

        candidate = self.find_schema_by_id(id)
        if candidate is None:
            raise SchemaNotFoundError(id)

        owner = candidate.owner
        if isinstance(owner, Managed):
            owner.instance.replace_labels(candidate.schema, labels)
            return candidate.schema

        manager = self._require_external_manager(f"update schema {id}")
        return manager.update_schema(candidate.schema, labels, username, password)

    def register_external_schema(
        self,
        username: str,
        password: str,
        jdbc_url: str,
        labels: Mapping[str, str | None],
    ) -> DatabaseSchema:
        """Register an existing schema with the external schema manager."""
        manager = self._require_external_manager("register external schema")
        schema = manager.register_schema(username, password, jdbc_url, labels)
        logger.info("Registered external schema id=%s, jdbcUrl=%s", schema.id, jdbc_url)
        return schema

    # Connections

    def validate_connection(self, id: str) -> ConnectionVerification:
        """
        Try to connect to the schema with its primary user.

        Raises:
            SchemaNotFoundError: If no active schema has this id.
        """
        candidate = self.find_schema_by_id(id)
        if candidate is None:
            raise SchemaNotFoundError(id)
        user = candidate.schema.primary_user
        return self.validate_connection_url(candidate.schema.jdbc_url, user.name, user.password)

    def validate_connection_url(
        self, jdbc_url: str, username: str, password: str
    ) -> ConnectionVerification:
        """Try to connect with raw credentials; failures are returned, not raised."""
        return verify_connection(jdbc_url, username, password)

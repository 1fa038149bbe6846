"""In-process instance registry.

`DatabaseHotelAdmin` keeps the pool of known database instances and the
optional external schema manager, and decides which instance a new
schema is placed on. How the instances are discovered and constructed
is up to whoever builds the admin (see `dbhotel.core.config`).
"""

from __future__ import annotations

import logging
import random
from typing import Iterable

from dbhotel.core.errors import InstanceSelectionError
from dbhotel.core.instances import DatabaseInstance, ExternalSchemaManager
from dbhotel.core.labels import matches_labels
from dbhotel.core.schemas import DatabaseEngine, DatabaseInstanceRequirements

logger = logging.getLogger(__name__)


class DatabaseHotelAdmin:
    """Registry of database instances plus the optional external schema manager."""

    def __init__(
        self,
        instances: Iterable[DatabaseInstance] = (),
        external_schema_manager: ExternalSchemaManager | None = None,
        *,
        rng: random.Random | None = None,
    ) -> None:
        self._instances: list[DatabaseInstance] = []
        self.external_schema_manager = external_schema_manager
        self._rng = rng or random.Random()
        for instance in instances:
            self.register_database_instance(instance)

    def register_database_instance(self, instance: DatabaseInstance) -> None:
        """Add an instance, replacing any instance registered for the same host."""
        host = instance.meta_info.host
        self._instances = [i for i in self._instances if i.meta_info.host != host]
        self._instances.append(instance)
        logger.info(
            "Registered %s instance %s on host %s",
            instance.engine.value,
            instance.meta_info.instance_name,
            host,
        )

    def remove_database_instance(self, host: str) -> None:
        """Forget the instance registered for `host` (no-op if unknown)."""
        self._instances = [i for i in self._instances if i.meta_info.host != host]

    def register_external_schema_manager(self, manager: ExternalSchemaManager) -> None:
        """Register the external schema manager; only one is kept."""
        if self.external_schema_manager is not None:
            logger.warning("Replacing previously registered external schema manager")
        self.external_schema_manager = manager

    def find_all_database_instances(
        self, engine: DatabaseEngine | None = None
    ) -> list[DatabaseInstance]:
        """Return registered instances in registration order."""
        if engine is None:
            return list(self._instances)
        return [i for i in self._instances if i.engine == engine]

    def find_database_instance_by_host(self, host: str) -> DatabaseInstance | None:
        for instance in self._instances:
            if instance.meta_info.host == host:
                return instance
        return None

    def find_database_instance_or_fail(
        self, requirements: DatabaseInstanceRequirements
    ) -> DatabaseInstance:
        """
        Pick the instance a new schema should be created on.

        Candidates are narrowed by engine, then by instance name when one
        is given, otherwise by instance labels. If nothing is left and
        fallback is allowed, any instance running the engine qualifies.
        One of the eligible instances is picked at random.

        Raises:
            InstanceSelectionError: If no instance is eligible.
        """
        by_engine = self.find_all_database_instances(requirements.database_engine)

        if requirements.instance_name:
            eligible = [
                i
                for i in by_engine
                if i.meta_info.instance_name == requirements.instance_name
            ]
        else:
            eligible = [
                i
                for i in by_engine
                if matches_labels(i.meta_info.labels, requirements.instance_labels)
            ]

        if not eligible and requirements.instance_fallback:
            eligible = by_engine

        if not eligible:
            raise InstanceSelectionError(
                "Unable to find database instance for "
                f"engine={requirements.database_engine.value}, "
                f"instanceName={requirements.instance_name}, "
                f"instanceLabels={dict(requirements.instance_labels)}, "
                f"fallback={requirements.instance_fallback}"
            )

        return self._rng.choice(eligible)

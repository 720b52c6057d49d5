"""Process engine configuration materialized from application properties."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError

from ddworkflow.core.properties import ApplicationProperties, MissingPropertyError
from ddworkflow.workflow_engine.exceptions import ProcessEngineError, UnsupportedDriverError

LOGGER = logging.getLogger("ddworkflow.workflow_engine.config")

JDBC_URL = "database.jdbc.url"
JDBC_USERNAME = "database.jdbc.username"
JDBC_PASSWORD = "database.jdbc.password"
JDBC_DRIVER = "database.jdbc.driver"
SCHEMA_UPDATE = "camunda.schema.update"
JOB_EXECUTOR_ACTIVATE = "camunda.job.executor.activate"
PROCESS_DEFINITION_KEY = "camunda.process.definition.key"
PROCESS_RESOURCE = "camunda.process.resource"
POOL_MAX = "database.connection.pool.max"
POOL_MIN = "database.connection.pool.min"

DEFAULT_POOL_MAX = 10
DEFAULT_POOL_MIN = 2

# JDBC driver classes and the DBAPI driver SQLAlchemy should use instead.
JDBC_DRIVER_CLASSES = {
    "org.postgresql.Driver": "psycopg",
    "org.sqlite.JDBC": "pysqlite",
}

# Used when neither the URL nor the properties name a driver.
DEFAULT_DRIVERS = {
    "postgresql": "psycopg",
}


@dataclass(frozen=True)
class EngineConfig:
    """Typed, validated view of the engine-related properties."""

    jdbc_url: str
    process_definition_key: str
    process_resource: str
    username: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)
    driver: Optional[str] = None
    schema_update: bool = True
    job_executor_activate: bool = True
    pool_max: int = DEFAULT_POOL_MAX
    pool_min: int = DEFAULT_POOL_MIN

    def database_url(self) -> URL:
        """Translate the configured JDBC or SQLAlchemy URL for SQLAlchemy."""

        raw = self.jdbc_url.strip()
        if raw.startswith("jdbc:"):
            raw = raw[len("jdbc:"):]
        try:
            url = make_url(raw)
        except ArgumentError as exc:
            raise ProcessEngineError(f"Invalid database URL '{self.jdbc_url}'") from exc

        backend = url.get_backend_name()
        driver = self._python_driver() or (None if "+" in url.drivername else DEFAULT_DRIVERS.get(backend))
        if driver:
            url = url.set(drivername=f"{backend}+{driver}")
        if backend == "sqlite":
            # SQLite rejects URLs that carry credentials.
            return url
        if self.username:
            url = url.set(username=self.username)
        if self.password:
            url = url.set(password=self.password)
        return url

    def display_url(self) -> str:
        return self.database_url().render_as_string(hide_password=True)

    def _python_driver(self) -> Optional[str]:
        if not self.driver:
            return None
        if "." in self.driver:
            mapped = JDBC_DRIVER_CLASSES.get(self.driver)
            if mapped is None:
                raise UnsupportedDriverError(f"No Python database driver known for JDBC driver '{self.driver}'")
            return mapped
        return self.driver


def _required(properties: ApplicationProperties, key: str) -> str:
    value = properties.get_string(key)
    if value is None or not value.strip():
        raise MissingPropertyError(key)
    return value.strip()


def _optional(properties: ApplicationProperties, key: str) -> Optional[str]:
    value = properties.get_string(key)
    if value is None:
        return None
    return value.strip() or None


def get_engine_config(properties: ApplicationProperties) -> EngineConfig:
    """Build the engine configuration, failing on missing required keys."""

    pool_max = properties.get_int(POOL_MAX, DEFAULT_POOL_MAX)
    pool_min = properties.get_int(POOL_MIN, DEFAULT_POOL_MIN)
    if pool_max < 1:
        LOGGER.warning("Ignoring %s=%s, using default: %s", POOL_MAX, pool_max, DEFAULT_POOL_MAX)
        pool_max = DEFAULT_POOL_MAX
    if pool_min < 0 or pool_min > pool_max:
        clamped = min(max(pool_min, 0), pool_max)
        LOGGER.warning("Clamping %s=%s to %s", POOL_MIN, pool_min, clamped)
        pool_min = clamped

    # The password is kept verbatim; surrounding whitespace may be significant.
    return EngineConfig(
        jdbc_url=_required(properties, JDBC_URL),
        process_definition_key=_required(properties, PROCESS_DEFINITION_KEY),
        process_resource=_required(properties, PROCESS_RESOURCE),
        username=_optional(properties, JDBC_USERNAME),
        password=properties.get_string(JDBC_PASSWORD),
        driver=_optional(properties, JDBC_DRIVER),
        schema_update=properties.get_bool(SCHEMA_UPDATE, True),
        job_executor_activate=properties.get_bool(JOB_EXECUTOR_ACTIVATE, True),
        pool_max=pool_max,
        pool_min=pool_min,
    )

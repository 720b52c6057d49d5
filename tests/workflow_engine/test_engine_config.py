from __future__ import annotations

import pytest

from ddworkflow.core.properties import ApplicationProperties, MissingPropertyError
from ddworkflow.workflow_engine.config import EngineConfig, get_engine_config
from ddworkflow.workflow_engine.exceptions import UnsupportedDriverError

REQUIRED = {
    "database.jdbc.url": "jdbc:postgresql://db.internal:5432/camunda",
    "camunda.process.definition.key": "simple-process",
    "camunda.process.resource": "processes/simple-process.bpmn",
}


def test_defaults_apply_when_optional_keys_are_absent() -> None:
    config = get_engine_config(ApplicationProperties(REQUIRED))

    assert config.schema_update is True
    assert config.job_executor_activate is True
    assert config.pool_max == 10
    assert config.pool_min == 2
    assert config.username is None
    assert config.driver is None


@pytest.mark.parametrize("missing", sorted(REQUIRED))
def test_required_keys_are_enforced(missing: str) -> None:
    entries = {key: value for key, value in REQUIRED.items() if key != missing}

    with pytest.raises(MissingPropertyError) as excinfo:
        get_engine_config(ApplicationProperties(entries))
    assert excinfo.value.key == missing


def test_blank_required_value_is_missing() -> None:
    entries = dict(REQUIRED, **{"camunda.process.resource": "   "})

    with pytest.raises(MissingPropertyError):
        get_engine_config(ApplicationProperties(entries))


def test_flags_and_pool_sizes_are_read() -> None:
    entries = dict(
        REQUIRED,
        **{
            "camunda.schema.update": "false",
            "camunda.job.executor.activate": "FALSE",
            "database.connection.pool.max": "20",
            "database.connection.pool.min": "5",
        },
    )

    config = get_engine_config(ApplicationProperties(entries))

    assert config.schema_update is False
    assert config.job_executor_activate is False
    assert (config.pool_max, config.pool_min) == (20, 5)


def test_malformed_pool_size_falls_back_to_default() -> None:
    entries = dict(REQUIRED, **{"database.connection.pool.max": "lots"})

    with pytest.warns(UserWarning):
        config = get_engine_config(ApplicationProperties(entries))
    assert config.pool_max == 10


def test_pool_min_is_clamped_to_pool_max() -> None:
    entries = dict(
        REQUIRED,
        **{"database.connection.pool.max": "3", "database.connection.pool.min": "8"},
    )

    config = get_engine_config(ApplicationProperties(entries))

    assert (config.pool_max, config.pool_min) == (3, 3)


def test_jdbc_url_is_translated_with_credentials_and_driver() -> None:
    entries = dict(
        REQUIRED,
        **{
            "database.jdbc.username": "camunda",
            "database.jdbc.password": "p@ss",
            "database.jdbc.driver": "org.postgresql.Driver",
        },
    )
    config = get_engine_config(ApplicationProperties(entries))

    url = config.database_url()

    assert url.drivername == "postgresql+psycopg"
    assert url.host == "db.internal"
    assert url.port == 5432
    assert url.database == "camunda"
    assert url.username == "camunda"
    assert url.password == "p@ss"
    assert "p@ss" not in config.display_url()
    assert "p@ss" not in repr(config)


def test_postgres_defaults_to_psycopg_without_driver() -> None:
    config = EngineConfig(jdbc_url="jdbc:postgresql://localhost/camunda", process_definition_key="k", process_resource="r")
    assert config.database_url().drivername == "postgresql+psycopg"


def test_explicit_python_driver_is_used_as_given() -> None:
    config = EngineConfig(
        jdbc_url="postgresql://localhost/camunda",
        process_definition_key="k",
        process_resource="r",
        driver="psycopg2",
    )
    assert config.database_url().drivername == "postgresql+psycopg2"


def test_native_sqlalchemy_url_is_kept() -> None:
    config = EngineConfig(jdbc_url="sqlite://", process_definition_key="k", process_resource="r")
    assert config.database_url().drivername == "sqlite"


def test_unknown_jdbc_driver_class_is_rejected() -> None:
    config = EngineConfig(
        jdbc_url="jdbc:postgresql://localhost/camunda",
        process_definition_key="k",
        process_resource="r",
        driver="com.example.jdbc.Driver",
    )
    with pytest.raises(UnsupportedDriverError):
        config.database_url()

"""Process engine construction and lifecycle."""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ddworkflow.core.database import create_database_engine, create_session_factory
from ddworkflow.core.resources import Classpath
from ddworkflow.models import Base
from ddworkflow.workflow_engine.config import EngineConfig
from ddworkflow.workflow_engine.exceptions import EngineClosedError, ProcessEngineError, SchemaMissingError
from ddworkflow.workflow_engine.repository import RepositoryService
from ddworkflow.workflow_engine.runtime import RuntimeService

LOGGER = logging.getLogger("ddworkflow.workflow_engine.engine")


class ProcessEngine:
    """Handle on a configured engine: persistence plus its services."""

    def __init__(
        self,
        *,
        config: EngineConfig,
        db_engine: Engine,
        classpath: Classpath,
    ) -> None:
        self.config = config
        self.db_engine = db_engine
        self.classpath = classpath
        self.session_factory: sessionmaker[Session] = create_session_factory(db_engine)
        self.repository_service = RepositoryService(self)
        self.runtime_service = RuntimeService(self)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def ensure_open(self) -> None:
        if self._closed:
            raise EngineClosedError("Process engine has been closed")

    def close(self) -> None:
        """Release pooled connections. Closing twice is a no-op."""

        if self._closed:
            return
        self._closed = True
        self.db_engine.dispose()
        LOGGER.info("Process engine closed")


def _prepare_schema(db_engine: Engine, schema_update: bool) -> None:
    if schema_update:
        Base.metadata.create_all(bind=db_engine)
        return

    inspector = inspect(db_engine)
    missing = sorted(name for name in Base.metadata.tables if not inspector.has_table(name))
    if missing:
        raise SchemaMissingError(
            f"Engine tables missing ({', '.join(missing)}) and schema update is disabled"
        )


def build_process_engine(config: EngineConfig, classpath: Optional[Classpath] = None) -> ProcessEngine:
    """Connect to the configured database, prepare the schema and return the engine."""

    url = config.database_url()
    db_engine = create_database_engine(url, pool_min=config.pool_min, pool_max=config.pool_max)
    try:
        _prepare_schema(db_engine, config.schema_update)
    except SQLAlchemyError as exc:
        db_engine.dispose()
        raise ProcessEngineError(f"Could not prepare engine schema: {exc}") from exc
    except ProcessEngineError:
        db_engine.dispose()
        raise

    engine = ProcessEngine(config=config, db_engine=db_engine, classpath=classpath or Classpath())
    LOGGER.info(
        "Process engine initialized with database %s, max connections %d, job executor active %s",
        config.display_url(),
        config.pool_max,
        config.job_executor_activate,
    )
    return engine

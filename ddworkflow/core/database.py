"""Database engine and session management for the process engine."""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool


def _resolve_sqlite_path(url: URL) -> None:
    """Ensure the parent directory for a SQLite database exists."""

    database = url.database
    if not database or database == ":memory:":
        return
    Path(database).expanduser().resolve().parent.mkdir(parents=True, exist_ok=True)


def create_database_engine(
    url: URL | str,
    *,
    pool_min: int,
    pool_max: int,
    echo: bool = False,
) -> Engine:
    """Create the engine's connection pool.

    ``pool_min`` connections are kept open; up to ``pool_max`` may be in use.
    """

    url = make_url(url)
    if url.get_backend_name() == "sqlite":
        _resolve_sqlite_path(url)
        engine_kwargs: dict[str, object] = {
            "echo": echo,
            "connect_args": {"check_same_thread": False},
        }
        if not url.database or url.database == ":memory:":
            engine_kwargs["poolclass"] = StaticPool
        return create_engine(url, **engine_kwargs)

    # QueuePool treats pool_size=0 as unbounded.
    pool_size = max(pool_min, 1)
    return create_engine(
        url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=pool_size,
        max_overflow=max(pool_max - pool_size, 0),
    )


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
        class_=Session,
        expire_on_commit=False,
    )


@contextmanager
def session_scope(factory: sessionmaker[Session]) -> Iterator[Session]:
    """Provide a transactional scope around a unit of engine work."""

    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()

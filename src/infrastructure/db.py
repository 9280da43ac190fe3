"""Database infrastructure for the planner.

This module creates and reuses the SQLAlchemy engine connected to the
planner database. It belongs to the infrastructure layer because it deals
with external systems (PostgreSQL or a local SQLite file).
"""

from pathlib import Path
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import QueuePool, StaticPool

from src.application.ports.database import DatabaseEnginePort
from src.infrastructure.schema import ensure_schema
from src.infrastructure.settings import PlannerSettings


def _ensure_sqlite_dir(db_url: str) -> None:
    """Create the parent directory of a file-backed SQLite database."""
    url = make_url(db_url)
    if url.get_backend_name() != "sqlite":
        return
    if url.database in (None, "", ":memory:"):
        return
    Path(url.database).parent.mkdir(parents=True, exist_ok=True)


def _create_engine(db_url: str) -> Engine:
    """Create a configured SQLAlchemy engine.

    Args:
        db_url: Fully qualified database URL (including driver and credentials)

    Returns:
        Engine: Engine with a small health-checked pool for server databases,
        or a SQLite engine (single shared connection when in memory).
    """
    if db_url.startswith("sqlite"):
        if db_url in ("sqlite://", "sqlite:///:memory:"):
            return create_engine(
                db_url,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
                future=True,
            )
        return create_engine(db_url, future=True)
    return create_engine(
        db_url,
        poolclass=QueuePool,
        pool_size=5,
        max_overflow=5,
        pool_pre_ping=True,
        future=True,
    )


_planner_engine: Optional[Engine] = None


def get_planner_engine() -> Engine:
    """Get a singleton SQLAlchemy engine for the planner database.

    The URL comes from PlannerSettings; the schema is created on first use.

    Returns:
        Engine: Lazily initialized engine connected to the planner storage.
    """
    global _planner_engine
    if _planner_engine is None:
        db_url = PlannerSettings.from_env().db_url
        _ensure_sqlite_dir(db_url)
        engine = _create_engine(db_url)
        ensure_schema(engine)
        _planner_engine = engine
    return _planner_engine


class SqlAlchemyDatabaseEngineAdapter(DatabaseEnginePort):
    """DatabaseEnginePort implementation backed by SQLAlchemy engines.

    The adapter hides configuration details (environment variables, pooling)
    behind the port so adapters can depend only on the protocol.
    """

    def get_planner_engine(self) -> Engine:
        """Get the engine for the planner database.

        Returns:
            Engine: SQLAlchemy engine connected to the planner storage.
        """
        return get_planner_engine()


class StaticEngineAdapter(DatabaseEnginePort):
    """DatabaseEnginePort returning an engine supplied by the caller."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def get_planner_engine(self) -> Engine:
        return self._engine


__all__ = [
    "get_planner_engine",
    "SqlAlchemyDatabaseEngineAdapter",
    "StaticEngineAdapter",
]

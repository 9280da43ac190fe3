"""Database port for the planner storage.

Infrastructure implementations provide the concrete SQLAlchemy engine; the
local adapters for plans, actuals and settings depend only on this protocol.
"""

from typing import Protocol

from sqlalchemy.engine import Engine


class DatabaseEnginePort(Protocol):
    """Port exposing the planner database engine."""

    def get_planner_engine(self) -> Engine:
        """Get the engine for the planner database.

        Returns:
            Engine: SQLAlchemy engine connected to the planner storage.
        """


__all__ = ["DatabaseEnginePort"]

"""Scoped key-value store persisted in the planner database."""

from sqlalchemy import text

from src.application.ports.database import DatabaseEnginePort
from src.application.ports.key_value_store import KeyValueStorePort
from src.infrastructure.sql_errors import translate_errors

SELECT_VALUE_SQL = text(
    "SELECT value FROM key_value_store WHERE scope = :scope AND key = :key"
)

DELETE_VALUE_SQL = text(
    "DELETE FROM key_value_store WHERE scope = :scope AND key = :key"
)

INSERT_VALUE_SQL = text(
    """
    INSERT INTO key_value_store (scope, key, value)
    VALUES (:scope, :key, :value)
    """
)


class SqlAlchemyKeyValueStore(KeyValueStorePort):
    """Key-value store whose keys are namespaced by a scope."""

    def __init__(self, db_port: DatabaseEnginePort, scope: str = "planner") -> None:
        """Initialize the store.

        Args:
            db_port: Port providing access to the planner engine.
            scope: Namespace isolating this store's keys.
        """
        self._db_port = db_port
        self._scope = scope

    def get(self, key: str) -> str | None:
        engine = self._db_port.get_planner_engine()
        with translate_errors(f"Reading '{key}'"):
            with engine.connect() as conn:
                return conn.execute(
                    SELECT_VALUE_SQL,
                    {"scope": self._scope, "key": key},
                ).scalar_one_or_none()

    def set(self, key: str, value: str) -> None:
        params = {"scope": self._scope, "key": key, "value": value}
        engine = self._db_port.get_planner_engine()
        with translate_errors(f"Writing '{key}'"):
            with engine.begin() as conn:
                conn.execute(DELETE_VALUE_SQL, params)
                conn.execute(INSERT_VALUE_SQL, params)

    def delete(self, key: str) -> None:
        engine = self._db_port.get_planner_engine()
        with translate_errors(f"Deleting '{key}'"):
            with engine.begin() as conn:
                conn.execute(
                    DELETE_VALUE_SQL,
                    {"scope": self._scope, "key": key},
                )


__all__ = ["SqlAlchemyKeyValueStore"]

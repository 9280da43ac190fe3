"""Settings helpers for infrastructure adapters."""

from dataclasses import dataclass
import os

import dotenv

from src.domain.constants import DEFAULT_GRID_MONTHS
from src.infrastructure.logging.logger import get_app_logger
from src.utils.utils import get_project_root


@dataclass(frozen=True)
class PlannerSettings:
    """Settings for the planner storage and views.

    Attributes:
        db_url: SQLAlchemy URL of the planner database.
        storage_scope: Namespace of the local key-value store.
        grid_months: Number of month columns in the plan grid.
    """

    db_url: str
    storage_scope: str = "planner"
    grid_months: int = DEFAULT_GRID_MONTHS

    @classmethod
    def from_env(cls) -> "PlannerSettings":
        """Build settings from environment variables.

        Values from a local .env file are loaded first; variables already
        set in the environment take precedence.

        Returns:
            PlannerSettings: Settings sourced from environment variables.
        """
        dotenv.load_dotenv()
        logger = get_app_logger()
        db_url = os.getenv("PLANNER_DB_URL") or cls._default_db_url()
        scope = os.getenv("PLANNER_STORAGE_SCOPE", "planner").strip() or "planner"
        grid_months = cls._parse_grid_months(
            os.getenv("PLANNER_GRID_MONTHS"),
            logger=logger,
        )
        return cls(
            db_url=db_url,
            storage_scope=scope,
            grid_months=grid_months,
        )

    @staticmethod
    def _default_db_url() -> str:
        return f"sqlite:///{get_project_root() / 'data' / 'planner.db'}"

    @staticmethod
    def _parse_grid_months(raw_value: str | None, logger) -> int:
        """Parse the grid width, falling back to the default.

        Args:
            raw_value: Raw environment value.
            logger: Logger used for warnings.

        Returns:
            int: Positive number of month columns.
        """
        if raw_value is None or not raw_value.strip():
            return DEFAULT_GRID_MONTHS
        try:
            value = int(raw_value)
        except ValueError:
            value = 0
        if value <= 0:
            logger.warning(
                f"Invalid PLANNER_GRID_MONTHS={raw_value!r}; "
                f"using {DEFAULT_GRID_MONTHS}"
            )
            return DEFAULT_GRID_MONTHS
        return value


__all__ = ["PlannerSettings"]

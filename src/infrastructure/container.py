"""Composition root for wiring infrastructure adapters."""

from typing import Optional

from src.application.ports.database import DatabaseEnginePort
from src.application.ports.finance_service import FinanceServicePort
from src.application.ports.key_value_store import KeyValueStorePort
from src.application.use_cases.active_plan import ActivePlanSelector
from src.application.use_cases.grid_editing import BuildPlanGridUseCase
from src.application.use_cases.period_manager import MonthlyPeriodManager
from src.application.use_cases.reconcile_period import ReconcilePeriodUseCase
from src.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from src.infrastructure.finance_repository import SqlAlchemyFinanceService
from src.infrastructure.key_value_store import SqlAlchemyKeyValueStore
from src.infrastructure.logging.logger import get_app_logger, get_usage_logger
from src.infrastructure.plan_repository import SqlAlchemyPlanService
from src.infrastructure.settings import PlannerSettings


def build_database_adapter() -> DatabaseEnginePort:
    """Return the database adapter instance."""
    return SqlAlchemyDatabaseEngineAdapter()


def build_plan_service(
    db_port: DatabaseEnginePort | None = None,
) -> SqlAlchemyPlanService:
    """Return the plan service backed by the planner database."""
    resolved_db = db_port or build_database_adapter()
    return SqlAlchemyPlanService(resolved_db, logger=get_app_logger())


def build_finance_service(
    db_port: DatabaseEnginePort | None = None,
) -> FinanceServicePort:
    """Return the finance service backed by the planner database."""
    resolved_db = db_port or build_database_adapter()
    return SqlAlchemyFinanceService(resolved_db, logger=get_app_logger())


def build_key_value_store(
    db_port: DatabaseEnginePort | None = None,
) -> KeyValueStorePort:
    """Return the key-value store scoped by PLANNER_STORAGE_SCOPE."""
    resolved_db = db_port or build_database_adapter()
    settings = PlannerSettings.from_env()
    return SqlAlchemyKeyValueStore(resolved_db, scope=settings.storage_scope)


def build_period_manager(
    db_port: DatabaseEnginePort | None = None,
) -> MonthlyPeriodManager:
    """Return a period manager writing through the plan service."""
    return MonthlyPeriodManager(
        build_plan_service(db_port),
        logger=get_app_logger(),
    )


def build_reconcile_use_case(
    db_port: DatabaseEnginePort | None = None,
) -> ReconcilePeriodUseCase:
    """Return the reconciliation use case wired to local adapters."""
    resolved_db = db_port or build_database_adapter()
    plan_service = build_plan_service(resolved_db)
    return ReconcilePeriodUseCase(
        MonthlyPeriodManager(plan_service, logger=get_app_logger()),
        build_finance_service(resolved_db),
        plan_service,
        logger=get_app_logger(),
    )


def build_plan_grid_use_case(
    db_port: DatabaseEnginePort | None = None,
) -> BuildPlanGridUseCase:
    """Return the grid use case wired to local adapters."""
    resolved_db = db_port or build_database_adapter()
    plan_service = build_plan_service(resolved_db)
    settings = PlannerSettings.from_env()
    return BuildPlanGridUseCase(
        MonthlyPeriodManager(plan_service, logger=get_app_logger()),
        plan_service,
        logger=get_app_logger(),
        month_count=settings.grid_months,
    )


_active_plan_selector: Optional[ActivePlanSelector] = None


def get_active_plan_selector(
    db_port: DatabaseEnginePort | None = None,
) -> ActivePlanSelector:
    """Return the process-wide active plan selector, loaded on first use."""
    global _active_plan_selector
    if _active_plan_selector is None:
        selector = ActivePlanSelector(
            build_key_value_store(db_port),
            logger=get_app_logger(),
        )
        selector.load()
        selector.subscribe(_log_active_plan_change)
        _active_plan_selector = selector
    return _active_plan_selector


def _log_active_plan_change(plan_id: str | None) -> None:
    get_usage_logger().info(f"Active plan changed to {plan_id}")


def reset_active_plan_selector() -> None:
    """Forget the process-wide selector so the next call reloads it."""
    global _active_plan_selector
    _active_plan_selector = None


__all__ = [
    "build_database_adapter",
    "build_plan_service",
    "build_finance_service",
    "build_key_value_store",
    "build_period_manager",
    "build_reconcile_use_case",
    "build_plan_grid_use_case",
    "get_active_plan_selector",
    "reset_active_plan_selector",
]

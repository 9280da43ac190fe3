"""Tests for the composition root."""

from unittest.mock import MagicMock

from src.application.use_cases.grid_editing import BuildPlanGridUseCase
from src.application.use_cases.reconcile_period import ReconcilePeriodUseCase
from src.infrastructure import container as container_module
from src.infrastructure.db import StaticEngineAdapter, _create_engine
from src.infrastructure.key_value_store import SqlAlchemyKeyValueStore
from src.infrastructure.plan_repository import SqlAlchemyPlanService
from src.infrastructure.schema import ensure_schema


def test_builders_wire_local_adapters() -> None:
    """Builders should return SQLAlchemy adapters and use cases."""
    db_port = MagicMock()

    assert isinstance(
        container_module.build_plan_service(db_port=db_port),
        SqlAlchemyPlanService,
    )
    assert isinstance(
        container_module.build_reconcile_use_case(db_port=db_port),
        ReconcilePeriodUseCase,
    )
    assert isinstance(
        container_module.build_plan_grid_use_case(db_port=db_port),
        BuildPlanGridUseCase,
    )


def test_plan_grid_width_comes_from_settings(monkeypatch) -> None:
    """The grid month count should come from PLANNER_GRID_MONTHS."""
    monkeypatch.setenv("PLANNER_GRID_MONTHS", "6")

    use_case = container_module.build_plan_grid_use_case(db_port=MagicMock())

    assert use_case._month_count == 6


def test_key_value_store_uses_configured_scope(monkeypatch) -> None:
    """The store scope should come from PLANNER_STORAGE_SCOPE."""
    monkeypatch.setenv("PLANNER_STORAGE_SCOPE", "household")

    store = container_module.build_key_value_store(db_port=MagicMock())

    assert isinstance(store, SqlAlchemyKeyValueStore)
    assert store._scope == "household"


def test_active_plan_selector_is_process_wide(monkeypatch) -> None:
    """The selector is loaded once and shared across callers."""
    engine = _create_engine("sqlite://")
    ensure_schema(engine)
    db_port = StaticEngineAdapter(engine)
    SqlAlchemyKeyValueStore(db_port, scope="planner").set(
        "active_plan_id",
        "household",
    )
    monkeypatch.delenv("PLANNER_STORAGE_SCOPE", raising=False)
    usage_logger = MagicMock()
    monkeypatch.setattr(container_module, "get_usage_logger", lambda: usage_logger)
    container_module.reset_active_plan_selector()

    selector = container_module.get_active_plan_selector(db_port=db_port)

    assert selector.get_active_plan_id() == "household"
    assert container_module.get_active_plan_selector() is selector
    selector.set_active_plan("business")
    usage_logger.info.assert_called_once_with("Active plan changed to business")
    container_module.reset_active_plan_selector()

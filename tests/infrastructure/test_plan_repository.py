"""Tests for the SQLAlchemy-backed plan service."""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from src.application.use_cases.period_manager import (
    MonthlyPeriodManager,
    build_seed_items,
)
from src.domain.errors import (
    ConflictError,
    PeriodItemNotFoundError,
    PeriodNotFoundError,
    PlanNotFoundError,
    UpstreamUnavailableError,
    ValidationError,
)
from src.domain.models import (
    Category,
    CategoryGroup,
    Item,
    ItemType,
    PeriodSeedItem,
    Plan,
    PlanSourceType,
    PlanStatus,
)
from src.infrastructure.db import StaticEngineAdapter, _create_engine
from src.infrastructure.plan_repository import SqlAlchemyPlanService
from src.infrastructure.schema import ensure_schema


def _service() -> SqlAlchemyPlanService:
    engine = _create_engine("sqlite://")
    ensure_schema(engine)
    return SqlAlchemyPlanService(StaticEngineAdapter(engine), logger=MagicMock())


def _plan() -> Plan:
    return Plan(
        id="household",
        name="Household",
        currency_code="EUR",
        source_type=PlanSourceType.IMPORTED_SPREADSHEET,
        status=PlanStatus.ACTIVE,
        description="Shared budget",
        category_groups=[
            CategoryGroup(
                id="essentials",
                name="Essentials",
                color="#2f855a",
                target_percent=50.0,
                categories=[
                    Category(
                        id="food",
                        name="Food",
                        icon="cart",
                        items=[
                            Item("groceries", "Groceries", ItemType.BUDGET, 5000, "food"),
                            Item("dining", "Dining", ItemType.BUDGET, 2000, "food"),
                        ],
                    )
                ],
            ),
            CategoryGroup(
                id="earnings",
                name="Earnings",
                color=None,
                target_percent=0.0,
                categories=[
                    Category(
                        id="salary",
                        name="Salary",
                        items=[Item("pay", "Pay", ItemType.INCOME, 100000, "salary")],
                    )
                ],
            ),
        ],
    )


def test_save_and_get_plan_preserve_hierarchy():
    """A saved plan is read back with its order and attributes."""
    service = _service()
    plan = _plan()

    service.save_plan(plan)

    assert service.get_plan("household") == plan


def test_save_plan_replaces_previous_snapshot():
    """Saving again replaces the stored hierarchy."""
    service = _service()
    service.save_plan(_plan())
    smaller = Plan(
        id="household",
        name="Household",
        currency_code="EUR",
        source_type=PlanSourceType.MANUAL,
        status=PlanStatus.DRAFT,
    )

    service.save_plan(smaller)

    assert service.get_plan("household") == smaller


def test_get_plan_unknown_raises():
    """Unknown plan ids raise PlanNotFoundError."""
    with pytest.raises(PlanNotFoundError):
        _service().get_plan("missing")


def test_create_period_and_conflict_on_same_key():
    """The plan/year/month key can only be created once."""
    service = _service()
    seeds = build_seed_items(_plan())

    period = service.create_period("household", 2025, 3, seeds)

    assert [item.item_id for item in period.items] == [
        "groceries",
        "dining",
        "pay",
    ]
    assert all(item.actual_minor == 0 for item in period.items)
    assert service.get_period("household", 2025, 3) == period
    assert service.get_period_by_id(period.id) == period
    with pytest.raises(ConflictError):
        service.create_period("household", 2025, 3, seeds)


def test_get_period_missing_raises():
    """Missing periods raise PeriodNotFoundError by key and by id."""
    service = _service()

    with pytest.raises(PeriodNotFoundError):
        service.get_period("household", 2025, 3)
    with pytest.raises(PeriodNotFoundError):
        service.get_period_by_id("missing")


def test_update_period_item_persists_amount():
    """A single item update is stored and returned."""
    service = _service()
    period = service.create_period(
        "household", 2025, 3, build_seed_items(_plan())
    )
    groceries = period.items[0]

    updated = service.update_period_item(groceries.id, 6500)

    assert updated.budgeted_minor == 6500
    stored = service.get_period_by_id(period.id)
    assert stored.find_item(groceries.id).budgeted_minor == 6500
    with pytest.raises(PeriodItemNotFoundError):
        service.update_period_item("missing", 1)


def test_update_period_item_refuses_locked_period():
    """Locked periods reject item edits."""
    service = _service()
    period = service.create_period(
        "household", 2025, 3, build_seed_items(_plan())
    )
    service.set_period_locked(period.id)

    with pytest.raises(ValidationError, match="locked"):
        service.update_period_item(period.items[0].id, 1)

    assert service.get_period_by_id(period.id).is_locked is True


def test_update_period_items_is_all_or_nothing():
    """An unknown item id rolls back every amount of the batch."""
    service = _service()
    period = service.create_period(
        "household", 2025, 3, build_seed_items(_plan())
    )
    groceries, dining, _ = period.items

    with pytest.raises(PeriodItemNotFoundError):
        service.update_period_items(
            period.id,
            {groceries.id: 1, "foreign": 2},
        )
    unchanged = service.get_period_by_id(period.id)
    assert unchanged.find_item(groceries.id).budgeted_minor == 5000

    updated = service.update_period_items(
        period.id,
        {groceries.id: 4500, dining.id: 0},
    )
    assert [item.budgeted_minor for item in updated.items[:2]] == [4500, 0]


def test_update_period_items_refuses_locked_period():
    """A batch update on a locked period writes nothing."""
    service = _service()
    period = service.create_period(
        "household", 2025, 3, build_seed_items(_plan())
    )
    groceries = period.items[0]
    service.set_period_locked(period.id)

    with pytest.raises(ValidationError, match="locked"):
        service.update_period_items(period.id, {groceries.id: 1})

    stored = service.get_period_by_id(period.id)
    assert stored.find_item(groceries.id).budgeted_minor == 5000


def test_update_period_items_refuses_formula_items():
    """Formula items reject batch writes and roll back the whole batch."""
    service = _service()
    seeds = [
        *build_seed_items(_plan()),
        PeriodSeedItem(
            item_id="savings",
            item_name="Savings",
            category_name="Savings",
            item_type=ItemType.GOAL,
            budgeted_minor=1200,
            is_formula=True,
        ),
    ]
    period = service.create_period("household", 2025, 3, seeds)
    groceries = period.items[0]
    savings = period.items_by_item_id()["savings"]
    assert savings.is_formula is True

    with pytest.raises(ValidationError, match="formula"):
        service.update_period_items(
            period.id,
            {groceries.id: 1, savings.id: 2},
        )

    stored = service.get_period_by_id(period.id)
    assert stored.find_item(groceries.id).budgeted_minor == 5000
    assert stored.find_item(savings.id).budgeted_minor == 1200


def test_database_failures_become_upstream_errors():
    """Driver failures are reported as UpstreamUnavailableError."""
    db_port = MagicMock()
    db_port.get_planner_engine.return_value.connect.side_effect = (
        OperationalError("SELECT 1", {}, Exception("unreachable"))
    )
    service = SqlAlchemyPlanService(db_port, logger=MagicMock())

    with pytest.raises(UpstreamUnavailableError):
        service.get_plan("household")


def test_period_manager_copy_forward_over_sqlite():
    """Copying March into April overwrites April's budgets only."""
    service = _service()
    service.save_plan(_plan())
    manager = MonthlyPeriodManager(service, logger=MagicMock())
    march = manager.get_or_create_period("household", 2025, 3)
    april = manager.get_or_create_period("household", 2025, 4)
    manager.update_period_item(april.items[0].id, 4000)
    manager.update_period_item(march.items[1].id, 0)

    result = manager.copy_forward(march.id, "household", 2025, 4)

    amounts = {item.item_id: item.budgeted_minor for item in result.items}
    assert amounts == {"groceries": 5000, "dining": 0, "pay": 100000}
    assert march.was_created is True
    reread = manager.get_or_create_period("household", 2025, 4)
    assert reread.was_created is False
    assert reread.items == result.items

"""End-to-end month of the Household plan over an in-memory database."""

from datetime import date
from unittest.mock import MagicMock

import pytest

from src.application.use_cases.period_manager import MonthlyPeriodManager
from src.application.use_cases.reconcile_period import ReconcilePeriodUseCase
from src.domain.models import (
    Category,
    CategoryGroup,
    Item,
    ItemType,
    Plan,
    PlanSourceType,
    PlanStatus,
    ThresholdStatus,
)
from src.infrastructure.db import StaticEngineAdapter, _create_engine
from src.infrastructure.finance_repository import SqlAlchemyFinanceService
from src.infrastructure.plan_repository import SqlAlchemyPlanService
from src.infrastructure.schema import ensure_schema


@pytest.fixture()
def household():
    engine = _create_engine("sqlite://")
    ensure_schema(engine)
    db_port = StaticEngineAdapter(engine)
    logger = MagicMock()
    plan_service = SqlAlchemyPlanService(db_port, logger=logger)
    plan_service.save_plan(
        Plan(
            id="household-1",
            name="Household",
            currency_code="EUR",
            source_type=PlanSourceType.MANUAL,
            status=PlanStatus.ACTIVE,
            category_groups=[
                CategoryGroup(
                    id="necessities",
                    name="Necessities",
                    color="#c05621",
                    target_percent=50,
                    categories=[
                        Category(
                            id="groceries",
                            name="Groceries",
                            items=[
                                Item(
                                    "supermarket",
                                    "Supermarket",
                                    ItemType.BUDGET,
                                    40000,
                                    "groceries",
                                )
                            ],
                        )
                    ],
                )
            ],
        )
    )
    finance_service = SqlAlchemyFinanceService(db_port, logger=logger)
    manager = MonthlyPeriodManager(plan_service, logger=logger)
    return manager, plan_service, finance_service, logger


def test_first_visit_creates_period_once(household):
    """The first visit creates the period; the second reuses it."""
    manager, _, _, _ = household

    first = manager.get_or_create_period("household-1", 2025, 3)
    second = manager.get_or_create_period("household-1", 2025, 3)

    assert first.was_created is True
    assert second.was_created is False
    assert first.id == second.id
    assert [(i.budgeted_minor, i.actual_minor) for i in first.items] == [
        (40000, 0)
    ]


def test_overspent_month_reconciles_to_danger(household):
    """45000 spent on a 40000 budget is 112.5% and over by 5000."""
    manager, plan_service, finance_service, logger = household
    finance_service.record_transaction(
        "household-1", "supermarket", 30000, date(2025, 3, 4)
    )
    finance_service.record_transaction(
        "household-1", "supermarket", 15000, date(2025, 3, 20)
    )
    use_case = ReconcilePeriodUseCase(
        manager,
        finance_service,
        plan_service,
        logger=logger,
    )

    result = use_case.execute("household-1", 2025, 3)

    assert result.period.was_created is True
    assert result.summary.usage_percent == pytest.approx(112.5)
    assert result.summary.per_item[0].status is ThresholdStatus.DANGER
    assert result.summary.remaining.label == "over by 5000"
    assert result.groups[0].name == "Necessities"
    assert result.groups[0].progress_percent == 100.0


def test_copy_forward_resets_actuals(household):
    """Copied budgets keep their amount while actuals start from zero."""
    manager, plan_service, finance_service, _ = household
    march = manager.get_or_create_period("household-1", 2025, 3)
    manager.update_period_item(march.items[0].id, 5000)
    finance_service.record_transaction(
        "household-1", "supermarket", 4000, date(2025, 3, 10)
    )

    result = manager.copy_forward(march.id, "household-1", 2025, 4)

    april_item = result.items[0]
    assert april_item.budgeted_minor == 5000
    assert april_item.actual_minor == 0
    assert finance_service.get_actuals("household-1", 2025, 4) == {}

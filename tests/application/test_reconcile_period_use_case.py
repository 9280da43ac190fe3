"""Tests for the ReconcilePeriodUseCase."""

from unittest.mock import MagicMock

import pytest

from src.application.use_cases.reconcile_period import ReconcilePeriodUseCase
from src.domain.errors import UpstreamUnavailableError
from src.domain.models import (
    Category,
    CategoryGroup,
    Item,
    ItemType,
    MonthlyPeriod,
    PeriodItem,
    Plan,
    PlanSourceType,
    PlanStatus,
    ThresholdStatus,
)


def _plan() -> Plan:
    return Plan(
        id="household",
        name="Household",
        currency_code="EUR",
        source_type=PlanSourceType.MANUAL,
        status=PlanStatus.ACTIVE,
        category_groups=[
            CategoryGroup(
                id="essentials",
                name="Essentials",
                color="#2f855a",
                target_percent=50,
                categories=[
                    Category(
                        id="housing",
                        name="Housing",
                        items=[Item("rent", "Rent", ItemType.BUDGET, 30000, "housing")],
                    ),
                    Category(
                        id="food",
                        name="Food",
                        items=[
                            Item("groceries", "Groceries", ItemType.BUDGET, 10000, "food")
                        ],
                    ),
                ],
            ),
            CategoryGroup(
                id="earnings",
                name="Earnings",
                color=None,
                target_percent=0,
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


def _period() -> MonthlyPeriod:
    def _item(item_id, item_type, amount):
        return PeriodItem(
            id=f"pi-{item_id}",
            item_id=item_id,
            item_name=item_id.title(),
            category_name="",
            item_type=item_type,
            budgeted_minor=amount,
        )

    return MonthlyPeriod(
        id="period-3",
        plan_id="household",
        year=2025,
        month=3,
        items=[
            _item("rent", ItemType.BUDGET, 30000),
            _item("groceries", ItemType.BUDGET, 10000),
            _item("pay", ItemType.INCOME, 100000),
        ],
    )


def _build(actuals):
    period_manager = MagicMock()
    period_manager.get_or_create_period.return_value = _period()
    finance_service = MagicMock()
    finance_service.get_actuals.return_value = actuals
    plan_service = MagicMock()
    plan_service.get_plan.return_value = _plan()
    logger = MagicMock()
    use_case = ReconcilePeriodUseCase(
        period_manager,
        finance_service,
        plan_service,
        logger=logger,
    )
    return use_case, logger


def test_execute_reconciles_household_month():
    """Groceries overspending pushes the month over budget."""
    use_case, logger = _build(
        {"rent": 30000, "groceries": 15000, "pay": 100000}
    )

    result = use_case.execute("household", 2025, 3)

    assert result.summary.total_budgeted == 40000
    assert result.summary.total_actual == 45000
    assert result.summary.usage_percent == pytest.approx(112.5)
    assert result.summary.status is ThresholdStatus.DANGER
    assert result.summary.remaining.label == "over by 5000"
    assert [group.group_id for group in result.groups] == ["essentials"]
    assert result.plan_totals.surplus == 60000
    assert result.currency_code == "EUR"
    assert result.period.find_item("pi-groceries").actual_minor == 15000
    logger.info.assert_called_once()


def test_execute_warns_about_unknown_items():
    """Actuals for items absent from the period are ignored with a warning."""
    use_case, logger = _build({"rent": 1000, "old-item": 500})

    result = use_case.execute("household", 2025, 3)

    assert result.summary.total_actual == 1000
    logger.warning.assert_called_once()


def test_execute_propagates_finance_failures():
    """A finance outage surfaces as UpstreamUnavailableError."""
    use_case, _ = _build({})
    use_case._finance_service.get_actuals.side_effect = (
        UpstreamUnavailableError("finance down")
    )

    with pytest.raises(UpstreamUnavailableError):
        use_case.execute("household", 2025, 3)

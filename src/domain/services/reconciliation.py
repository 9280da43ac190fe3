"""Reconciliation of budgeted amounts against actual activity."""

from collections.abc import Mapping
from dataclasses import replace

from src.domain.constants import (
    AGGREGATE_THRESHOLDS,
    ITEM_THRESHOLDS,
    ThresholdTable,
)
from src.domain.errors import ValidationError
from src.domain.models.period import MonthlyPeriod, PeriodItem
from src.domain.models.plan import ItemType, Plan
from src.domain.models.reconciliation import (
    GroupRollup,
    ReconciledItem,
    ReconciliationResult,
    RemainingBudget,
    ThresholdStatus,
)
from src.domain.services.hierarchy import group_items


def usage_ratio(actual: float, budgeted: float) -> float:
    """Return actual / budgeted, or 0.0 when nothing is budgeted."""
    if budgeted <= 0:
        return 0.0
    return actual / budgeted


def classify_ratio(ratio: float, table: ThresholdTable) -> ThresholdStatus:
    """Classify a usage ratio against a threshold table.

    Args:
        ratio: Actual over budgeted.
        table: Band upper bounds to apply.

    Returns:
        ThresholdStatus: success, normal, warning or danger.
    """
    if ratio != ratio:
        return ThresholdStatus.NORMAL
    if ratio <= table.success_max:
        return ThresholdStatus.SUCCESS
    if ratio <= table.normal_max:
        return ThresholdStatus.NORMAL
    if ratio <= table.warning_max:
        return ThresholdStatus.WARNING
    return ThresholdStatus.DANGER


def classify(
    actual: float,
    budgeted: float,
    table: ThresholdTable = ITEM_THRESHOLDS,
) -> ThresholdStatus:
    """Classify actual versus budgeted amounts."""
    return classify_ratio(usage_ratio(actual, budgeted), table)


def remaining_budget(budgeted: int, actual: int) -> RemainingBudget:
    """Return budget left, reporting overspend as a positive 'over' amount."""
    difference = budgeted - actual
    if difference < 0:
        return RemainingBudget(amount_minor=-difference, is_over=True)
    return RemainingBudget(amount_minor=difference, is_over=False)


def reconcile(period: MonthlyPeriod) -> ReconciliationResult:
    """Reconcile a period's budgeted and actual amounts.

    Income items are excluded from the totals and from the per-item list.

    Args:
        period: Period whose actuals are already refreshed.

    Returns:
        ReconciliationResult: Totals, usage percent, status and per-item rows.

    Raises:
        ValidationError: If an amount is negative or not an integer.
    """
    per_item: list[ReconciledItem] = []
    total_budgeted = 0
    total_actual = 0
    for item in period.items:
        _validate_minor(item.budgeted_minor, item, "budgeted")
        _validate_minor(item.actual_minor, item, "actual")
        if item.item_type is ItemType.INCOME:
            continue
        total_budgeted += item.budgeted_minor
        total_actual += item.actual_minor
        per_item.append(_reconcile_item(item))

    return ReconciliationResult(
        total_budgeted=total_budgeted,
        total_actual=total_actual,
        usage_percent=usage_ratio(total_actual, total_budgeted) * 100,
        status=classify(total_actual, total_budgeted, AGGREGATE_THRESHOLDS),
        remaining=remaining_budget(total_budgeted, total_actual),
        per_item=per_item,
    )


def apply_actuals(
    period: MonthlyPeriod,
    actuals: Mapping[str, int],
) -> MonthlyPeriod:
    """Return a copy of the period with actuals from a finance feed.

    Args:
        period: Period to refresh.
        actuals: Actual amounts in minor units keyed by plan item id; items
            absent from the mapping have no activity.

    Raises:
        ValidationError: If an actual amount is negative or not an integer.
    """
    items = []
    for item in period.items:
        actual = actuals.get(item.item_id, 0)
        _validate_minor(actual, item, "actual")
        items.append(replace(item, actual_minor=actual))
    return replace(period, items=items)


def rollup_groups(plan: Plan, period: MonthlyPeriod) -> list[GroupRollup]:
    """Roll a period's spending up to the plan's category groups.

    Groups without any budgeted spending are omitted.

    Args:
        plan: Plan providing the group structure.
        period: Period providing budgeted and actual amounts.

    Returns:
        list[GroupRollup]: One roll-up per group with a budget.
    """
    by_item_id = period.items_by_item_id()
    rollups: list[GroupRollup] = []
    for group in plan.category_groups:
        budgeted = 0
        actual = 0
        for item in group_items(group):
            period_item = by_item_id.get(item.id)
            if period_item is None or item.is_income:
                continue
            budgeted += period_item.budgeted_minor
            actual += period_item.actual_minor
        if budgeted <= 0:
            continue
        usage_percent = usage_ratio(actual, budgeted) * 100
        rollups.append(
            GroupRollup(
                group_id=group.id,
                name=group.name,
                color=group.color,
                target_percent=group.target_percent,
                budgeted_minor=budgeted,
                actual_minor=actual,
                usage_percent=usage_percent,
                progress_percent=min(usage_percent, 100.0),
                status=classify(actual, budgeted, ITEM_THRESHOLDS),
            )
        )
    return rollups


def _reconcile_item(item: PeriodItem) -> ReconciledItem:
    return ReconciledItem(
        period_item_id=item.id,
        item_id=item.item_id,
        item_name=item.item_name,
        category_name=item.category_name,
        item_type=item.item_type,
        budgeted_minor=item.budgeted_minor,
        actual_minor=item.actual_minor,
        usage_percent=usage_ratio(item.actual_minor, item.budgeted_minor) * 100,
        status=classify(item.actual_minor, item.budgeted_minor, ITEM_THRESHOLDS),
        remaining=remaining_budget(item.budgeted_minor, item.actual_minor),
    )


def _validate_minor(amount, item: PeriodItem, label: str) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValidationError(
            f"Period item '{item.id}' {label} amount must be integer minor "
            f"units, got {amount!r}"
        )
    if amount < 0:
        raise ValidationError(
            f"Period item '{item.id}' {label} amount must be non-negative, "
            f"got {amount}"
        )


__all__ = [
    "usage_ratio",
    "classify_ratio",
    "classify",
    "remaining_budget",
    "reconcile",
    "apply_actuals",
    "rollup_groups",
]

"""Read-only operations over the plan hierarchy."""

from logging import Logger
from numbers import Real

from src.domain.errors import ValidationError
from src.domain.models.plan import (
    ITEM_TYPE_TABS,
    CategoryGroup,
    Item,
    ItemType,
    Plan,
    PlanTotals,
    TargetTab,
)


def all_items(plan: Plan) -> list[Item]:
    """Flatten a plan into its items, in declared order."""
    return [
        item
        for group in plan.category_groups
        for category in group.categories
        for item in category.items
    ]


def group_items(group: CategoryGroup) -> list[Item]:
    """Flatten a category group into its items."""
    return [item for category in group.categories for item in category.items]


def total_budgeted_group(group: CategoryGroup) -> int:
    """Return the budgeted spending of a group in minor units.

    Income items are excluded.
    """
    return sum(
        item.budgeted_minor for item in group_items(group) if not item.is_income
    )


def total_budgeted_plan(plan: Plan) -> int:
    """Return the budgeted spending of a plan in minor units."""
    return sum(total_budgeted_group(group) for group in plan.category_groups)


def compute_plan_totals(plan: Plan) -> PlanTotals:
    """Compute income and expense totals of a plan.

    Args:
        plan: Plan snapshot.

    Returns:
        PlanTotals: Income, expenses and derived surplus in minor units.
    """
    total_income = 0
    total_expenses = 0
    for item in all_items(plan):
        if item.is_income:
            total_income += item.budgeted_minor
        else:
            total_expenses += item.budgeted_minor
    return PlanTotals(total_income=total_income, total_expenses=total_expenses)


def items_for_tab(plan: Plan, tab: TargetTab) -> list[Item]:
    """Return the items of a plan displayed under a feature tab."""
    return [
        item for item in all_items(plan) if ITEM_TYPE_TABS[item.item_type] is tab
    ]


def validate_plan(plan: Plan, logger: Logger) -> None:
    """Validate structural invariants of a plan.

    Target percents summing above 100 are advisory and only logged.

    Args:
        plan: Plan snapshot to validate.
        logger: Logger receiving advisory warnings.

    Raises:
        ValidationError: On duplicate item ids, negative amounts, invalid
            target percents or mismatched category back-references.
    """
    seen: set[str] = set()
    target_sum = 0.0
    for group in plan.category_groups:
        percent = group.target_percent
        if isinstance(percent, bool) or not isinstance(percent, Real):
            raise ValidationError(
                f"Group '{group.name}' target percent must be numeric, "
                f"got {percent!r}"
            )
        if percent != percent or percent < 0:
            raise ValidationError(
                f"Group '{group.name}' target percent must be non-negative, "
                f"got {percent}"
            )
        target_sum += float(percent)
        for category in group.categories:
            for item in category.items:
                if item.id in seen:
                    raise ValidationError(
                        f"Duplicate item id '{item.id}' in plan '{plan.id}'"
                    )
                seen.add(item.id)
                if not isinstance(item.item_type, ItemType):
                    raise ValidationError(
                        f"Item '{item.id}' has unknown type {item.item_type!r}"
                    )
                _validate_amount(item)
                if item.category_id != category.id:
                    raise ValidationError(
                        f"Item '{item.id}' references category "
                        f"'{item.category_id}' but belongs to '{category.id}'"
                    )
    if target_sum > 100:
        logger.warning(
            f"Plan {plan.id} group targets sum to {target_sum:g}% (over 100%)"
        )


def _validate_amount(item: Item) -> None:
    amount = item.budgeted_minor
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValidationError(
            f"Item '{item.id}' budgeted amount must be integer minor units, "
            f"got {amount!r}"
        )
    if amount < 0:
        raise ValidationError(
            f"Item '{item.id}' budgeted amount must be non-negative, got {amount}"
        )


__all__ = [
    "all_items",
    "group_items",
    "total_budgeted_group",
    "total_budgeted_plan",
    "compute_plan_totals",
    "items_for_tab",
    "validate_plan",
]

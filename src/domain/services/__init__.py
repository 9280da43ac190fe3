"""Domain services package."""

from .calendar import (
    YearMonth,
    generate_months,
    generate_year_months,
    month_name,
    month_token,
    next_month,
    parse_month_token,
    previous_month,
    validate_year_month,
)
from .grid import build_plan_rows, project_grid, recompute_totals
from .hierarchy import (
    all_items,
    compute_plan_totals,
    items_for_tab,
    total_budgeted_group,
    total_budgeted_plan,
    validate_plan,
)
from .reconciliation import (
    apply_actuals,
    classify,
    classify_ratio,
    reconcile,
    remaining_budget,
    rollup_groups,
    usage_ratio,
)

__all__ = [
    "YearMonth",
    "generate_months",
    "generate_year_months",
    "month_name",
    "month_token",
    "next_month",
    "parse_month_token",
    "previous_month",
    "validate_year_month",
    "build_plan_rows",
    "project_grid",
    "recompute_totals",
    "all_items",
    "compute_plan_totals",
    "items_for_tab",
    "total_budgeted_group",
    "total_budgeted_plan",
    "validate_plan",
    "apply_actuals",
    "classify",
    "classify_ratio",
    "reconcile",
    "remaining_budget",
    "rollup_groups",
    "usage_ratio",
]

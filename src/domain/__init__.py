"""Domain package for budget plans, periods and reconciliation."""

from .constants import AGGREGATE_THRESHOLDS, ITEM_THRESHOLDS, ThresholdTable
from .errors import (
    ConflictError,
    NotFoundError,
    PlannerError,
    SourcePeriodNotFoundError,
    UpstreamUnavailableError,
    ValidationError,
)
from .models import (
    Category,
    CategoryGroup,
    Item,
    ItemType,
    MonthlyPeriod,
    PeriodItem,
    Plan,
    ThresholdStatus,
)
from .services import (
    all_items,
    next_month,
    previous_month,
    project_grid,
    reconcile,
    total_budgeted_group,
    total_budgeted_plan,
)

__all__ = [
    "AGGREGATE_THRESHOLDS",
    "ITEM_THRESHOLDS",
    "ThresholdTable",
    "ConflictError",
    "NotFoundError",
    "PlannerError",
    "SourcePeriodNotFoundError",
    "UpstreamUnavailableError",
    "ValidationError",
    "Category",
    "CategoryGroup",
    "Item",
    "ItemType",
    "MonthlyPeriod",
    "PeriodItem",
    "Plan",
    "ThresholdStatus",
    "all_items",
    "next_month",
    "previous_month",
    "project_grid",
    "reconcile",
    "total_budgeted_group",
    "total_budgeted_plan",
]

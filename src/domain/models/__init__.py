"""Domain models package."""

from .grid import (
    CellKind,
    CellValue,
    FormulaValue,
    GridCell,
    GridProjection,
    GridRow,
    MonthlyValue,
    RowSpec,
    StoredValue,
)
from .period import CopyForwardResult, MonthlyPeriod, PeriodItem, PeriodSeedItem
from .plan import (
    ITEM_TYPE_TABS,
    Category,
    CategoryGroup,
    Item,
    ItemType,
    Plan,
    PlanSourceType,
    PlanStatus,
    PlanTotals,
    TargetTab,
)
from .reconciliation import (
    GroupRollup,
    ReconciledItem,
    ReconciliationResult,
    RemainingBudget,
    ThresholdStatus,
)

__all__ = [
    "CellKind",
    "CellValue",
    "FormulaValue",
    "GridCell",
    "GridProjection",
    "GridRow",
    "MonthlyValue",
    "RowSpec",
    "StoredValue",
    "CopyForwardResult",
    "MonthlyPeriod",
    "PeriodItem",
    "PeriodSeedItem",
    "ITEM_TYPE_TABS",
    "Category",
    "CategoryGroup",
    "Item",
    "ItemType",
    "Plan",
    "PlanSourceType",
    "PlanStatus",
    "PlanTotals",
    "TargetTab",
    "GroupRollup",
    "ReconciledItem",
    "ReconciliationResult",
    "RemainingBudget",
    "ThresholdStatus",
]

"""Application use cases package."""

from .active_plan import ActivePlanSelector, SetActivePlanResult
from .grid_editing import (
    BuildPlanGridUseCase,
    GridEditSession,
    PlanGridView,
    period_item_committer,
)
from .period_manager import MonthlyPeriodManager, build_seed_items
from .reconcile_period import PeriodReconciliation, ReconcilePeriodUseCase

__all__ = [
    "ActivePlanSelector",
    "SetActivePlanResult",
    "BuildPlanGridUseCase",
    "GridEditSession",
    "PlanGridView",
    "period_item_committer",
    "MonthlyPeriodManager",
    "build_seed_items",
    "PeriodReconciliation",
    "ReconcilePeriodUseCase",
]

"""Domain models for budget reconciliation results."""

from dataclasses import dataclass, field
from enum import Enum

from src.domain.models.plan import ItemType


class ThresholdStatus(str, Enum):
    """Health classification of actual versus budgeted spending."""

    SUCCESS = "success"
    NORMAL = "normal"
    WARNING = "warning"
    DANGER = "danger"

    @property
    def severity(self) -> int:
        """Return the ordinal severity, success being the lowest."""
        return _SEVERITY[self]


_SEVERITY = {
    ThresholdStatus.SUCCESS: 0,
    ThresholdStatus.NORMAL: 1,
    ThresholdStatus.WARNING: 2,
    ThresholdStatus.DANGER: 3,
}


@dataclass(frozen=True)
class RemainingBudget:
    """Budget left, or the overspend when the budget is exceeded.

    Attributes:
        amount_minor: Non-negative amount in minor units.
        is_over: True when the amount is an overspend.
    """

    amount_minor: int
    is_over: bool

    @property
    def label(self) -> str:
        """Return a short human readable description."""
        if self.is_over:
            return f"over by {self.amount_minor}"
        return f"{self.amount_minor} left"


@dataclass(frozen=True)
class ReconciledItem:
    """Budgeted versus actual state of a single period item."""

    period_item_id: str
    item_id: str
    item_name: str
    category_name: str
    item_type: ItemType
    budgeted_minor: int
    actual_minor: int
    usage_percent: float
    status: ThresholdStatus
    remaining: RemainingBudget


@dataclass(frozen=True)
class ReconciliationResult:
    """Aggregate reconciliation of a monthly period."""

    total_budgeted: int
    total_actual: int
    usage_percent: float
    status: ThresholdStatus
    remaining: RemainingBudget
    per_item: list[ReconciledItem] = field(default_factory=list)

    @property
    def is_over_budget(self) -> bool:
        """Return True when actual spending exceeds the budget."""
        return self.remaining.is_over


@dataclass(frozen=True)
class GroupRollup:
    """Per-group spending roll-up for summary widgets.

    Attributes:
        group_id: Category group identifier.
        name: Group name.
        color: Group display color.
        target_percent: Advisory target share of income.
        budgeted_minor: Sum of non-income budgeted amounts.
        actual_minor: Sum of non-income actual amounts.
        usage_percent: Actual over budgeted, in percent.
        progress_percent: usage_percent capped at 100 for progress bars.
        status: Classification with the item threshold table.
    """

    group_id: str
    name: str
    color: str | None
    target_percent: float
    budgeted_minor: int
    actual_minor: int
    usage_percent: float
    progress_percent: float
    status: ThresholdStatus


__all__ = [
    "ThresholdStatus",
    "RemainingBudget",
    "ReconciledItem",
    "ReconciliationResult",
    "GroupRollup",
]

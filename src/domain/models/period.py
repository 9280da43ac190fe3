"""Domain models for monthly budget periods."""

from dataclasses import dataclass, field

from src.domain.models.plan import ItemType


@dataclass(frozen=True)
class PeriodSeedItem:
    """Initial state of a period item when a period is created."""

    item_id: str
    item_name: str
    category_name: str
    item_type: ItemType
    budgeted_minor: int
    is_formula: bool = False


@dataclass(frozen=True)
class PeriodItem:
    """One item's budgeted/actual snapshot within one month.

    The item fields are copied at creation so that historical periods keep
    their values after the plan item is removed.

    Attributes:
        id: Period item identifier.
        item_id: Identifier of the plan item (weak reference).
        item_name: Item name at creation time.
        category_name: Owning category name at creation time.
        item_type: Item kind at creation time.
        budgeted_minor: Budgeted amount in minor units.
        actual_minor: Actual amount in minor units, refreshed from finance data.
        is_formula: True when the budgeted value is derived, not user-entered.
        notes: Optional free-text note.
    """

    id: str
    item_id: str
    item_name: str
    category_name: str
    item_type: ItemType
    budgeted_minor: int
    actual_minor: int = 0
    is_formula: bool = False
    notes: str | None = None

    @property
    def is_editable(self) -> bool:
        """Return True when users may edit the budgeted value."""
        return not self.is_formula


@dataclass(frozen=True)
class MonthlyPeriod:
    """Materialization of a plan's items for one calendar month."""

    id: str
    plan_id: str
    year: int
    month: int
    items: list[PeriodItem] = field(default_factory=list)
    was_created: bool = False
    is_locked: bool = False
    notes: str | None = None

    def find_item(self, period_item_id: str) -> PeriodItem | None:
        """Return the period item with the given id, if any."""
        for item in self.items:
            if item.id == period_item_id:
                return item
        return None

    def items_by_item_id(self) -> dict[str, PeriodItem]:
        """Return period items keyed by their plan item id."""
        return {item.item_id: item for item in self.items}


@dataclass(frozen=True)
class CopyForwardResult:
    """Outcome of copying budgets into a target period."""

    period: MonthlyPeriod
    items: list[PeriodItem]
    skipped_item_ids: list[str] = field(default_factory=list)
    formula_item_ids: list[str] = field(default_factory=list)


__all__ = [
    "PeriodSeedItem",
    "PeriodItem",
    "MonthlyPeriod",
    "CopyForwardResult",
]

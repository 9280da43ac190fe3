"""Domain models for the plan hierarchy."""

from dataclasses import dataclass, field
from enum import Enum


class ItemType(str, Enum):
    """Closed set of budget line kinds."""

    BUDGET = "budget"
    RECURRING = "recurring"
    GOAL = "goal"
    INCOME = "income"
    INVESTMENT = "investment"
    DEBT = "debt"


class TargetTab(str, Enum):
    """Feature tab an item type is displayed under."""

    BUDGETS = "budgets"
    RECURRING = "recurring"
    GOALS = "goals"
    INCOME = "income"
    PORTFOLIO = "portfolio"
    LIABILITIES = "liabilities"


ITEM_TYPE_TABS: dict[ItemType, TargetTab] = {
    ItemType.BUDGET: TargetTab.BUDGETS,
    ItemType.RECURRING: TargetTab.RECURRING,
    ItemType.GOAL: TargetTab.GOALS,
    ItemType.INCOME: TargetTab.INCOME,
    ItemType.INVESTMENT: TargetTab.PORTFOLIO,
    ItemType.DEBT: TargetTab.LIABILITIES,
}


class PlanStatus(str, Enum):
    """Lifecycle status of a plan."""

    DRAFT = "draft"
    ACTIVE = "active"
    ARCHIVED = "archived"


class PlanSourceType(str, Enum):
    """How a plan was created."""

    MANUAL = "manual"
    IMPORTED_SPREADSHEET = "imported-spreadsheet"


@dataclass(frozen=True)
class Item:
    """Leaf budget line.

    Attributes:
        id: Item identifier, unique within a plan.
        name: Display name.
        item_type: Kind of line; income items never count as spending.
        budgeted_minor: Baseline budgeted amount in minor units.
        category_id: Identifier of the owning category.
    """

    id: str
    name: str
    item_type: ItemType
    budgeted_minor: int
    category_id: str

    @property
    def is_income(self) -> bool:
        """Return True for income lines."""
        return self.item_type is ItemType.INCOME


@dataclass(frozen=True)
class Category:
    """Named grouping of items within a group."""

    id: str
    name: str
    items: list[Item] = field(default_factory=list)
    icon: str | None = None


@dataclass(frozen=True)
class CategoryGroup:
    """Budget bucket with an advisory share of income.

    Attributes:
        id: Group identifier.
        name: Display name.
        color: Display color (hex string) or None.
        target_percent: Advisory target share of income, 0-100.
        categories: Ordered categories of the group.
    """

    id: str
    name: str
    color: str | None
    target_percent: float
    categories: list[Category] = field(default_factory=list)


@dataclass(frozen=True)
class Plan:
    """Root aggregate of a user's budget definition."""

    id: str
    name: str
    currency_code: str
    source_type: PlanSourceType
    status: PlanStatus
    category_groups: list[CategoryGroup] = field(default_factory=list)
    description: str | None = None


@dataclass(frozen=True)
class PlanTotals:
    """Income, expense and surplus roll-up of a plan."""

    total_income: int
    total_expenses: int

    @property
    def surplus(self) -> int:
        """Return income minus expenses."""
        return self.total_income - self.total_expenses


__all__ = [
    "ItemType",
    "TargetTab",
    "ITEM_TYPE_TABS",
    "PlanStatus",
    "PlanSourceType",
    "Item",
    "Category",
    "CategoryGroup",
    "Plan",
    "PlanTotals",
]

"""Domain models for the monthly budget grid."""

from dataclasses import dataclass, field
from enum import Enum

from src.domain.models.reconciliation import ThresholdStatus


class CellKind(str, Enum):
    """Role of a cell in the grid."""

    HEADER = "header"
    CATEGORY = "category"
    VALUE = "value"
    PERCENTAGE = "percentage"
    TOTAL = "total"


@dataclass(frozen=True)
class StoredValue:
    """Amount entered by the user."""

    amount: int


@dataclass(frozen=True)
class FormulaValue:
    """Amount derived from a formula; never editable."""

    expression: str
    cached_result: int

    @property
    def amount(self) -> int:
        """Return the last computed result."""
        return self.cached_result


CellValue = StoredValue | FormulaValue


@dataclass(frozen=True)
class MonthlyValue:
    """Value of a row for one month column."""

    month: str
    value: CellValue
    percentage: float | None = None


@dataclass(frozen=True)
class RowSpec:
    """Input row of the grid projection.

    Attributes:
        id: Row identifier (category id or synthetic total id).
        name: Row label.
        monthly_values: Values keyed by month token.
        is_category: True for category heading rows.
        is_total: True for synthetic total rows, which are read-only.
        target_percentage: Optional target share used for threshold hints.
    """

    id: str
    name: str
    monthly_values: list[MonthlyValue] = field(default_factory=list)
    is_category: bool = False
    is_total: bool = False
    target_percentage: float | None = None

    def value_for(self, month: str) -> MonthlyValue | None:
        """Return the monthly value for a month token, if present."""
        for monthly_value in self.monthly_values:
            if monthly_value.month == month:
                return monthly_value
        return None


@dataclass(frozen=True)
class GridCell:
    """One projected cell; recomputed on every projection."""

    id: str
    row_id: str
    column: str | None
    value: int | float | str
    kind: CellKind
    is_editable: bool = False
    is_formula: bool = False
    formula: str | None = None
    threshold_status: ThresholdStatus | None = None


@dataclass(frozen=True)
class GridRow:
    """Projected row of cells."""

    row_id: str
    cells: list[GridCell]
    is_category: bool = False

    def value_cell(self, month: str) -> GridCell | None:
        """Return the value (or total) cell of a month column."""
        for cell in self.cells:
            if cell.column == month and cell.kind in (
                CellKind.VALUE,
                CellKind.TOTAL,
            ):
                return cell
        return None


@dataclass(frozen=True)
class GridProjection:
    """Header and rows of a projected grid."""

    header: list[GridCell]
    rows: list[GridRow]

    def row(self, row_id: str) -> GridRow | None:
        """Return the projected row with the given id, if any."""
        for row in self.rows:
            if row.row_id == row_id:
                return row
        return None


__all__ = [
    "CellKind",
    "StoredValue",
    "FormulaValue",
    "CellValue",
    "MonthlyValue",
    "RowSpec",
    "GridCell",
    "GridRow",
    "GridProjection",
]

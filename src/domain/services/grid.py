"""Projection of plan rows into a (row x month) grid."""

from collections.abc import Mapping, Sequence
from dataclasses import replace

from src.domain.constants import ITEM_THRESHOLDS
from src.domain.errors import ValidationError
from src.domain.models.grid import (
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
from src.domain.models.period import MonthlyPeriod, PeriodItem
from src.domain.models.plan import ItemType, Plan
from src.domain.models.reconciliation import ThresholdStatus
from src.domain.services.calendar import parse_month_token
from src.domain.services.reconciliation import classify, usage_ratio

HEADER_LABEL = "Category"
PERCENT_LABEL = "%"
TOTAL_ROW_ID = "total"


def project_grid(
    rows: Sequence[RowSpec],
    months: Sequence[str],
    show_percentages: bool = True,
) -> GridProjection:
    """Build the header and cell rows of the monthly grid.

    Args:
        rows: Category and total rows with their monthly values.
        months: Month column tokens, e.g. from generate_months.
        show_percentages: Add a percentage column after each month.

    Returns:
        GridProjection: Header cells and one projected row per input row.

    Raises:
        ValidationError: On malformed month tokens or duplicate ids.
    """
    _validate_columns(rows, months)
    header = _build_header(months, show_percentages)
    projected = [
        GridRow(
            row_id=row.id,
            cells=_build_row_cells(row, months, show_percentages),
            is_category=row.is_category,
        )
        for row in rows
    ]
    return GridProjection(header=header, rows=projected)


def build_plan_rows(
    plan: Plan,
    periods: Mapping[str, MonthlyPeriod],
) -> list[RowSpec]:
    """Derive one row per spending category plus a total row.

    A category with a single stored item is editable; categories aggregating
    several items, formula items, and the total row are formula cells.
    Percentages are shares of the month's budgeted income.

    Args:
        plan: Plan providing groups and categories.
        periods: Periods keyed by month token.

    Returns:
        list[RowSpec]: Category rows followed by the total row.
    """
    rows: list[RowSpec] = []
    totals: dict[str, int] = {month: 0 for month in periods}
    for group in plan.category_groups:
        for category in group.categories:
            spending = [item for item in category.items if not item.is_income]
            if not spending:
                continue
            values = []
            for month, period in periods.items():
                by_item_id = period.items_by_item_id()
                period_items = [
                    by_item_id[item.id]
                    for item in spending
                    if item.id in by_item_id
                ]
                amount = sum(item.budgeted_minor for item in period_items)
                totals[month] += amount
                values.append(
                    MonthlyValue(
                        month=month,
                        value=_category_value(period_items, amount),
                        percentage=_income_share(amount, period),
                    )
                )
            rows.append(
                RowSpec(
                    id=category.id,
                    name=category.name,
                    monthly_values=values,
                    is_category=True,
                    target_percentage=group.target_percent,
                )
            )
    rows.append(
        RowSpec(
            id=TOTAL_ROW_ID,
            name="Total",
            monthly_values=[
                MonthlyValue(
                    month=month,
                    value=FormulaValue("SUM(categories)", totals[month]),
                    percentage=_income_share(totals[month], period),
                )
                for month, period in periods.items()
            ],
            is_total=True,
        )
    )
    return rows


def recompute_totals(rows: Sequence[RowSpec]) -> list[RowSpec]:
    """Re-sum the total rows from the other rows, month by month.

    Generic rows carry no income basis, so percentages are left as they are.

    Args:
        rows: Rows whose non-total values are current.

    Returns:
        list[RowSpec]: Same rows, total rows holding fresh formula results.
    """
    sums: dict[str, int] = {}
    for row in rows:
        if row.is_total:
            continue
        for monthly_value in row.monthly_values:
            sums[monthly_value.month] = (
                sums.get(monthly_value.month, 0) + monthly_value.value.amount
            )

    result: list[RowSpec] = []
    for row in rows:
        if not row.is_total:
            result.append(row)
            continue
        values = []
        for month, amount in sums.items():
            current = row.value_for(month) or MonthlyValue(
                month=month,
                value=FormulaValue("SUM(categories)", 0),
            )
            expression = (
                current.value.expression
                if isinstance(current.value, FormulaValue)
                else "SUM(categories)"
            )
            values.append(
                replace(current, value=FormulaValue(expression, amount))
            )
        result.append(replace(row, monthly_values=values))
    return result


def _category_value(period_items: list[PeriodItem], amount: int) -> CellValue:
    if len(period_items) == 1 and period_items[0].is_editable:
        return StoredValue(amount)
    names = ", ".join(item.item_name for item in period_items)
    return FormulaValue(f"SUM({names})", amount)


def _income_share(amount: int, period: MonthlyPeriod) -> float:
    income = sum(
        item.budgeted_minor
        for item in period.items
        if item.item_type is ItemType.INCOME
    )
    return usage_ratio(amount, income) * 100


def cell_threshold(
    monthly_value: MonthlyValue,
    target_percentage: float | None,
) -> ThresholdStatus:
    """Return the threshold hint of a value cell.

    The cell's share of income is compared to the row's target share with
    the per-item table; rows without a target are always normal.
    """
    if not target_percentage:
        return ThresholdStatus.NORMAL
    return classify(
        monthly_value.percentage or 0.0,
        target_percentage,
        ITEM_THRESHOLDS,
    )


def is_cell_editable(row: RowSpec, monthly_value: MonthlyValue) -> bool:
    """Return True when a value cell accepts user edits."""
    return not row.is_total and isinstance(monthly_value.value, StoredValue)


def _validate_columns(rows: Sequence[RowSpec], months: Sequence[str]) -> None:
    if len(set(months)) != len(months):
        raise ValidationError("Month columns must be unique")
    for month in months:
        parse_month_token(month)
    row_ids = [row.id for row in rows]
    if len(set(row_ids)) != len(row_ids):
        raise ValidationError("Grid row ids must be unique")


def _build_header(months: Sequence[str], show_percentages: bool) -> list[GridCell]:
    cells = [
        GridCell(
            id="header-label",
            row_id="header",
            column=None,
            value=HEADER_LABEL,
            kind=CellKind.HEADER,
        )
    ]
    for month in months:
        cells.append(
            GridCell(
                id=f"header-{month}",
                row_id="header",
                column=month,
                value=month.upper(),
                kind=CellKind.HEADER,
            )
        )
        if show_percentages:
            cells.append(
                GridCell(
                    id=f"header-{month}-pct",
                    row_id="header",
                    column=month,
                    value=PERCENT_LABEL,
                    kind=CellKind.HEADER,
                )
            )
    return cells


def _build_row_cells(
    row: RowSpec,
    months: Sequence[str],
    show_percentages: bool,
) -> list[GridCell]:
    cells = [
        GridCell(
            id=f"{row.id}-name",
            row_id=row.id,
            column=None,
            value=row.name,
            kind=CellKind.CATEGORY,
        )
    ]
    for month in months:
        monthly_value = row.value_for(month) or MonthlyValue(
            month=month,
            value=StoredValue(0),
            percentage=0.0,
        )
        value = monthly_value.value
        is_formula = isinstance(value, FormulaValue)
        cells.append(
            GridCell(
                id=f"{row.id}-{month}",
                row_id=row.id,
                column=month,
                value=value.amount,
                kind=CellKind.TOTAL if row.is_total else CellKind.VALUE,
                is_editable=is_cell_editable(row, monthly_value),
                is_formula=is_formula,
                formula=value.expression if is_formula else None,
                threshold_status=cell_threshold(
                    monthly_value,
                    row.target_percentage,
                ),
            )
        )
        if show_percentages:
            cells.append(
                GridCell(
                    id=f"{row.id}-{month}-pct",
                    row_id=row.id,
                    column=month,
                    value=monthly_value.percentage or 0.0,
                    kind=CellKind.PERCENTAGE,
                )
            )
    return cells


__all__ = [
    "HEADER_LABEL",
    "TOTAL_ROW_ID",
    "project_grid",
    "build_plan_rows",
    "recompute_totals",
    "cell_threshold",
    "is_cell_editable",
]

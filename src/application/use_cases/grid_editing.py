"""Monthly grid building and optimistic cell editing."""

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, replace
from datetime import date

from src.application.ports.plan_service import PlanServicePort
from src.application.use_cases.period_manager import MonthlyPeriodManager
from src.domain.constants import DEFAULT_GRID_MONTHS
from src.domain.errors import ValidationError
from src.domain.models import (
    GridProjection,
    MonthlyPeriod,
    MonthlyValue,
    PeriodItem,
    Plan,
    RowSpec,
    StoredValue,
)
from src.domain.services.calendar import generate_year_months, month_token
from src.domain.services.grid import (
    build_plan_rows,
    is_cell_editable,
    project_grid,
    recompute_totals,
)
from src.infrastructure.logging.logger import get_app_logger

CommitCallback = Callable[[str, str, int], None]
RowDeriver = Callable[[Sequence[RowSpec]], list[RowSpec]]


class GridEditSession:
    """Local grid state with optimistic edits.

    An edit is applied to the projection immediately, then committed through
    the callback. If the commit fails the cell reverts to its last confirmed
    value and the error is re-raised to the caller. Derived rows (totals,
    percentages) are rebuilt after every change by the row deriver.
    """

    def __init__(
        self,
        rows: Sequence[RowSpec],
        months: Sequence[str],
        on_commit: CommitCallback,
        show_percentages: bool = True,
        logger=None,
        derive_rows: RowDeriver | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            rows: Rows to project.
            months: Month column tokens.
            on_commit: Callback receiving (row_id, month, new_value).
            show_percentages: Add percentage columns to the projection.
            logger: Optional logger compatible with logging.Logger-like API.
            derive_rows: Rebuilds derived values from the edited rows.
                Defaults to re-summing the total rows.
        """
        self._rows = list(rows)
        self._months = list(months)
        self._on_commit = on_commit
        self._show_percentages = show_percentages
        self._logger = logger or get_app_logger()
        self._derive_rows = derive_rows or recompute_totals
        self._projection = project_grid(
            self._rows,
            self._months,
            self._show_percentages,
        )

    @property
    def projection(self) -> GridProjection:
        """Return the current projection, including pending edits."""
        return self._projection

    @property
    def rows(self) -> list[RowSpec]:
        """Return the current row state."""
        return list(self._rows)

    def edit_cell(self, row_id: str, month: str, new_value: int) -> GridProjection:
        """Apply an edit optimistically and commit it.

        Args:
            row_id: Row of the edited cell.
            month: Month token of the edited cell.
            new_value: New amount in minor units.

        Returns:
            GridProjection: Projection including the confirmed edit.

        Raises:
            ValidationError: If the cell is read-only or the value invalid.
            Exception: Any commit failure, after the cell was reverted.
        """
        index, row = self._find_row(row_id)
        if month not in self._months:
            raise ValidationError(f"Unknown month column '{month}'")
        current = row.value_for(month) or MonthlyValue(
            month=month,
            value=StoredValue(0),
            percentage=0.0,
        )
        if not is_cell_editable(row, current):
            raise ValidationError(
                f"Cell {row.name} / {month} is read-only"
            )
        if isinstance(new_value, bool) or not isinstance(new_value, int):
            raise ValidationError(
                f"Cell value must be integer minor units, got {new_value!r}"
            )
        if new_value < 0:
            raise ValidationError(
                f"Cell value must be non-negative, got {new_value}"
            )

        self._apply(index, replace(current, value=StoredValue(new_value)))
        try:
            self._on_commit(row_id, month, new_value)
        except Exception as exc:
            self._apply(index, current)
            self._logger.warning(
                f"Reverted grid cell {row_id}/{month} after failed update: {exc}"
            )
            raise
        return self._projection

    def _find_row(self, row_id: str) -> tuple[int, RowSpec]:
        for index, row in enumerate(self._rows):
            if row.id == row_id:
                return index, row
        raise ValidationError(f"Unknown grid row '{row_id}'")

    def _apply(self, index: int, monthly_value: MonthlyValue) -> None:
        row = self._rows[index]
        values = [
            value
            for value in row.monthly_values
            if value.month != monthly_value.month
        ]
        values.append(monthly_value)
        self._rows[index] = replace(row, monthly_values=values)
        self._rows = self._derive_rows(self._rows)
        self._projection = project_grid(
            self._rows,
            self._months,
            self._show_percentages,
        )


def period_item_committer(
    period_manager: MonthlyPeriodManager,
    plan: Plan,
    periods: Mapping[str, MonthlyPeriod],
) -> CommitCallback:
    """Return a commit callback writing category cells to period items.

    Editable category cells map to exactly one spending item of the month's
    period; the callback forwards the value to the period manager.
    """

    def _commit(row_id: str, month: str, new_value: int) -> None:
        period = periods.get(month)
        if period is None:
            raise ValidationError(f"No period loaded for month '{month}'")
        target = _single_spending_item(plan, period, row_id)
        period_manager.update_period_item(target.id, new_value)

    return _commit


def plan_row_deriver(
    plan: Plan,
    periods: Mapping[str, MonthlyPeriod],
) -> RowDeriver:
    """Return a deriver rebuilding plan rows from edited category values.

    Stored category values are written onto the matching period item of a
    copy of each period, then the rows are rebuilt so the total row,
    income percentages and threshold hints follow the edit.
    """

    def _derive(rows: Sequence[RowSpec]) -> list[RowSpec]:
        edited: dict[str, dict[str, int]] = {month: {} for month in periods}
        for row in rows:
            if row.is_total:
                continue
            for monthly_value in row.monthly_values:
                period = periods.get(monthly_value.month)
                if period is None or not isinstance(
                    monthly_value.value, StoredValue
                ):
                    continue
                target = _single_spending_item(plan, period, row.id)
                edited[monthly_value.month][target.id] = (
                    monthly_value.value.amount
                )
        updated = {
            month: replace(
                period,
                items=[
                    replace(item, budgeted_minor=edited[month][item.id])
                    if item.id in edited[month]
                    else item
                    for item in period.items
                ],
            )
            for month, period in periods.items()
        }
        return build_plan_rows(plan, updated)

    return _derive


def _single_spending_item(
    plan: Plan,
    period: MonthlyPeriod,
    category_id: str,
) -> PeriodItem:
    category = _find_category(plan, category_id)
    item_ids = {item.id for item in category.items if not item.is_income}
    targets = [item for item in period.items if item.item_id in item_ids]
    if len(targets) != 1:
        raise ValidationError(
            f"Category '{category.name}' does not map to a single item"
        )
    return targets[0]


def _find_category(plan: Plan, category_id: str):
    for group in plan.category_groups:
        for category in group.categories:
            if category.id == category_id:
                return category
    raise ValidationError(f"Unknown category '{category_id}'")


@dataclass(frozen=True)
class PlanGridView:
    """Grid of a plan over consecutive months."""

    plan: Plan
    months: list[str]
    periods: dict[str, MonthlyPeriod]
    rows: list[RowSpec]
    projection: GridProjection


class BuildPlanGridUseCase:
    """Build the monthly grid of a plan and open editing sessions on it."""

    def __init__(
        self,
        period_manager: MonthlyPeriodManager,
        plan_service: PlanServicePort,
        logger=None,
        month_count: int = DEFAULT_GRID_MONTHS,
    ) -> None:
        """Initialize the use case.

        Args:
            period_manager: Manager resolving or creating each month's period.
            plan_service: Port supplying the plan structure.
            logger: Optional logger compatible with logging.Logger-like API.
            month_count: Default number of month columns.
        """
        self._period_manager = period_manager
        self._plan_service = plan_service
        self._logger = logger or get_app_logger()
        self._month_count = month_count

    def execute(
        self,
        plan_id: str,
        start: date,
        month_count: int | None = None,
        show_percentages: bool = True,
    ) -> PlanGridView:
        """Return the grid of a plan starting at the month of start.

        Args:
            plan_id: Identifier of the plan.
            start: Any date within the first month.
            month_count: Number of month columns, defaults to the configured
                grid width.
            show_percentages: Add percentage columns to the projection.

        Returns:
            PlanGridView: Plan, periods, rows and projection.
        """
        if month_count is None:
            month_count = self._month_count
        plan = self._plan_service.get_plan(plan_id)
        months: list[str] = []
        periods: dict[str, MonthlyPeriod] = {}
        for year, month in generate_year_months(start, month_count):
            token = month_token(year, month)
            months.append(token)
            periods[token] = self._period_manager.get_or_create_period(
                plan_id,
                year,
                month,
            )
        rows = build_plan_rows(plan, periods)
        self._logger.info(
            f"Built grid for plan {plan_id}: {len(rows)} rows x "
            f"{len(months)} months"
        )
        return PlanGridView(
            plan=plan,
            months=months,
            periods=periods,
            rows=rows,
            projection=project_grid(rows, months, show_percentages),
        )

    def open_session(
        self,
        view: PlanGridView,
        show_percentages: bool = True,
    ) -> GridEditSession:
        """Return an editing session whose commits update period items."""
        return GridEditSession(
            view.rows,
            view.months,
            period_item_committer(self._period_manager, view.plan, view.periods),
            show_percentages=show_percentages,
            logger=self._logger,
            derive_rows=plan_row_deriver(view.plan, view.periods),
        )


__all__ = [
    "GridEditSession",
    "period_item_committer",
    "plan_row_deriver",
    "PlanGridView",
    "BuildPlanGridUseCase",
]

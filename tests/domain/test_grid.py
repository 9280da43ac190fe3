"""Tests for the grid projection layer."""

import pytest

from src.domain.errors import ValidationError
from src.domain.models import (
    Category,
    CategoryGroup,
    CellKind,
    FormulaValue,
    Item,
    ItemType,
    MonthlyPeriod,
    MonthlyValue,
    PeriodItem,
    Plan,
    PlanSourceType,
    PlanStatus,
    RowSpec,
    StoredValue,
    ThresholdStatus,
)
from src.domain.services.grid import (
    TOTAL_ROW_ID,
    build_plan_rows,
    cell_threshold,
    is_cell_editable,
    project_grid,
)

MONTHS = ["jan-25", "feb-25"]


def _rows() -> list[RowSpec]:
    return [
        RowSpec(
            id="housing",
            name="Housing",
            monthly_values=[
                MonthlyValue("jan-25", StoredValue(30000), percentage=30.0)
            ],
            is_category=True,
            target_percentage=50,
        ),
        RowSpec(
            id=TOTAL_ROW_ID,
            name="Total",
            monthly_values=[
                MonthlyValue(
                    "jan-25",
                    FormulaValue("SUM(categories)", 30000),
                    percentage=30.0,
                )
            ],
            is_total=True,
        ),
    ]


def test_header_has_label_month_and_percentage_cells():
    """The header lists the label then each month with its % column."""
    projection = project_grid(_rows(), MONTHS)

    assert [cell.value for cell in projection.header] == [
        "Category",
        "JAN-25",
        "%",
        "FEB-25",
        "%",
    ]
    assert all(cell.kind is CellKind.HEADER for cell in projection.header)


def test_percentage_columns_can_be_hidden():
    """Without percentages each row has one cell per month."""
    projection = project_grid(_rows(), MONTHS, show_percentages=False)

    assert len(projection.header) == 3
    assert all(len(row.cells) == 3 for row in projection.rows)


def test_value_cells_follow_row_and_month():
    """Each row projects a name cell then value and percentage cells."""
    projection = project_grid(_rows(), MONTHS)
    housing = projection.row("housing")

    assert housing.is_category is True
    assert [cell.kind for cell in housing.cells] == [
        CellKind.CATEGORY,
        CellKind.VALUE,
        CellKind.PERCENTAGE,
        CellKind.VALUE,
        CellKind.PERCENTAGE,
    ]
    january = housing.value_cell("jan-25")
    assert january.value == 30000
    assert january.is_editable is True
    assert january.threshold_status is ThresholdStatus.SUCCESS


def test_missing_month_defaults_to_editable_zero():
    """A month without a value projects as an editable zero."""
    projection = project_grid(_rows(), MONTHS)

    february = projection.row("housing").value_cell("feb-25")

    assert february.value == 0
    assert february.is_editable is True
    assert february.is_formula is False


def test_total_row_is_read_only_formula():
    """Total rows are formula cells that reject edits."""
    projection = project_grid(_rows(), MONTHS)

    total = projection.row(TOTAL_ROW_ID).value_cell("jan-25")

    assert total.kind is CellKind.TOTAL
    assert total.is_editable is False
    assert total.is_formula is True
    assert total.formula == "SUM(categories)"
    assert total.value == 30000


def test_projection_rejects_duplicate_or_malformed_columns():
    """Months must be unique well-formed tokens; row ids must be unique."""
    with pytest.raises(ValidationError):
        project_grid(_rows(), ["jan-25", "jan-25"])
    with pytest.raises(ValidationError):
        project_grid(_rows(), ["january"])
    with pytest.raises(ValidationError):
        project_grid(_rows() + _rows(), MONTHS)


def test_cell_threshold_compares_share_with_target():
    """Threshold hints compare the income share with the row target."""
    over = MonthlyValue("jan-25", StoredValue(0), percentage=55.0)
    near = MonthlyValue("jan-25", StoredValue(0), percentage=45.0)

    assert cell_threshold(over, 50) is ThresholdStatus.DANGER
    assert cell_threshold(near, 50) is ThresholdStatus.WARNING
    assert cell_threshold(over, None) is ThresholdStatus.NORMAL


def test_formula_values_are_not_editable():
    """Formula values are read-only even on category rows."""
    row = _rows()[0]
    formula = MonthlyValue("jan-25", FormulaValue("SUM(a, b)", 10))

    assert is_cell_editable(row, formula) is False
    assert is_cell_editable(row, row.monthly_values[0]) is True


def _plan() -> Plan:
    return Plan(
        id="plan-1",
        name="Household",
        currency_code="EUR",
        source_type=PlanSourceType.MANUAL,
        status=PlanStatus.ACTIVE,
        category_groups=[
            CategoryGroup(
                id="essentials",
                name="Essentials",
                color=None,
                target_percent=50,
                categories=[
                    Category(
                        id="housing",
                        name="Housing",
                        items=[Item("rent", "Rent", ItemType.BUDGET, 30000, "housing")],
                    ),
                    Category(
                        id="food",
                        name="Food",
                        items=[
                            Item("groceries", "Groceries", ItemType.BUDGET, 10000, "food"),
                            Item("netflix", "Netflix", ItemType.RECURRING, 1500, "food"),
                        ],
                    ),
                ],
            ),
            CategoryGroup(
                id="earnings",
                name="Earnings",
                color=None,
                target_percent=0,
                categories=[
                    Category(
                        id="salary",
                        name="Salary",
                        items=[Item("pay", "Pay", ItemType.INCOME, 100000, "salary")],
                    )
                ],
            ),
        ],
    )


def _period_item(item_id, name, item_type, amount) -> PeriodItem:
    return PeriodItem(
        id=f"pi-{item_id}",
        item_id=item_id,
        item_name=name,
        category_name="",
        item_type=item_type,
        budgeted_minor=amount,
    )


def test_build_plan_rows_derives_category_and_total_rows():
    """Single-item categories are stored values; others are formulas."""
    period = MonthlyPeriod(
        id="period-1",
        plan_id="plan-1",
        year=2025,
        month=1,
        items=[
            _period_item("rent", "Rent", ItemType.BUDGET, 30000),
            _period_item("groceries", "Groceries", ItemType.BUDGET, 10000),
            _period_item("netflix", "Netflix", ItemType.RECURRING, 1500),
            _period_item("pay", "Pay", ItemType.INCOME, 100000),
        ],
    )

    rows = build_plan_rows(_plan(), {"jan-25": period})

    assert [row.id for row in rows] == ["housing", "food", TOTAL_ROW_ID]
    housing, food, total = rows
    assert housing.value_for("jan-25").value == StoredValue(30000)
    assert housing.value_for("jan-25").percentage == pytest.approx(30.0)
    assert housing.target_percentage == 50
    assert food.value_for("jan-25").value == FormulaValue(
        "SUM(Groceries, Netflix)",
        11500,
    )
    assert total.is_total is True
    assert total.value_for("jan-25").value.amount == 41500
    assert total.value_for("jan-25").percentage == pytest.approx(41.5)

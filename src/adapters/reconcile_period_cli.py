"""CLI adapter printing the reconciliation of one month of a plan.

The plan comes from PLANNER_PLAN_ID or the active plan; the month from
PLANNER_YEAR and PLANNER_MONTH (current month by default).
"""

from src.adapters._cli_inputs import (
    format_minor,
    resolve_plan_id,
    resolve_year_month,
)
from src.domain.services.calendar import month_name
from src.infrastructure.container import build_reconcile_use_case
from src.infrastructure.logging.logger import get_app_logger


def main() -> None:
    """Run the reconciliation use case and print its summary."""
    logger = get_app_logger()
    plan_id = resolve_plan_id()
    year, month = resolve_year_month()
    result = build_reconcile_use_case().execute(plan_id, year, month)
    summary = result.summary
    currency = result.currency_code
    logger.info(f"Printed reconciliation for {plan_id} {year}-{month:02d}")

    print(f"{month_name(month)} {year} ({plan_id})")
    print(f"Budgeted: {format_minor(summary.total_budgeted, currency)}")
    print(f"Actual:   {format_minor(summary.total_actual, currency)}")
    print(f"Usage:    {summary.usage_percent:.1f}% ({summary.status.value})")
    if summary.remaining.is_over:
        print(f"Over by:  {format_minor(summary.remaining.amount_minor, currency)}")
    else:
        print(f"Left:     {format_minor(summary.remaining.amount_minor, currency)}")
    for item in summary.per_item:
        print(
            f"  {item.category_name} / {item.item_name}: "
            f"{format_minor(item.actual_minor, currency)} of "
            f"{format_minor(item.budgeted_minor, currency)} "
            f"[{item.status.value}]"
        )


if __name__ == "__main__":  # pragma: no cover
    main()

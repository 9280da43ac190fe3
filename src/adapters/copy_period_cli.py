"""CLI adapter copying one month's budgets into the following month."""

from src.adapters._cli_inputs import resolve_plan_id, resolve_year_month
from src.domain.services.calendar import next_month
from src.infrastructure.container import build_period_manager
from src.infrastructure.logging.logger import get_app_logger


def main() -> None:
    """Copy the budgets of PLANNER_YEAR/PLANNER_MONTH into the next month."""
    logger = get_app_logger()
    plan_id = resolve_plan_id()
    year, month = resolve_year_month()
    target = next_month(year, month)

    manager = build_period_manager()
    source = manager.get_or_create_period(plan_id, year, month)
    result = manager.copy_forward(source.id, plan_id, target.year, target.month)
    logger.info(
        f"Copied period {source.id} to {target.year}-{target.month:02d}"
    )

    print(
        f"Copied budgets from {year}-{month:02d} "
        f"to {target.year}-{target.month:02d} ({len(result.items)} items)."
    )
    if result.skipped_item_ids:
        print(
            f"Skipped {len(result.skipped_item_ids)} items no longer in the plan."
        )
    if result.formula_item_ids:
        print(
            f"Kept {len(result.formula_item_ids)} formula items unchanged."
        )


if __name__ == "__main__":  # pragma: no cover
    main()

"""Shared environment parsing for the planner CLIs."""

from datetime import date
import os

from src.infrastructure.container import get_active_plan_selector


def resolve_plan_id() -> str:
    """Return PLANNER_PLAN_ID, or the active plan when it is unset.

    Raises:
        SystemExit: If no plan is configured or active.
    """
    plan_id = os.getenv("PLANNER_PLAN_ID", "").strip()
    if plan_id:
        return plan_id
    active = get_active_plan_selector().get_active_plan_id()
    if active is None:
        raise SystemExit(
            "No plan selected: set PLANNER_PLAN_ID or choose an active plan."
        )
    return active


def resolve_year_month(today: date | None = None) -> tuple[int, int]:
    """Return PLANNER_YEAR and PLANNER_MONTH, defaulting to today's month.

    Raises:
        SystemExit: If a value is not an integer.
    """
    current = today or date.today()
    raw_year = os.getenv("PLANNER_YEAR", "").strip()
    raw_month = os.getenv("PLANNER_MONTH", "").strip()
    try:
        year = int(raw_year) if raw_year else current.year
        month = int(raw_month) if raw_month else current.month
    except ValueError as exc:
        raise SystemExit(
            f"PLANNER_YEAR and PLANNER_MONTH must be integers: {exc}"
        ) from exc
    return year, month


def format_minor(amount_minor: int, currency_code: str) -> str:
    """Format minor units with two decimals, e.g. '450.00 EUR'."""
    return f"{amount_minor / 100:,.2f} {currency_code}"


__all__ = ["resolve_plan_id", "resolve_year_month", "format_minor"]

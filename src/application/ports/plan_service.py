"""Port for the remote Plan Service that persists plans and periods."""

from collections.abc import Mapping, Sequence
from typing import Protocol

from src.domain.models import MonthlyPeriod, PeriodItem, PeriodSeedItem, Plan


class PlanServicePort(Protocol):
    """Port exposing plan reads and period persistence.

    Implementations raise NotFoundError subclasses for unknown keys,
    ConflictError when a period key is already taken, and
    UpstreamUnavailableError when the service cannot be reached.
    """

    def get_plan(self, plan_id: str) -> Plan:
        """Return the current snapshot of a plan."""

    def get_period(self, plan_id: str, year: int, month: int) -> MonthlyPeriod:
        """Return the period stored for a plan/year/month key."""

    def get_period_by_id(self, period_id: str) -> MonthlyPeriod:
        """Return the period with the given identifier."""

    def create_period(
        self,
        plan_id: str,
        year: int,
        month: int,
        seed_items: Sequence[PeriodSeedItem],
    ) -> MonthlyPeriod:
        """Create a period seeded with the given items."""

    def update_period_item(
        self,
        period_item_id: str,
        budgeted_minor: int,
    ) -> PeriodItem:
        """Set the budgeted amount of one period item."""

    def update_period_items(
        self,
        period_id: str,
        budgets: Mapping[str, int],
    ) -> MonthlyPeriod:
        """Atomically set budgeted amounts keyed by period item id."""


__all__ = ["PlanServicePort"]

"""Use case to reconcile a month's budget against actual spending."""

from dataclasses import dataclass

from src.application.ports.finance_service import FinanceServicePort
from src.application.ports.plan_service import PlanServicePort
from src.application.use_cases.period_manager import MonthlyPeriodManager
from src.domain.models import (
    GroupRollup,
    MonthlyPeriod,
    PlanTotals,
    ReconciliationResult,
)
from src.domain.services.hierarchy import compute_plan_totals
from src.domain.services.reconciliation import (
    apply_actuals,
    reconcile,
    rollup_groups,
)
from src.infrastructure.logging.logger import get_app_logger


@dataclass(frozen=True)
class PeriodReconciliation:
    """Reconciled month ready for grid, cards and progress widgets.

    Attributes:
        period: Period with actuals refreshed from the Finance Service.
        summary: Aggregate and per-item reconciliation.
        groups: Per-group roll-ups of groups with a budget.
        plan_totals: Baseline income, expenses and surplus of the plan.
        currency_code: ISO currency of the plan's amounts.
    """

    period: MonthlyPeriod
    summary: ReconciliationResult
    groups: list[GroupRollup]
    plan_totals: PlanTotals
    currency_code: str


class ReconcilePeriodUseCase:
    """Combine a period's budget with actuals from the Finance Service."""

    def __init__(
        self,
        period_manager: MonthlyPeriodManager,
        finance_service: FinanceServicePort,
        plan_service: PlanServicePort,
        logger=None,
    ) -> None:
        """Initialize the use case.

        Args:
            period_manager: Manager resolving or creating the period.
            finance_service: Port supplying actual amounts per item.
            plan_service: Port supplying the plan's group structure.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._period_manager = period_manager
        self._finance_service = finance_service
        self._plan_service = plan_service
        self._logger = logger or get_app_logger()

    def execute(self, plan_id: str, year: int, month: int) -> PeriodReconciliation:
        """Return the reconciliation of a plan's month.

        Args:
            plan_id: Identifier of the plan.
            year: Calendar year.
            month: Month number, 1-12.

        Returns:
            PeriodReconciliation: Refreshed period, totals and roll-ups.

        Raises:
            ValidationError: On invalid input or malformed amounts.
            UpstreamUnavailableError: If a remote call failed.
        """
        period = self._period_manager.get_or_create_period(plan_id, year, month)
        actuals = self._finance_service.get_actuals(plan_id, year, month)
        known = {item.item_id for item in period.items}
        unknown = [item_id for item_id in actuals if item_id not in known]
        if unknown:
            self._logger.warning(
                f"Ignored actuals for {len(unknown)} items missing from "
                f"period {period.id}"
            )
        refreshed = apply_actuals(period, actuals)
        summary = reconcile(refreshed)
        plan = self._plan_service.get_plan(plan_id)
        groups = rollup_groups(plan, refreshed)
        self._logger.info(
            f"Reconciled {plan_id} {year}-{month:02d}: "
            f"budgeted={summary.total_budgeted}, actual={summary.total_actual}, "
            f"usage={summary.usage_percent:.1f}%, status={summary.status.value}"
        )
        return PeriodReconciliation(
            period=refreshed,
            summary=summary,
            groups=groups,
            plan_totals=compute_plan_totals(plan),
            currency_code=plan.currency_code,
        )


__all__ = ["ReconcilePeriodUseCase", "PeriodReconciliation"]

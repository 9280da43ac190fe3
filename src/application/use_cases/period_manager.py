"""Monthly Period Manager: get-or-create and copy-forward of budget periods.

This is the only component that writes period data. It keeps the last
confirmed state of each period it has seen and only replaces that state
after the Plan Service acknowledged a write, so a failed write never
leaves a partially applied period behind.
"""

from dataclasses import replace

from src.application.ports.plan_service import PlanServicePort
from src.domain.errors import (
    ConflictError,
    NotFoundError,
    PeriodNotFoundError,
    SourcePeriodNotFoundError,
    ValidationError,
)
from src.domain.models import (
    CopyForwardResult,
    MonthlyPeriod,
    PeriodItem,
    PeriodSeedItem,
    Plan,
)
from src.domain.services.calendar import validate_year_month
from src.domain.services.hierarchy import validate_plan
from src.infrastructure.logging.logger import get_app_logger


def build_seed_items(plan: Plan) -> list[PeriodSeedItem]:
    """Return the seed items of a new period: every item at its baseline.

    Args:
        plan: Current plan snapshot.

    Returns:
        list[PeriodSeedItem]: One seed per plan item, in declared order.
    """
    return [
        PeriodSeedItem(
            item_id=item.id,
            item_name=item.name,
            category_name=category.name,
            item_type=item.item_type,
            budgeted_minor=item.budgeted_minor,
        )
        for group in plan.category_groups
        for category in group.categories
        for item in category.items
    ]


class MonthlyPeriodManager:
    """Resolve, create and update monthly periods through the Plan Service."""

    def __init__(self, plan_service: PlanServicePort, logger=None) -> None:
        """Initialize the manager.

        Args:
            plan_service: Port persisting plans and periods.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._plan_service = plan_service
        self._logger = logger or get_app_logger()
        self._periods: dict[tuple[str, int, int], MonthlyPeriod] = {}

    def get_or_create_period(
        self,
        plan_id: str,
        year: int,
        month: int,
    ) -> MonthlyPeriod:
        """Return the period of a month, creating it on first visit.

        Args:
            plan_id: Identifier of the owning plan.
            year: Calendar year.
            month: Month number, 1-12.

        Returns:
            MonthlyPeriod: Existing period with ``was_created=False`` or a
            newly seeded period with ``was_created=True``.

        Raises:
            ValidationError: On an empty plan id or invalid month.
            PlanNotFoundError: If the plan does not exist.
            UpstreamUnavailableError: If the Plan Service call failed.
        """
        _validate_plan_id(plan_id)
        validate_year_month(year, month)
        try:
            period = replace(
                self._plan_service.get_period(plan_id, year, month),
                was_created=False,
            )
        except PeriodNotFoundError:
            period = self._create_period(plan_id, year, month)
        self._remember(period)
        return period

    def copy_forward(
        self,
        source_period_id: str,
        target_plan_id: str,
        target_year: int,
        target_month: int,
    ) -> CopyForwardResult:
        """Copy budgeted amounts of a period into another month.

        Actual amounts are never copied. Source items whose plan item no
        longer exists in the target period are skipped, and target items
        computed by a formula keep their value.

        Args:
            source_period_id: Identifier of the period to copy from.
            target_plan_id: Plan owning the target period.
            target_year: Target calendar year.
            target_month: Target month number, 1-12.

        Returns:
            CopyForwardResult: Target period after the write, its items, the
            skipped plan item ids and the formula plan item ids left as is.

        Raises:
            SourcePeriodNotFoundError: If the source period does not resolve.
            ValidationError: If the target is locked or equals the source.
            UpstreamUnavailableError: If a Plan Service call failed; the
                cached target period is left untouched.
        """
        if not source_period_id:
            raise ValidationError("Source period id must not be empty")
        try:
            source = self._plan_service.get_period_by_id(source_period_id)
        except NotFoundError as exc:
            raise SourcePeriodNotFoundError(source_period_id) from exc

        target = self.get_or_create_period(
            target_plan_id,
            target_year,
            target_month,
        )
        if target.id == source.id:
            raise ValidationError("Cannot copy a period onto itself")
        if target.is_locked:
            raise ValidationError(
                f"Period {target_year}-{target_month:02d} is locked"
            )

        target_items = target.items_by_item_id()
        budgets: dict[str, int] = {}
        skipped: list[str] = []
        formulas: list[str] = []
        for source_item in source.items:
            target_item = target_items.get(source_item.item_id)
            if target_item is None:
                skipped.append(source_item.item_id)
                continue
            if target_item.is_formula:
                formulas.append(source_item.item_id)
                continue
            budgets[target_item.id] = source_item.budgeted_minor

        if skipped:
            self._logger.info(
                f"Skipped {len(skipped)} items removed from plan "
                f"{target_plan_id} while copying period {source_period_id}"
            )
        if formulas:
            self._logger.info(
                f"Kept {len(formulas)} formula items of plan {target_plan_id} "
                f"while copying period {source_period_id}"
            )

        updated = target
        if budgets:
            updated = replace(
                self._plan_service.update_period_items(target.id, budgets),
                was_created=target.was_created,
            )
        self._remember(updated)
        self._logger.info(
            f"Copied {len(budgets)} budgets from period {source_period_id} "
            f"to {target_plan_id} {target_year}-{target_month:02d}"
        )
        return CopyForwardResult(
            period=updated,
            items=list(updated.items),
            skipped_item_ids=skipped,
            formula_item_ids=formulas,
        )

    def update_period_item(
        self,
        period_item_id: str,
        budgeted_minor: int,
    ) -> PeriodItem:
        """Set the budgeted amount of a period item.

        Args:
            period_item_id: Identifier of the period item.
            budgeted_minor: New budgeted amount in minor units.

        Returns:
            PeriodItem: Item as confirmed by the Plan Service.

        Raises:
            ValidationError: On negative amounts, formula items or locked
                periods.
            UpstreamUnavailableError: If the Plan Service call failed.
        """
        _validate_amount(budgeted_minor)
        cached = self._find_cached(period_item_id)
        if cached is not None:
            period, item = cached
            if period.is_locked:
                raise ValidationError(
                    f"Period {period.year}-{period.month:02d} is locked"
                )
            if not item.is_editable:
                raise ValidationError(
                    f"'{item.item_name}' is computed by a formula and cannot "
                    "be edited"
                )

        confirmed = self._plan_service.update_period_item(
            period_item_id,
            budgeted_minor,
        )
        if cached is not None:
            period, _ = cached
            self._remember(
                replace(
                    period,
                    items=[
                        confirmed if item.id == confirmed.id else item
                        for item in period.items
                    ],
                )
            )
        return confirmed

    def cached_period(
        self,
        plan_id: str,
        year: int,
        month: int,
    ) -> MonthlyPeriod | None:
        """Return the last confirmed state of a period, if known."""
        return self._periods.get((plan_id, year, month))

    def _create_period(
        self,
        plan_id: str,
        year: int,
        month: int,
    ) -> MonthlyPeriod:
        plan = self._plan_service.get_plan(plan_id)
        validate_plan(plan, self._logger)
        seed_items = build_seed_items(plan)
        try:
            period = self._plan_service.create_period(
                plan_id,
                year,
                month,
                seed_items,
            )
        except ConflictError:
            self._logger.info(
                f"Period {plan_id} {year}-{month:02d} was created concurrently; "
                "re-fetching"
            )
            return replace(
                self._plan_service.get_period(plan_id, year, month),
                was_created=False,
            )
        self._logger.info(
            f"Created period {plan_id} {year}-{month:02d} "
            f"with {len(seed_items)} items"
        )
        return replace(period, was_created=True)

    def _remember(self, period: MonthlyPeriod) -> None:
        self._periods[(period.plan_id, period.year, period.month)] = period

    def _find_cached(
        self,
        period_item_id: str,
    ) -> tuple[MonthlyPeriod, PeriodItem] | None:
        for period in self._periods.values():
            item = period.find_item(period_item_id)
            if item is not None:
                return period, item
        return None


def _validate_plan_id(plan_id: str) -> None:
    if not isinstance(plan_id, str) or not plan_id.strip():
        raise ValidationError("Plan id must be a non-empty string")


def _validate_amount(amount: int) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValidationError(
            f"Budgeted amount must be integer minor units, got {amount!r}"
        )
    if amount < 0:
        raise ValidationError(
            f"Budgeted amount must be non-negative, got {amount}"
        )


__all__ = ["MonthlyPeriodManager", "build_seed_items"]

"""Plan Service adapter backed by the local planner database."""

from collections.abc import Mapping, Sequence
import uuid

from sqlalchemy import text

from src.application.ports.database import DatabaseEnginePort
from src.application.ports.plan_service import PlanServicePort
from src.domain.errors import (
    PeriodItemNotFoundError,
    PeriodNotFoundError,
    PlanNotFoundError,
    ValidationError,
)
from src.domain.models import (
    Category,
    CategoryGroup,
    Item,
    ItemType,
    MonthlyPeriod,
    PeriodItem,
    PeriodSeedItem,
    Plan,
    PlanSourceType,
    PlanStatus,
)
from src.infrastructure.logging.logger import get_app_logger
from src.infrastructure.sql_errors import translate_errors

SELECT_PLAN_SQL = text(
    """
    SELECT id, name, currency_code, source_type, status, description
    FROM plans
    WHERE id = :plan_id
    """
)

SELECT_GROUPS_SQL = text(
    """
    SELECT id, name, color, target_percent
    FROM category_groups
    WHERE plan_id = :plan_id
    ORDER BY position
    """
)

SELECT_CATEGORIES_SQL = text(
    """
    SELECT c.id, c.group_id, c.name, c.icon
    FROM categories AS c
    JOIN category_groups AS g ON g.id = c.group_id
    WHERE g.plan_id = :plan_id
    ORDER BY c.position
    """
)

SELECT_ITEMS_SQL = text(
    """
    SELECT id, category_id, name, item_type, budgeted_minor
    FROM plan_items
    WHERE plan_id = :plan_id
    ORDER BY position
    """
)

DELETE_ITEMS_SQL = text("DELETE FROM plan_items WHERE plan_id = :plan_id")

DELETE_CATEGORIES_SQL = text(
    """
    DELETE FROM categories
    WHERE group_id IN (
        SELECT id FROM category_groups WHERE plan_id = :plan_id
    )
    """
)

DELETE_GROUPS_SQL = text("DELETE FROM category_groups WHERE plan_id = :plan_id")

DELETE_PLAN_SQL = text("DELETE FROM plans WHERE id = :plan_id")

INSERT_PLAN_SQL = text(
    """
    INSERT INTO plans (id, name, currency_code, source_type, status, description)
    VALUES (:id, :name, :currency_code, :source_type, :status, :description)
    """
)

INSERT_GROUP_SQL = text(
    """
    INSERT INTO category_groups (
        id, plan_id, name, color, target_percent, position
    )
    VALUES (:id, :plan_id, :name, :color, :target_percent, :position)
    """
)

INSERT_CATEGORY_SQL = text(
    """
    INSERT INTO categories (id, group_id, name, icon, position)
    VALUES (:id, :group_id, :name, :icon, :position)
    """
)

INSERT_ITEM_SQL = text(
    """
    INSERT INTO plan_items (
        id, plan_id, category_id, name, item_type, budgeted_minor, position
    )
    VALUES (
        :id, :plan_id, :category_id, :name, :item_type, :budgeted_minor,
        :position
    )
    """
)

SELECT_PERIOD_BY_KEY_SQL = text(
    """
    SELECT id, plan_id, year, month, is_locked, notes
    FROM budget_periods
    WHERE plan_id = :plan_id AND year = :year AND month = :month
    """
)

SELECT_PERIOD_BY_ID_SQL = text(
    """
    SELECT id, plan_id, year, month, is_locked, notes
    FROM budget_periods
    WHERE id = :period_id
    """
)

SELECT_PERIOD_ITEMS_SQL = text(
    """
    SELECT id, item_id, item_name, category_name, item_type,
           budgeted_minor, actual_minor, is_formula, notes
    FROM budget_period_items
    WHERE period_id = :period_id
    ORDER BY position
    """
)

SELECT_PERIOD_ITEM_SQL = text(
    """
    SELECT id, item_id, item_name, category_name, item_type,
           budgeted_minor, actual_minor, is_formula, notes
    FROM budget_period_items
    WHERE id = :period_item_id
    """
)

INSERT_PERIOD_SQL = text(
    """
    INSERT INTO budget_periods (id, plan_id, year, month, is_locked, notes)
    VALUES (:id, :plan_id, :year, :month, 0, NULL)
    """
)

INSERT_PERIOD_ITEM_SQL = text(
    """
    INSERT INTO budget_period_items (
        id, period_id, item_id, item_name, category_name, item_type,
        budgeted_minor, actual_minor, is_formula, notes, position
    )
    VALUES (
        :id, :period_id, :item_id, :item_name, :category_name, :item_type,
        :budgeted_minor, 0, :is_formula, NULL, :position
    )
    """
)

UPDATE_PERIOD_ITEM_SQL = text(
    """
    UPDATE budget_period_items
    SET budgeted_minor = :budgeted_minor
    WHERE id = :period_item_id
    """
)

SELECT_PERIOD_ITEM_FORMULA_SQL = text(
    """
    SELECT is_formula
    FROM budget_period_items
    WHERE id = :period_item_id AND period_id = :period_id
    """
)

SELECT_PERIOD_ITEM_STATE_SQL = text(
    """
    SELECT i.is_formula, p.is_locked
    FROM budget_period_items AS i
    JOIN budget_periods AS p ON p.id = i.period_id
    WHERE i.id = :period_item_id
    """
)

UPDATE_PERIOD_LOCK_SQL = text(
    """
    UPDATE budget_periods
    SET is_locked = :is_locked
    WHERE id = :period_id
    """
)


def _new_id() -> str:
    return str(uuid.uuid4())


def _row_to_period_item(row) -> PeriodItem:
    return PeriodItem(
        id=row.id,
        item_id=row.item_id,
        item_name=row.item_name,
        category_name=row.category_name,
        item_type=ItemType(row.item_type),
        budgeted_minor=int(row.budgeted_minor),
        actual_minor=int(row.actual_minor),
        is_formula=bool(row.is_formula),
        notes=row.notes,
    )


class SqlAlchemyPlanService(PlanServicePort):
    """Plan Service storing plans and periods in SQL tables."""

    def __init__(self, db_port: DatabaseEnginePort, logger=None) -> None:
        """Initialize the adapter.

        Args:
            db_port: Port providing access to the planner engine.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._db_port = db_port
        self._logger = logger or get_app_logger()

    def save_plan(self, plan: Plan) -> None:
        """Insert or replace a plan and its full hierarchy.

        Args:
            plan: Plan snapshot to store.
        """
        params = {"plan_id": plan.id}
        groups, categories, items = [], [], []
        for group_position, group in enumerate(plan.category_groups):
            groups.append(
                {
                    "id": group.id,
                    "plan_id": plan.id,
                    "name": group.name,
                    "color": group.color,
                    "target_percent": group.target_percent,
                    "position": group_position,
                }
            )
            for category in group.categories:
                categories.append(
                    {
                        "id": category.id,
                        "group_id": group.id,
                        "name": category.name,
                        "icon": category.icon,
                        "position": len(categories),
                    }
                )
                for item in category.items:
                    items.append(
                        {
                            "id": item.id,
                            "plan_id": plan.id,
                            "category_id": category.id,
                            "name": item.name,
                            "item_type": ItemType(item.item_type).value,
                            "budgeted_minor": item.budgeted_minor,
                            "position": len(items),
                        }
                    )

        engine = self._db_port.get_planner_engine()
        with translate_errors(f"Saving plan {plan.id}"):
            with engine.begin() as conn:
                conn.execute(DELETE_ITEMS_SQL, params)
                conn.execute(DELETE_CATEGORIES_SQL, params)
                conn.execute(DELETE_GROUPS_SQL, params)
                conn.execute(DELETE_PLAN_SQL, params)
                conn.execute(
                    INSERT_PLAN_SQL,
                    {
                        "id": plan.id,
                        "name": plan.name,
                        "currency_code": plan.currency_code,
                        "source_type": PlanSourceType(plan.source_type).value,
                        "status": PlanStatus(plan.status).value,
                        "description": plan.description,
                    },
                )
                if groups:
                    conn.execute(INSERT_GROUP_SQL, groups)
                if categories:
                    conn.execute(INSERT_CATEGORY_SQL, categories)
                if items:
                    conn.execute(INSERT_ITEM_SQL, items)
        self._logger.info(
            f"Saved plan {plan.id} with {len(groups)} groups and "
            f"{len(items)} items"
        )

    def get_plan(self, plan_id: str) -> Plan:
        """Return the current snapshot of a plan.

        Raises:
            PlanNotFoundError: If no plan has this id.
        """
        params = {"plan_id": plan_id}
        engine = self._db_port.get_planner_engine()
        with translate_errors(f"Loading plan {plan_id}"):
            with engine.connect() as conn:
                plan_row = conn.execute(SELECT_PLAN_SQL, params).first()
                if plan_row is None:
                    raise PlanNotFoundError(plan_id)
                group_rows = conn.execute(SELECT_GROUPS_SQL, params).all()
                category_rows = conn.execute(SELECT_CATEGORIES_SQL, params).all()
                item_rows = conn.execute(SELECT_ITEMS_SQL, params).all()

        items_by_category: dict[str, list[Item]] = {}
        for row in item_rows:
            items_by_category.setdefault(row.category_id, []).append(
                Item(
                    id=row.id,
                    name=row.name,
                    item_type=ItemType(row.item_type),
                    budgeted_minor=int(row.budgeted_minor),
                    category_id=row.category_id,
                )
            )
        categories_by_group: dict[str, list[Category]] = {}
        for row in category_rows:
            categories_by_group.setdefault(row.group_id, []).append(
                Category(
                    id=row.id,
                    name=row.name,
                    items=items_by_category.get(row.id, []),
                    icon=row.icon,
                )
            )
        return Plan(
            id=plan_row.id,
            name=plan_row.name,
            currency_code=plan_row.currency_code,
            source_type=PlanSourceType(plan_row.source_type),
            status=PlanStatus(plan_row.status),
            category_groups=[
                CategoryGroup(
                    id=row.id,
                    name=row.name,
                    color=row.color,
                    target_percent=float(row.target_percent),
                    categories=categories_by_group.get(row.id, []),
                )
                for row in group_rows
            ],
            description=plan_row.description,
        )

    def get_period(self, plan_id: str, year: int, month: int) -> MonthlyPeriod:
        """Return the period stored for a plan/year/month key.

        Raises:
            PeriodNotFoundError: If the month has no period yet.
        """
        key = f"{plan_id} {year}-{month:02d}"
        engine = self._db_port.get_planner_engine()
        with translate_errors(f"Loading period {key}"):
            with engine.connect() as conn:
                row = conn.execute(
                    SELECT_PERIOD_BY_KEY_SQL,
                    {"plan_id": plan_id, "year": year, "month": month},
                ).first()
                if row is None:
                    raise PeriodNotFoundError(key)
                return self._load_period(conn, row)

    def get_period_by_id(self, period_id: str) -> MonthlyPeriod:
        """Return the period with the given identifier.

        Raises:
            PeriodNotFoundError: If no period has this id.
        """
        engine = self._db_port.get_planner_engine()
        with translate_errors(f"Loading period {period_id}"):
            with engine.connect() as conn:
                row = conn.execute(
                    SELECT_PERIOD_BY_ID_SQL,
                    {"period_id": period_id},
                ).first()
                if row is None:
                    raise PeriodNotFoundError(period_id)
                return self._load_period(conn, row)

    def create_period(
        self,
        plan_id: str,
        year: int,
        month: int,
        seed_items: Sequence[PeriodSeedItem],
    ) -> MonthlyPeriod:
        """Create a period seeded with the given items.

        Raises:
            ConflictError: If the plan/year/month key is already taken.
        """
        period_id = _new_id()
        payload = [
            {
                "id": _new_id(),
                "period_id": period_id,
                "item_id": seed.item_id,
                "item_name": seed.item_name,
                "category_name": seed.category_name,
                "item_type": ItemType(seed.item_type).value,
                "budgeted_minor": seed.budgeted_minor,
                "is_formula": int(seed.is_formula),
                "position": position,
            }
            for position, seed in enumerate(seed_items)
        ]
        engine = self._db_port.get_planner_engine()
        with translate_errors(f"Creating period {plan_id} {year}-{month:02d}"):
            with engine.begin() as conn:
                conn.execute(
                    INSERT_PERIOD_SQL,
                    {
                        "id": period_id,
                        "plan_id": plan_id,
                        "year": year,
                        "month": month,
                    },
                )
                if payload:
                    conn.execute(INSERT_PERIOD_ITEM_SQL, payload)
        return self.get_period_by_id(period_id)

    def update_period_item(
        self,
        period_item_id: str,
        budgeted_minor: int,
    ) -> PeriodItem:
        """Set the budgeted amount of one period item.

        Raises:
            PeriodItemNotFoundError: If no period item has this id.
            ValidationError: If the item is a formula or its period is locked.
        """
        key = {"period_item_id": period_item_id}
        params = {**key, "budgeted_minor": budgeted_minor}
        engine = self._db_port.get_planner_engine()
        with translate_errors(f"Updating period item {period_item_id}"):
            with engine.begin() as conn:
                state = conn.execute(SELECT_PERIOD_ITEM_STATE_SQL, key).first()
                if state is None:
                    raise PeriodItemNotFoundError(period_item_id)
                if state.is_locked:
                    raise ValidationError(
                        f"Period of item {period_item_id} is locked"
                    )
                if state.is_formula:
                    raise ValidationError(
                        f"Period item {period_item_id} is computed by a formula"
                    )
                conn.execute(UPDATE_PERIOD_ITEM_SQL, params)
                row = conn.execute(SELECT_PERIOD_ITEM_SQL, key).first()
        return _row_to_period_item(row)

    def update_period_items(
        self,
        period_id: str,
        budgets: Mapping[str, int],
    ) -> MonthlyPeriod:
        """Atomically set budgeted amounts keyed by period item id.

        Either every amount is written or none is.

        Raises:
            PeriodNotFoundError: If the period does not exist.
            PeriodItemNotFoundError: If an id is not an item of the period.
            ValidationError: If the period is locked or an item is a formula.
        """
        engine = self._db_port.get_planner_engine()
        with translate_errors(f"Updating period {period_id}"):
            with engine.begin() as conn:
                row = conn.execute(
                    SELECT_PERIOD_BY_ID_SQL,
                    {"period_id": period_id},
                ).first()
                if row is None:
                    raise PeriodNotFoundError(period_id)
                if row.is_locked:
                    raise ValidationError(f"Period {period_id} is locked")
                for period_item_id, budgeted_minor in budgets.items():
                    is_formula = conn.execute(
                        SELECT_PERIOD_ITEM_FORMULA_SQL,
                        {
                            "period_item_id": period_item_id,
                            "period_id": period_id,
                        },
                    ).scalar()
                    if is_formula is None:
                        raise PeriodItemNotFoundError(period_item_id)
                    if is_formula:
                        raise ValidationError(
                            f"Period item {period_item_id} is computed "
                            "by a formula"
                        )
                    conn.execute(
                        UPDATE_PERIOD_ITEM_SQL,
                        {
                            "period_item_id": period_item_id,
                            "budgeted_minor": budgeted_minor,
                        },
                    )
                return self._load_period(conn, row)

    def set_period_locked(self, period_id: str, is_locked: bool = True) -> None:
        """Lock or unlock a period against budget edits.

        Raises:
            PeriodNotFoundError: If no period has this id.
        """
        engine = self._db_port.get_planner_engine()
        with translate_errors(f"Locking period {period_id}"):
            with engine.begin() as conn:
                result = conn.execute(
                    UPDATE_PERIOD_LOCK_SQL,
                    {"period_id": period_id, "is_locked": int(is_locked)},
                )
                if result.rowcount == 0:
                    raise PeriodNotFoundError(period_id)

    @staticmethod
    def _load_period(conn, row) -> MonthlyPeriod:
        item_rows = conn.execute(
            SELECT_PERIOD_ITEMS_SQL,
            {"period_id": row.id},
        ).all()
        return MonthlyPeriod(
            id=row.id,
            plan_id=row.plan_id,
            year=int(row.year),
            month=int(row.month),
            items=[_row_to_period_item(item_row) for item_row in item_rows],
            is_locked=bool(row.is_locked),
            notes=row.notes,
        )


__all__ = ["SqlAlchemyPlanService"]

"""Finance Service adapter aggregating locally recorded transactions."""

from datetime import date
import uuid

from sqlalchemy import text

from src.application.ports.database import DatabaseEnginePort
from src.application.ports.finance_service import FinanceServicePort
from src.domain.errors import ValidationError
from src.domain.services.calendar import next_month, validate_year_month
from src.infrastructure.logging.logger import get_app_logger
from src.infrastructure.sql_errors import translate_errors

SELECT_ACTUALS_SQL = text(
    """
    SELECT item_id, SUM(amount_minor) AS total_minor
    FROM plan_transactions
    WHERE plan_id = :plan_id
      AND item_id IS NOT NULL
      AND posted_on >= :start_date
      AND posted_on < :end_date
    GROUP BY item_id
    """
)

INSERT_TRANSACTION_SQL = text(
    """
    INSERT INTO plan_transactions (id, plan_id, item_id, amount_minor, posted_on)
    VALUES (:id, :plan_id, :item_id, :amount_minor, :posted_on)
    """
)


class SqlAlchemyFinanceService(FinanceServicePort):
    """Finance Service summing spending transactions per plan item.

    Amounts are positive spending in minor units; refunds are negative.
    """

    def __init__(self, db_port: DatabaseEnginePort, logger=None) -> None:
        """Initialize the adapter.

        Args:
            db_port: Port providing access to the planner engine.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._db_port = db_port
        self._logger = logger or get_app_logger()

    def get_actuals(self, plan_id: str, year: int, month: int) -> dict[str, int]:
        """Return actual amounts in minor units keyed by plan item id.

        Items whose refunds exceed their spending report zero.

        Args:
            plan_id: Identifier of the plan.
            year: Calendar year.
            month: Month number, 1-12.

        Returns:
            dict[str, int]: Non-negative actual amount per item id.
        """
        validate_year_month(year, month)
        end = next_month(year, month)
        params = {
            "plan_id": plan_id,
            "start_date": date(year, month, 1).isoformat(),
            "end_date": date(end.year, end.month, 1).isoformat(),
        }
        engine = self._db_port.get_planner_engine()
        with translate_errors(f"Loading actuals for {plan_id} {year}-{month:02d}"):
            with engine.connect() as conn:
                rows = conn.execute(SELECT_ACTUALS_SQL, params).all()

        actuals: dict[str, int] = {}
        for row in rows:
            total = int(row.total_minor or 0)
            if total < 0:
                self._logger.warning(
                    f"Net refunds for item {row.item_id} in "
                    f"{year}-{month:02d}; reporting 0"
                )
                total = 0
            actuals[row.item_id] = total
        return actuals

    def record_transaction(
        self,
        plan_id: str,
        item_id: str | None,
        amount_minor: int,
        posted_on: date,
    ) -> str:
        """Store a transaction and return its identifier.

        Args:
            plan_id: Identifier of the plan.
            item_id: Plan item the transaction is assigned to, if any.
            amount_minor: Signed amount in minor units.
            posted_on: Posting date.

        Raises:
            ValidationError: If amount_minor is not an integer.
        """
        if isinstance(amount_minor, bool) or not isinstance(amount_minor, int):
            raise ValidationError(
                f"Transaction amount must be integer minor units, got "
                f"{amount_minor!r}"
            )
        transaction_id = str(uuid.uuid4())
        engine = self._db_port.get_planner_engine()
        with translate_errors(f"Recording transaction for {plan_id}"):
            with engine.begin() as conn:
                conn.execute(
                    INSERT_TRANSACTION_SQL,
                    {
                        "id": transaction_id,
                        "plan_id": plan_id,
                        "item_id": item_id,
                        "amount_minor": amount_minor,
                        "posted_on": posted_on.isoformat(),
                    },
                )
        return transaction_id


__all__ = ["SqlAlchemyFinanceService"]

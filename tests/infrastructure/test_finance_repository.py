"""Tests for the SQLAlchemy-backed finance service."""

from datetime import date
from unittest.mock import MagicMock

import pytest

from src.domain.errors import ValidationError
from src.infrastructure.db import StaticEngineAdapter, _create_engine
from src.infrastructure.finance_repository import SqlAlchemyFinanceService
from src.infrastructure.schema import ensure_schema


def _service(logger=None) -> SqlAlchemyFinanceService:
    engine = _create_engine("sqlite://")
    ensure_schema(engine)
    return SqlAlchemyFinanceService(
        StaticEngineAdapter(engine),
        logger=logger or MagicMock(),
    )


def test_get_actuals_sums_transactions_within_month():
    """Only transactions of the requested month and plan are summed."""
    service = _service()
    service.record_transaction("household", "groceries", 4000, date(2025, 3, 1))
    service.record_transaction("household", "groceries", 11000, date(2025, 3, 31))
    service.record_transaction("household", "groceries", 999, date(2025, 4, 1))
    service.record_transaction("household", "groceries", 500, date(2025, 2, 28))
    service.record_transaction("household", "rent", 30000, date(2025, 3, 2))
    service.record_transaction("other-plan", "rent", 100, date(2025, 3, 2))
    service.record_transaction("household", None, 700, date(2025, 3, 2))

    actuals = service.get_actuals("household", 2025, 3)

    assert actuals == {"groceries": 15000, "rent": 30000}


def test_get_actuals_handles_december_rollover():
    """December includes the 31st and excludes January."""
    service = _service()
    service.record_transaction("household", "gifts", 2500, date(2024, 12, 31))
    service.record_transaction("household", "gifts", 100, date(2025, 1, 1))

    assert service.get_actuals("household", 2024, 12) == {"gifts": 2500}


def test_net_refunds_are_reported_as_zero():
    """Items whose refunds exceed spending report zero with a warning."""
    logger = MagicMock()
    service = _service(logger)
    service.record_transaction("household", "shoes", 3000, date(2025, 3, 3))
    service.record_transaction("household", "shoes", -5000, date(2025, 3, 9))

    assert service.get_actuals("household", 2025, 3) == {"shoes": 0}
    logger.warning.assert_called_once()


def test_invalid_inputs_are_rejected():
    """Months and amounts are validated."""
    service = _service()

    with pytest.raises(ValidationError):
        service.get_actuals("household", 2025, 13)
    with pytest.raises(ValidationError):
        service.record_transaction("household", "x", 12.5, date(2025, 3, 3))

"""Port for the remote Finance Service that aggregates transactions."""

from typing import Protocol


class FinanceServicePort(Protocol):
    """Port exposing actual spending aggregates."""

    def get_actuals(self, plan_id: str, year: int, month: int) -> dict[str, int]:
        """Return actual amounts in minor units keyed by plan item id."""


__all__ = ["FinanceServicePort"]

"""Error taxonomy shared by the planning engine."""


class PlannerError(Exception):
    """Base class for planning engine errors."""


class NotFoundError(PlannerError):
    """Requested plan, period or item does not exist."""


class PlanNotFoundError(NotFoundError):
    """Raised when a plan identifier does not resolve."""

    def __init__(self, plan_id: str) -> None:
        super().__init__(f"Plan not found: {plan_id}")
        self.plan_id = plan_id


class PeriodNotFoundError(NotFoundError):
    """Raised when no period exists for a plan/year/month key or id."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Budget period not found: {key}")
        self.key = key


class SourcePeriodNotFoundError(NotFoundError):
    """Raised when the source period of a copy-forward does not resolve."""

    def __init__(self, period_id: str) -> None:
        super().__init__(f"Source period not found: {period_id}")
        self.period_id = period_id


class PeriodItemNotFoundError(NotFoundError):
    """Raised when a period item identifier does not resolve."""

    def __init__(self, period_item_id: str) -> None:
        super().__init__(f"Period item not found: {period_item_id}")
        self.period_item_id = period_item_id


class ConflictError(PlannerError):
    """Concurrent creation race on a period key."""


class ValidationError(PlannerError):
    """Malformed input such as negative amounts or out-of-range months."""


class UpstreamUnavailableError(PlannerError):
    """A Plan or Finance Service call failed."""


__all__ = [
    "PlannerError",
    "NotFoundError",
    "PlanNotFoundError",
    "PeriodNotFoundError",
    "SourcePeriodNotFoundError",
    "PeriodItemNotFoundError",
    "ConflictError",
    "ValidationError",
    "UpstreamUnavailableError",
]

"""Active Plan Selector: process-wide pointer to the plan in scope.

Every feature reads the active plan through this accessor instead of keeping
its own copy. Writes update memory first and then persist; a persistence
failure is reported as a warning and the in-session selection is kept.
"""

from collections.abc import Callable
from dataclasses import dataclass

from src.application.ports.key_value_store import KeyValueStorePort
from src.domain.errors import PlannerError, ValidationError
from src.infrastructure.logging.logger import get_app_logger

ACTIVE_PLAN_KEY = "active_plan_id"

ActivePlanListener = Callable[[str | None], None]


@dataclass(frozen=True)
class SetActivePlanResult:
    """Outcome of an active plan change.

    Attributes:
        plan_id: Active plan id after the change.
        persisted: True when the value reached local storage.
        warning: Message describing a persistence failure, if any.
    """

    plan_id: str | None
    persisted: bool
    warning: str | None = None


class ActivePlanSelector:
    """Hold and persist the identifier of the active plan."""

    def __init__(
        self,
        store: KeyValueStorePort,
        logger=None,
        storage_key: str = ACTIVE_PLAN_KEY,
    ) -> None:
        """Initialize the selector.

        Args:
            store: Scoped key-value store persisting the selection.
            logger: Optional logger compatible with logging.Logger-like API.
            storage_key: Key under which the plan id is stored.
        """
        self._store = store
        self._logger = logger or get_app_logger()
        self._storage_key = storage_key
        self._active_plan_id: str | None = None
        self._loaded = False
        self._listeners: list[ActivePlanListener] = []

    def load(self) -> str | None:
        """Read the persisted selection once at startup.

        A storage failure leaves the selection empty and is logged.

        Returns:
            str | None: The active plan id after loading.
        """
        if self._loaded:
            return self._active_plan_id
        try:
            self._active_plan_id = self._store.get(self._storage_key) or None
        except PlannerError as exc:
            self._logger.warning(f"Could not read active plan: {exc}")
        self._loaded = True
        return self._active_plan_id

    def get_active_plan_id(self) -> str | None:
        """Return the active plan id, or None."""
        return self._active_plan_id

    def has_active_plan(self) -> bool:
        """Return True when a plan is active."""
        return self._active_plan_id is not None

    def set_active_plan(self, plan_id: str | None) -> SetActivePlanResult:
        """Select a plan and persist the selection.

        The in-memory value and listeners are updated before persisting and
        are not rolled back when persisting fails.

        Args:
            plan_id: Plan to activate, or None to clear the selection.

        Returns:
            SetActivePlanResult: Selection and persistence outcome.

        Raises:
            ValidationError: If plan_id is an empty or non-string value.
        """
        if plan_id is not None and (
            not isinstance(plan_id, str) or not plan_id.strip()
        ):
            raise ValidationError("Active plan id must be a non-empty string")

        changed = plan_id != self._active_plan_id
        self._active_plan_id = plan_id
        self._loaded = True
        if changed:
            self._notify(plan_id)

        try:
            if plan_id is None:
                self._store.delete(self._storage_key)
            else:
                self._store.set(self._storage_key, plan_id)
        except PlannerError as exc:
            warning = f"Active plan changed but could not be saved: {exc}"
            self._logger.warning(warning)
            return SetActivePlanResult(
                plan_id=plan_id,
                persisted=False,
                warning=warning,
            )
        self._logger.info(f"Active plan set to {plan_id}")
        return SetActivePlanResult(plan_id=plan_id, persisted=True)

    def clear_active_plan(self) -> SetActivePlanResult:
        """Clear the selection, e.g. on logout."""
        return self.set_active_plan(None)

    def subscribe(self, listener: ActivePlanListener) -> Callable[[], None]:
        """Register a listener called with the new plan id on changes.

        Returns:
            Callable[[], None]: Function removing the listener.
        """
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, plan_id: str | None) -> None:
        for listener in list(self._listeners):
            listener(plan_id)


__all__ = [
    "ACTIVE_PLAN_KEY",
    "ActivePlanSelector",
    "SetActivePlanResult",
]

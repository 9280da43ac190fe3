"""Application ports package."""

from .database import DatabaseEnginePort
from .finance_service import FinanceServicePort
from .key_value_store import KeyValueStorePort
from .plan_service import PlanServicePort

__all__ = [
    "DatabaseEnginePort",
    "FinanceServicePort",
    "KeyValueStorePort",
    "PlanServicePort",
]

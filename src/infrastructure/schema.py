"""DDL for the local planner storage."""

from sqlalchemy.engine import Engine

CREATE_PLANS_SQL = """
CREATE TABLE IF NOT EXISTS plans (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    currency_code TEXT NOT NULL,
    source_type TEXT NOT NULL,
    status TEXT NOT NULL,
    description TEXT
)
"""

CREATE_CATEGORY_GROUPS_SQL = """
CREATE TABLE IF NOT EXISTS category_groups (
    id TEXT PRIMARY KEY,
    plan_id TEXT NOT NULL,
    name TEXT NOT NULL,
    color TEXT,
    target_percent REAL NOT NULL DEFAULT 0,
    position INTEGER NOT NULL
)
"""

CREATE_CATEGORIES_SQL = """
CREATE TABLE IF NOT EXISTS categories (
    id TEXT PRIMARY KEY,
    group_id TEXT NOT NULL,
    name TEXT NOT NULL,
    icon TEXT,
    position INTEGER NOT NULL
)
"""

CREATE_ITEMS_SQL = """
CREATE TABLE IF NOT EXISTS plan_items (
    id TEXT NOT NULL,
    plan_id TEXT NOT NULL,
    category_id TEXT NOT NULL,
    name TEXT NOT NULL,
    item_type TEXT NOT NULL,
    budgeted_minor BIGINT NOT NULL,
    position INTEGER NOT NULL,
    PRIMARY KEY (plan_id, id)
)
"""

CREATE_PERIODS_SQL = """
CREATE TABLE IF NOT EXISTS budget_periods (
    id TEXT PRIMARY KEY,
    plan_id TEXT NOT NULL,
    year INTEGER NOT NULL,
    month INTEGER NOT NULL,
    is_locked INTEGER NOT NULL DEFAULT 0,
    notes TEXT,
    UNIQUE (plan_id, year, month)
)
"""

CREATE_PERIOD_ITEMS_SQL = """
CREATE TABLE IF NOT EXISTS budget_period_items (
    id TEXT PRIMARY KEY,
    period_id TEXT NOT NULL,
    item_id TEXT NOT NULL,
    item_name TEXT NOT NULL,
    category_name TEXT NOT NULL,
    item_type TEXT NOT NULL,
    budgeted_minor BIGINT NOT NULL,
    actual_minor BIGINT NOT NULL DEFAULT 0,
    is_formula INTEGER NOT NULL DEFAULT 0,
    notes TEXT,
    position INTEGER NOT NULL
)
"""

CREATE_TRANSACTIONS_SQL = """
CREATE TABLE IF NOT EXISTS plan_transactions (
    id TEXT PRIMARY KEY,
    plan_id TEXT NOT NULL,
    item_id TEXT,
    amount_minor BIGINT NOT NULL,
    posted_on TEXT NOT NULL
)
"""

CREATE_KEY_VALUE_SQL = """
CREATE TABLE IF NOT EXISTS key_value_store (
    scope TEXT NOT NULL,
    key TEXT NOT NULL,
    value TEXT,
    PRIMARY KEY (scope, key)
)
"""

SCHEMA_STATEMENTS = (
    CREATE_PLANS_SQL,
    CREATE_CATEGORY_GROUPS_SQL,
    CREATE_CATEGORIES_SQL,
    CREATE_ITEMS_SQL,
    CREATE_PERIODS_SQL,
    CREATE_PERIOD_ITEMS_SQL,
    CREATE_TRANSACTIONS_SQL,
    CREATE_KEY_VALUE_SQL,
)


def ensure_schema(engine: Engine) -> None:
    """Create the planner tables if they do not exist.

    Args:
        engine: SQLAlchemy engine for the planner database.
    """
    with engine.begin() as conn:
        for statement in SCHEMA_STATEMENTS:
            conn.exec_driver_sql(statement)


__all__ = ["SCHEMA_STATEMENTS", "ensure_schema"]

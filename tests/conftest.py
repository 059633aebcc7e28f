import os
from pathlib import Path

import pytest

from memberships.adapters.sqlite.migrator import apply_migrations
from memberships.adapters.sqlite.repos import (
    SQLiteMembershipStatusRepo,
    SQLitePlanRepo,
    SQLitePlanTierLookup,
)
from memberships.rules.loader import load_rules
from memberships.rules.models import Rules

PROJECT_ROOT = Path(__file__).resolve().parent.parent


@pytest.fixture
def test_data_dir(tmp_path):
    return str(tmp_path)


@pytest.fixture
def db_path(test_data_dir) -> str:
    """Migrated temporary SQLite database."""
    path = os.path.join(test_data_dir, "memberships.db")
    apply_migrations(path)
    return path


@pytest.fixture
def rules() -> Rules:
    """The real rules file from the project root."""
    return load_rules(PROJECT_ROOT / "rules.yaml")


@pytest.fixture
def plan_repo(db_path: str, rules: Rules) -> SQLitePlanRepo:
    return SQLitePlanRepo(db_path, meta_prefix=rules.plans.meta_prefix)


@pytest.fixture
def status_repo(db_path: str) -> SQLiteMembershipStatusRepo:
    return SQLiteMembershipStatusRepo(db_path)


@pytest.fixture
def tier_lookup(db_path: str, rules: Rules) -> SQLitePlanTierLookup:
    return SQLitePlanTierLookup(db_path, site_id=rules.site.site_id)

import json
import sqlite3
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from memberships.components.plans import DEFAULT_META_PREFIX, plan_field_storage_keys
from memberships.domain.entities import (
    PLAN_RECORD_TYPE,
    ConnectionStatus,
    Plan,
    PlanStatus,
    ProductSummary,
)


# Helper to convert sqlite rows to dicts
def dict_factory(cursor: sqlite3.Cursor, row: Any) -> dict[str, Any]:
    d = {}
    for idx, col in enumerate(cursor.description):
        d[col[0]] = row[idx]
    return d


def _now() -> str:
    return datetime.now(UTC).isoformat()


class _SQLiteRepo:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn


class SQLitePlanRepo(_SQLiteRepo):
    """Plan records with price and currency kept as metadata rows."""

    def __init__(self, db_path: str, meta_prefix: str = DEFAULT_META_PREFIX):
        super().__init__(db_path)
        self.meta_prefix = meta_prefix

    def list_plan_fields(self) -> dict[str, str]:
        return plan_field_storage_keys(self.meta_prefix)

    def create_plan(
        self,
        title: str,
        price: Decimal | str = "0",
        currency: str = "USD",
        status: PlanStatus = "draft",
        record_type: str = PLAN_RECORD_TYPE,
    ) -> Plan:
        # Validate before writing
        Plan(id=1, title=title, price=Decimal(str(price)), currency=currency, status=status)
        fields = self.list_plan_fields()
        now = _now()
        conn = self._get_conn()
        try:
            cursor = conn.execute(
                """
                INSERT INTO membership_plans (record_type, title, status, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?)
            """,
                (record_type, title, status, now, now),
            )
            plan_id = cursor.lastrowid
            conn.executemany(
                "INSERT INTO membership_plan_meta (plan_id, meta_key, meta_value) VALUES (?, ?, ?)",
                [
                    (plan_id, fields["price"], str(price)),
                    (plan_id, fields["currency"], currency),
                ],
            )
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

        plan = self.find_plan(int(plan_id or 0))
        if plan is None:
            raise RuntimeError("Plan insert did not persist")
        return plan

    def set_status(self, plan_id: int, status: PlanStatus) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                "UPDATE membership_plans SET status = ?, updated_at = ? WHERE id = ?",
                (status, _now(), plan_id),
            )
            conn.commit()
        finally:
            conn.close()

    def find_plan(self, plan_id: int) -> Plan | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM membership_plans WHERE id = ?", (plan_id,)
            ).fetchone()
            if not row:
                return None
            meta_rows = conn.execute(
                "SELECT meta_key, meta_value FROM membership_plan_meta WHERE plan_id = ?",
                (plan_id,),
            ).fetchall()
        finally:
            conn.close()

        meta = {m["meta_key"]: m["meta_value"] for m in meta_rows}
        fields = self.list_plan_fields()
        return Plan(
            id=row["id"],
            title=row["title"],
            price=Decimal(meta.get(fields["price"]) or "0"),
            currency=meta.get(fields["currency"]) or "USD",
            status=row["status"],
            record_type=row["record_type"],
        )


class SQLiteMembershipStatusRepo(_SQLiteRepo):
    """Authoritative per-site membership status."""

    def save_status(self, site_id: int, status: ConnectionStatus) -> ConnectionStatus:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO membership_site_settings (
                    site_id, connected_account_id, connect_url, upgrade_url,
                    should_upgrade_to_access_memberships, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(site_id) DO UPDATE SET
                    connected_account_id=excluded.connected_account_id,
                    connect_url=excluded.connect_url,
                    upgrade_url=excluded.upgrade_url,
                    should_upgrade_to_access_memberships=excluded.should_upgrade_to_access_memberships,
                    updated_at=excluded.updated_at
            """,
                (
                    site_id,
                    (
                        str(status.connected_account_id)
                        if status.connected_account_id is not None
                        else None
                    ),
                    status.connect_url,
                    status.upgrade_url,
                    1 if status.should_upgrade_to_access_memberships else 0,
                    _now(),
                ),
            )

            conn.execute("DELETE FROM membership_site_products WHERE site_id = ?", (site_id,))
            for i, product in enumerate(status.products):
                conn.execute(
                    """
                    INSERT INTO membership_site_products (site_id, position, product_json)
                    VALUES (?, ?, ?)
                """,
                    (site_id, i, product.model_dump_json()),
                )

            conn.commit()
            return status
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def get_status(self, site_id: int) -> ConnectionStatus | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM membership_site_settings WHERE site_id = ?", (site_id,)
            ).fetchone()
            if not row:
                return None
            product_rows = conn.execute(
                "SELECT product_json FROM membership_site_products "
                "WHERE site_id = ? ORDER BY position ASC",
                (site_id,),
            ).fetchall()
        finally:
            conn.close()

        return ConnectionStatus(
            products=[
                ProductSummary.model_validate(json.loads(p["product_json"]))
                for p in product_rows
            ],
            connected_account_id=row["connected_account_id"],
            connect_url=row["connect_url"],
            upgrade_url=row["upgrade_url"],
            should_upgrade_to_access_memberships=bool(
                row["should_upgrade_to_access_memberships"]
            ),
        )

    def get_connected_account_id(self, site_id: int) -> str | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT connected_account_id FROM membership_site_settings WHERE site_id = ?",
                (site_id,),
            ).fetchone()
            return row["connected_account_id"] if row else None
        finally:
            conn.close()


class SQLitePlanTierLookup(_SQLiteRepo):
    """
    Plan tier signals stored locally.

    Tier markers are written by the authoritative backend. For connected
    clients the site's plan features are cached locally and the connection
    is active when a user token is configured.
    """

    def __init__(self, db_path: str, site_id: int, connection_active: bool = False):
        super().__init__(db_path)
        self.site_id = site_id
        self.connection_active = connection_active

    def site_markers(self, site_id: int) -> set[str]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT marker FROM membership_site_markers WHERE site_id = ?", (site_id,)
            ).fetchall()
            return {r["marker"] for r in rows}
        finally:
            conn.close()

    def is_connection_active(self) -> bool:
        return self.connection_active

    def plan_supports(self, capability: str) -> bool:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT 1 AS present FROM membership_site_features "
                "WHERE site_id = ? AND feature = ?",
                (self.site_id, capability),
            ).fetchone()
            return row is not None
        finally:
            conn.close()

    def add_marker(self, site_id: int, marker: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                "INSERT OR IGNORE INTO membership_site_markers (site_id, marker) VALUES (?, ?)",
                (site_id, marker),
            )
            conn.commit()
        finally:
            conn.close()

    def add_feature(self, site_id: int, feature: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                "INSERT OR IGNORE INTO membership_site_features (site_id, feature) VALUES (?, ?)",
                (site_id, feature),
            )
            conn.commit()
        finally:
            conn.close()

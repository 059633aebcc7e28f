"""
Schema migrations for the memberships database.

Each ``NNNN_name.sql`` file holds an Up part and, after a ``-- Down``
line, a Down part that is kept for operators and never executed here.
A file is applied in a single transaction together with its row in
``_migrations``, so a failing file leaves neither tables nor a record.
"""

import logging
import sqlite3
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_MIGRATIONS_DIR = Path(__file__).parent / "migrations"
DOWN_MARKER = "-- Down"

_LEDGER_DDL = """
CREATE TABLE IF NOT EXISTS _migrations (
    filename TEXT PRIMARY KEY,
    applied_at DATETIME DEFAULT CURRENT_TIMESTAMP
)
"""


def up_script(path: Path) -> str:
    """The part of a migration file before its Down marker."""
    return path.read_text().partition(DOWN_MARKER)[0]


def _sql_literal(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def applied_migrations(conn: sqlite3.Connection) -> set[str]:
    conn.execute(_LEDGER_DDL)
    return {row[0] for row in conn.execute("SELECT filename FROM _migrations")}


def pending_migrations(conn: sqlite3.Connection, migrations_dir: Path) -> list[Path]:
    """Migration files not yet recorded, in filename order."""
    done = applied_migrations(conn)
    return [p for p in sorted(migrations_dir.glob("*.sql")) if p.name not in done]


def apply_migrations(
    db_path: str, migrations_dir: str | Path = DEFAULT_MIGRATIONS_DIR
) -> list[str]:
    """Apply pending migrations to the database, returning the filenames applied."""
    migrations_dir = Path(migrations_dir)
    conn = sqlite3.connect(db_path, isolation_level=None)
    applied: list[str] = []
    try:
        for path in pending_migrations(conn, migrations_dir):
            logger.info(f"Applying migration: {path.name}")
            script = (
                f"BEGIN;\n{up_script(path)}\n;\n"
                f"INSERT INTO _migrations (filename) VALUES ({_sql_literal(path.name)});\n"
                "COMMIT;"
            )
            try:
                conn.executescript(script)
            except sqlite3.Error as e:
                if conn.in_transaction:
                    conn.execute("ROLLBACK")
                raise RuntimeError(f"Migration {path.name} failed: {e}") from e
            applied.append(path.name)
        return applied
    finally:
        conn.close()

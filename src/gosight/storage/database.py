"""SQLite-backed graph store for analysis reports."""

import sqlite3
from pathlib import Path
from typing import Optional

from ..logging_config import get_logger

logger = get_logger(__name__)

# Current schema version (bump when tables change).
_SCHEMA_VERSION = 1

NODE_TABLES = ("functions", "structs", "interfaces", "globals", "imports")
EDGE_TABLES = ("calls", "methods", "implements", "references", "dependencies")


class GraphDB:
    """Manages a report database file.

    Usage::

        with GraphDB("analysis.db") as db:
            save_report(db.conn, report)
    """

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = Path(db_path)
        self._conn: Optional[sqlite3.Connection] = None

    @property
    def conn(self) -> sqlite3.Connection:
        """Return the active connection. Raises if not connected."""
        if self._conn is None:
            raise RuntimeError(
                "GraphDB is not connected. Use as context manager or call connect()."
            )
        return self._conn

    # ── lifecycle ─────────────────────────────────────────────────

    def connect(self) -> sqlite3.Connection:
        """Open (or create) the database and create missing tables."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self.db_path))
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA foreign_keys=ON")
        conn.row_factory = sqlite3.Row
        self._conn = conn
        self._migrate()
        logger.debug("Graph DB connected at %s", self.db_path)
        return conn

    def close(self) -> None:
        """Close the connection if open."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> "GraphDB":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # ── migration ─────────────────────────────────────────────────

    def _migrate(self) -> None:
        """Idempotently create all tables."""
        c = self.conn

        c.execute("CREATE TABLE IF NOT EXISTS schema_version (version INTEGER NOT NULL)")
        row = c.execute("SELECT version FROM schema_version").fetchone()
        if row is None:
            c.execute("INSERT INTO schema_version (version) VALUES (?)", (_SCHEMA_VERSION,))

        # ── nodes ────────────────────────────────────────────────
        c.execute(
            """
            CREATE TABLE IF NOT EXISTS functions (
                name                  TEXT PRIMARY KEY,
                package               TEXT    NOT NULL,
                file                  TEXT    NOT NULL,
                receiver              TEXT,
                params                TEXT    NOT NULL DEFAULT '[]',
                returns               TEXT    NOT NULL DEFAULT '[]',
                is_method             INTEGER NOT NULL DEFAULT 0,
                is_recursive          INTEGER NOT NULL DEFAULT 0,
                is_duplicate          INTEGER NOT NULL DEFAULT 0,
                is_unused             INTEGER NOT NULL DEFAULT 0,
                cyclomatic_complexity INTEGER NOT NULL DEFAULT 1,
                lines_of_code         INTEGER NOT NULL DEFAULT 0,
                cognitive_score       INTEGER NOT NULL DEFAULT 0,
                nesting_depth         INTEGER NOT NULL DEFAULT 0,
                halstead_volume       REAL    NOT NULL DEFAULT 0,
                halstead_effort       REAL    NOT NULL DEFAULT 0,
                maintainability_index REAL    NOT NULL DEFAULT 0,
                metrics               TEXT    NOT NULL DEFAULT '{}'
            )
            """
        )
        c.execute(
            """
            CREATE TABLE IF NOT EXISTS structs (
                id      INTEGER PRIMARY KEY AUTOINCREMENT,
                name    TEXT NOT NULL,
                package TEXT NOT NULL,
                file    TEXT NOT NULL
            )
            """
        )
        c.execute(
            """
            CREATE TABLE IF NOT EXISTS interfaces (
                id      INTEGER PRIMARY KEY AUTOINCREMENT,
                name    TEXT NOT NULL,
                package TEXT NOT NULL,
                file    TEXT NOT NULL,
                methods TEXT NOT NULL DEFAULT '[]'
            )
            """
        )
        c.execute(
            """
            CREATE TABLE IF NOT EXISTS globals (
                id      INTEGER PRIMARY KEY AUTOINCREMENT,
                name    TEXT NOT NULL,
                package TEXT NOT NULL,
                file    TEXT NOT NULL,
                type    TEXT NOT NULL DEFAULT '',
                value   TEXT
            )
            """
        )
        c.execute(
            """
            CREATE TABLE IF NOT EXISTS imports (
                id      INTEGER PRIMARY KEY AUTOINCREMENT,
                path    TEXT NOT NULL,
                package TEXT NOT NULL,
                file    TEXT NOT NULL
            )
            """
        )

        # ── edges ────────────────────────────────────────────────
        c.execute(
            """
            CREATE TABLE IF NOT EXISTS calls (
                caller   TEXT    NOT NULL REFERENCES functions(name) ON DELETE CASCADE,
                callee   TEXT    NOT NULL,
                resolved INTEGER NOT NULL DEFAULT 0
            )
            """
        )
        c.execute(
            """
            CREATE TABLE IF NOT EXISTS methods (
                struct   TEXT NOT NULL,
                package  TEXT NOT NULL,
                function TEXT NOT NULL REFERENCES functions(name) ON DELETE CASCADE
            )
            """
        )
        c.execute(
            """
            CREATE TABLE IF NOT EXISTS implements (
                struct    TEXT NOT NULL,
                interface TEXT NOT NULL
            )
            """
        )
        c.execute(
            """
            CREATE TABLE IF NOT EXISTS "references" (
                function    TEXT NOT NULL REFERENCES functions(name) ON DELETE CASCADE,
                global_name TEXT NOT NULL
            )
            """
        )
        c.execute(
            """
            CREATE TABLE IF NOT EXISTS dependencies (
                function    TEXT NOT NULL REFERENCES functions(name) ON DELETE CASCADE,
                import_path TEXT NOT NULL
            )
            """
        )

        c.execute("CREATE INDEX IF NOT EXISTS idx_calls_caller ON calls(caller)")
        c.execute("CREATE INDEX IF NOT EXISTS idx_calls_callee ON calls(callee)")
        c.commit()

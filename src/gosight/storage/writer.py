"""Write an AnalysisReport into the graph store, and read edges back."""

import json
import sqlite3

from ..models import AnalysisReport
from .database import EDGE_TABLES, NODE_TABLES


def save_report(conn: sqlite3.Connection, report: AnalysisReport) -> int:
    """Replace the stored graph with ``report``.

    A run is a complete re-scan, so previous rows are deleted first. All
    statements run inside a single transaction so the database never holds
    half of a report.

    Returns
    -------
    int
        Number of function rows written.
    """
    names = {fn.qualified_name for fn in report.functions}
    cur = conn.cursor()
    try:
        cur.execute("BEGIN")
        for table in EDGE_TABLES + NODE_TABLES:
            cur.execute(f'DELETE FROM "{table}"')

        # ── nodes ────────────────────────────────────────────────
        cur.executemany(
            """
            INSERT INTO functions (
                name, package, file, receiver, params, returns, is_method,
                is_recursive, is_duplicate, is_unused, cyclomatic_complexity,
                lines_of_code, cognitive_score, nesting_depth, halstead_volume,
                halstead_effort, maintainability_index, metrics
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            [
                (
                    fn.qualified_name,
                    fn.package,
                    fn.file,
                    fn.receiver,
                    json.dumps(fn.params),
                    json.dumps(fn.returns),
                    int(fn.is_method),
                    int(fn.is_recursive),
                    int(fn.is_duplicate),
                    int(fn.metrics.is_unused),
                    fn.metrics.cyclomatic_complexity,
                    fn.metrics.lines_of_code,
                    fn.metrics.cognitive.score,
                    fn.metrics.readability.nesting_depth,
                    fn.metrics.halstead.volume,
                    fn.metrics.halstead.effort,
                    fn.metrics.maintainability_index,
                    json.dumps(fn.metrics.to_dict()),
                )
                for fn in report.functions
            ],
        )
        cur.executemany(
            "INSERT INTO structs (name, package, file) VALUES (?, ?, ?)",
            [(s.name, s.package, s.file) for s in report.structs],
        )
        cur.executemany(
            "INSERT INTO interfaces (name, package, file, methods) VALUES (?, ?, ?, ?)",
            [(i.name, i.package, i.file, json.dumps(i.methods)) for i in report.interfaces],
        )
        cur.executemany(
            "INSERT INTO globals (name, package, file, type, value) VALUES (?, ?, ?, ?, ?)",
            [(g.name, g.package, g.file, g.type, g.value) for g in report.globals],
        )
        cur.executemany(
            "INSERT INTO imports (path, package, file) VALUES (?, ?, ?)",
            [(i.path, i.package, i.file) for i in report.imports],
        )

        # ── edges ────────────────────────────────────────────────
        cur.executemany(
            "INSERT INTO calls (caller, callee, resolved) VALUES (?, ?, ?)",
            [
                (fn.qualified_name, callee, int(callee in names))
                for fn in report.functions
                for callee in fn.callees
            ],
        )
        cur.executemany(
            "INSERT INTO methods (struct, package, function) VALUES (?, ?, ?)",
            [
                (fn.receiver, fn.package, fn.qualified_name)
                for fn in report.functions
                if fn.receiver
            ],
        )
        cur.executemany(
            "INSERT INTO implements (struct, interface) VALUES (?, ?)",
            [(r.struct, r.interface) for r in report.implements],
        )
        cur.executemany(
            'INSERT INTO "references" (function, global_name) VALUES (?, ?)',
            [
                (fn.qualified_name, name)
                for fn in report.functions
                for name in fn.referenced_globals
            ],
        )
        cur.executemany(
            "INSERT INTO dependencies (function, import_path) VALUES (?, ?)",
            [(fn.qualified_name, path) for fn in report.functions for path in fn.dependencies],
        )

        conn.commit()
    except Exception:
        conn.rollback()
        raise

    return len(report.functions)


def callees_of(conn: sqlite3.Connection, name: str, resolved_only: bool = False) -> list[str]:
    sql = "SELECT callee FROM calls WHERE caller = ?"
    if resolved_only:
        sql += " AND resolved = 1"
    return [row[0] for row in conn.execute(sql + " ORDER BY callee", (name,))]


def callers_of(conn: sqlite3.Connection, name: str) -> list[str]:
    rows = conn.execute("SELECT caller FROM calls WHERE callee = ? ORDER BY caller", (name,))
    return [row[0] for row in rows]


def table_counts(conn: sqlite3.Connection) -> dict[str, int]:
    return {
        table: conn.execute(f'SELECT COUNT(*) FROM "{table}"').fetchone()[0]
        for table in NODE_TABLES + EDGE_TABLES
    }

"""DuckDB storage for analyses and generated_analyses."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import duckdb

from ..models import AnalysisResult, GeneratedAnalysis


def _serialize_datetime(obj: Any) -> Any:
    """JSON serializer for datetime objects."""
    if isinstance(obj, datetime):
        return obj.isoformat()
    raise TypeError(f"Object of type {type(obj)} is not JSON serializable")


def _utcnow() -> datetime:
    """Naive UTC timestamp for TIMESTAMP columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _headline(result: AnalysisResult) -> tuple[int, str]:
    if result.affordability is not None:
        return result.affordability.score, result.affordability.level.value
    return result.investment.score, result.investment.level


class Storage:
    """
    DuckDB storage for analyses and generated_analyses.
    """

    def __init__(self, db_path: Path | str = "homepilot.duckdb") -> None:
        self.db_path = Path(db_path)
        self._conn: duckdb.DuckDBPyConnection | None = None

    def _connect(self) -> duckdb.DuckDBPyConnection:
        if self._conn is None:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = duckdb.connect(str(self.db_path))
            self._init_schema()
        return self._conn

    def _init_schema(self) -> None:
        conn = self._conn
        conn.execute("""
            CREATE TABLE IF NOT EXISTS analyses (
                run_id TEXT,
                seq INTEGER,
                mode TEXT,
                address TEXT,
                zipcode TEXT,
                price REAL,
                score INTEGER,
                level TEXT,
                overall_risk TEXT,
                full_result JSON,
                created_at TIMESTAMP,
                PRIMARY KEY (run_id, seq)
            )
        """)
        conn.execute("""
            CREATE TABLE IF NOT EXISTS generated_analyses (
                run_id TEXT PRIMARY KEY,
                score INTEGER,
                level TEXT,
                repaired INTEGER,
                record JSON,
                created_at TIMESTAMP
            )
        """)

    def save_analyses(self, run_id: str, results: list[AnalysisResult]) -> None:
        """Save analysis results under one run id."""
        conn = self._connect()
        now = _utcnow()
        for seq, r in enumerate(results):
            score, level = _headline(r)
            conn.execute(
                """
                INSERT OR REPLACE INTO analyses
                (run_id, seq, mode, address, zipcode, price, score, level,
                 overall_risk, full_result, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    run_id,
                    seq,
                    r.mode,
                    r.property.address,
                    r.property.zipcode,
                    r.property.price,
                    score,
                    level,
                    r.risk.overall.value,
                    json.dumps(r.to_dict(), default=_serialize_datetime),
                    now,
                ],
            )

    def save_analysis(self, run_id: str, result: AnalysisResult) -> None:
        self.save_analyses(run_id, [result])

    def save_generated(self, run_id: str, generated: GeneratedAnalysis) -> None:
        """Save a recovered generator record as-is."""
        conn = self._connect()
        conn.execute(
            """
            INSERT OR REPLACE INTO generated_analyses
            (run_id, score, level, repaired, record, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            [
                run_id,
                generated.score,
                generated.level,
                1 if generated.repaired else 0,
                json.dumps(generated.record),
                _utcnow(),
            ],
        )

    def load_analyses(self, limit: int | None = None) -> list[dict[str, Any]]:
        """Load stored analyses, newest first. ``full_result`` is decoded back to a dict."""
        conn = self._connect()
        sql = """
            SELECT run_id, seq, mode, address, zipcode, price, score, level,
                   overall_risk, full_result, created_at
            FROM analyses
            ORDER BY created_at DESC, run_id, seq
        """
        if limit is not None:
            sql += f" LIMIT {int(limit)}"
        rows = conn.execute(sql).fetchall()
        cols = ["run_id", "seq", "mode", "address", "zipcode", "price", "score", "level",
                "overall_risk", "full_result", "created_at"]
        out = []
        for row in rows:
            d = dict(zip(cols, row))
            full = d.get("full_result")
            if isinstance(full, str):
                d["full_result"] = json.loads(full)
            out.append(d)
        return out

    def close(self) -> None:
        """Close the database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None

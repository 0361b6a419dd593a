"""
Analysis Store — persistence gateway for validated analyses.

Two operations matter to the pipeline: store(query, result) → id and
fetch_latest(query) → record | None. Records are write-once.

Backends:
  • SqliteAnalysisStore — default, WAL-mode SQLite file
  • InMemoryAnalysisStore — process-local, for tests and throwaway runs
"""

from __future__ import annotations

import logging
import sqlite3
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

from impact_analyzer.models.analysis_models import (
    SCHEMA_VERSION,
    AnalysisRecord,
    AnalysisResult,
)
from impact_analyzer.models.query_models import JobQuery

logger = logging.getLogger(__name__)

_ANALYSES_TABLE = """
CREATE TABLE IF NOT EXISTS job_analyses (
    id               TEXT PRIMARY KEY,
    job_title        TEXT NOT NULL,
    industry         TEXT NOT NULL,
    responsibilities TEXT NOT NULL DEFAULT '',
    skills           TEXT NOT NULL DEFAULT '',
    query_key        TEXT NOT NULL,
    schema_version   TEXT NOT NULL,
    status           TEXT NOT NULL DEFAULT 'completed',
    analysis_result  TEXT NOT NULL,
    created_at       TEXT NOT NULL
);
"""

_QUERY_KEY_INDEX = """
CREATE INDEX IF NOT EXISTS idx_job_analyses_query_key
    ON job_analyses (query_key, created_at);
"""


class AnalysisStore(Protocol):
    """What the analysis pipeline needs from storage."""

    def store(self, query: JobQuery, result: AnalysisResult) -> str: ...

    def fetch_latest(self, query: JobQuery) -> AnalysisRecord | None: ...

    def get(self, analysis_id: str) -> AnalysisRecord | None: ...


def _new_record(query: JobQuery, result: AnalysisResult) -> AnalysisRecord:
    return AnalysisRecord(
        id=str(uuid.uuid4()),
        job_title=query.job_title,
        industry=query.industry,
        responsibilities=query.responsibilities,
        skills=query.skills,
        query_key=query.fingerprint(),
        schema_version=SCHEMA_VERSION,
        status="completed",
        analysis=result,
        created_at=datetime.now(timezone.utc),
    )


# ── SQLite ───────────────────────────────────────────────────────────────────


class SqliteAnalysisStore:
    """SQLite-backed analysis store with WAL mode."""

    def __init__(self, db_path: str | Path):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute(_ANALYSES_TABLE)
            conn.execute(_QUERY_KEY_INDEX)

    def store(self, query: JobQuery, result: AnalysisResult) -> str:
        """Persist a validated analysis. Returns its ID."""
        record = _new_record(query, result)
        with self._connect() as conn:
            conn.execute(
                """INSERT INTO job_analyses
                   (id, job_title, industry, responsibilities, skills, query_key,
                    schema_version, status, analysis_result, created_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    record.id,
                    record.job_title,
                    record.industry,
                    record.responsibilities or "",
                    record.skills or "",
                    record.query_key,
                    record.schema_version,
                    record.status,
                    record.analysis.model_dump_json(by_alias=True),
                    record.created_at.isoformat(),
                ),
            )
        logger.info(f"Stored analysis id={record.id} title={record.job_title}")
        return record.id

    def fetch_latest(self, query: JobQuery) -> AnalysisRecord | None:
        """Most recent analysis stored for the same title and industry."""
        with self._connect() as conn:
            row = conn.execute(
                """SELECT * FROM job_analyses
                   WHERE query_key = ? AND status = 'completed'
                   ORDER BY created_at DESC, rowid DESC LIMIT 1""",
                (query.fingerprint(),),
            ).fetchone()
        return self._row_to_record(row) if row else None

    def get(self, analysis_id: str) -> AnalysisRecord | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM job_analyses WHERE id = ?", (analysis_id,)
            ).fetchone()
        return self._row_to_record(row) if row else None

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> AnalysisRecord:
        return AnalysisRecord(
            id=row["id"],
            job_title=row["job_title"],
            industry=row["industry"],
            responsibilities=row["responsibilities"] or None,
            skills=row["skills"] or None,
            query_key=row["query_key"],
            schema_version=row["schema_version"],
            status=row["status"],
            analysis=AnalysisResult.model_validate_json(row["analysis_result"]),
            created_at=datetime.fromisoformat(row["created_at"]),
        )


# ── In-Memory ────────────────────────────────────────────────────────────────


class InMemoryAnalysisStore:
    """Session-scoped store, lost on restart."""

    def __init__(self) -> None:
        self._records: dict[str, AnalysisRecord] = {}

    def store(self, query: JobQuery, result: AnalysisResult) -> str:
        record = _new_record(query, result)
        self._records[record.id] = record
        return record.id

    def fetch_latest(self, query: JobQuery) -> AnalysisRecord | None:
        key = query.fingerprint()
        matches = [r for r in self._records.values() if r.query_key == key]
        return sorted(matches, key=lambda r: r.created_at)[-1] if matches else None

    def get(self, analysis_id: str) -> AnalysisRecord | None:
        return self._records.get(analysis_id)

    def __len__(self) -> int:
        return len(self._records)

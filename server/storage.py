"""SQLite storage for queued analysis jobs."""

import json
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from uuid import uuid4


BASE_DIR = Path(__file__).resolve().parents[1]
DATA_DIR = BASE_DIR / 'data'
DB_PATH = DATA_DIR / 'jobs.db'
HISTORY_DB_PATH = DATA_DIR / 'history.db'

JOB_STATUSES = ('queued', 'running', 'finished', 'failed')


def ensure_dirs() -> None:
    """Ensure the data directory exists."""
    DATA_DIR.mkdir(parents=True, exist_ok=True)


def history_db_path() -> Path:
    """Local history database, HISTORY_DB_PATH overriding the default."""
    from .config import settings
    return Path(settings.history_db_path) if settings.history_db_path else HISTORY_DB_PATH


def get_connection() -> sqlite3.Connection:
    """Get a DB connection."""
    ensure_dirs()
    conn = sqlite3.connect(DB_PATH)
    conn.row_factory = sqlite3.Row
    return conn


def init_db() -> None:
    """Initialize DB schema."""
    with get_connection() as conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS jobs (
                id TEXT PRIMARY KEY,
                created_at TEXT NOT NULL,
                status TEXT NOT NULL,
                idea TEXT NOT NULL,
                schema TEXT NOT NULL,
                analysis_id TEXT,
                result_json TEXT,
                error_message TEXT
            )
            """
        )
        conn.commit()


def create_job(idea: str, schema: str) -> str:
    """Insert a new job and return its ID."""
    job_id = str(uuid4())
    created_at = datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')
    with get_connection() as conn:
        conn.execute(
            """
            INSERT INTO jobs (id, created_at, status, idea, schema)
            VALUES (?, ?, ?, ?, ?)
            """,
            (job_id, created_at, 'queued', idea, schema)
        )
        conn.commit()
    return job_id


def update_status(job_id: str, status: str, error_message: str = '') -> None:
    """Update job status."""
    with get_connection() as conn:
        conn.execute(
            """
            UPDATE jobs
            SET status = ?, error_message = ?
            WHERE id = ?
            """,
            (status, error_message, job_id)
        )
        conn.commit()


def attach_result(job_id: str, analysis_id: str, result: dict) -> None:
    """Attach the finished analysis."""
    with get_connection() as conn:
        conn.execute(
            """
            UPDATE jobs
            SET analysis_id = ?, result_json = ?
            WHERE id = ?
            """,
            (analysis_id, json.dumps(result), job_id)
        )
        conn.commit()


def _row_to_job(row: sqlite3.Row) -> dict:
    job = dict(row)
    raw = job.pop('result_json', None)
    job['result'] = json.loads(raw) if raw else None
    return job


def get_job(job_id: str) -> dict | None:
    """Fetch job by ID."""
    with get_connection() as conn:
        row = conn.execute(
            "SELECT * FROM jobs WHERE id = ?",
            (job_id,)
        ).fetchone()
        if not row:
            return None
        return _row_to_job(row)


def list_jobs(limit: int = 50) -> list:
    """List recent jobs."""
    with get_connection() as conn:
        rows = conn.execute(
            "SELECT * FROM jobs ORDER BY created_at DESC LIMIT ?",
            (limit,)
        ).fetchall()
        return [_row_to_job(r) for r in rows]

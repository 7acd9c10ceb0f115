"""SQLite schema migrations."""
from __future__ import annotations

import os
import sqlite3
from typing import Iterable

SCHEMA: Iterable[str] = [
    """
CREATE TABLE IF NOT EXISTS interview_sessions (
  session_id TEXT PRIMARY KEY,
  candidate_id TEXT NOT NULL,
  completed INTEGER NOT NULL DEFAULT 0,
  final_score REAL,
  passed INTEGER,
  question_count INTEGER NOT NULL DEFAULT 0,
  snapshot_json TEXT NOT NULL,
  saved_at TEXT NOT NULL
);
""",
    """
CREATE INDEX IF NOT EXISTS idx_interview_sessions_candidate
  ON interview_sessions (candidate_id, saved_at);
""",
    """
CREATE TABLE IF NOT EXISTS candidates (
  candidate_id TEXT PRIMARY KEY,
  name TEXT NOT NULL,
  created_at TEXT NOT NULL,
  total_interviews INTEGER NOT NULL DEFAULT 0,
  average_score REAL NOT NULL DEFAULT 0,
  best_score REAL NOT NULL DEFAULT 0,
  total_passed INTEGER NOT NULL DEFAULT 0,
  pass_rate INTEGER NOT NULL DEFAULT 0,
  skill_profile_json TEXT NOT NULL DEFAULT '{}',
  last_interview_at TEXT
);
""",
]


def apply_schema(conn: sqlite3.Connection) -> None:
    cur = conn.cursor()
    for stmt in SCHEMA:
        cur.execute(stmt)
    conn.commit()


def migrate(db_path: str = "data/interview.db") -> None:
    """Apply schema migrations to the SQLite database."""

    directory = os.path.dirname(db_path) or "."
    os.makedirs(directory, exist_ok=True)
    conn = sqlite3.connect(db_path)
    try:
        apply_schema(conn)
    finally:
        conn.close()


if __name__ == "__main__":
    migrate()

"""Session snapshot persistence."""
from __future__ import annotations

import datetime as dt
import json
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .sqlite import get_conn


class StoredSession(BaseModel):
    session_id: str
    candidate_id: str
    completed: bool = False
    final_score: Optional[float] = None
    passed: Optional[bool] = None
    question_count: int = 0
    saved_at: str
    snapshot: Dict[str, Any] = Field(default_factory=dict)


def _row_to_stored(row: Any) -> StoredSession:
    passed = row["passed"]
    return StoredSession(
        session_id=row["session_id"],
        candidate_id=row["candidate_id"],
        completed=bool(row["completed"]),
        final_score=row["final_score"],
        passed=None if passed is None else bool(passed),
        question_count=row["question_count"],
        saved_at=row["saved_at"],
        snapshot=json.loads(row["snapshot_json"]),
    )


class SessionStore:
    """Key-value store of session snapshots; the last write for an id wins."""

    def save(self, session_id: str, snapshot: Dict[str, Any]) -> StoredSession:
        saved_at = dt.datetime.now(dt.timezone.utc).isoformat()
        passed = snapshot.get("passed")
        with get_conn() as conn:
            conn.execute(
                """INSERT OR REPLACE INTO interview_sessions
                   (session_id, candidate_id, completed, final_score, passed, question_count, snapshot_json, saved_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    session_id,
                    snapshot.get("candidate_id") or "anonymous",
                    1 if snapshot.get("completed") else 0,
                    snapshot.get("final_score"),
                    None if passed is None else int(bool(passed)),
                    int(snapshot.get("question_count") or 0),
                    json.dumps(snapshot, ensure_ascii=False),
                    saved_at,
                ),
            )
        return StoredSession(
            session_id=session_id,
            candidate_id=snapshot.get("candidate_id") or "anonymous",
            completed=bool(snapshot.get("completed")),
            final_score=snapshot.get("final_score"),
            passed=passed,
            question_count=int(snapshot.get("question_count") or 0),
            saved_at=saved_at,
            snapshot=snapshot,
        )

    def load(self, session_id: str) -> Optional[Dict[str, Any]]:
        stored = self.get(session_id)
        return stored.snapshot if stored else None

    def get(self, session_id: str) -> Optional[StoredSession]:
        with get_conn() as conn:
            row = conn.execute(
                "SELECT * FROM interview_sessions WHERE session_id = ?",
                (session_id,),
            ).fetchone()
        return _row_to_stored(row) if row else None

    def list(
        self,
        candidate_id: Optional[str] = None,
        *,
        completed_only: bool = False,
        limit: Optional[int] = None,
    ) -> List[StoredSession]:
        """Stored sessions, newest first."""

        clauses: List[str] = []
        params: List[Any] = []
        if candidate_id is not None:
            clauses.append("candidate_id = ?")
            params.append(candidate_id)
        if completed_only:
            clauses.append("completed = 1")
        sql = "SELECT * FROM interview_sessions"
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        sql += " ORDER BY saved_at DESC"
        if limit is not None:
            sql += " LIMIT ?"
            params.append(limit)
        with get_conn() as conn:
            rows = conn.execute(sql, params).fetchall()
        return [_row_to_stored(row) for row in rows]

    def count(self, *, completed_only: bool = False) -> int:
        sql = "SELECT COUNT(*) FROM interview_sessions"
        if completed_only:
            sql += " WHERE completed = 1"
        with get_conn() as conn:
            return int(conn.execute(sql).fetchone()[0])

    def delete(self, session_id: str) -> bool:
        with get_conn() as conn:
            cur = conn.execute("DELETE FROM interview_sessions WHERE session_id = ?", (session_id,))
            return cur.rowcount > 0


__all__ = ["SessionStore", "StoredSession"]

"""Persistence helpers for candidate profiles."""
from __future__ import annotations

import datetime as dt
import json
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from engines.numeric import round1, round_half_up

from .sqlite import get_conn


class TopicHistory(BaseModel):
    scores: List[float] = Field(default_factory=list)
    average: float = 0.0


class CandidateRecord(BaseModel):
    candidate_id: str
    name: str = "Anonymous"
    created_at: str
    total_interviews: int = 0
    average_score: float = 0.0
    best_score: float = 0.0
    total_passed: int = 0
    pass_rate: int = 0  # percent
    skill_profile: Dict[str, TopicHistory] = Field(default_factory=dict)
    last_interview_at: Optional[str] = None


def _now() -> str:
    return dt.datetime.now(dt.timezone.utc).isoformat()


def _row_to_record(row: Any) -> CandidateRecord:
    return CandidateRecord(
        candidate_id=row["candidate_id"],
        name=row["name"],
        created_at=row["created_at"],
        total_interviews=row["total_interviews"],
        average_score=row["average_score"],
        best_score=row["best_score"],
        total_passed=row["total_passed"],
        pass_rate=row["pass_rate"],
        skill_profile=json.loads(row["skill_profile_json"] or "{}"),
        last_interview_at=row["last_interview_at"],
    )


def _write(conn: Any, record: CandidateRecord) -> None:
    conn.execute(
        """INSERT OR REPLACE INTO candidates
           (candidate_id, name, created_at, total_interviews, average_score, best_score,
            total_passed, pass_rate, skill_profile_json, last_interview_at)
           VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
        (
            record.candidate_id,
            record.name,
            record.created_at,
            record.total_interviews,
            record.average_score,
            record.best_score,
            record.total_passed,
            record.pass_rate,
            json.dumps({topic: history.model_dump() for topic, history in record.skill_profile.items()}),
            record.last_interview_at,
        ),
    )


def find_candidate(candidate_id: str) -> Optional[CandidateRecord]:
    with get_conn() as conn:
        row = conn.execute("SELECT * FROM candidates WHERE candidate_id = ?", (candidate_id,)).fetchone()
    return _row_to_record(row) if row else None


def get_candidate(candidate_id: str, name: str = "Anonymous") -> CandidateRecord:
    """Return the candidate record, creating an empty one on first access."""

    existing = find_candidate(candidate_id)
    if existing is not None:
        return existing
    record = CandidateRecord(candidate_id=candidate_id, name=name, created_at=_now())
    with get_conn() as conn:
        _write(conn, record)
    return record


def list_candidates() -> List[CandidateRecord]:
    with get_conn() as conn:
        rows = conn.execute("SELECT * FROM candidates ORDER BY created_at").fetchall()
    return [_row_to_record(row) for row in rows]


def update_candidate_profile(
    candidate_id: str,
    *,
    final_score: float,
    passed: bool,
    topic_scores: Optional[Dict[str, float]] = None,
    name: Optional[str] = None,
) -> CandidateRecord:
    """Fold one completed session into the candidate's running profile."""

    record = get_candidate(candidate_id, name or "Anonymous")
    if name and record.name == "Anonymous":
        record.name = name

    record.total_interviews += 1
    record.last_interview_at = _now()
    record.best_score = max(record.best_score, final_score)
    if passed:
        record.total_passed += 1
    record.pass_rate = round_half_up(record.total_passed / record.total_interviews * 100)
    previous_total = record.average_score * (record.total_interviews - 1)
    record.average_score = round1((previous_total + final_score) / record.total_interviews)

    for topic, score in (topic_scores or {}).items():
        history = record.skill_profile.setdefault(topic, TopicHistory())
        history.scores.append(score)
        history.average = round1(sum(history.scores) / len(history.scores))

    with get_conn() as conn:
        _write(conn, record)
    return record


__all__ = [
    "CandidateRecord",
    "TopicHistory",
    "find_candidate",
    "get_candidate",
    "list_candidates",
    "update_candidate_profile",
]

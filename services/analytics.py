"""Cross-session analytics over stored interviews and candidate profiles.

Only completed sessions count: sessions are checkpointed after every turn,
so the store also holds interviews that are still running.
"""
from __future__ import annotations

import datetime as dt
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel, Field

from engines.numeric import mean, population_std, round1, round_half_up
from storage.candidates import CandidateRecord, find_candidate, list_candidates
from storage.sessions import SessionStore, StoredSession

RECENT_SESSIONS = 100
SUCCESS_RATE_WINDOW = 500
RECENT_ACTIVITY_DAYS = 7
TREND_THRESHOLD = 0.5

SCORE_BUCKETS = ("0-2", "3-4", "5-6", "7-8", "9-10")


class ScorePoint(BaseModel):
    interview_number: int
    session_id: str
    date: str
    score: float
    passed: bool
    difficulty: int
    question_count: int


class ImprovementRate(BaseModel):
    rate: float = 0.0
    trend: str = "insufficient_data"
    sessions: int = 0
    first_half_avg: Optional[float] = None
    second_half_avg: Optional[float] = None


class Overview(BaseModel):
    total_candidates: int
    total_sessions: int
    average_score: float
    overall_pass_rate: int
    recent_activity_count: int


class WeaknessCount(BaseModel):
    weakness: str
    count: int
    percentage: int


class SkillGapCount(BaseModel):
    topic: str
    count: int
    percentage: int


class DifficultyDistribution(BaseModel):
    easy: int = 0
    medium: int = 0
    hard: int = 0


class TopPerformer(BaseModel):
    candidate_id: str
    name: str
    average_score: float
    total_interviews: int
    pass_rate: int


class Dashboard(BaseModel):
    overview: Overview
    score_distribution: Dict[str, int]
    common_weaknesses: List[WeaknessCount] = Field(default_factory=list)
    common_skill_gaps: List[SkillGapCount] = Field(default_factory=list)
    difficulty_distribution: DifficultyDistribution
    top_performers: List[TopPerformer] = Field(default_factory=list)
    generated_at: str


class SkillTrend(BaseModel):
    topic: str
    average_score: float
    attempts: int
    trend: str


class Consistency(BaseModel):
    variance: float = 0.0
    standard_deviation: float = 0.0
    label: str = "insufficient_data"
    mean: Optional[float] = None


class CandidateAnalytics(BaseModel):
    profile: CandidateRecord
    score_progression: List[ScorePoint]
    improvement: ImprovementRate
    skill_breakdown: List[SkillTrend]
    strengths: List[SkillTrend]
    weaknesses: List[SkillTrend]
    consistency: Consistency
    generated_at: str


class DailyStats(BaseModel):
    sessions: int = 0
    passed: int = 0
    total_score: float = 0.0
    avg_score: float = 0.0
    pass_rate: int = 0


class SuccessRate(BaseModel):
    period: int
    total_sessions: int = 0
    pass_rate: int = 0
    avg_score: float = 0.0
    daily_breakdown: Dict[str, DailyStats] = Field(default_factory=dict)


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def _saved_at(stored: StoredSession) -> dt.datetime:
    saved = dt.datetime.fromisoformat(stored.saved_at)
    if saved.tzinfo is None:
        saved = saved.replace(tzinfo=dt.timezone.utc)
    return saved


def _level(stored: StoredSession) -> int:
    adaptive = stored.snapshot.get("adaptive") or {}
    return int(adaptive.get("current_level") or 1)


def _score_bucket(score: float) -> str:
    if score <= 2:
        return "0-2"
    if score <= 4:
        return "3-4"
    if score <= 6:
        return "5-6"
    if score <= 8:
        return "7-8"
    return "9-10"


def _percentage(count: int, total: int) -> int:
    return round_half_up(count / max(total, 1) * 100)


def score_progression(candidate_id: str, store: Optional[SessionStore] = None) -> List[ScorePoint]:
    """Completed interviews of one candidate, oldest first."""

    store = store or SessionStore()
    sessions = list(reversed(store.list(candidate_id, completed_only=True)))
    return [
        ScorePoint(
            interview_number=number,
            session_id=stored.session_id,
            date=stored.saved_at,
            score=stored.final_score or 0.0,
            passed=bool(stored.passed),
            difficulty=_level(stored),
            question_count=stored.question_count,
        )
        for number, stored in enumerate(sessions, start=1)
    ]


def improvement_rate(progression: Sequence[ScorePoint]) -> ImprovementRate:
    """Second-half average minus first-half average of the progression."""

    if len(progression) < 2:
        return ImprovementRate(sessions=len(progression))
    middle = len(progression) // 2
    first = mean([point.score for point in progression[:middle]])
    second = mean([point.score for point in progression[middle:]])
    rate = round1(second - first)
    trend = "stable"
    if rate > TREND_THRESHOLD:
        trend = "improving"
    elif rate < -TREND_THRESHOLD:
        trend = "declining"
    return ImprovementRate(
        rate=rate,
        trend=trend,
        sessions=len(progression),
        first_half_avg=round1(first),
        second_half_avg=round1(second),
    )


def consistency(scores: Sequence[float]) -> Consistency:
    if len(scores) < 2:
        return Consistency()
    avg = mean(scores)
    variance = sum((score - avg) ** 2 for score in scores) / len(scores)
    std = round1(population_std(scores))
    if std < 1:
        label = "very_consistent"
    elif std < 2:
        label = "consistent"
    elif std < 3:
        label = "moderate"
    else:
        label = "inconsistent"
    return Consistency(variance=round1(variance), standard_deviation=std, label=label, mean=round1(avg))


def _count_top(counts: Dict[str, int], limit: int = 10) -> List[tuple]:
    return sorted(counts.items(), key=lambda item: item[1], reverse=True)[:limit]


def dashboard(store: Optional[SessionStore] = None, *, now: Optional[dt.datetime] = None) -> Dashboard:
    """Platform-wide overview built from candidate profiles and recent completed sessions."""

    store = store or SessionStore()
    now = now or _utcnow()
    candidates = list_candidates()
    recent = store.list(completed_only=True, limit=RECENT_SESSIONS)

    distribution = {bucket: 0 for bucket in SCORE_BUCKETS}
    weaknesses: Dict[str, int] = {}
    gaps: Dict[str, int] = {}
    difficulty = DifficultyDistribution()
    for stored in recent:
        distribution[_score_bucket(stored.final_score or 0.0)] += 1
        report = stored.snapshot.get("feedback_report") or {}
        for item in report.get("improvements") or []:
            weaknesses[item["text"]] = weaknesses.get(item["text"], 0) + 1
        analysis = stored.snapshot.get("skill_gaps") or {}
        for gap in analysis.get("gaps") or []:
            gaps[gap["topic"]] = gaps.get(gap["topic"], 0) + 1
        level = _level(stored)
        if level == 1:
            difficulty.easy += 1
        elif level == 2:
            difficulty.medium += 1
        else:
            difficulty.hard += 1

    cutoff = now - dt.timedelta(days=RECENT_ACTIVITY_DAYS)
    recent_activity = [stored for stored in recent if _saved_at(stored) > cutoff]

    performers = sorted(
        (record for record in candidates if record.total_interviews >= 2),
        key=lambda record: record.average_score,
        reverse=True,
    )[:5]

    return Dashboard(
        overview=Overview(
            total_candidates=len(candidates),
            total_sessions=store.count(completed_only=True),
            average_score=round1(mean([record.average_score for record in candidates])),
            overall_pass_rate=round_half_up(mean([record.pass_rate for record in candidates])),
            recent_activity_count=len(recent_activity),
        ),
        score_distribution=distribution,
        common_weaknesses=[
            WeaknessCount(weakness=text, count=count, percentage=_percentage(count, len(recent)))
            for text, count in _count_top(weaknesses)
        ],
        common_skill_gaps=[
            SkillGapCount(topic=topic, count=count, percentage=_percentage(count, len(recent)))
            for topic, count in _count_top(gaps)
        ],
        difficulty_distribution=difficulty,
        top_performers=[
            TopPerformer(
                candidate_id=record.candidate_id,
                name=record.name,
                average_score=record.average_score,
                total_interviews=record.total_interviews,
                pass_rate=record.pass_rate,
            )
            for record in performers
        ],
        generated_at=now.isoformat(),
    )


def _skill_trend(topic: str, scores: Sequence[float], average: float) -> SkillTrend:
    if len(scores) < 2:
        trend = "insufficient_data"
    elif scores[-1] > scores[0]:
        trend = "improving"
    elif scores[-1] < scores[0]:
        trend = "declining"
    else:
        trend = "stable"
    return SkillTrend(topic=topic, average_score=average, attempts=len(scores), trend=trend)


def candidate_analytics(
    candidate_id: str,
    store: Optional[SessionStore] = None,
    *,
    now: Optional[dt.datetime] = None,
) -> Optional[CandidateAnalytics]:
    """Per-candidate analytics, or ``None`` for an unknown candidate."""

    record = find_candidate(candidate_id)
    if record is None:
        return None
    progression = score_progression(candidate_id, store)
    skills = sorted(
        (_skill_trend(topic, history.scores, history.average) for topic, history in record.skill_profile.items()),
        key=lambda skill: skill.average_score,
    )
    return CandidateAnalytics(
        profile=record,
        score_progression=progression,
        improvement=improvement_rate(progression),
        skill_breakdown=skills,
        strengths=[skill for skill in skills if skill.average_score >= 7],
        weaknesses=[skill for skill in skills if skill.average_score < 5],
        consistency=consistency([point.score for point in progression]),
        generated_at=(now or _utcnow()).isoformat(),
    )


def success_rate(
    days: int = 30,
    store: Optional[SessionStore] = None,
    *,
    now: Optional[dt.datetime] = None,
) -> SuccessRate:
    """Pass rate and average score of completed sessions saved in the last ``days`` days."""

    store = store or SessionStore()
    cutoff = (now or _utcnow()) - dt.timedelta(days=days)
    window = [
        stored
        for stored in store.list(completed_only=True, limit=SUCCESS_RATE_WINDOW)
        if _saved_at(stored) > cutoff
    ]
    if not window:
        return SuccessRate(period=days)

    daily: Dict[str, DailyStats] = {}
    for stored in window:
        day = daily.setdefault(_saved_at(stored).date().isoformat(), DailyStats())
        day.sessions += 1
        day.total_score += stored.final_score or 0.0
        if stored.passed:
            day.passed += 1
    for day in daily.values():
        day.avg_score = round1(day.total_score / day.sessions)
        day.pass_rate = round_half_up(day.passed / day.sessions * 100)

    passed = sum(1 for stored in window if stored.passed)
    return SuccessRate(
        period=days,
        total_sessions=len(window),
        pass_rate=round_half_up(passed / len(window) * 100),
        avg_score=round1(mean([stored.final_score or 0.0 for stored in window])),
        daily_breakdown=daily,
    )


__all__ = [
    "ScorePoint",
    "ImprovementRate",
    "Dashboard",
    "CandidateAnalytics",
    "SuccessRate",
    "score_progression",
    "improvement_rate",
    "consistency",
    "dashboard",
    "candidate_analytics",
    "success_rate",
]

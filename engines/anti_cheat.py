"""Anti-cheat monitor.

Six independent rule checks look at response timing, answer length,
vocabulary complexity and phrase repetition. Each check can raise at most one
flag per answer; flag points feed a decaying suspicion score in ``[0, 100]``
so isolated anomalies fade while sustained patterns compound. Flags are
informational and never block the interview.
"""
from __future__ import annotations

import time
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from .numeric import clamp, mean, population_std, round1, round_half_up

MIN_RESPONSE_TIME_SEC = 3.0
MAX_NATURAL_WPM = 200
COMPLEXITY_SPIKE_THRESHOLD = 2.5
MIN_PRIOR_ANSWERS = 3
LOW_SUSPICION = 20
MEDIUM_SUSPICION = 40
HIGH_SUSPICION = 60
DECAY = 0.7

FlagType = Literal[
    "fast_response",
    "high_wpm",
    "length_spike",
    "complexity_spike",
    "score_timing_mismatch",
    "repetitive_pattern",
]
Severity = Literal["low", "medium", "high"]
SuspicionLevel = Literal["clean", "low", "medium", "high"]

VERDICTS: Dict[str, str] = {
    "high": "Multiple suspicious patterns detected. Manual review recommended.",
    "medium": "Some irregular patterns noted. Results may need verification.",
    "low": "Minor irregularities detected. Generally reliable results.",
    "clean": "No suspicious patterns detected. Results are reliable.",
}


class CheatFlag(BaseModel):
    type: FlagType
    severity: Severity
    detail: str
    points: int


class AnswerMetrics(BaseModel):
    response_time_sec: Optional[float] = None
    word_count: int
    avg_word_length: float
    complexity_ratio: float


class AnswerIntegrity(BaseModel):
    flags: List[CheatFlag] = Field(default_factory=list)
    answer_suspicion_points: int = 0
    overall_suspicion_score: int
    suspicion_level: SuspicionLevel
    metrics: AnswerMetrics


class AntiCheatState(BaseModel):
    response_timings: List[float] = Field(default_factory=list)
    response_lengths: List[int] = Field(default_factory=list)
    vocabulary_complexities: List[float] = Field(default_factory=list)
    flags: List[CheatFlag] = Field(default_factory=list)
    last_question_at: Optional[float] = None  # epoch seconds
    overall_suspicion_score: int = Field(default=0, ge=0, le=100)


class TimingStats(BaseModel):
    average_response_time_sec: Optional[float] = None
    fastest_response_sec: Optional[float] = None
    slowest_response_sec: Optional[float] = None


class LengthConsistency(BaseModel):
    average_words: int = 0
    standard_deviation: float = 0.0


class IntegrityReport(BaseModel):
    overall_suspicion_score: int
    suspicion_level: SuspicionLevel
    total_flags: int
    flag_breakdown: Dict[str, int]
    flags: List[CheatFlag] = Field(default_factory=list)
    timing: TimingStats
    response_length_consistency: LengthConsistency
    verdict: str


def suspicion_level(score: int) -> SuspicionLevel:
    if score >= HIGH_SUSPICION:
        return "high"
    if score >= MEDIUM_SUSPICION:
        return "medium"
    if score >= LOW_SUSPICION:
        return "low"
    return "clean"


def question_asked(state: AntiCheatState, now: Optional[float] = None) -> None:
    """Stamp the moment a question reached the candidate."""

    state.last_question_at = time.time() if now is None else now


def repeated_trigrams(text: str) -> List[str]:
    words = text.lower().split()
    counts: Dict[str, int] = {}
    for i in range(len(words) - 2):
        tri = " ".join(words[i:i + 3])
        counts[tri] = counts.get(tri, 0) + 1
    return [phrase for phrase, count in counts.items() if count > 1]


def _elapsed(state: AntiCheatState, now: float) -> Optional[float]:
    if state.last_question_at is None:
        return None
    elapsed = now - state.last_question_at
    # Clock skew or a stamp from a restored snapshot in the future.
    if elapsed < 0:
        return None
    return elapsed


def analyze_answer(state: AntiCheatState, answer: str, score: float, now: Optional[float] = None) -> AnswerIntegrity:
    """Run the six integrity checks for one answer and update the suspicion score.

    Timing checks are skipped when no question stamp exists. The length and
    complexity spike checks need at least three earlier answers.
    """

    current = time.time() if now is None else now
    elapsed = _elapsed(state, current)
    text = answer if isinstance(answer, str) else ""

    words = text.split()
    word_count = len(words)
    avg_word_length = mean([len(w) for w in words])
    complexity = (sum(1 for w in words if len(w) > 6) / word_count) if word_count else 0.0

    prior_lengths = list(state.response_lengths)
    prior_complexities = list(state.vocabulary_complexities)
    state.response_lengths.append(word_count)
    state.vocabulary_complexities.append(complexity)
    if elapsed is not None:
        state.response_timings.append(elapsed)

    flags: List[CheatFlag] = []

    if elapsed is not None and elapsed < MIN_RESPONSE_TIME_SEC and word_count > 20:
        flags.append(
            CheatFlag(
                type="fast_response",
                severity="medium",
                detail=f"Responded with {word_count} words in {elapsed:.1f}s",
                points=15,
            )
        )

    if elapsed:
        wpm = word_count / elapsed * 60
        if wpm > MAX_NATURAL_WPM and word_count > 15:
            flags.append(
                CheatFlag(
                    type="high_wpm",
                    severity="high",
                    detail=f"Effective {round_half_up(wpm)} WPM (natural speech: ~130 WPM)",
                    points=25,
                )
            )

    if len(prior_lengths) >= MIN_PRIOR_ANSWERS:
        avg_prev = mean(prior_lengths)
        if avg_prev > 0 and word_count > avg_prev * 3 and word_count > 50:
            flags.append(
                CheatFlag(
                    type="length_spike",
                    severity="medium",
                    detail=(
                        f"Answer is {round_half_up(word_count / avg_prev)}x longer than average "
                        f"({word_count} vs {round_half_up(avg_prev)} words)"
                    ),
                    points=15,
                )
            )

    if len(prior_complexities) >= MIN_PRIOR_ANSWERS:
        avg_complexity = mean(prior_complexities)
        if avg_complexity > 0 and complexity > avg_complexity * COMPLEXITY_SPIKE_THRESHOLD:
            flags.append(
                CheatFlag(
                    type="complexity_spike",
                    severity="low",
                    detail=(
                        f"Vocabulary complexity spiked to {round_half_up(complexity * 100)}% "
                        f"(avg: {round_half_up(avg_complexity * 100)}%)"
                    ),
                    points=10,
                )
            )

    if elapsed is not None and elapsed < 5 and score >= 9 and word_count > 30:
        flags.append(
            CheatFlag(
                type="score_timing_mismatch",
                severity="high",
                detail=f"Perfect score ({score:g}/10) with very fast response ({elapsed:.1f}s)",
                points=20,
            )
        )

    repeated = repeated_trigrams(text)
    if len(repeated) > 2:
        flags.append(
            CheatFlag(
                type="repetitive_pattern",
                severity="low",
                detail=f"Detected {len(repeated)} repeated phrases",
                points=5,
            )
        )

    state.flags.extend(flags)
    points = sum(flag.points for flag in flags)
    state.overall_suspicion_score = int(
        clamp(round_half_up(state.overall_suspicion_score * DECAY + points * (1 - DECAY)), 0, 100)
    )

    return AnswerIntegrity(
        flags=flags,
        answer_suspicion_points=points,
        overall_suspicion_score=state.overall_suspicion_score,
        suspicion_level=suspicion_level(state.overall_suspicion_score),
        metrics=AnswerMetrics(
            response_time_sec=round1(elapsed) if elapsed is not None else None,
            word_count=word_count,
            avg_word_length=round1(avg_word_length),
            complexity_ratio=round_half_up(complexity * 100) / 100,
        ),
    )


def integrity_report(state: AntiCheatState) -> IntegrityReport:
    high = sum(1 for flag in state.flags if flag.severity == "high")
    medium = sum(1 for flag in state.flags if flag.severity == "medium")
    timings = state.response_timings
    level = suspicion_level(state.overall_suspicion_score)
    std = population_std(state.response_lengths) if len(state.response_lengths) >= 2 else 0.0
    return IntegrityReport(
        overall_suspicion_score=state.overall_suspicion_score,
        suspicion_level=level,
        total_flags=len(state.flags),
        flag_breakdown={"high": high, "medium": medium, "low": len(state.flags) - high - medium},
        flags=list(state.flags),
        timing=TimingStats(
            average_response_time_sec=round1(mean(timings)) if timings else None,
            fastest_response_sec=min(timings) if timings else None,
            slowest_response_sec=max(timings) if timings else None,
        ),
        response_length_consistency=LengthConsistency(
            average_words=round_half_up(mean(state.response_lengths)),
            standard_deviation=round1(std),
        ),
        verdict=VERDICTS[level],
    )


__all__ = [
    "CheatFlag",
    "AnswerMetrics",
    "AnswerIntegrity",
    "AntiCheatState",
    "IntegrityReport",
    "TimingStats",
    "LengthConsistency",
    "VERDICTS",
    "suspicion_level",
    "question_asked",
    "repeated_trigrams",
    "analyze_answer",
    "integrity_report",
]

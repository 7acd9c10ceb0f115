"""Adaptive difficulty controller.

The controller is a three-state machine (Easy, Medium, Hard) driven by the
rolling average of the most recent composite scores. Thresholds are
asymmetric per level so a single borderline answer does not bounce the
candidate between levels. It also decides when the next question should be a
follow-up instead of the next slot in the question-type rotation.

State lives in :class:`AdaptiveState`; the functions below mutate it in place.
"""
from __future__ import annotations

import datetime as dt
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from .numeric import clamp, mean, round1
from .types import QuestionType

MIN_LEVEL = 1
MAX_LEVEL = 3
# Level changes need at least this many recorded scores.
MIN_SCORES_FOR_CHANGE = 2
SNIPPET_CHARS = 100

FollowUpReason = Literal["incomplete_answer", "can_elaborate", "probe_deeper"]


class DifficultyLevel(BaseModel):
    name: str
    description: str
    prompt_modifier: str
    up: Optional[float] = None
    down: Optional[float] = None


DIFFICULTY_LEVELS: Dict[int, DifficultyLevel] = {
    1: DifficultyLevel(
        name="Easy",
        description="Fundamental concepts and definitions",
        prompt_modifier="Ask a basic, introductory-level question about fundamentals or definitions.",
        up=7,
    ),
    2: DifficultyLevel(
        name="Medium",
        description="Applied knowledge and scenarios",
        prompt_modifier=(
            "Ask a moderate-difficulty question involving practical application or scenario-based thinking."
        ),
        up=8,
        down=4,
    ),
    3: DifficultyLevel(
        name="Hard",
        description="Advanced concepts, system design, edge cases",
        prompt_modifier=(
            "Ask an advanced, challenging question about system design, edge cases, or deep technical concepts."
        ),
        down=5,
    ),
}

QUESTION_TYPES: List[QuestionType] = [
    "technical",
    "behavioral",
    "technical",
    "problem_solving",
    "technical",
    "behavioral",
    "technical",
    "system_design",
    "situational",
    "technical",
]

QUESTION_TYPE_PROMPTS: Dict[str, str] = {
    "technical": "Ask a technical question about programming concepts, algorithms, or specific technologies.",
    "behavioral": 'Ask a behavioral question using the STAR format (e.g., "Tell me about a time when...")',
    "problem_solving": "Present a coding or problem-solving scenario and ask how they would approach it.",
    "system_design": "Ask a system design question about architecture, scalability, or infrastructure.",
    "situational": "Ask a situational question about how they would handle a hypothetical workplace scenario.",
}


class FollowUpContext(BaseModel):
    question: str
    answer: str
    score: float
    reason: FollowUpReason
    prompt: str


class AdaptationEntry(BaseModel):
    question_index: int
    score: float
    avg_score: float
    previous_level: int
    new_level: int
    changed: bool
    timestamp: str


class FollowUpDecision(BaseModel):
    should_follow_up: bool
    reason: Optional[FollowUpReason] = None
    prompt: Optional[str] = None


class QuestionConfig(BaseModel):
    difficulty: int
    difficulty_name: str
    question_type: QuestionType
    is_follow_up: bool = False
    prompt: str


class AdaptiveState(BaseModel):
    current_level: int = Field(default=1, ge=MIN_LEVEL, le=MAX_LEVEL)
    window_size: int = Field(default=3, ge=1)
    score_history: List[float] = Field(default_factory=list)
    level_history: List[int] = Field(default_factory=list)
    question_index: int = 0
    follow_up_pending: bool = False
    follow_up_context: Optional[FollowUpContext] = None
    adaptation_log: List[AdaptationEntry] = Field(default_factory=list)

    @classmethod
    def start(cls, start_level: int = 1, window_size: int = 3) -> "AdaptiveState":
        level = int(clamp(start_level, MIN_LEVEL, MAX_LEVEL))
        return cls(current_level=level, window_size=window_size, level_history=[level])


class AdaptiveSummary(BaseModel):
    current_level: int
    current_level_name: str
    question_index: int
    total_answers: int
    recent_average: float
    score_history: List[float]
    level_history: List[int]
    adaptation_log: List[AdaptationEntry]


def _rolling_average(state: AdaptiveState) -> float:
    return mean(state.score_history[-state.window_size:])


def set_start_level(state: AdaptiveState, level: int) -> None:
    """Re-seed the starting level before any answer has been scored."""

    if state.score_history:
        raise ValueError("start level can only change before the first scored answer")
    state.current_level = int(clamp(level, MIN_LEVEL, MAX_LEVEL))
    state.level_history = [state.current_level]


def record_score(state: AdaptiveState, score: float, *, now: Optional[dt.datetime] = None) -> AdaptationEntry:
    """Append ``score`` and move at most one level based on the rolling average."""

    state.score_history.append(score)
    avg = _rolling_average(state)
    previous = state.current_level
    level = DIFFICULTY_LEVELS[previous]

    if len(state.score_history) >= MIN_SCORES_FOR_CHANGE:
        if level.up is not None and avg >= level.up:
            state.current_level = min(MAX_LEVEL, previous + 1)
        elif level.down is not None and avg <= level.down:
            state.current_level = max(MIN_LEVEL, previous - 1)

    stamp = now or dt.datetime.now(dt.timezone.utc)
    entry = AdaptationEntry(
        question_index=state.question_index,
        score=score,
        avg_score=round1(avg),
        previous_level=previous,
        new_level=state.current_level,
        changed=previous != state.current_level,
        timestamp=stamp.isoformat(),
    )
    state.adaptation_log.append(entry)
    state.level_history.append(state.current_level)
    return entry


def _follow_up_prompt(score: float, answer: str) -> str:
    snippet = answer[:SNIPPET_CHARS]
    if score <= 4:
        return (
            f'The candidate\'s answer was incomplete or unclear. They said: "{snippet}..." '
            "Ask a targeted follow-up to help them demonstrate their knowledge better. "
            'For example: "Can you be more specific about..." or "What exactly do you mean by..."'
        )
    return (
        f'The candidate gave a partial answer. They said: "{snippet}..." '
        "Ask them to elaborate on a specific aspect they mentioned but didn't fully explain."
    )


def _probe_prompt(answer: str) -> str:
    return (
        "The candidate gave an excellent answer. Ask a deeper follow-up question to probe their "
        f'understanding further. Reference their previous answer: "{answer[:SNIPPET_CHARS]}..."'
    )


def should_follow_up(state: AdaptiveState, score: float, question: str, answer: str) -> FollowUpDecision:
    """Decide whether the next question is a follow-up; at most one is ever pending."""

    reason: Optional[FollowUpReason] = None
    prompt = ""
    if not state.follow_up_pending:
        if 3 <= score <= 6:
            reason = "incomplete_answer" if score <= 4 else "can_elaborate"
            prompt = _follow_up_prompt(score, answer)
        elif score >= 8 and state.question_index % 3 == 0:
            reason = "probe_deeper"
            prompt = _probe_prompt(answer)

    if reason is None:
        state.follow_up_pending = False
        state.follow_up_context = None
        return FollowUpDecision(should_follow_up=False)

    state.follow_up_pending = True
    state.follow_up_context = FollowUpContext(
        question=question, answer=answer, score=score, reason=reason, prompt=prompt
    )
    return FollowUpDecision(should_follow_up=True, reason=reason, prompt=prompt)


def next_question_config(state: AdaptiveState) -> QuestionConfig:
    """Return the directive for the next question.

    A pending follow-up is consumed (flag and context cleared) without
    advancing the rotation; otherwise the question index moves one slot
    through :data:`QUESTION_TYPES`.
    """

    level = DIFFICULTY_LEVELS[state.current_level]
    if state.follow_up_pending and state.follow_up_context is not None:
        context = state.follow_up_context
        state.follow_up_pending = False
        state.follow_up_context = None
        return QuestionConfig(
            difficulty=state.current_level,
            difficulty_name=level.name,
            question_type="follow_up",
            is_follow_up=True,
            prompt=context.prompt or f'Ask a follow-up question about: "{context.question}"',
        )

    question_type = QUESTION_TYPES[state.question_index % len(QUESTION_TYPES)]
    state.question_index += 1
    return QuestionConfig(
        difficulty=state.current_level,
        difficulty_name=level.name,
        question_type=question_type,
        prompt=f"{level.prompt_modifier} {QUESTION_TYPE_PROMPTS[question_type]}",
    )


def summary(state: AdaptiveState) -> AdaptiveSummary:
    recent = state.score_history[-state.window_size:]
    return AdaptiveSummary(
        current_level=state.current_level,
        current_level_name=DIFFICULTY_LEVELS[state.current_level].name,
        question_index=state.question_index,
        total_answers=len(state.score_history),
        recent_average=round1(mean(recent)),
        score_history=list(state.score_history),
        level_history=list(state.level_history),
        adaptation_log=list(state.adaptation_log),
    )


__all__ = [
    "DIFFICULTY_LEVELS",
    "QUESTION_TYPES",
    "QUESTION_TYPE_PROMPTS",
    "DifficultyLevel",
    "FollowUpContext",
    "AdaptationEntry",
    "FollowUpDecision",
    "QuestionConfig",
    "AdaptiveState",
    "AdaptiveSummary",
    "set_start_level",
    "record_score",
    "should_follow_up",
    "next_question_config",
    "summary",
]

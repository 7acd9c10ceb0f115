"""Feedback synthesizer.

Builds the terminal :class:`FeedbackReport` for a completed session from the
accumulated answer evaluations, the adaptive state and the skill-gap
analysis. Everything here is a pure function of its inputs.
"""
from __future__ import annotations

from typing import Dict, List, Literal, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .adaptive import AdaptiveState
from .numeric import mean, round1, round_half_up
from .skill_gap import SkillGapAnalysis, critical_gaps
from .types import AnswerEvaluation

Priority = Literal["high", "medium", "low"]
Trajectory = Literal["ascending", "descending", "stable"]


class PerformanceTier(BaseModel):
    key: str
    min: float
    label: str
    emoji: str
    description: str


PERFORMANCE_TIERS: List[PerformanceTier] = [
    PerformanceTier(
        key="exceptional", min=9, label="Exceptional", emoji="\U0001F31F",
        description="Outstanding performance. Interview-ready.",
    ),
    PerformanceTier(
        key="strong", min=7.5, label="Strong", emoji="\U0001F4AA",
        description="Solid performance with minor gaps.",
    ),
    PerformanceTier(
        key="competent", min=6, label="Competent", emoji="\U0001F44D",
        description="Adequate but needs improvement in key areas.",
    ),
    PerformanceTier(
        key="developing", min=4, label="Developing", emoji="\U0001F4DA",
        description="Significant gaps. Needs focused practice.",
    ),
    PerformanceTier(
        key="beginner", min=0, label="Beginner", emoji="\U0001F331",
        description="Fundamental skills need development.",
    ),
]

HEADLINES: Dict[str, str] = {
    "exceptional": "Outstanding! You demonstrated mastery-level interview skills.",
    "strong": "Strong performance! You're well-prepared with minor areas to polish.",
    "competent": "Solid foundation. A few targeted improvements will make a big difference.",
    "developing": "Keep practicing! Focus on the improvement areas below to level up.",
    "beginner": "Everyone starts somewhere. Use the roadmap below to build your interview skills.",
}

DIMENSION_FEEDBACK: Dict[str, Dict[str, str]] = {
    "technical": {
        "high": "Excellent technical depth. You demonstrated strong command of relevant concepts and technologies.",
        "medium": "Adequate technical knowledge. Consider deepening your understanding of core concepts.",
        "low": (
            "Technical knowledge needs strengthening. Focus on fundamentals and practice explaining concepts clearly."
        ),
    },
    "communication": {
        "high": "Clear, well-structured responses. You communicate complex ideas effectively.",
        "medium": (
            "Communication is decent but could be more structured. "
            "Try using the STAR method for behavioral questions."
        ),
        "low": "Responses need more structure and detail. Practice giving complete, multi-sentence answers.",
    },
    "confidence": {
        "high": "Confident and assertive delivery. You project professionalism and conviction.",
        "medium": (
            'Generally confident but some hesitation detected. Reduce hedging language like "I think" or "maybe".'
        ),
        "low": "Work on projecting more confidence. Replace uncertain phrases with definitive statements.",
    },
    "relevance": {
        "high": "Excellent use of relevant terminology and domain-specific language.",
        "medium": "Good relevance but could incorporate more specific technical terms.",
        "low": "Responses could be more focused on the topic. Use domain-specific vocabulary.",
    },
}

IMMEDIATE_ACTIONS: Dict[str, str] = {
    "Technical Knowledge": "Review fundamental concepts in your target technology. Practice explaining them out loud.",
    "Communication": (
        "Record yourself answering 3 common interview questions. Listen back and note areas to improve."
    ),
    "Confidence": 'Practice power poses before mock interviews. Replace "I think" with "I know" in daily speech.',
    "Relevance": "Create a list of 20 key terms for your target role. Practice using them naturally in sentences.",
}


class DimensionAverages(BaseModel):
    ai_judgment: float = 0.0
    keyword_coverage: float = 0.0
    completeness: float = 0.0
    confidence: float = 0.0


class DimensionFeedback(BaseModel):
    score: float
    label: str
    feedback: str


class ReportDimensions(BaseModel):
    technical_knowledge: DimensionFeedback
    communication: DimensionFeedback
    confidence: DimensionFeedback
    relevance: DimensionFeedback

    def ordered(self) -> List[DimensionFeedback]:
        return [self.technical_knowledge, self.communication, self.confidence, self.relevance]


class ReportSummary(BaseModel):
    overall_score: float
    tier: PerformanceTier
    passed: bool
    question_count: int
    duration_sec: float
    headline: str


class StrengthItem(BaseModel):
    text: str
    frequency: int
    consistency: int  # percent of answers


class ImprovementItem(BaseModel):
    text: str
    frequency: int
    priority: Priority


class RoadmapItem(BaseModel):
    area: Optional[str] = None
    action: str
    priority: Priority


class Roadmap(BaseModel):
    immediate: List[RoadmapItem] = Field(default_factory=list)
    short_term: List[RoadmapItem] = Field(default_factory=list)
    long_term: List[RoadmapItem] = Field(default_factory=list)


class AnswerHighlight(BaseModel):
    answer_number: int
    score: int
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)


class AnswerHighlights(BaseModel):
    best: Optional[AnswerHighlight] = None
    worst: Optional[AnswerHighlight] = None
    all: List[AnswerHighlight] = Field(default_factory=list)


class DifficultyProgression(BaseModel):
    start_level: int
    end_level: int
    peaked: int
    trajectory: Trajectory


class FeedbackReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    summary: ReportSummary
    dimensions: ReportDimensions
    dimension_averages: DimensionAverages
    strengths: List[StrengthItem] = Field(default_factory=list)
    improvements: List[ImprovementItem] = Field(default_factory=list)
    roadmap: Roadmap
    answer_highlights: AnswerHighlights
    difficulty_progression: Optional[DifficultyProgression] = None


def performance_tier(score: float) -> PerformanceTier:
    for tier in PERFORMANCE_TIERS:
        if score >= tier.min:
            return tier
    return PERFORMANCE_TIERS[-1]


def headline(tier: PerformanceTier) -> str:
    return f"{tier.emoji} {HEADLINES[tier.key]}"


def aggregate_dimensions(evaluations: Sequence[AnswerEvaluation]) -> DimensionAverages:
    """Average each dimension across evaluations; no evaluations averages to zeros."""

    if not evaluations:
        return DimensionAverages()
    return DimensionAverages(
        ai_judgment=round1(mean([e.dimensions.ai_judgment.score for e in evaluations])),
        keyword_coverage=round1(mean([e.dimensions.keyword_coverage.score for e in evaluations])),
        completeness=round1(mean([e.dimensions.completeness.score for e in evaluations])),
        confidence=round1(mean([e.dimensions.confidence.score for e in evaluations])),
    )


def dimension_feedback(dimension: str, score: float) -> str:
    level = "high" if score >= 7 else "medium" if score >= 5 else "low"
    return DIMENSION_FEEDBACK.get(dimension, {}).get(level, "No specific feedback available.")


def _dimensions(averages: DimensionAverages) -> ReportDimensions:
    def _entry(key: str, label: str, score: float) -> DimensionFeedback:
        return DimensionFeedback(score=score, label=label, feedback=dimension_feedback(key, score))

    return ReportDimensions(
        technical_knowledge=_entry("technical", "Technical Knowledge", averages.ai_judgment),
        communication=_entry("communication", "Communication & Clarity", averages.completeness),
        confidence=_entry("confidence", "Confidence & Delivery", averages.confidence),
        relevance=_entry("relevance", "Relevance & Terminology", averages.keyword_coverage),
    )


def _frequency(statements: Sequence[Sequence[str]]) -> List[Tuple[str, int]]:
    counts: Dict[str, int] = {}
    for group in statements:
        for text in group:
            counts[text] = counts.get(text, 0) + 1
    # sorted() is stable, so ties keep first-seen order
    return sorted(counts.items(), key=lambda item: item[1], reverse=True)


def top_strengths(evaluations: Sequence[AnswerEvaluation], averages: DimensionAverages, limit: int = 5) -> List[StrengthItem]:
    total = max(len(evaluations), 1)
    items = [
        StrengthItem(text=text, frequency=count, consistency=round_half_up(count / total * 100))
        for text, count in _frequency([e.strengths for e in evaluations])[:limit]
    ]
    if averages.ai_judgment >= 7 and not any("technical" in item.text for item in items):
        items.append(StrengthItem(text="Consistent technical accuracy", frequency=0, consistency=0))
    if averages.confidence >= 7 and not any("confident" in item.text for item in items):
        items.append(StrengthItem(text="Strong professional demeanor", frequency=0, consistency=0))
    return items[:limit]


def _priority(count: int) -> Priority:
    if count >= 3:
        return "high"
    if count >= 2:
        return "medium"
    return "low"


def top_improvements(evaluations: Sequence[AnswerEvaluation], limit: int = 5) -> List[ImprovementItem]:
    return [
        ImprovementItem(text=text, frequency=count, priority=_priority(count))
        for text, count in _frequency([e.weaknesses for e in evaluations])[:limit]
    ]


def build_roadmap(averages: DimensionAverages, skill_gaps: Optional[SkillGapAnalysis]) -> Roadmap:
    """Three-horizon plan from the two weakest dimensions and the skill-gap analysis."""

    ranked = sorted(
        [
            ("Technical Knowledge", averages.ai_judgment),
            ("Communication", averages.completeness),
            ("Confidence", averages.confidence),
            ("Relevance", averages.keyword_coverage),
        ],
        key=lambda item: item[1],
    )
    (weakest, weakest_score), (second, second_score) = ranked[0], ranked[1]
    roadmap = Roadmap()

    if weakest_score < 6:
        roadmap.immediate.append(
            RoadmapItem(
                area=weakest,
                action=IMMEDIATE_ACTIONS.get(weakest, "Practice this skill area daily."),
                priority="high",
            )
        )
    if second_score < 6:
        roadmap.immediate.append(
            RoadmapItem(
                area=second,
                action=f"Focus secondary attention on improving {second.lower()}.",
                priority="medium",
            )
        )
    for gap in critical_gaps(skill_gaps)[:2]:
        roadmap.immediate.append(RoadmapItem(area=gap.topic, action=gap.recommendation, priority="high"))

    roadmap.short_term.append(
        RoadmapItem(action="Complete 5 full mock interviews and track your score progression.", priority="high")
    )
    if averages.completeness < 6:
        roadmap.short_term.append(
            RoadmapItem(
                action=(
                    "Practice STAR method: Write out 5 stories from your experience "
                    "following Situation-Task-Action-Result."
                ),
                priority="high",
            )
        )
    if skill_gaps is not None and skill_gaps.gaps:
        topics = ", ".join(gap.topic for gap in skill_gaps.gaps[:3])
        roadmap.short_term.append(
            RoadmapItem(action=f"Study these identified skill gaps: {topics}", priority="high")
        )

    roadmap.long_term.extend(
        [
            RoadmapItem(action="Do one mock interview per week to maintain and improve skills.", priority="medium"),
            RoadmapItem(
                action="Read technical blogs and practice explaining new concepts to build terminology.",
                priority="medium",
            ),
            RoadmapItem(
                action="Join a study group or find a mock interview partner for peer feedback.", priority="low"
            ),
        ]
    )
    return roadmap


def answer_highlights(evaluations: Sequence[AnswerEvaluation]) -> AnswerHighlights:
    if not evaluations:
        return AnswerHighlights()
    ranked = sorted(
        (
            AnswerHighlight(
                answer_number=position + 1,
                score=evaluation.composite_score,
                strengths=evaluation.strengths[:2],
                weaknesses=evaluation.weaknesses[:2],
            )
            for position, evaluation in enumerate(evaluations)
        ),
        key=lambda item: item.score,
        reverse=True,
    )
    return AnswerHighlights(best=ranked[0], worst=ranked[-1], all=ranked)


def trajectory(level_history: Sequence[int]) -> Trajectory:
    if len(level_history) < 2:
        return "stable"
    if level_history[-1] > level_history[0]:
        return "ascending"
    if level_history[-1] < level_history[0]:
        return "descending"
    return "stable"


def difficulty_progression(adaptive: Optional[AdaptiveState]) -> Optional[DifficultyProgression]:
    if adaptive is None:
        return None
    history = adaptive.level_history or [1]
    return DifficultyProgression(
        start_level=history[0],
        end_level=adaptive.current_level,
        peaked=max(history),
        trajectory=trajectory(adaptive.level_history),
    )


def build_report(
    *,
    final_score: float,
    passed: bool,
    evaluations: Sequence[AnswerEvaluation],
    adaptive: Optional[AdaptiveState] = None,
    skill_gaps: Optional[SkillGapAnalysis] = None,
    duration_sec: float = 0.0,
    question_count: int = 0,
) -> FeedbackReport:
    """Synthesize the final feedback report for a session."""

    tier = performance_tier(final_score)
    averages = aggregate_dimensions(evaluations)
    return FeedbackReport(
        summary=ReportSummary(
            overall_score=final_score,
            tier=tier,
            passed=passed,
            question_count=question_count,
            duration_sec=duration_sec,
            headline=headline(tier),
        ),
        dimensions=_dimensions(averages),
        dimension_averages=averages,
        strengths=top_strengths(evaluations, averages),
        improvements=top_improvements(evaluations),
        roadmap=build_roadmap(averages, skill_gaps),
        answer_highlights=answer_highlights(evaluations),
        difficulty_progression=difficulty_progression(adaptive),
    )


def _fmt(value: float) -> str:
    return f"{value:g}"


def spoken_summary(report: FeedbackReport) -> str:
    """Condensed plain-text summary for text-to-speech playback."""

    parts = [
        f"Your interview score is {_fmt(report.summary.overall_score)} out of 10.",
        report.summary.tier.description,
    ]
    if report.strengths:
        parts.append(f"Your top strengths are: {' and '.join(s.text for s in report.strengths[:2])}.")
    if report.improvements:
        parts.append(f"Key areas to improve: {' and '.join(i.text for i in report.improvements[:2])}.")
    weakest = min(report.dimensions.ordered(), key=lambda dim: dim.score)
    if weakest.score < 6:
        parts.append(f"Focus especially on {weakest.label.lower()}.")
    return " ".join(parts)


__all__ = [
    "PERFORMANCE_TIERS",
    "PerformanceTier",
    "DimensionAverages",
    "DimensionFeedback",
    "ReportDimensions",
    "ReportSummary",
    "StrengthItem",
    "ImprovementItem",
    "RoadmapItem",
    "Roadmap",
    "AnswerHighlight",
    "AnswerHighlights",
    "DifficultyProgression",
    "FeedbackReport",
    "performance_tier",
    "headline",
    "aggregate_dimensions",
    "dimension_feedback",
    "top_strengths",
    "top_improvements",
    "build_roadmap",
    "answer_highlights",
    "trajectory",
    "difficulty_progression",
    "build_report",
    "spoken_summary",
]

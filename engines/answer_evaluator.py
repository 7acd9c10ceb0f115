"""Composite answer evaluation.

Combines the externally supplied LLM judgement with the three lexical
analyzers into a single :class:`AnswerEvaluation`. The function is pure and
never raises on malformed input: non-string answers or questions are read as
empty text and an unusable LLM score counts as ``0``.
"""
from __future__ import annotations

from typing import Any, List

from .lexical import evaluate_completeness, evaluate_confidence, evaluate_keyword_coverage
from .numeric import clamp, round_half_up
from .types import (
    AnswerEvaluation,
    CompletenessAnalysis,
    ConfidenceAnalysis,
    DimensionScore,
    Dimensions,
    KeywordAnalysis,
    Rating,
)

AI_WEIGHT = 0.35
KEYWORD_WEIGHT = 0.20
COMPLETENESS_WEIGHT = 0.25
CONFIDENCE_WEIGHT = 0.20


def rating_for(score: float) -> Rating:
    if score >= 8:
        return "excellent"
    if score >= 6:
        return "good"
    if score >= 4:
        return "average"
    return "needs_improvement"


def _coerce_text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _coerce_score(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return 0.0
    if numeric != numeric:  # NaN
        return 0.0
    return clamp(numeric, 0.0, 10.0)


def _strengths(kw: KeywordAnalysis, comp: CompletenessAnalysis, conf: ConfidenceAnalysis, ai: float) -> List[str]:
    out: List[str] = []
    if ai >= 7:
        out.append("Strong technical understanding")
    if kw.score >= 7:
        out.append("Good use of technical terminology")
    if comp.score >= 7:
        out.append("Well-structured and detailed response")
    if comp.has_examples:
        out.append("Provided concrete examples")
    if comp.has_numbers:
        out.append("Used quantifiable data points")
    if conf.score >= 7:
        out.append("Confident and assertive communication")
    if comp.star_coverage.covered_count >= 3:
        out.append("Good STAR method structure")
    if len(conf.assertive_language) >= 2:
        out.append("Assertive language patterns")
    return out


def _weaknesses(kw: KeywordAnalysis, comp: CompletenessAnalysis, conf: ConfidenceAnalysis, ai: float) -> List[str]:
    out: List[str] = []
    if ai < 5:
        out.append("Answer lacks technical accuracy")
    if kw.score < 4:
        out.append("Missing key technical terms")
    if comp.word_count < 20:
        out.append("Response is too brief")
    if comp.word_count > 200:
        out.append("Response is too verbose")
    if not comp.has_examples:
        out.append("No concrete examples provided")
    if comp.structure_score < 5:
        out.append("Answer lacks structure")
    if conf.score < 5:
        out.append("Sounds uncertain or hesitant")
    if len(conf.hedging_phrases) > 3:
        out.append("Excessive hedging language")
    if len(conf.filler_words) > 2:
        out.append("Too many filler words")
    return out


def _tips(kw: KeywordAnalysis, comp: CompletenessAnalysis, conf: ConfidenceAnalysis, ai: float) -> List[str]:
    out: List[str] = []
    if kw.score < 5:
        out.append("Use more specific technical terms relevant to the topic")
    if comp.word_count < 20:
        out.append("Elaborate more - aim for 30-60 words per response")
    if not comp.has_examples:
        out.append('Include specific examples: "For instance..." or "In my experience..."')
    if not comp.has_numbers:
        out.append('Add metrics when possible: "reduced load time by 40%"')
    if conf.score < 5:
        out.append('Replace "I think" and "maybe" with "I know" and "I have experience with"')
    if len(conf.filler_words) > 2:
        out.append("Reduce filler words (um, uh, like) - pause instead")
    if comp.star_coverage.covered_count < 2:
        out.append("Structure behavioral answers using STAR: Situation, Task, Action, Result")
    if comp.structure_score < 5:
        out.append("Use multiple sentences to structure your answer clearly")
    if ai < 5:
        out.append("Review core concepts in this topic area before the next attempt")
    return out


def evaluate(answer: Any, question: Any, llm_score: Any = 0) -> AnswerEvaluation:
    """Score one answer against the question that prompted it."""

    text = _coerce_text(answer)
    prompt = _coerce_text(question)
    ai = _coerce_score(llm_score)

    keywords = evaluate_keyword_coverage(text, prompt)
    completeness = evaluate_completeness(text)
    confidence = evaluate_confidence(text)

    weighted = (
        ai * AI_WEIGHT
        + clamp(keywords.score, 0, 10) * KEYWORD_WEIGHT
        + clamp(completeness.score, 0, 10) * COMPLETENESS_WEIGHT
        + clamp(confidence.score, 0, 10) * CONFIDENCE_WEIGHT
    )
    composite = int(clamp(round_half_up(weighted), 0, 10))

    return AnswerEvaluation(
        composite_score=composite,
        dimensions=Dimensions(
            ai_judgment=DimensionScore(score=ai, rating=rating_for(ai), weight=AI_WEIGHT),
            keyword_coverage=DimensionScore(
                score=keywords.score, rating=rating_for(keywords.score), weight=KEYWORD_WEIGHT
            ),
            completeness=DimensionScore(
                score=completeness.score, rating=rating_for(completeness.score), weight=COMPLETENESS_WEIGHT
            ),
            confidence=DimensionScore(
                score=confidence.score, rating=rating_for(confidence.score), weight=CONFIDENCE_WEIGHT
            ),
        ),
        keyword_analysis=keywords,
        completeness_analysis=completeness,
        confidence_analysis=confidence,
        strengths=_strengths(keywords, completeness, confidence, ai),
        weaknesses=_weaknesses(keywords, completeness, confidence, ai),
        tips=_tips(keywords, completeness, confidence, ai),
    )


__all__ = ["evaluate", "rating_for", "AI_WEIGHT", "KEYWORD_WEIGHT", "COMPLETENESS_WEIGHT", "CONFIDENCE_WEIGHT"]

import pytest
from pydantic import ValidationError

from engines.adaptive import AdaptiveState, record_score
from engines.answer_evaluator import evaluate
from engines.feedback import (
    DimensionAverages,
    aggregate_dimensions,
    build_report,
    dimension_feedback,
    performance_tier,
    spoken_summary,
    top_strengths,
    trajectory,
)
from engines.skill_gap import SkillGapState, analyze, track_answer

RICH_ANSWER = (
    "In my last project I was responsible for the checkout service. "
    "I implemented a caching layer because the database was overloaded. "
    "For example, hot product queries went through Redis. "
    "As a result we reduced latency by 40 percent."
)


@pytest.mark.parametrize(
    "score, key",
    [(9, "exceptional"), (8, "strong"), (7.5, "strong"), (6, "competent"), (5.9, "developing"), (3, "beginner")],
)
def test_performance_tiers(score, key):
    assert performance_tier(score).key == key


def test_dimension_feedback_levels():
    assert dimension_feedback("technical", 7).startswith("Excellent technical depth")
    assert dimension_feedback("confidence", 5).startswith("Generally confident")
    assert dimension_feedback("relevance", 2).startswith("Responses could be more focused")


def test_trajectory():
    assert trajectory([1]) == "stable"
    assert trajectory([1, 1, 2]) == "ascending"
    assert trajectory([3, 2, 2]) == "descending"
    assert trajectory([2, 3, 2]) == "stable"


def test_report_without_answers():
    report = build_report(final_score=0.0, passed=False, evaluations=[])
    assert report.summary.tier.key == "beginner"
    assert report.dimension_averages.ai_judgment == 0.0
    assert report.answer_highlights.best is None
    assert [item.area for item in report.roadmap.immediate] == ["Technical Knowledge", "Communication"]
    assert len(report.roadmap.long_term) == 3
    assert report.difficulty_progression is None


def test_report_aggregates_evaluations():
    evaluations = [
        evaluate("", "What is recursion?", 0),
        evaluate("", "What is recursion?", 0),
        evaluate(RICH_ANSWER, "Tell me about a time you improved performance.", 9),
    ]
    adaptive = AdaptiveState.start(1, 3)
    for evaluation in evaluations:
        record_score(adaptive, evaluation.composite_score)

    report = build_report(
        final_score=3.0,
        passed=False,
        evaluations=evaluations,
        adaptive=adaptive,
        duration_sec=120,
        question_count=4,
    )
    averages = aggregate_dimensions(evaluations)
    assert report.dimension_averages == averages
    assert averages.ai_judgment == 3.0
    assert averages.confidence == 7.0

    improvements = {item.text: item for item in report.improvements}
    assert improvements["Response is too brief"].frequency == 2
    assert improvements["Response is too brief"].priority == "medium"
    assert len(report.improvements) <= 5
    assert len(report.strengths) <= 5

    best = report.answer_highlights.best
    assert best.answer_number == 3
    assert report.answer_highlights.worst.score == 1
    assert report.difficulty_progression.start_level == 1
    assert report.summary.headline.endswith(
        "Everyone starts somewhere. Use the roadmap below to build your interview skills."
    )


def test_critical_skill_gaps_enter_immediate_roadmap():
    state = SkillGapState.for_role("mid")
    track_answer(state, "How do you design a database schema?", "a", 2, "technical")
    report = build_report(
        final_score=7.0,
        passed=True,
        evaluations=[evaluate(RICH_ANSWER, "Tell me about a project.", 8)],
        skill_gaps=analyze(state),
    )
    areas = [item.area for item in report.roadmap.immediate]
    assert "Database" in areas
    assert any("Database" in item.action for item in report.roadmap.short_term)


def test_spoken_summary():
    report = build_report(
        final_score=4.5,
        passed=False,
        evaluations=[evaluate("", "What is recursion?", 4)],
    )
    text = spoken_summary(report)
    assert text.startswith("Your interview score is 4.5 out of 10. Significant gaps.")
    assert "Key areas to improve: " in text
    assert text.endswith("Focus especially on communication & clarity.")


def test_report_is_immutable():
    report = build_report(final_score=5.0, passed=False, evaluations=[])
    with pytest.raises(ValidationError):
        report.summary = None


def test_fallback_strengths_match_case_sensitively():
    evaluation = evaluate(RICH_ANSWER, "Tell me about a project.", 8).model_copy(
        update={"strengths": ["Strong technical understanding", "Confident and assertive communication"]}
    )
    items = top_strengths([evaluation], DimensionAverages(ai_judgment=8, confidence=8))
    texts = [item.text for item in items]
    assert "Consistent technical accuracy" not in texts
    assert texts[-1] == "Strong professional demeanor"
    assert "Confident and assertive communication" in texts

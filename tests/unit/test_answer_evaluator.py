import math

import pytest
from pydantic import ValidationError

from engines.answer_evaluator import evaluate, rating_for
from engines.numeric import round_half_up

RICH_ANSWER = (
    "In my last project I was responsible for the checkout service. "
    "I implemented a caching layer because the database was overloaded. "
    "For example, hot product queries went through Redis. "
    "As a result we reduced latency by 40 percent."
)


def test_rating_buckets():
    assert rating_for(8) == "excellent"
    assert rating_for(6) == "good"
    assert rating_for(4) == "average"
    assert rating_for(3.9) == "needs_improvement"


def test_empty_answer_floor():
    result = evaluate("", "Explain closures in JavaScript", 0)
    assert result.dimensions.keyword_coverage.score == 0
    assert result.dimensions.completeness.score <= 2
    assert result.dimensions.confidence.score == 7
    assert result.composite_score == 1
    assert result.weaknesses == [
        "Answer lacks technical accuracy",
        "Missing key technical terms",
        "Response is too brief",
        "No concrete examples provided",
        "Answer lacks structure",
    ]
    assert result.strengths == ["Confident and assertive communication"]


@pytest.mark.parametrize("answer", [None, 42, ["a list"]])
def test_non_string_answer_reads_as_empty(answer):
    result = evaluate(answer, "What is recursion?", 0)
    assert result.composite_score == 1
    assert result.completeness_analysis.word_count == 0


@pytest.mark.parametrize("raw, expected", [("abc", 0), (None, 0), (math.nan, 0), (True, 0), (15, 10), (-3, 0)])
def test_llm_score_is_coerced(raw, expected):
    result = evaluate("", "What is recursion?", raw)
    assert result.dimensions.ai_judgment.score == expected


def test_ai_score_dominates_weighting():
    # 10*0.35 + 7*0.20 = 4.9
    assert evaluate("", "What is recursion?", 10).composite_score == 5


def test_composite_matches_weighted_blend():
    result = evaluate(RICH_ANSWER, "Tell me about a time you improved performance.", 8)
    dims = result.dimensions
    weighted = (
        dims.ai_judgment.score * 0.35
        + dims.keyword_coverage.score * 0.20
        + dims.completeness.score * 0.25
        + dims.confidence.score * 0.20
    )
    assert result.composite_score == round_half_up(weighted)
    assert dims.completeness.score == 10
    assert "Provided concrete examples" in result.strengths
    assert "Used quantifiable data points" in result.strengths
    assert "Good STAR method structure" in result.strengths
    assert sum(d.weight for d in (dims.ai_judgment, dims.keyword_coverage, dims.completeness, dims.confidence)) == pytest.approx(1.0)


def test_evaluation_is_immutable():
    result = evaluate("short", "What is recursion?", 5)
    with pytest.raises(ValidationError):
        result.composite_score = 9


def test_evaluate_is_deterministic():
    first = evaluate(RICH_ANSWER, "Design a cache", 7)
    second = evaluate(RICH_ANSWER, "Design a cache", 7)
    assert first == second

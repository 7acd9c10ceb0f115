from engines.lexical import (
    detect_relevant_topics,
    evaluate_completeness,
    evaluate_confidence,
    evaluate_keyword_coverage,
    evaluate_star_method,
)

RICH_ANSWER = (
    "In my last project I was responsible for the checkout service. "
    "I implemented a caching layer because the database was overloaded. "
    "For example, hot product queries went through Redis. "
    "As a result we reduced latency by 40 percent."
)


def test_topics_detected_from_question():
    assert detect_relevant_topics("Explain closures in JavaScript") == ["javascript"]
    assert "behavioral" in detect_relevant_topics("Tell me about a conflict on your team")
    assert detect_relevant_topics("What is recursion?") == ["general"]


def test_keyword_coverage_uses_capped_denominator():
    result = evaluate_keyword_coverage(
        "A closure captures scope; with async and await a promise resolves.",
        "Explain closures in JavaScript",
    )
    assert set(result.matched_keywords) == {"closure", "async", "await", "promise", "scope"}
    assert result.match_count == 5
    # 5 of min(total, 8) keywords -> 6.25 -> 6
    assert result.score == 6
    assert result.total_relevant > 8


def test_keyword_coverage_never_exceeds_ten():
    answer = "algorithm data structure complexity testing debugging git agile scrum code review deployment monitoring"
    result = evaluate_keyword_coverage(answer, "What is recursion?")
    assert result.score == 10


def test_keyword_coverage_empty_answer():
    result = evaluate_keyword_coverage("", "Explain closures in JavaScript")
    assert result.score == 0
    assert result.matched_keywords == []


def test_star_method_counts_components():
    star = evaluate_star_method(RICH_ANSWER)
    assert star.covered_count == 4
    assert star.score == 10
    assert all(star.components.values())


def test_completeness_rich_answer():
    result = evaluate_completeness(RICH_ANSWER)
    assert result.word_count == 38
    assert result.sentence_count == 4
    assert result.length_score == 9
    assert result.structure_score == 10
    assert result.specificity_score == 10
    assert result.has_examples and result.has_numbers
    assert result.score == 10


def test_completeness_one_word_answer():
    result = evaluate_completeness("Yes.")
    # 2*0.30 + 4*0.25 + 4*0.25 + 0*0.20 = 2.6
    assert result.score == 3
    assert result.star_coverage.covered_count == 0


def test_completeness_blank_answer_is_zero():
    result = evaluate_completeness("   ")
    assert result.score == 0
    assert result.word_count == 0
    assert result.star_coverage.score == 0


def test_confidence_penalizes_hedging():
    result = evaluate_confidence("I think maybe it works.")
    assert result.hedging_phrases == ["i think", "maybe"]
    assert result.score == 4


def test_confidence_rewards_assertive_language():
    result = evaluate_confidence("I led the team and I built the pipeline, definitely.")
    assert set(result.assertive_language) == {"i led", "i built", "definitely"}
    assert result.score == 10


def test_confidence_is_clamped_at_one():
    result = evaluate_confidence(
        "Um, I think maybe, I guess, probably, you know, basically, like, sort of, honestly right."
    )
    assert result.score == 1

from engines.anti_cheat import (
    AntiCheatState,
    analyze_answer,
    integrity_report,
    question_asked,
    repeated_trigrams,
    suspicion_level,
)


def _words(count: int, prefix: str = "w") -> str:
    return " ".join(f"{prefix}{i}" for i in range(count))


def _types(result):
    return {flag.type for flag in result.flags}


def test_fast_response_and_high_wpm():
    state = AntiCheatState()
    question_asked(state, now=100.0)
    result = analyze_answer(state, _words(25), 5, now=102.0)
    assert _types(result) == {"fast_response", "high_wpm"}
    assert result.answer_suspicion_points == 40
    assert result.overall_suspicion_score == 12
    assert result.metrics.response_time_sec == 2.0


def test_missing_timing_skips_only_timing_checks():
    state = AntiCheatState()
    result = analyze_answer(state, "I like it a lot. I like it a lot. I like it a lot.", 10)
    assert _types(result) == {"repetitive_pattern"}
    assert result.metrics.response_time_sec is None
    assert state.response_timings == []


def test_score_timing_mismatch():
    state = AntiCheatState()
    question_asked(state, now=0.0)
    result = analyze_answer(state, _words(35), 9, now=4.0)
    assert "score_timing_mismatch" in _types(result)
    assert "fast_response" not in _types(result)


def test_length_spike_needs_three_prior_answers():
    state = AntiCheatState()
    for _ in range(2):
        analyze_answer(state, _words(10), 5)
    assert "length_spike" not in _types(analyze_answer(state, _words(60), 5))

    state = AntiCheatState()
    for _ in range(3):
        analyze_answer(state, _words(10), 5)
    result = analyze_answer(state, _words(60), 5)
    assert _types(result) == {"length_spike"}


def test_complexity_spike():
    state = AntiCheatState()
    plain = "a b c d e f g h i elaborate"  # one long word in ten
    for _ in range(3):
        analyze_answer(state, plain, 5)
    result = analyze_answer(state, _words(10, prefix="complicated"), 5)
    assert "complexity_spike" in _types(result)


def test_suspicion_decays_without_new_flags():
    state = AntiCheatState(overall_suspicion_score=40)
    integrity_report(state)
    assert state.overall_suspicion_score == 40
    result = analyze_answer(state, "short honest answer", 5)
    assert result.flags == []
    assert result.overall_suspicion_score == 28


def test_suspicion_levels():
    assert suspicion_level(0) == "clean"
    assert suspicion_level(20) == "low"
    assert suspicion_level(40) == "medium"
    assert suspicion_level(60) == "high"


def test_repeated_trigrams():
    assert repeated_trigrams("one two three one two three") == ["one two three"]
    assert repeated_trigrams("") == []


def test_integrity_report_summarizes_flags():
    state = AntiCheatState()
    question_asked(state, now=0.0)
    analyze_answer(state, _words(25), 5, now=2.0)
    question_asked(state, now=10.0)
    analyze_answer(state, _words(5), 5, now=30.0)
    report = integrity_report(state)
    assert report.total_flags == 2
    assert report.flag_breakdown == {"high": 1, "medium": 1, "low": 0}
    assert report.timing.fastest_response_sec == 2.0
    assert report.timing.slowest_response_sec == 20.0
    assert report.timing.average_response_time_sec == 11.0
    assert report.response_length_consistency.average_words == 15
    assert report.verdict.startswith("No suspicious patterns")


def test_round_trip_reproduces_next_delta():
    state = AntiCheatState()
    question_asked(state, now=0.0)
    analyze_answer(state, _words(25), 5, now=2.0)
    question_asked(state, now=50.0)
    restored = AntiCheatState.model_validate_json(state.model_dump_json())

    original = analyze_answer(state, _words(40), 9, now=53.0)
    again = analyze_answer(restored, _words(40), 9, now=53.0)
    assert original == again
    assert state == restored

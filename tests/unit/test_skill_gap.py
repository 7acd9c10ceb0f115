from engines.skill_gap import (
    GENERAL_TOPIC,
    SkillGapState,
    TopicGap,
    analyze,
    detect_topics,
    overall_gap_score,
    track_answer,
)


def _gap(deficit: float) -> TopicGap:
    return TopicGap(
        topic=f"T{deficit}",
        current_score=10 - deficit,
        expected_score=10,
        deficit=deficit,
        severity="critical",
        recommendation="practice",
    )


def test_detect_topics_falls_back_to_general():
    assert detect_topics("Tell me about yourself.") == [GENERAL_TOPIC]
    assert detect_topics("How do you design a database schema?") == ["Database"]


def test_general_topic_strength_for_mid_role():
    state = SkillGapState.for_role("mid")
    for _ in range(3):
        track_answer(state, "Tell me about yourself.", "answer", 9, "technical")
    analysis = analyze(state)
    assert analysis.topic_scores == {GENERAL_TOPIC: 9.0}
    assert analysis.gaps == []
    assert len(analysis.strengths) == 1
    strength = analysis.strengths[0]
    assert strength.topic == GENERAL_TOPIC
    assert strength.expected_score == 7
    assert strength.surplus == 2.0
    assert analysis.type_analysis["technical"].status == "meets_expectation"
    assert analysis.overall_gap_score == 0


def test_gap_severity_and_learning_path():
    state = SkillGapState.for_role("mid")
    track_answer(state, "How do you design a database schema?", "a", 3, "technical")
    track_answer(state, "What do you know about react?", "a", 5.5, "technical")
    track_answer(state, "Describe a microservice", "a", 4.5, "system_design")
    analysis = analyze(state)

    by_topic = {gap.topic: gap for gap in analysis.gaps}
    assert by_topic["Database"].severity == "critical"
    assert by_topic["React/Frontend"].severity == "significant"
    assert by_topic["System Design"].severity == "minor"
    assert [gap.topic for gap in analysis.gaps] == ["Database", "React/Frontend", "System Design"]

    path = analysis.prioritized_learning_path
    assert [step.topic for step in path] == ["Database", "React/Frontend"]
    assert [step.estimated_hours for step in path] == [20, 10]
    assert path[0].priority == 1
    assert analysis.type_analysis["system_design"].status == "below_expectation"


def test_overall_gap_score_bounds():
    assert overall_gap_score([]) == 0
    assert overall_gap_score([_gap(10), _gap(10)]) == 100
    assert overall_gap_score([_gap(10), _gap(5)]) == 75


def test_unknown_role_uses_mid_baseline():
    state = SkillGapState.for_role("principal")
    assert state.role_level == "mid"
    assert state.baseline["technical"] == 7


def test_senior_baseline_turns_strength_into_gap():
    state = SkillGapState.for_role("senior")
    track_answer(state, "Tell me about yourself.", "answer", 7, "technical")
    analysis = analyze(state)
    assert analysis.gaps[0].topic == GENERAL_TOPIC
    assert analysis.gaps[0].deficit == 1.0


def test_round_trip_reproduces_analysis():
    state = SkillGapState.for_role("junior")
    track_answer(state, "How do you design a database schema?", "a", 4, "technical")
    restored = SkillGapState.model_validate_json(state.model_dump_json())
    track_answer(state, "Tell me about yourself.", "a", 8, "behavioral")
    track_answer(restored, "Tell me about yourself.", "a", 8, "behavioral")
    assert analyze(state) == analyze(restored)

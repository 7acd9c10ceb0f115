import itertools

import pytest

from engines.adaptive import (
    QUESTION_TYPES,
    AdaptiveState,
    next_question_config,
    record_score,
    set_start_level,
    should_follow_up,
    summary,
)


def test_level_moves_up_after_second_score():
    state = AdaptiveState.start(1, 3)
    record_score(state, 8)
    assert state.current_level == 1
    entry = record_score(state, 8)
    assert entry.changed and state.current_level == 2
    record_score(state, 8)
    # medium promotes at an average of 8
    assert state.level_history == [1, 1, 2, 3]


def test_level_never_exceeds_hard():
    state = AdaptiveState.start(1, 3)
    for _ in range(10):
        record_score(state, 10)
    assert state.current_level == 3
    assert max(state.level_history) == 3


def test_level_moves_down_on_low_average():
    state = AdaptiveState.start(3, 3)
    record_score(state, 5)
    record_score(state, 5)
    assert state.current_level == 2
    record_score(state, 2)
    # avg of [5, 5, 2] = 4 <= medium down threshold
    assert state.current_level == 1


@pytest.mark.parametrize("scores", list(itertools.product([0, 4, 5, 8, 10], repeat=3)))
def test_level_stays_in_range_and_steps_by_one(scores):
    state = AdaptiveState.start(2, 3)
    previous = state.current_level
    for score in scores:
        record_score(state, score)
        assert state.current_level in (1, 2, 3)
        assert abs(state.current_level - previous) <= 1
        previous = state.current_level


def test_set_start_level_only_before_scores():
    state = AdaptiveState.start(1, 3)
    set_start_level(state, 2)
    assert state.current_level == 2
    assert state.level_history == [2]
    record_score(state, 5)
    with pytest.raises(ValueError):
        set_start_level(state, 3)


def test_follow_up_reasons():
    state = AdaptiveState.start(1, 3)
    decision = should_follow_up(state, 4, "Q", "partial answer")
    assert decision.should_follow_up and decision.reason == "incomplete_answer"

    state = AdaptiveState.start(1, 3)
    decision = should_follow_up(state, 6, "Q", "decent answer")
    assert decision.reason == "can_elaborate"

    state = AdaptiveState.start(1, 3)
    decision = should_follow_up(state, 9, "Q", "excellent answer")
    assert decision.reason == "probe_deeper"  # question index 0 is a multiple of 3

    state = AdaptiveState.start(1, 3)
    state.question_index = 1
    decision = should_follow_up(state, 9, "Q", "excellent answer")
    assert not decision.should_follow_up
    assert state.follow_up_context is None


def test_follow_up_is_consumed_without_advancing_rotation():
    state = AdaptiveState.start(1, 3)
    first = next_question_config(state)
    assert first.question_type == QUESTION_TYPES[0]
    assert state.question_index == 1

    should_follow_up(state, 4, "What is a closure?", "It is a function thing")
    config = next_question_config(state)
    assert config.is_follow_up and config.question_type == "follow_up"
    assert "It is a function thing" in config.prompt
    assert state.question_index == 1
    assert not state.follow_up_pending and state.follow_up_context is None

    following = next_question_config(state)
    assert following.question_type == QUESTION_TYPES[1]
    assert state.question_index == 2


def test_rotation_wraps_after_ten_slots():
    state = AdaptiveState.start(1, 3)
    types = [next_question_config(state).question_type for _ in range(11)]
    assert types[:10] == QUESTION_TYPES
    assert types[10] == QUESTION_TYPES[0]


def test_question_config_carries_level():
    state = AdaptiveState.start(2, 3)
    config = next_question_config(state)
    assert config.difficulty == 2
    assert config.difficulty_name == "Medium"
    assert config.prompt.startswith("Ask a moderate-difficulty question")


def test_round_trip_reproduces_next_decision():
    state = AdaptiveState.start(1, 3)
    for score in (6, 7):
        record_score(state, score)
    restored = AdaptiveState.model_validate_json(state.model_dump_json())
    assert restored == state

    original_entry = record_score(state, 9)
    restored_entry = record_score(restored, 9)
    assert original_entry.new_level == restored_entry.new_level
    assert state.level_history == restored.level_history


def test_summary_reports_recent_average():
    state = AdaptiveState.start(1, 3)
    for score in (2, 6, 7, 8):
        record_score(state, score)
    result = summary(state)
    assert result.recent_average == 7.0
    assert result.total_answers == 4
    assert result.current_level_name in ("Easy", "Medium", "Hard")

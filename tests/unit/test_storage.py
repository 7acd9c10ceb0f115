from storage.candidates import find_candidate, get_candidate, list_candidates, update_candidate_profile
from storage.sessions import SessionStore


def _snapshot(candidate_id="cand-1", completed=False, final_score=None, passed=None):
    return {
        "candidate_id": candidate_id,
        "completed": completed,
        "final_score": final_score,
        "passed": passed,
        "question_count": 3,
        "history": [{"role": "user", "content": "__start__"}],
    }


def test_session_store_round_trip():
    store = SessionStore()
    store.save("s1", _snapshot())
    stored = store.get("s1")
    assert stored.candidate_id == "cand-1"
    assert stored.completed is False
    assert stored.passed is None
    assert store.load("s1")["history"][0]["content"] == "__start__"
    assert store.load("missing") is None


def test_last_write_wins():
    store = SessionStore()
    store.save("s1", _snapshot())
    store.save("s1", _snapshot(completed=True, final_score=7.5, passed=True))
    stored = store.get("s1")
    assert stored.completed is True
    assert stored.final_score == 7.5
    assert stored.passed is True
    assert store.count() == 1


def test_list_and_count_filters():
    store = SessionStore()
    store.save("s1", _snapshot("a", completed=True, final_score=8.0, passed=True))
    store.save("s2", _snapshot("a"))
    store.save("s3", _snapshot("b", completed=True, final_score=4.0, passed=False))
    assert {s.session_id for s in store.list("a")} == {"s1", "s2"}
    assert {s.session_id for s in store.list(completed_only=True)} == {"s1", "s3"}
    assert len(store.list(limit=2)) == 2
    assert store.count() == 3
    assert store.count(completed_only=True) == 2


def test_delete():
    store = SessionStore()
    store.save("s1", _snapshot())
    assert store.delete("s1") is True
    assert store.delete("s1") is False
    assert store.get("s1") is None


def test_candidate_created_on_first_access():
    assert find_candidate("c1") is None
    record = get_candidate("c1")
    assert record.name == "Anonymous"
    assert record.total_interviews == 0
    assert [c.candidate_id for c in list_candidates()] == ["c1"]


def test_candidate_profile_accumulates_sessions():
    update_candidate_profile("c1", final_score=8.0, passed=True, topic_scores={"Database": 7.0}, name="Jane")
    record = update_candidate_profile("c1", final_score=4.0, passed=False, topic_scores={"Database": 5.0})
    assert record.name == "Jane"
    assert record.total_interviews == 2
    assert record.total_passed == 1
    assert record.pass_rate == 50
    assert record.average_score == 6.0
    assert record.best_score == 8.0
    assert record.skill_profile["Database"].scores == [7.0, 5.0]
    assert record.skill_profile["Database"].average == 6.0
    assert find_candidate("c1") == record

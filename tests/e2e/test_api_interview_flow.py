from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

import config.registry as model_registry
from api.routes import router
from config.registry import INTERVIEWER_KEY

BASE = "/api/interview-sessions"

RESUME = """Jane Doe
Senior Software Engineer with 8 years of experience
Skills: Python, Django, PostgreSQL, Docker, Kubernetes, AWS
Led a team of 6 engineers and reduced latency by 40%
"""

ANSWER = (
    "In my last project I was responsible for the checkout service. "
    "I implemented a caching layer because the database was overloaded. "
    "As a result we reduced latency by 40 percent."
)


def _client() -> TestClient:
    app = FastAPI()
    app.include_router(router)
    return TestClient(app)


def _chat(client: TestClient, message: str, session_id: str = "e1", **extra):
    return client.post(f"{BASE}/chat", json={"session_id": session_id, "message": message, **extra})


def test_full_interview_cycle(interviewer, fresh_registry):
    interviewer(
        "Hello. Tell me about yourself.",
        "Good. SCORE|8/10 How do you design a database schema?",
        "Thanks for your time. SCORE|6/10 INTERVIEW_COMPLETE|7/10|true",
    )
    client = _client()

    resume = client.post(f"{BASE}/resume", json={"session_id": "e1", "resume_text": RESUME})
    assert resume.status_code == 200
    assert resume.json()["experience_level"] == "senior"
    assert resume.json()["difficulty_override"] == 2

    start = _chat(client, "__start__", candidate_id="cand-e2e")
    assert start.status_code == 200
    assert start.json()["response"] == "Hello. Tell me about yourself."
    assert start.json()["answer_meta"] is None

    status = client.get(f"{BASE}/e1").json()
    assert status["question_count"] == 1
    assert status["adaptive"]["current_level"] == 2
    assert status["completed"] is False

    assert client.get(f"{BASE}/e1/feedback").status_code == 409

    first = _chat(client, ANSWER, candidate_id="cand-e2e").json()
    assert first["answer_meta"]["ai_score"] == 8
    assert first["interview_complete"] is False

    final = _chat(client, ANSWER, candidate_id="cand-e2e").json()
    assert final["interview_complete"] is True
    assert final["final_score"] == "7/10"
    assert final["passed"] is True
    assert final["feedback_report"]["summary"]["tier"]["key"] == "competent"

    feedback = client.get(f"{BASE}/e1/feedback")
    assert feedback.status_code == 200
    assert feedback.json()["final_score"] == 7.0
    assert feedback.json()["skill_gaps"]["questions_analyzed"] == 2

    pdf = client.get(f"{BASE}/e1/report.pdf")
    assert pdf.status_code == 200
    assert pdf.headers["content-type"] == "application/pdf"
    assert "interview-e1.pdf" in pdf.headers["content-disposition"]
    assert pdf.content.startswith(b"%PDF")

    candidate = client.get(f"{BASE}/candidates/cand-e2e").json()
    assert candidate["total_interviews"] == 1
    assert candidate["name"] == "Jane Doe"

    history = client.get(f"{BASE}/candidates/cand-e2e/history").json()
    assert [point["score"] for point in history["sessions"]] == [7.0]
    assert history["improvement"]["trend"] == "insufficient_data"

    board = client.get(f"{BASE}/analytics/dashboard").json()
    assert board["overview"]["total_sessions"] == 1
    assert board["difficulty_distribution"]["easy"] + board["difficulty_distribution"]["medium"] + board[
        "difficulty_distribution"
    ]["hard"] == 1

    analytics = client.get(f"{BASE}/analytics/candidates/cand-e2e")
    assert analytics.status_code == 200
    assert analytics.json()["profile"]["candidate_id"] == "cand-e2e"

    rate = client.get(f"{BASE}/analytics/success-rate", params={"days": 7}).json()
    assert rate["total_sessions"] == 1
    assert rate["pass_rate"] == 100

    after = _chat(client, "one more thing").json()
    assert after["interview_complete"] is True
    assert after["final_score"] == "7/10"


def test_llm_failure_maps_to_bad_gateway(interviewer, fresh_registry, llm_down):
    interviewer("Hello.", llm_down)
    client = _client()
    assert _chat(client, "__start__").status_code == 200

    failed = _chat(client, ANSWER)
    assert failed.status_code == 502
    assert failed.json()["detail"] == "The interviewer is unavailable right now, please try again."
    status = client.get(f"{BASE}/e1").json()
    assert status["question_count"] == 1
    assert status["adaptive"]["total_answers"] == 0


def test_unbound_model_is_unavailable(monkeypatch, fresh_registry):
    monkeypatch.delitem(model_registry._REGISTRY, INTERVIEWER_KEY, raising=False)
    assert _chat(_client(), "__start__").status_code == 503


def test_request_validation(interviewer, fresh_registry):
    interviewer()
    client = _client()
    assert _chat(client, "").status_code == 422
    assert client.post(f"{BASE}/chat", json={"session_id": "e1"}).status_code == 422
    assert "e1" not in fresh_registry
    assert _chat(client, "__start__").status_code == 200
    blank = _chat(client, "   ")
    assert blank.status_code == 200
    assert blank.json()["answer_meta"]["ai_score"] == 5
    assert client.post(f"{BASE}/chat", json={"session_id": "", "message": "hi"}).status_code == 422
    assert client.post(f"{BASE}/resume", json={"session_id": "e1", "resume_text": "  "}).status_code == 400
    assert client.get(f"{BASE}/analytics/success-rate", params={"days": 0}).status_code == 422


@pytest.mark.parametrize(
    "path",
    [
        "/missing",
        "/missing/feedback",
        "/missing/report.pdf",
        "/candidates/missing",
        "/analytics/candidates/missing",
    ],
)
def test_unknown_resources(fresh_registry, path):
    assert _client().get(f"{BASE}{path}").status_code == 404


def test_reset_forgets_session(interviewer, fresh_registry):
    interviewer("Hello.")
    client = _client()
    _chat(client, "__start__")
    assert client.post(f"{BASE}/reset", json={"session_id": "e1"}).json() == {"session_id": "e1", "reset": True}
    assert client.post(f"{BASE}/reset", json={"session_id": "e1"}).json()["reset"] is False
    assert client.get(f"{BASE}/e1").status_code == 404


def test_health_endpoint():
    from api_server import app

    body = TestClient(app).get("/api/health").json()
    assert body["status"] == "ok"

from engines.anti_cheat import AntiCheatState, analyze_answer, integrity_report
from engines.answer_evaluator import evaluate
from engines.feedback import build_report
from session_reports import render_feedback_pdf


def _report():
    evaluations = [
        evaluate("I think maybe it works.", "What is a closure?", 4),
        evaluate("For example, I built a cache and reduced latency by 40 percent.", "Design a cache", 8),
    ]
    return build_report(final_score=6.0, passed=True, evaluations=evaluations, duration_sec=125, question_count=3)


def test_pdf_payload():
    state = AntiCheatState()
    analyze_answer(state, "An answer with “smart quotes” and an emoji \U0001F680", 5, now=10.0)
    payload = render_feedback_pdf(
        _report(),
        integrity_report(state),
        session_id="s1",
        candidate_id="c1",
    )
    assert isinstance(payload, bytes)
    assert payload.startswith(b"%PDF")


def test_pdf_without_integrity_section():
    payload = render_feedback_pdf(_report(), None, session_id="s2", candidate_id="anonymous")
    assert payload.startswith(b"%PDF")

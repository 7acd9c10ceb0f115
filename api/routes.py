"""FastAPI routes for interview session control, reports and analytics."""
from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query, Response

from api.schemas import (
    CandidateHistory,
    ChatReq,
    FeedbackResp,
    ResetReq,
    ResetResp,
    ResumeReq,
    ResumeResp,
    SessionStatus,
)
from config.registry import INTERVIEWER_KEY, get_model
from engines.adaptive import summary as adaptive_summary
from engines.anti_cheat import suspicion_level
from engines.resume import parse_profile, profile_prompt
from llm_gateway import LlmGatewayError
from services.analytics import (
    CandidateAnalytics,
    Dashboard,
    SuccessRate,
    candidate_analytics,
    dashboard,
    improvement_rate,
    score_progression,
    success_rate,
)
from services.pipeline import InvalidMessage, TurnResult, process_turn, reset_session
from services.sessions import DEFAULT_CANDIDATE, Session, SessionNotFound, SessionRegistry
from session_reports import render_feedback_pdf
from storage.candidates import CandidateRecord, find_candidate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/interview-sessions")
registry = SessionRegistry()


def _session_or_404(session_id: str) -> Session:
    try:
        return registry.get(session_id)
    except SessionNotFound as exc:
        raise HTTPException(status_code=404, detail="Session not found") from exc


def _completed_or_409(session_id: str) -> Session:
    session = _session_or_404(session_id)
    if not session.completed or session.feedback_report is None:
        raise HTTPException(status_code=409, detail="Interview is not complete yet")
    return session


@router.post("/chat", response_model=TurnResult)
def chat(req: ChatReq) -> TurnResult:
    try:
        llm = get_model(INTERVIEWER_KEY)
    except KeyError as exc:
        logger.error("Interviewer model is not bound")
        raise HTTPException(status_code=503, detail="Interviewer model is not configured") from exc
    try:
        return process_turn(
            registry,
            req.session_id,
            req.message,
            llm=llm,
            candidate_id=req.candidate_id or DEFAULT_CANDIDATE,
            resume_text=req.resume_text,
            domain=req.domain,
        )
    except InvalidMessage as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except LlmGatewayError as exc:
        logger.exception("Interviewer model failed")
        raise HTTPException(
            status_code=502,
            detail="The interviewer is unavailable right now, please try again.",
        ) from exc
    except Exception as exc:  # noqa: BLE001
        logger.exception("Unexpected error while processing interview turn")
        raise HTTPException(status_code=500, detail="Unable to process interview turn") from exc


@router.post("/reset", response_model=ResetResp)
def reset(req: ResetReq) -> ResetResp:
    return ResetResp(session_id=req.session_id, reset=reset_session(registry, req.session_id))


@router.post("/resume", response_model=ResumeResp)
def upload_resume(req: ResumeReq) -> ResumeResp:
    if not req.resume_text.strip():
        raise HTTPException(status_code=400, detail="Resume text is required.")
    profile = parse_profile(req.resume_text)
    seeding = profile_prompt(profile)
    registry.stash_resume(req.session_id, req.resume_text)
    return ResumeResp(
        session_id=req.session_id,
        profile=profile,
        suggested_topics=seeding.suggested_topics,
        difficulty_override=seeding.difficulty_override,
        experience_level=seeding.experience_level,
    )


@router.get("/candidates/{candidate_id}", response_model=CandidateRecord)
def fetch_candidate(candidate_id: str) -> CandidateRecord:
    record = find_candidate(candidate_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Candidate not found")
    return record


@router.get("/candidates/{candidate_id}/history", response_model=CandidateHistory)
def fetch_candidate_history(candidate_id: str) -> CandidateHistory:
    progression = score_progression(candidate_id, registry.store)
    return CandidateHistory(
        candidate_id=candidate_id,
        sessions=progression,
        improvement=improvement_rate(progression),
    )


@router.get("/analytics/dashboard", response_model=Dashboard)
def fetch_dashboard() -> Dashboard:
    return dashboard(registry.store)


@router.get("/analytics/candidates/{candidate_id}", response_model=CandidateAnalytics)
def fetch_candidate_analytics(candidate_id: str) -> CandidateAnalytics:
    analytics = candidate_analytics(candidate_id, registry.store)
    if analytics is None:
        raise HTTPException(status_code=404, detail="Candidate not found")
    return analytics


@router.get("/analytics/success-rate", response_model=SuccessRate)
def fetch_success_rate(days: int = Query(30, ge=1, le=3650)) -> SuccessRate:
    return success_rate(days, registry.store)


@router.get("/{session_id}", response_model=SessionStatus)
def fetch_session(session_id: str) -> SessionStatus:
    session = _session_or_404(session_id)
    score = session.anti_cheat.overall_suspicion_score
    return SessionStatus(
        session_id=session.session_id,
        candidate_id=session.candidate_id,
        question_count=session.question_count,
        average_score=session.average_score(),
        completed=session.completed,
        final_score=session.final_score,
        passed=session.passed,
        suspicion_score=score,
        suspicion_level=suspicion_level(score),
        adaptive=adaptive_summary(session.adaptive),
    )


@router.get("/{session_id}/feedback", response_model=FeedbackResp)
def fetch_feedback(session_id: str) -> FeedbackResp:
    session = _completed_or_409(session_id)
    return FeedbackResp(
        session_id=session.session_id,
        final_score=session.final_score or 0.0,
        passed=bool(session.passed),
        feedback_report=session.feedback_report,
        integrity_report=session.integrity_report,
        skill_gaps=session.skill_gaps,
        spoken_summary=session.spoken_summary,
    )


@router.get("/{session_id}/report.pdf")
def fetch_feedback_pdf(session_id: str) -> Response:
    session = _completed_or_409(session_id)
    payload = render_feedback_pdf(
        session.feedback_report,
        session.integrity_report,
        session_id=session.session_id,
        candidate_id=session.candidate_id,
    )
    headers = {"Content-Disposition": f"attachment; filename=\"interview-{session.session_id}.pdf\""}
    return Response(content=payload, media_type="application/pdf", headers=headers)

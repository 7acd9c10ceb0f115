"""Per-turn interview pipeline.

One call to :func:`process_turn` handles one client message for one session:

1. resolve the session (memory, then store, then create),
2. build the system prompt from a draft of the adaptive state and call the
   interviewer model,
3. parse the reply markers,
4. for real answers run the engines in fixed order: evaluator, adaptive
   controller, anti-cheat monitor, skill-gap detector,
5. on a completion marker synthesize the feedback and integrity reports,
6. stamp the question time and checkpoint the session.

Each turn works on a copy of the session. A model failure discards the copy,
so the registry, the resume stash and the stored session stay as they were
and no engine runs for that turn.
"""
from __future__ import annotations

import time
from typing import Callable, Dict, List, Optional, Tuple

from pydantic import BaseModel

from config.settings import settings
from engines.adaptive import next_question_config, record_score, set_start_level, should_follow_up
from engines.answer_evaluator import evaluate
from engines.anti_cheat import (
    AnswerIntegrity,
    IntegrityReport,
    analyze_answer,
    integrity_report,
    question_asked,
)
from engines.feedback import FeedbackReport, build_report, spoken_summary
from engines.markers import parse_reply
from engines.resume import ProfilePrompt, parse_profile, profile_prompt
from engines.skill_gap import SkillGapState, analyze, track_answer
from engines.types import AnswerEvaluation
from llm_gateway import ChatModel, LlmGatewayError
from observability import log_event
from services.prompts import START_MESSAGE, build_system_prompt, is_control, prompt_for
from services.sessions import (
    DEFAULT_CANDIDATE,
    ChatMessage,
    QuestionAnswer,
    Session,
    SessionConfig,
    SessionRegistry,
)
from storage.candidates import update_candidate_profile

Clock = Callable[[], float]

COMPLETION_FALLBACK = "The interview is complete. Thank you."


class InvalidMessage(ValueError):
    """The client message is missing or empty."""


class AnswerMeta(BaseModel):
    composite_score: int
    ai_score: int
    difficulty_level: int
    suspicion_level: str


class TurnResult(BaseModel):
    session_id: str
    response: str
    interview_complete: bool = False
    answer_meta: Optional[AnswerMeta] = None
    final_score: Optional[str] = None
    passed: Optional[bool] = None
    feedback_report: Optional[FeedbackReport] = None
    integrity_report: Optional[IntegrityReport] = None
    spoken_summary: Optional[str] = None


def _fmt_score(value: float) -> str:
    return f"{value:g}/10"


def apply_resume(session: Session, text: str) -> ProfilePrompt:
    """Seed a session from resume text.

    The starting difficulty and role baseline only change while no answer
    has been scored; the prompt context is always refreshed.
    """

    profile = parse_profile(text[: settings.MAX_RESUME_CHARS])
    seeding = profile_prompt(profile)
    session.profile = profile
    session.resume_prompt = seeding.system_prompt_addition or None
    if not session.adaptive.score_history:
        if seeding.difficulty_override:
            set_start_level(session.adaptive, seeding.difficulty_override)
        if seeding.experience_level:
            session.skill_gap = SkillGapState.for_role(seeding.experience_level)
    log_event(
        "resume_applied",
        session.session_id,
        skills=profile.skills.count,
        level=profile.experience_level,
    )
    return seeding


def run_answer_pipeline(
    session: Session,
    *,
    question: str,
    answer: str,
    ai_score: int,
    question_type: str,
    now: float,
) -> Tuple[AnswerEvaluation, AnswerIntegrity]:
    """Run the engines for one real answer, in their fixed order."""

    sid = session.session_id
    evaluation = evaluate(answer, question, ai_score)
    composite = evaluation.composite_score
    session.evaluations.append(evaluation)
    session.qa_pairs.append(
        QuestionAnswer(
            question=question,
            answer=answer,
            ai_score=ai_score,
            composite_score=composite,
            question_type=question_type,
            timestamp=now,
        )
    )
    log_event("answer_evaluated", sid, stage="evaluate", composite=composite, ai_score=ai_score)

    entry = record_score(session.adaptive, composite)
    decision = should_follow_up(session.adaptive, composite, question, answer)
    log_event(
        "difficulty_adapted",
        sid,
        stage="adapt",
        level=entry.new_level,
        changed=entry.changed,
        follow_up=decision.reason,
    )

    integrity = analyze_answer(session.anti_cheat, answer, composite, now=now)
    log_event(
        "integrity_checked",
        sid,
        stage="integrity",
        suspicion=integrity.overall_suspicion_score,
        flags=[flag.type for flag in integrity.flags],
    )

    tracked = track_answer(session.skill_gap, question, answer, composite, question_type)
    log_event("skills_tracked", sid, stage="skills", topics=tracked.detected_topics)
    return evaluation, integrity


def complete_session(session: Session, *, now: Optional[float] = None) -> FeedbackReport:
    """Mark the session complete and attach the terminal reports."""

    final = session.average_score()
    passed = session.scored_count > 0 and final >= settings.PASS_THRESHOLD
    session.completed = True
    session.final_score = final
    session.passed = passed
    session.completed_at = time.time() if now is None else now

    analysis = analyze(session.skill_gap)
    report = build_report(
        final_score=final,
        passed=passed,
        evaluations=session.evaluations,
        adaptive=session.adaptive,
        skill_gaps=analysis,
        duration_sec=session.duration_sec(),
        question_count=session.question_count,
    )
    session.skill_gaps = analysis
    session.feedback_report = report
    session.integrity_report = integrity_report(session.anti_cheat)
    session.spoken_summary = spoken_summary(report)
    log_event(
        "session_completed",
        session.session_id,
        stage="complete",
        final_score=final,
        passed=passed,
        outcome=report.summary.tier.key,
    )
    return report


def _completed_result(session: Session, response: str, meta: Optional[AnswerMeta] = None) -> TurnResult:
    return TurnResult(
        session_id=session.session_id,
        response=response or COMPLETION_FALLBACK,
        interview_complete=True,
        answer_meta=meta,
        final_score=_fmt_score(session.final_score or 0.0),
        passed=session.passed,
        feedback_report=session.feedback_report,
        integrity_report=session.integrity_report,
        spoken_summary=session.spoken_summary,
    )


def _model_messages(session: Session, system_prompt: str, prompt: str) -> List[Dict[str, str]]:
    messages = [{"role": "system", "content": system_prompt}]
    messages.extend(message.model_dump() for message in session.history)
    messages.append({"role": "user", "content": prompt})
    return messages


def process_turn(
    registry: SessionRegistry,
    session_id: str,
    message: str,
    *,
    llm: ChatModel,
    candidate_id: str = DEFAULT_CANDIDATE,
    resume_text: Optional[str] = None,
    domain: Optional[str] = None,
    config: Optional[SessionConfig] = None,
    clock: Clock = time.time,
) -> TurnResult:
    """Handle one client message (an answer or a control message) for a session.

    Whitespace-only answers are scored like any other answer.

    Raises:
        InvalidMessage: If ``message`` is not a string or is empty.
        LlmGatewayError: If the interviewer model fails; the registry, the
            resume stash and the session are left as they were.
    """

    if not isinstance(message, str) or message == "":
        raise InvalidMessage("message is required")

    with registry.lock_for(session_id):
        received_at = clock()
        current = registry.find(session_id)
        if current is not None and current.completed:
            return _completed_result(current, COMPLETION_FALLBACK)

        # The turn runs on a draft that replaces the registered session once the model has replied.
        if current is None:
            session = Session.create(session_id, candidate_id, config, now=received_at)
        else:
            session = current.model_copy(deep=True)

        control = is_control(message)
        stashed = False
        if message == START_MESSAGE:
            text = resume_text
            if not text:
                text = registry.peek_resume(session_id)
                stashed = text is not None
            if text:
                apply_resume(session, text)
            if domain and domain.strip().lower() != "general":
                session.domain = domain.strip()

        answered_config = session.last_question_config
        question = session.last_assistant_message()

        next_config = next_question_config(session.adaptive)
        system_prompt = build_system_prompt(next_config, domain=session.domain, resume_prompt=session.resume_prompt)
        try:
            raw = llm(_model_messages(session, system_prompt, prompt_for(message)))
            if not isinstance(raw, str):
                raise LlmGatewayError("LLM reply was not text")
        except LlmGatewayError as exc:
            log_event("llm_failed", session_id, stage="llm", error=str(exc))
            raise

        if stashed:
            registry.pop_resume(session_id)
        registry.register(session)
        session.last_question_config = next_config
        if not control:
            session.history.append(ChatMessage(role="user", content=message))
        session.history.append(ChatMessage(role="assistant", content=raw))
        session.question_count += 1

        parsed = parse_reply(raw)
        ai_score = parsed.score.value if parsed.score else 0

        meta: Optional[AnswerMeta] = None
        if not control:
            if parsed.score is not None:
                session.total_score += ai_score
                session.scored_count += 1
            question_type = answered_config.question_type if answered_config else "technical"
            evaluation, integrity = run_answer_pipeline(
                session,
                question=question,
                answer=message,
                ai_score=ai_score,
                question_type=question_type,
                now=received_at,
            )
            meta = AnswerMeta(
                composite_score=evaluation.composite_score,
                ai_score=ai_score,
                difficulty_level=session.adaptive.current_level,
                suspicion_level=integrity.suspicion_level,
            )

        if parsed.completion is not None:
            complete_session(session, now=clock())
            registry.checkpoint(session)
            update_candidate_profile(
                session.candidate_id,
                final_score=session.final_score or 0.0,
                passed=bool(session.passed),
                topic_scores=session.skill_gaps.topic_scores if session.skill_gaps else None,
                name=session.profile.candidate_name if session.profile else None,
            )
            return _completed_result(session, parsed.display_text, meta)

        question_asked(session.anti_cheat, now=clock())
        registry.checkpoint(session)
        return TurnResult(session_id=session_id, response=parsed.display_text, answer_meta=meta)


def reset_session(registry: SessionRegistry, session_id: str) -> bool:
    with registry.lock_for(session_id):
        removed = registry.reset(session_id)
    log_event("session_reset", session_id, outcome="removed" if removed else "absent")
    return removed


__all__ = [
    "InvalidMessage",
    "AnswerMeta",
    "TurnResult",
    "apply_resume",
    "run_answer_pipeline",
    "complete_session",
    "process_turn",
    "reset_session",
]

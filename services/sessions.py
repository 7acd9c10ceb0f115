"""Session aggregate and registry.

A :class:`Session` owns every piece of per-interview state: the conversation
transcript, the four engine states and the evaluation list. The
:class:`SessionRegistry` maps session ids to live aggregates, falls back to
the snapshot store for sessions that are no longer resident, and hands out a
per-session lock so one session's answers are processed one at a time.
"""
from __future__ import annotations

import threading
import time
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from config.settings import RoleLevel, settings
from engines.adaptive import AdaptiveState, QuestionConfig
from engines.anti_cheat import AntiCheatState, IntegrityReport
from engines.feedback import FeedbackReport
from engines.numeric import round1
from engines.resume import CandidateProfile
from engines.skill_gap import SkillGapAnalysis, SkillGapState
from engines.types import AnswerEvaluation
from storage.sessions import SessionStore

DEFAULT_CANDIDATE = "anonymous"


class SessionNotFound(KeyError):
    pass


class SessionConfig(BaseModel):
    """Per-session tuning; defaults come from settings."""

    window_size: int = Field(default_factory=lambda: settings.ADAPTIVE_WINDOW_SIZE, ge=1)
    start_level: int = Field(default_factory=lambda: settings.ADAPTIVE_START_LEVEL, ge=1, le=3)
    role_level: RoleLevel = Field(default_factory=lambda: settings.DEFAULT_ROLE_LEVEL)


class ChatMessage(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str


class QuestionAnswer(BaseModel):
    question: str
    answer: str
    ai_score: int
    composite_score: int
    question_type: str
    timestamp: float


class Session(BaseModel):
    session_id: str
    candidate_id: str = DEFAULT_CANDIDATE
    started_at: float
    config: SessionConfig = Field(default_factory=SessionConfig)
    question_count: int = 0
    total_score: float = 0.0
    scored_count: int = 0
    completed: bool = False
    final_score: Optional[float] = None
    passed: Optional[bool] = None
    completed_at: Optional[float] = None

    adaptive: AdaptiveState
    anti_cheat: AntiCheatState = Field(default_factory=AntiCheatState)
    skill_gap: SkillGapState
    evaluations: List[AnswerEvaluation] = Field(default_factory=list)
    qa_pairs: List[QuestionAnswer] = Field(default_factory=list)
    history: List[ChatMessage] = Field(default_factory=list)
    last_question_config: Optional[QuestionConfig] = None

    domain: Optional[str] = None
    resume_prompt: Optional[str] = None
    profile: Optional[CandidateProfile] = None

    feedback_report: Optional[FeedbackReport] = None
    integrity_report: Optional[IntegrityReport] = None
    skill_gaps: Optional[SkillGapAnalysis] = None
    spoken_summary: Optional[str] = None

    @classmethod
    def create(
        cls,
        session_id: str,
        candidate_id: str = DEFAULT_CANDIDATE,
        config: Optional[SessionConfig] = None,
        *,
        now: Optional[float] = None,
    ) -> "Session":
        cfg = config or SessionConfig()
        return cls(
            session_id=session_id,
            candidate_id=candidate_id or DEFAULT_CANDIDATE,
            started_at=time.time() if now is None else now,
            config=cfg,
            adaptive=AdaptiveState.start(cfg.start_level, cfg.window_size),
            skill_gap=SkillGapState.for_role(cfg.role_level),
        )

    def snapshot(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")

    @classmethod
    def from_snapshot(cls, data: Dict[str, Any]) -> "Session":
        return cls.model_validate(data)

    def average_score(self) -> float:
        """One-decimal average of the recorded LLM scores.

        A session that finishes without a single scored answer averages to
        ``0.0`` instead of dividing by zero.
        """

        if self.scored_count == 0:
            return 0.0
        return round1(self.total_score / self.scored_count)

    def duration_sec(self, now: Optional[float] = None) -> int:
        end = self.completed_at if self.completed_at is not None else (time.time() if now is None else now)
        return max(0, int(end - self.started_at))

    def last_assistant_message(self) -> str:
        for message in reversed(self.history):
            if message.role == "assistant":
                return message.content
        return ""


class SessionRegistry:
    """Live sessions keyed by id, backed by a :class:`SessionStore`."""

    def __init__(self, store: Optional[SessionStore] = None) -> None:
        self.store = store or SessionStore()
        self._sessions: Dict[str, Session] = {}
        self._pending_resumes: Dict[str, str] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def lock_for(self, session_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(session_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[session_id] = lock
        return lock

    def find(self, session_id: str) -> Optional[Session]:
        session = self._sessions.get(session_id)
        if session is not None:
            return session
        snapshot = self.store.load(session_id)
        if snapshot is None:
            return None
        session = Session.from_snapshot(snapshot)
        self._sessions[session_id] = session
        return session

    def get(self, session_id: str) -> Session:
        session = self.find(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session

    def get_or_create(
        self,
        session_id: str,
        candidate_id: str = DEFAULT_CANDIDATE,
        config: Optional[SessionConfig] = None,
        *,
        now: Optional[float] = None,
    ) -> Session:
        session = self.find(session_id)
        if session is None:
            session = Session.create(session_id, candidate_id, config, now=now)
            self._sessions[session_id] = session
        return session

    def register(self, session: Session) -> None:
        self._sessions[session.session_id] = session

    def checkpoint(self, session: Session) -> None:
        self.store.save(session.session_id, session.snapshot())

    def reset(self, session_id: str) -> bool:
        """Forget a session in memory and in the store."""

        in_memory = self._sessions.pop(session_id, None) is not None
        self._pending_resumes.pop(session_id, None)
        with self._guard:
            self._locks.pop(session_id, None)
        stored = self.store.delete(session_id)
        return in_memory or stored

    def stash_resume(self, session_id: str, text: str) -> None:
        self._pending_resumes[session_id] = text

    def peek_resume(self, session_id: str) -> Optional[str]:
        return self._pending_resumes.get(session_id)

    def pop_resume(self, session_id: str) -> Optional[str]:
        return self._pending_resumes.pop(session_id, None)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)


__all__ = [
    "DEFAULT_CANDIDATE",
    "SessionNotFound",
    "SessionConfig",
    "ChatMessage",
    "QuestionAnswer",
    "Session",
    "SessionRegistry",
]

"""Pydantic schemas for the interview session API."""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from engines.adaptive import AdaptiveSummary
from engines.anti_cheat import IntegrityReport
from engines.feedback import FeedbackReport
from engines.resume import CandidateProfile, SuggestedTopic
from engines.skill_gap import SkillGapAnalysis
from services.analytics import ImprovementRate, ScorePoint


class ChatReq(BaseModel):
    session_id: str = Field(min_length=1)
    message: str = Field(min_length=1)
    candidate_id: Optional[str] = None
    resume_text: Optional[str] = None
    domain: Optional[str] = None


class ResetReq(BaseModel):
    session_id: str = Field(min_length=1)


class ResetResp(BaseModel):
    session_id: str
    reset: bool


class ResumeReq(BaseModel):
    session_id: str = Field(min_length=1)
    resume_text: str


class ResumeResp(BaseModel):
    session_id: str
    profile: CandidateProfile
    suggested_topics: List[SuggestedTopic] = Field(default_factory=list)
    difficulty_override: Optional[int] = None
    experience_level: Optional[str] = None


class SessionStatus(BaseModel):
    session_id: str
    candidate_id: str
    question_count: int
    average_score: float
    completed: bool
    final_score: Optional[float] = None
    passed: Optional[bool] = None
    suspicion_score: int
    suspicion_level: str
    adaptive: AdaptiveSummary


class FeedbackResp(BaseModel):
    session_id: str
    final_score: float
    passed: bool
    feedback_report: FeedbackReport
    integrity_report: Optional[IntegrityReport] = None
    skill_gaps: Optional[SkillGapAnalysis] = None
    spoken_summary: Optional[str] = None


class CandidateHistory(BaseModel):
    candidate_id: str
    sessions: List[ScorePoint] = Field(default_factory=list)
    improvement: ImprovementRate

"""Deterministic scoring engines for mock interview answers."""
from .adaptive import AdaptiveState, QuestionConfig, next_question_config, record_score, should_follow_up
from .answer_evaluator import evaluate
from .anti_cheat import AntiCheatState, analyze_answer, integrity_report, question_asked
from .feedback import FeedbackReport, build_report, spoken_summary
from .markers import ParsedReply, parse_reply, tokenize
from .resume import CandidateProfile, parse_profile, profile_prompt
from .skill_gap import SkillGapAnalysis, SkillGapState, analyze, track_answer
from .types import AnswerEvaluation

__all__ = [
    "AdaptiveState",
    "QuestionConfig",
    "next_question_config",
    "record_score",
    "should_follow_up",
    "evaluate",
    "AntiCheatState",
    "analyze_answer",
    "integrity_report",
    "question_asked",
    "FeedbackReport",
    "build_report",
    "spoken_summary",
    "ParsedReply",
    "parse_reply",
    "tokenize",
    "CandidateProfile",
    "parse_profile",
    "profile_prompt",
    "SkillGapAnalysis",
    "SkillGapState",
    "analyze",
    "track_answer",
    "AnswerEvaluation",
]

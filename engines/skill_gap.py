"""Skill-gap detector.

Each answered question is attributed to one or more topics by substring
patterns. Per-topic averages are compared against the expectation baseline
for the candidate's role level to produce gaps, strengths and a prioritized
learning path.
"""
from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from .numeric import mean, round1, round_half_up

GENERAL_TOPIC = "General"
DEFAULT_EXPECTATION = 5.0

GapSeverity = Literal["critical", "significant", "minor"]

ROLE_BASELINES: Dict[str, Dict[str, float]] = {
    "junior": {"technical": 5, "behavioral": 5, "problem_solving": 4, "system_design": 3, "communication": 5},
    "mid": {"technical": 7, "behavioral": 6, "problem_solving": 6, "system_design": 5, "communication": 6},
    "senior": {"technical": 8, "behavioral": 7, "problem_solving": 8, "system_design": 7, "communication": 7},
}

TOPIC_PATTERNS: Dict[str, List[str]] = {
    "JavaScript/TypeScript": ["javascript", "typescript", "js", "ts", "node", "es6", "ecmascript", "v8", "npm"],
    "React/Frontend": ["react", "component", "hook", "frontend", "css", "html", "dom", "ui", "ux", "next.js", "vue", "angular"],
    "Backend/API": ["backend", "api", "rest", "graphql", "server", "express", "endpoint", "middleware", "authentication"],
    "Database": ["database", "sql", "nosql", "query", "schema", "migration", "orm", "mongo", "postgres", "redis"],
    "System Design": ["system design", "architecture", "scalab", "microservice", "distributed", "load balanc", "caching"],
    "Data Structures": ["array", "linked list", "tree", "graph", "hash", "stack", "queue", "heap", "data structure"],
    "Algorithms": ["algorithm", "sorting", "searching", "recursion", "dynamic programming", "complexity", "big o", "time complexity"],
    "DevOps/CI-CD": ["docker", "kubernetes", "ci/cd", "pipeline", "deployment", "aws", "cloud", "devops", "terraform"],
    "Testing": ["testing", "unit test", "integration test", "e2e", "jest", "cypress", "tdd", "coverage", "mock"],
    "Security": ["security", "xss", "csrf", "authentication", "authorization", "encryption", "vulnerability", "owasp"],
    "Leadership": ["leadership", "mentor", "team lead", "manage", "delegate", "vision", "strategy"],
    "Problem Solving": ["problem solving", "approach", "debug", "troubleshoot", "root cause", "analyze", "optimize"],
    "Communication": ["communicate", "present", "explain", "stakeholder", "collaborate", "feedback", "documentation"],
}

TOPIC_CATEGORIES: Dict[str, str] = {
    "JavaScript/TypeScript": "technical",
    "React/Frontend": "technical",
    "Backend/API": "technical",
    "Database": "technical",
    "System Design": "system_design",
    "Data Structures": "technical",
    "Algorithms": "problem_solving",
    "DevOps/CI-CD": "technical",
    "Testing": "technical",
    "Security": "technical",
    "Leadership": "behavioral",
    "Problem Solving": "problem_solving",
    "Communication": "communication",
    GENERAL_TOPIC: "technical",
}

TOPIC_RECOMMENDATIONS: Dict[str, str] = {
    "JavaScript/TypeScript": (
        "Review core JS concepts: closures, prototypes, async/await, event loop. Practice on platforms like LeetCode."
    ),
    "React/Frontend": "Build small React projects focusing on hooks, state management, and component lifecycle.",
    "Backend/API": "Practice building REST APIs with authentication, error handling, and database integration.",
    "Database": "Study SQL joins, indexing strategies, and database normalization. Practice query writing.",
    "System Design": (
        "Study Grokking the System Design Interview. Practice designing real systems like URL shorteners."
    ),
    "Data Structures": "Review arrays, trees, graphs, hash tables. Implement each from scratch.",
    "Algorithms": "Practice sorting, searching, and dynamic programming. Aim for 2-3 LeetCode problems daily.",
    "DevOps/CI-CD": "Set up a simple CI/CD pipeline with GitHub Actions. Learn Docker basics.",
    "Testing": "Write unit tests for existing code. Learn Jest/Mocha and testing patterns.",
    "Security": "Study OWASP Top 10. Learn about XSS, CSRF, SQL injection prevention.",
    "Leadership": "Practice STAR method stories about leadership experiences. Read about engineering management.",
    "Problem Solving": "Practice breaking down complex problems. Use whiteboard/verbal problem solving.",
    "Communication": "Record yourself explaining technical concepts. Practice concise, structured answers.",
}


class SkillGapState(BaseModel):
    role_level: str = "mid"
    baseline: Dict[str, float] = Field(default_factory=lambda: dict(ROLE_BASELINES["mid"]))
    topic_scores: Dict[str, List[float]] = Field(default_factory=dict)
    question_type_scores: Dict[str, List[float]] = Field(default_factory=dict)
    questions_analyzed: int = 0

    @classmethod
    def for_role(cls, role_level: str = "mid") -> "SkillGapState":
        """Build a detector state; unknown role levels fall back to the mid baseline."""

        level = role_level if role_level in ROLE_BASELINES else "mid"
        return cls(role_level=level, baseline=dict(ROLE_BASELINES[level]))


class TrackResult(BaseModel):
    detected_topics: List[str]
    question_type: str
    score: float
    topic_averages: Dict[str, float]


class TopicGap(BaseModel):
    topic: str
    current_score: float
    expected_score: float
    deficit: float
    severity: GapSeverity
    recommendation: str
    questions_asked: int = 0


class TopicStrength(BaseModel):
    topic: str
    current_score: float
    expected_score: float
    surplus: float


class TypeComparison(BaseModel):
    score: float
    expected: float
    gap: float
    status: Literal["meets_expectation", "below_expectation"]


class LearningStep(BaseModel):
    priority: int
    topic: str
    current_level: float
    target_level: float
    action: str
    estimated_hours: int


class SkillGapAnalysis(BaseModel):
    role_level: str
    questions_analyzed: int
    topic_scores: Dict[str, float] = Field(default_factory=dict)
    gaps: List[TopicGap] = Field(default_factory=list)
    strengths: List[TopicStrength] = Field(default_factory=list)
    type_analysis: Dict[str, TypeComparison] = Field(default_factory=dict)
    overall_gap_score: int = 0
    prioritized_learning_path: List[LearningStep] = Field(default_factory=list)


def detect_topics(question: str) -> List[str]:
    lowered = question.lower()
    topics = [topic for topic, patterns in TOPIC_PATTERNS.items() if any(p in lowered for p in patterns)]
    return topics or [GENERAL_TOPIC]


def _averages(scores: Dict[str, List[float]]) -> Dict[str, float]:
    return {key: round1(mean(values)) for key, values in scores.items() if values}


def baseline_for_topic(state: SkillGapState, topic: str) -> float:
    category = TOPIC_CATEGORIES.get(topic, "technical")
    return state.baseline.get(category, DEFAULT_EXPECTATION)


def recommendation_for(topic: str) -> str:
    return TOPIC_RECOMMENDATIONS.get(
        topic, f"Focus on improving {topic} skills through dedicated practice and study."
    )


def _severity(deficit: float) -> GapSeverity:
    if deficit >= 3:
        return "critical"
    if deficit >= 1.5:
        return "significant"
    return "minor"


def track_answer(
    state: SkillGapState,
    question: str,
    answer: str,
    score: float,
    question_type: str = "technical",
) -> TrackResult:
    """Attribute ``score`` to every topic the question touches and to its question type."""

    state.questions_analyzed += 1
    topics = detect_topics(question if isinstance(question, str) else "")
    for topic in topics:
        state.topic_scores.setdefault(topic, []).append(score)
    state.question_type_scores.setdefault(question_type, []).append(score)
    return TrackResult(
        detected_topics=topics,
        question_type=question_type,
        score=score,
        topic_averages=_averages(state.topic_scores),
    )


def overall_gap_score(gaps: List[TopicGap]) -> int:
    """Normalized total deficit on a 0..100 scale; ``0`` when there are no gaps."""

    if not gaps:
        return 0
    total = sum(gap.deficit for gap in gaps)
    return min(100, round_half_up(total / (len(gaps) * 10) * 100))


def learning_path(gaps: List[TopicGap], limit: int = 5) -> List[LearningStep]:
    urgent = [gap for gap in gaps if gap.severity != "minor"][:limit]
    return [
        LearningStep(
            priority=index + 1,
            topic=gap.topic,
            current_level=gap.current_score,
            target_level=gap.expected_score,
            action=gap.recommendation,
            estimated_hours=20 if gap.severity == "critical" else 10,
        )
        for index, gap in enumerate(urgent)
    ]


def analyze(state: SkillGapState) -> SkillGapAnalysis:
    topic_averages = _averages(state.topic_scores)

    gaps: List[TopicGap] = []
    strengths: List[TopicStrength] = []
    for topic, avg in topic_averages.items():
        expected = baseline_for_topic(state, topic)
        deficit = expected - avg
        if deficit > 0:
            gaps.append(
                TopicGap(
                    topic=topic,
                    current_score=avg,
                    expected_score=expected,
                    deficit=round1(deficit),
                    severity=_severity(deficit),
                    recommendation=recommendation_for(topic),
                    questions_asked=len(state.topic_scores.get(topic, [])),
                )
            )
        surplus = avg - expected
        if surplus >= 1:
            strengths.append(
                TopicStrength(topic=topic, current_score=avg, expected_score=expected, surplus=round1(surplus))
            )
    gaps.sort(key=lambda gap: gap.deficit, reverse=True)
    strengths.sort(key=lambda strength: strength.surplus, reverse=True)

    type_analysis: Dict[str, TypeComparison] = {}
    for question_type, avg in _averages(state.question_type_scores).items():
        expected = state.baseline.get(question_type, DEFAULT_EXPECTATION)
        type_analysis[question_type] = TypeComparison(
            score=avg,
            expected=expected,
            gap=round1(expected - avg),
            status="meets_expectation" if avg >= expected else "below_expectation",
        )

    return SkillGapAnalysis(
        role_level=state.role_level,
        questions_analyzed=state.questions_analyzed,
        topic_scores=topic_averages,
        gaps=gaps,
        strengths=strengths,
        type_analysis=type_analysis,
        overall_gap_score=overall_gap_score(gaps),
        prioritized_learning_path=learning_path(gaps),
    )


def critical_gaps(analysis: Optional[SkillGapAnalysis]) -> List[TopicGap]:
    if analysis is None:
        return []
    return [gap for gap in analysis.gaps if gap.severity == "critical"]


__all__ = [
    "ROLE_BASELINES",
    "TOPIC_PATTERNS",
    "TOPIC_CATEGORIES",
    "TOPIC_RECOMMENDATIONS",
    "GENERAL_TOPIC",
    "SkillGapState",
    "TrackResult",
    "TopicGap",
    "TopicStrength",
    "TypeComparison",
    "LearningStep",
    "SkillGapAnalysis",
    "detect_topics",
    "baseline_for_topic",
    "recommendation_for",
    "track_answer",
    "overall_gap_score",
    "learning_path",
    "analyze",
    "critical_gaps",
]

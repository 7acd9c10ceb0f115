"""Lexical analyzers for interview answers.

Three pure detectors score an answer's text without any session state:

* keyword coverage against the topic vocabulary implied by the question,
* completeness (length, sentence structure, specificity and STAR coverage),
* confidence (hedging, filler words and assertive phrasing).

All matching is case-insensitive substring matching except filler words,
which are matched on word boundaries.
"""
from __future__ import annotations

import re
from typing import Dict, List

from .numeric import clamp, round1, round_half_up
from .types import CompletenessAnalysis, ConfidenceAnalysis, KeywordAnalysis, StarCoverage

TECHNICAL_KEYWORDS: Dict[str, List[str]] = {
    "javascript": [
        "closure", "prototype", "async", "await", "promise", "callback", "event loop",
        "hoisting", "scope", "this", "arrow function", "destructuring", "spread", "rest",
        "module", "import", "export", "class", "inheritance", "dom", "api", "fetch", "json",
        "typescript",
    ],
    "react": [
        "component", "state", "props", "hook", "useeffect", "usestate", "virtual dom", "jsx",
        "render", "lifecycle", "context", "redux", "memo", "ref", "key", "fragment", "portal",
        "suspense", "lazy",
    ],
    "python": [
        "decorator", "generator", "list comprehension", "lambda", "class", "inheritance",
        "exception", "module", "package", "pip", "virtual environment", "dict", "tuple", "set",
        "async", "await", "type hint",
    ],
    "database": [
        "sql", "nosql", "index", "query", "join", "normalization", "transaction", "acid",
        "schema", "migration", "orm", "primary key", "foreign key", "aggregate",
        "stored procedure",
    ],
    "system_design": [
        "scalability", "load balancer", "caching", "microservice", "api gateway",
        "database sharding", "replication", "cdn", "message queue", "rate limiting",
        "circuit breaker", "consistency", "availability", "partition tolerance",
    ],
    "general": [
        "algorithm", "data structure", "complexity", "testing", "debugging", "version control",
        "git", "ci/cd", "agile", "scrum", "code review", "documentation", "deployment",
        "monitoring", "security",
    ],
    "behavioral": [
        "team", "leadership", "conflict", "challenge", "deadline", "communication", "feedback",
        "collaboration", "priority", "decision", "mistake", "learn", "improve", "initiative",
        "mentor",
    ],
}

TOPIC_INDICATORS: Dict[str, List[str]] = {
    "javascript": ["javascript", "js", "node", "typescript", "es6", "ecmascript"],
    "react": ["react", "component", "hook", "jsx", "redux", "next.js", "frontend"],
    "python": ["python", "django", "flask", "pip", "pandas", "numpy"],
    "database": ["database", "sql", "nosql", "mongo", "postgres", "mysql", "query", "data model"],
    "system_design": ["system design", "architecture", "scalab", "microservice", "distributed", "design a"],
    "behavioral": [
        "tell me about", "describe a time", "how do you handle", "experience", "challenge", "team",
        "conflict", "why do you", "what are your", "strength", "weakness",
    ],
}

HEDGING_PHRASES = [
    "i think", "maybe", "probably", "i guess", "not sure", "i believe", "kind of", "sort of",
    "um", "uh", "like", "you know", "basically", "i don't know", "i'm not certain",
    "it might be", "perhaps", "i suppose", "something like", "more or less",
]

FILLER_WORDS = ["um", "uh", "like", "you know", "basically", "actually", "literally", "honestly", "right", "so yeah"]

ASSERTIVE_PHRASES = [
    "i am", "i have", "i did", "i will", "i can", "i know", "definitely", "certainly",
    "absolutely", "clearly", "my experience", "i successfully", "i led", "i built", "i designed",
]

STAR_KEYWORDS: Dict[str, List[str]] = {
    "situation": ["situation", "context", "background", "working on", "project", "task", "assigned"],
    "task": ["task", "responsible", "goal", "objective", "needed to", "had to", "required"],
    "action": ["action", "implemented", "developed", "created", "built", "designed", "led", "initiated", "proposed", "solved"],
    "result": ["result", "outcome", "achieved", "improved", "reduced", "increased", "delivered", "successfully", "impact", "metrics"],
}

# Denominator cap for keyword coverage; large vocabularies would otherwise make 10 unreachable.
KEYWORD_EXPECTATION = 8

_EXAMPLE_RE = re.compile(r"for example|for instance|such as|like when|one time", re.IGNORECASE)
_SPECIFIC_RE = re.compile(r"specifically|in particular|the key|the main|because|the reason", re.IGNORECASE)
_NUMBER_RE = re.compile(r"\d+")
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")
_FILLER_RES = {word: re.compile(rf"\b{re.escape(word)}\b", re.IGNORECASE) for word in FILLER_WORDS}


def detect_relevant_topics(question: str) -> List[str]:
    """Return the keyword topics implied by ``question``; ``["general"]`` when none match."""

    lowered = question.lower()
    topics = [
        topic
        for topic, indicators in TOPIC_INDICATORS.items()
        if any(indicator in lowered for indicator in indicators)
    ]
    return topics or ["general"]


def evaluate_keyword_coverage(answer: str, question: str) -> KeywordAnalysis:
    lowered = answer.lower()
    topics = detect_relevant_topics(question)

    keywords: List[str] = []
    for topic in topics:
        keywords.extend(TECHNICAL_KEYWORDS.get(topic, []))
    # General and behavioral vocabulary always counts.
    for always in ("general", "behavioral"):
        if always not in topics:
            keywords.extend(TECHNICAL_KEYWORDS[always])
    keywords = list(dict.fromkeys(keywords))

    matched = [kw for kw in keywords if kw in lowered]
    ratio = len(matched) / min(len(keywords), KEYWORD_EXPECTATION) if keywords else 0.0
    return KeywordAnalysis(
        score=min(10, round_half_up(ratio * 10)),
        matched_keywords=matched,
        total_relevant=len(keywords),
        match_count=len(matched),
        topics=topics,
    )


def evaluate_star_method(answer: str) -> StarCoverage:
    lowered = answer.lower()
    components = {
        component: any(kw in lowered for kw in keywords)
        for component, keywords in STAR_KEYWORDS.items()
    }
    covered = sum(1 for hit in components.values() if hit)
    return StarCoverage(
        score=round_half_up(covered / len(STAR_KEYWORDS) * 10),
        components=components,
        covered_count=covered,
        total_components=len(STAR_KEYWORDS),
    )


def _length_score(word_count: int) -> int:
    if word_count < 10:
        return 2
    if word_count < 20:
        return 4
    if word_count < 30:
        return 6
    if word_count <= 120:
        return 9
    if word_count <= 200:
        return 8
    return 6  # too verbose


def _structure_score(sentence_count: int) -> int:
    if sentence_count >= 3:
        return 10
    if sentence_count >= 2:
        return 7
    return 4


def evaluate_completeness(answer: str) -> CompletenessAnalysis:
    """Blend length, structure, specificity and STAR coverage into a 0..10 score.

    Blank answers short-circuit to an all-zero analysis rather than earning
    the one-word floor.
    """

    if not answer.strip():
        return CompletenessAnalysis(
            score=0,
            star_coverage=StarCoverage(score=0, components={name: False for name in STAR_KEYWORDS}),
        )

    words = answer.split()
    sentences = [s for s in _SENTENCE_SPLIT_RE.split(answer) if s.strip()]
    length_score = _length_score(len(words))
    structure_score = _structure_score(len(sentences))

    has_numbers = bool(_NUMBER_RE.search(answer))
    has_examples = bool(_EXAMPLE_RE.search(answer))
    has_specifics = bool(_SPECIFIC_RE.search(answer))
    specificity = 4 + 2 * has_numbers + 2 * has_examples + 2 * has_specifics
    specificity = min(10, specificity)

    star = evaluate_star_method(answer)
    blended = length_score * 0.30 + structure_score * 0.25 + specificity * 0.25 + star.score * 0.20
    return CompletenessAnalysis(
        score=int(clamp(round_half_up(blended), 0, 10)),
        word_count=len(words),
        sentence_count=len(sentences),
        length_score=length_score,
        structure_score=structure_score,
        specificity_score=specificity,
        star_coverage=star,
        has_examples=has_examples,
        has_numbers=has_numbers,
    )


def evaluate_confidence(answer: str) -> ConfidenceAnalysis:
    lowered = answer.lower()
    word_count = len(lowered.split())

    hedging = [phrase for phrase in HEDGING_PHRASES if phrase in lowered]
    fillers = [word for word, pattern in _FILLER_RES.items() if pattern.search(lowered)]
    assertive = [phrase for phrase in ASSERTIVE_PHRASES if phrase in lowered]

    raw = 7.0
    raw -= min(4.0, len(hedging) * 1.5)
    raw -= min(2.0, len(fillers) * 0.5)
    raw += min(3.0, len(assertive) * 1.0)

    hedging_density = len(hedging) / word_count * 100 if word_count else 0.0
    filler_density = len(fillers) / word_count * 100 if word_count else 0.0
    return ConfidenceAnalysis(
        score=int(clamp(round_half_up(raw), 1, 10)),
        hedging_phrases=hedging,
        filler_words=fillers,
        assertive_language=assertive,
        hedging_density=round1(hedging_density),
        filler_density=round1(filler_density),
    )


__all__ = [
    "TECHNICAL_KEYWORDS",
    "TOPIC_INDICATORS",
    "HEDGING_PHRASES",
    "FILLER_WORDS",
    "ASSERTIVE_PHRASES",
    "STAR_KEYWORDS",
    "detect_relevant_topics",
    "evaluate_keyword_coverage",
    "evaluate_star_method",
    "evaluate_completeness",
    "evaluate_confidence",
]

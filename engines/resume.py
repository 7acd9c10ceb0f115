"""Resume pre-processing.

Turns plain resume text into a :class:`CandidateProfile` (skills by
category, experience level, expertise areas, education, quantified
achievements and name) and derives the one-time session seeding from it:
a system-prompt addition, suggested topics and the starting difficulty.
"""
from __future__ import annotations

import re
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from .numeric import round1

ExperienceLevel = Literal["junior", "mid", "senior"]

SKILL_CATEGORIES: Dict[str, List[str]] = {
    "Programming Languages": [
        "javascript", "typescript", "python", "java", "c++", "c#", "go", "golang", "rust", "ruby", "php",
        "swift", "kotlin", "scala", "r", "matlab", "perl", "dart", "elixir", "haskell", "lua",
        "objective-c", "assembly",
    ],
    "Frontend Frameworks": [
        "react", "react.js", "reactjs", "angular", "vue", "vue.js", "vuejs", "svelte", "next.js", "nextjs",
        "nuxt", "gatsby", "ember", "backbone", "jquery", "bootstrap", "tailwind", "material-ui", "ant design",
    ],
    "Backend Frameworks": [
        "node.js", "nodejs", "express", "express.js", "django", "flask", "fastapi", "spring", "spring boot",
        "rails", "ruby on rails", "laravel", "asp.net", "nestjs", "koa", "hapi", "gin", "echo", "fiber",
    ],
    "Databases": [
        "mysql", "postgresql", "postgres", "mongodb", "redis", "elasticsearch", "dynamodb", "cassandra",
        "sqlite", "oracle", "sql server", "mariadb", "neo4j", "couchdb", "firebase", "supabase", "prisma",
        "sequelize",
    ],
    "Cloud & DevOps": [
        "aws", "azure", "gcp", "google cloud", "docker", "kubernetes", "k8s", "terraform", "ansible",
        "jenkins", "github actions", "gitlab ci", "circleci", "travis ci", "nginx", "apache", "linux", "bash",
        "cloudflare", "vercel", "netlify", "heroku", "digitalocean",
    ],
    "Mobile": [
        "react native", "flutter", "swift", "kotlin", "ios", "android", "xamarin", "cordova", "ionic", "expo",
    ],
    "Data & ML": [
        "machine learning", "deep learning", "tensorflow", "pytorch", "keras", "scikit-learn", "pandas",
        "numpy", "data science", "nlp", "computer vision", "neural network", "hadoop", "spark", "kafka",
        "airflow", "tableau", "power bi",
    ],
    "Tools & Practices": [
        "git", "github", "gitlab", "bitbucket", "jira", "agile", "scrum", "kanban", "ci/cd", "tdd", "bdd",
        "pair programming", "code review", "microservices", "rest", "graphql", "grpc", "websocket", "oauth",
        "jwt", "api design",
    ],
}

EXPERIENCE_INDICATORS: Dict[str, List[str]] = {
    "senior": [
        "senior", "lead", "principal", "staff", "architect", "manager", "director", "head of", "vp of",
        "chief", "cto", "10+ years", "8+ years", "7+ years", "mentored", "led a team", "managed a team",
    ],
    "mid": [
        "mid-level", "mid level", "3+ years", "4+ years", "5+ years", "6+ years", "contributed to",
        "collaborated", "developed multiple", "full-stack",
    ],
    "junior": [
        "junior", "intern", "entry-level", "entry level", "fresh graduate", "bootcamp", "self-taught",
        "1 year", "2 years", "beginner", "student", "graduate",
    ],
}

DIFFICULTY_BY_LEVEL: Dict[str, int] = {"senior": 2, "mid": 2, "junior": 1}

_SKILL_RES = {
    skill: re.compile(rf"(?<!\w){re.escape(skill)}(?!\w)", re.IGNORECASE)
    for skills in SKILL_CATEGORIES.values()
    for skill in skills
}
_YEARS_RE = re.compile(r"(\d+)\+?\s*years?\s*(?:of\s*)?(?:experience|professional)", re.IGNORECASE)
_DEGREE_PATTERNS = [
    ("Bachelor's", re.compile(r"bachelor|b\.?s\.?|b\.?a\.?|b\.?sc\.?|b\.?tech", re.IGNORECASE)),
    ("Master's", re.compile(r"master|m\.?s\.?|m\.?a\.?|m\.?sc\.?|m\.?tech|mba", re.IGNORECASE)),
    ("PhD/Doctorate", re.compile(r"ph\.?d|doctorate|doctor", re.IGNORECASE)),
    ("Certification", re.compile(r"diploma|certificate|certification", re.IGNORECASE)),
]
_CS_RE = re.compile(r"computer science|software engineer|information technology|cs degree", re.IGNORECASE)
_IMPACT_PATTERNS = [
    re.compile(
        r"(?:improved|increased|reduced|decreased|achieved|delivered|grew|scaled)\s+[\w\s]+by\s+\d+%",
        re.IGNORECASE,
    ),
    re.compile(r"(?:managed|led|mentored)\s+(?:a\s+)?team\s+of\s+\d+", re.IGNORECASE),
    re.compile(r"\$[\d,]+(?:k|m|b)?(?:\s+in\s+\w+)?", re.IGNORECASE),
    re.compile(r"\d+(?:k|m|b)\+?\s+(?:users|customers|requests|transactions)", re.IGNORECASE),
]
_NAME_SKIP_RE = re.compile(
    r"^(resume|curriculum vitae|cv|profile|summary|contact|objective|about|phone|email|address|portfolio"
    r"|linkedin|github|http)",
    re.IGNORECASE,
)
_CONTACT_RE = re.compile(r"@|http|www\.|\+\d{2,}|\d{5,}")
_NAME_RE = re.compile(r"^[A-Z][a-zA-Z.'-]+(?:\s+[A-Z][a-zA-Z.'-]+){1,3}$")


class ExpertiseArea(BaseModel):
    area: str
    skill_count: int
    skills: List[str]


class Education(BaseModel):
    degrees: List[str] = Field(default_factory=list)
    is_cs_related: bool = False
    has_degree: bool = False


class SkillSet(BaseModel):
    all: List[str] = Field(default_factory=list)
    by_category: Dict[str, List[str]] = Field(default_factory=dict)
    count: int = 0


class CandidateProfile(BaseModel):
    skills: SkillSet = Field(default_factory=SkillSet)
    experience_level: ExperienceLevel = "mid"
    estimated_years: Optional[int] = None
    expertise: List[ExpertiseArea] = Field(default_factory=list)
    education: Education = Field(default_factory=Education)
    achievements: List[str] = Field(default_factory=list)
    candidate_name: str = ""
    skill_density: float = 0.0  # skills per 100 words


class SuggestedTopic(BaseModel):
    topic: str
    skills: List[str] = Field(default_factory=list)
    question_hint: str


class ProfilePrompt(BaseModel):
    system_prompt_addition: str = ""
    suggested_topics: List[SuggestedTopic] = Field(default_factory=list)
    difficulty_override: Optional[int] = None
    experience_level: Optional[ExperienceLevel] = None


def estimate_experience(lowered: str) -> ExperienceLevel:
    """Pick the first level with two indicator hits, else the densest level; defaults to mid."""

    hits = {
        level: sum(1 for indicator in indicators if indicator in lowered)
        for level, indicators in EXPERIENCE_INDICATORS.items()
    }
    for level in ("senior", "mid", "junior"):
        if hits[level] >= 2:
            return level  # type: ignore[return-value]
    if hits["senior"] > hits["mid"] and hits["senior"] > hits["junior"]:
        return "senior"
    if hits["mid"] > hits["junior"]:
        return "mid"
    if hits["junior"] > 0:
        return "junior"
    return "mid"


def extract_education(text: str) -> Education:
    degrees = [label for label, pattern in _DEGREE_PATTERNS if pattern.search(text)]
    return Education(degrees=degrees, is_cs_related=bool(_CS_RE.search(text)), has_degree=bool(degrees))


def extract_achievements(text: str, limit: int = 5) -> List[str]:
    found: List[str] = []
    for pattern in _IMPACT_PATTERNS:
        found.extend(match.group(0).strip() for match in pattern.finditer(text))
    return list(dict.fromkeys(found))[:limit]


def extract_name(text: str) -> str:
    lines = [line.strip() for line in text.split("\n") if line.strip()]
    for line in lines[:5]:
        if len(line) > 50 or _CONTACT_RE.search(line) or _NAME_SKIP_RE.match(line):
            continue
        if _NAME_RE.match(line):
            return line
    return ""


def parse_profile(text: Any) -> CandidateProfile:
    """Parse resume text; non-string or blank input yields an empty profile."""

    if not isinstance(text, str) or not text.strip():
        return CandidateProfile()

    by_category: Dict[str, List[str]] = {}
    every: List[str] = []
    for category, skills in SKILL_CATEGORIES.items():
        found = [skill for skill in skills if _SKILL_RES[skill].search(text)]
        if found:
            by_category[category] = found
            every.extend(found)

    years = _YEARS_RE.search(text)
    expertise = [
        ExpertiseArea(area=category, skill_count=len(skills), skills=skills)
        for category, skills in sorted(by_category.items(), key=lambda item: len(item[1]), reverse=True)[:3]
    ]
    word_total = max(len(text.split()), 1)
    return CandidateProfile(
        skills=SkillSet(all=list(dict.fromkeys(every)), by_category=by_category, count=len(every)),
        experience_level=estimate_experience(text.lower()),
        estimated_years=int(years.group(1)) if years else None,
        expertise=expertise,
        education=extract_education(text),
        achievements=extract_achievements(text),
        candidate_name=extract_name(text),
        skill_density=round1(len(every) / word_total * 100),
    )


def profile_prompt(profile: CandidateProfile) -> ProfilePrompt:
    """Derive the session seeding from a parsed profile.

    Profiles without any recognized skill seed nothing.
    """

    if profile.skills.count == 0:
        return ProfilePrompt()

    top_skills = ", ".join(profile.skills.all[:10])
    top_areas = ", ".join(area.area for area in profile.expertise)
    lines = [
        "",
        "CANDIDATE RESUME CONTEXT:",
        f"- Listed skills: {top_skills}",
        f"- Areas of expertise: {top_areas}",
        f"- Experience level: {profile.experience_level}",
    ]
    if profile.achievements:
        lines.append(f"- Notable achievements: {'; '.join(profile.achievements[:3])}")
    lines.extend(
        [
            "",
            "INSTRUCTIONS FOR RESUME-BASED INTERVIEW:",
            "- Ask questions specifically about the technologies and skills listed on their resume",
            "- Probe depth of knowledge in their stated areas of expertise",
            "- For senior candidates, ask architecture and system design questions related to their stack",
            "- Challenge their claimed experience with scenario-based questions",
            "- Ask about specific projects or achievements mentioned",
            "- Verify skill claims with technical deep-dives",
            "",
        ]
    )

    topics = [
        SuggestedTopic(
            topic=area.area,
            skills=area.skills[:3],
            question_hint=(
                f"Ask about their experience with {' and '.join(area.skills[:2])} in production environments."
            ),
        )
        for area in profile.expertise
    ]
    if profile.achievements:
        topics.append(
            SuggestedTopic(
                topic="Achievements",
                question_hint="Ask them to elaborate on their achievements and the impact they made.",
            )
        )

    return ProfilePrompt(
        system_prompt_addition="\n".join(lines),
        suggested_topics=topics,
        difficulty_override=DIFFICULTY_BY_LEVEL.get(profile.experience_level, 1),
        experience_level=profile.experience_level,
    )


__all__ = [
    "SKILL_CATEGORIES",
    "EXPERIENCE_INDICATORS",
    "ExpertiseArea",
    "Education",
    "SkillSet",
    "CandidateProfile",
    "SuggestedTopic",
    "ProfilePrompt",
    "estimate_experience",
    "extract_education",
    "extract_achievements",
    "extract_name",
    "parse_profile",
    "profile_prompt",
]

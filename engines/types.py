"""Shared type definitions for the answer-scoring engines."""
from typing import Dict, List, Literal

from pydantic import BaseModel, ConfigDict, Field

Rating = Literal["excellent", "good", "average", "needs_improvement"]
QuestionType = Literal[
    "technical",
    "behavioral",
    "problem_solving",
    "system_design",
    "situational",
    "follow_up",
]


class KeywordAnalysis(BaseModel):
    score: int  # 0..10
    matched_keywords: List[str] = Field(default_factory=list)
    total_relevant: int = 0
    match_count: int = 0
    topics: List[str] = Field(default_factory=list)


class StarCoverage(BaseModel):
    score: int  # 0..10
    components: Dict[str, bool] = Field(default_factory=dict)
    covered_count: int = 0
    total_components: int = 4


class CompletenessAnalysis(BaseModel):
    score: int  # 0..10
    word_count: int = 0
    sentence_count: int = 0
    length_score: int = 0
    structure_score: int = 0
    specificity_score: int = 0
    star_coverage: StarCoverage
    has_examples: bool = False
    has_numbers: bool = False


class ConfidenceAnalysis(BaseModel):
    score: int  # 1..10
    hedging_phrases: List[str] = Field(default_factory=list)
    filler_words: List[str] = Field(default_factory=list)
    assertive_language: List[str] = Field(default_factory=list)
    hedging_density: float = 0.0  # per 100 words
    filler_density: float = 0.0


class DimensionScore(BaseModel):
    score: float
    rating: Rating
    weight: float


class Dimensions(BaseModel):
    ai_judgment: DimensionScore
    keyword_coverage: DimensionScore
    completeness: DimensionScore
    confidence: DimensionScore


class AnswerEvaluation(BaseModel):
    """Scored view of a single answer; never mutated after creation."""

    model_config = ConfigDict(frozen=True)

    composite_score: int  # 0..10
    dimensions: Dimensions
    keyword_analysis: KeywordAnalysis
    completeness_analysis: CompletenessAnalysis
    confidence_analysis: ConfidenceAnalysis
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    tips: List[str] = Field(default_factory=list)

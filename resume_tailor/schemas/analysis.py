from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

ImpactLevel = Literal["none", "minor", "major", "transformed"]
ImpactScoreLabel = Literal["weak", "moderate", "strong", "exceptional"]
UniquenessScoreLabel = Literal["low", "moderate", "high", "exceptional"]
ContextScoreLabel = Literal["poor", "weak", "moderate", "good", "excellent"]
FactorType = Literal[
    "skill_combination",
    "career_transition",
    "unique_experience",
    "domain_expertise",
    "achievement",
    "education",
]
Rarity = Literal["uncommon", "rare", "very_rare"]
SkillSource = Literal["technical", "soft", "experience", "education"]
MatchStrength = Literal["exact", "related", "transferable"]
Importance = Literal["critical", "important", "nice_to_have"]
Relevance = Literal["high", "medium", "low"]
Priority = Literal["high", "medium", "low"]
SoftSkillStrength = Literal["weak", "moderate", "strong"]
CompanySize = Literal["startup", "small", "mid", "enterprise", "unknown"]


class Suggestion(BaseModel):
    area: str = "General"
    recommendation: str = ""


# Impact quantification ------------------------------------------------------


class ImpactBullet(BaseModel):
    id: str
    experience_id: str
    experience_title: str = "Unknown Position"
    company_name: str = "Unknown Company"
    original: str
    improved: str
    metrics: list[str] = Field(default_factory=list)
    improvement_level: ImpactLevel = "none"
    explanation: str = ""


class MetricCategories(BaseModel):
    percentage: int = Field(default=0, ge=0)
    monetary: int = Field(default=0, ge=0)
    time: int = Field(default=0, ge=0)
    scale: int = Field(default=0, ge=0)
    other: int = Field(default=0, ge=0)


class ImpactResult(BaseModel):
    score: int = Field(ge=0, le=100)
    score_label: ImpactScoreLabel
    summary: str
    total_bullets: int = 0
    bullets_improved: int = 0
    bullets: list[ImpactBullet] = Field(default_factory=list)
    metric_categories: MetricCategories = Field(default_factory=MetricCategories)
    suggestions: list[Suggestion] = Field(default_factory=list)


# Uniqueness extraction ------------------------------------------------------


class UniquenessFactor(BaseModel):
    id: str
    type: FactorType
    title: str
    description: str
    rarity: Rarity
    evidence: list[str] = Field(default_factory=list)
    suggestion: str = ""


class UniquenessResult(BaseModel):
    score: int = Field(ge=0, le=100)
    score_label: UniquenessScoreLabel
    factors: list[UniquenessFactor] = Field(default_factory=list)
    summary: str
    differentiators: list[str] = Field(default_factory=list)
    suggestions: list[Suggestion] = Field(default_factory=list)


# Job-context alignment ------------------------------------------------------


class MatchedSkill(BaseModel):
    skill: str
    source: SkillSource = "technical"
    strength: MatchStrength = "related"
    evidence: str = ""


class MissingRequirement(BaseModel):
    requirement: str
    importance: Importance = "important"
    suggestion: str = ""


class ExperienceAlignment(BaseModel):
    experience_id: str
    experience_title: str = ""
    company_name: str = ""
    relevance: Relevance = "medium"
    matched_aspects: list[str] = Field(default_factory=list)
    explanation: str = ""


class KeywordHit(BaseModel):
    keyword: str
    found: bool
    location: str | None = None


class KeywordCoverage(BaseModel):
    matched: int = Field(default=0, ge=0)
    total: int = Field(default=0, ge=0)
    percentage: int = Field(default=0, ge=0, le=100)
    keywords: list[KeywordHit] = Field(default_factory=list)


class ContextSuggestion(BaseModel):
    category: str = "tailoring"
    priority: Priority = "medium"
    recommendation: str = ""


class FitAssessment(BaseModel):
    strengths: list[str] = Field(default_factory=list)
    gaps: list[str] = Field(default_factory=list)
    overall_fit: str = ""


class ContextResult(BaseModel):
    score: int = Field(ge=0, le=100)
    score_label: ContextScoreLabel
    summary: str
    matched_skills: list[MatchedSkill] = Field(default_factory=list)
    missing_requirements: list[MissingRequirement] = Field(default_factory=list)
    experience_alignments: list[ExperienceAlignment] = Field(default_factory=list)
    keyword_coverage: KeywordCoverage = Field(default_factory=KeywordCoverage)
    suggestions: list[ContextSuggestion] = Field(default_factory=list)
    fit_assessment: FitAssessment = Field(default_factory=FitAssessment)


# Local analyses -------------------------------------------------------------


class CompanyResearchResult(BaseModel):
    company_name: str
    is_well_known: bool
    industry: str | None = None
    size: CompanySize = "unknown"
    funding_stage: str | None = None
    comparable: str | None = None
    context: str = ""


class SoftSkillAssessment(BaseModel):
    skill: str
    evidence: list[str] = Field(default_factory=list)
    strength: SoftSkillStrength
    bullet_ids: list[str] = Field(default_factory=list)


# Aggregate ------------------------------------------------------------------


class PreAnalysisResult(BaseModel):
    impact: ImpactResult
    uniqueness: UniquenessResult
    context: ContextResult
    company: CompanyResearchResult
    soft_skills: list[SoftSkillAssessment] = Field(default_factory=list)
    analyzed_at: datetime
    resume_id: str = ""
    job_id: str
    failed_analyses: list[str] = Field(default_factory=list)


class PreAnalysisSummary(BaseModel):
    overall_score: int = Field(ge=0, le=100)
    issue_scores: dict[str, int] = Field(default_factory=dict)
    top_strengths: list[str] = Field(default_factory=list)
    top_gaps: list[str] = Field(default_factory=list)


def impact_score_label(score: int) -> ImpactScoreLabel:
    if score < 40:
        return "weak"
    if score < 65:
        return "moderate"
    if score < 85:
        return "strong"
    return "exceptional"


def uniqueness_score_label(score: int) -> UniquenessScoreLabel:
    if score < 40:
        return "low"
    if score < 65:
        return "moderate"
    if score < 85:
        return "high"
    return "exceptional"


def context_score_label(score: int) -> ContextScoreLabel:
    if score < 30:
        return "poor"
    if score < 50:
        return "weak"
    if score < 70:
        return "moderate"
    if score < 85:
        return "good"
    return "excellent"

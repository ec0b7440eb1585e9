from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from .analysis import ImpactLevel, Rarity
from .rules import RuleEvaluationResult, StrategicTone


class BulletTransformInstruction(BaseModel):
    bullet_id: str
    experience_id: str
    original_text: str
    add_metrics: bool = False
    suggested_metrics: list[str] = Field(default_factory=list)
    add_keywords: bool = False
    keywords_to_add: list[str] = Field(default_factory=list, max_length=3)
    add_context: bool = False
    context_to_add: str = ""
    add_soft_skills: bool = False
    soft_skills_to_weave: list[str] = Field(default_factory=list, max_length=2)
    tone: StrategicTone
    improvement_level: ImpactLevel = "none"
    rewrite_instruction: str


class SummaryTransformInstruction(BaseModel):
    original_summary: str | None = None
    target_role: str
    target_company: str
    unique_differentiators: list[str] = Field(default_factory=list, max_length=3)
    matched_skills: list[str] = Field(default_factory=list, max_length=5)
    company_alignment: str | None = None
    tone: StrategicTone
    rewrite_instruction: str


class WhyFitBullet(BaseModel):
    label: str
    text: str
    source: Literal["uniqueness", "experience"]
    rarity: Rarity


class WhyFitInstruction(BaseModel):
    bullets: list[WhyFitBullet] = Field(default_factory=list, max_length=3)


class TechnicalSkillsPlan(BaseModel):
    original: list[str] = Field(default_factory=list)
    reordered: list[str] = Field(default_factory=list)
    matched_first: list[str] = Field(default_factory=list)
    to_add: list[str] = Field(default_factory=list)


class SoftSkillsPlan(BaseModel):
    original: list[str] = Field(default_factory=list)
    reordered: list[str] = Field(default_factory=list)
    emphasized: list[str] = Field(default_factory=list)


class SkillsReorderInstruction(BaseModel):
    technical: TechnicalSkillsPlan
    soft: SoftSkillsPlan


class ExperienceReorderInstruction(BaseModel):
    experience_ids: list[str] = Field(default_factory=list)
    relevance_scores: dict[str, int] = Field(default_factory=dict)
    new_order: list[str] = Field(default_factory=list)


class TransformationInstructions(BaseModel):
    bullets: list[BulletTransformInstruction] = Field(default_factory=list)
    summary: SummaryTransformInstruction
    why_fit: WhyFitInstruction
    skills: SkillsReorderInstruction
    experience_order: ExperienceReorderInstruction
    applied_rules: list[RuleEvaluationResult] = Field(default_factory=list)
    overall_tone: StrategicTone

from __future__ import annotations

import logging
from typing import Iterable

from resume_tailor.schemas.analysis import ImpactBullet, PreAnalysisResult, UniquenessFactor
from resume_tailor.schemas.instructions import (
    BulletTransformInstruction,
    ExperienceReorderInstruction,
    SkillsReorderInstruction,
    SoftSkillsPlan,
    SummaryTransformInstruction,
    TechnicalSkillsPlan,
    TransformationInstructions,
    WhyFitBullet,
    WhyFitInstruction,
)
from resume_tailor.schemas.job import JobData
from resume_tailor.schemas.resume import ResumeContent
from resume_tailor.schemas.rules import RuleEvaluationResult, StrategicTone, TransformationRule
from resume_tailor.tailoring.rule_engine import evaluate_rules

logger = logging.getLogger(__name__)

MAX_KEYWORDS_PER_BULLET = 3
MAX_SOFT_SKILLS_PER_BULLET = 2
MAX_SUMMARY_DIFFERENTIATORS = 3
MAX_SUMMARY_SKILLS = 5
MAX_WHY_FIT_BULLETS = 3
MIN_WHY_FIT_BULLETS = 2
MAX_SKILLS_TO_ADD = 3
MAX_SKILL_WORDS = 3

COMPANY_CONTEXT_ACTION = "add_company_context"

_BULLET_TONE_GUIDANCE: dict[StrategicTone, str] = {
    "confident": "Use strong action verbs and assertive language",
    "measured": "Balance confidence with precision",
    "humble": "Focus on learning and growth while highlighting contribution",
}
_SUMMARY_TONE_GUIDANCE: dict[StrategicTone, str] = {
    "confident": "Position as the ideal candidate with proven track record",
    "measured": "Show strong fit while acknowledging growth areas",
    "humble": "Emphasize eagerness to contribute and learn",
}
_WHY_FIT_LABELS = {
    "skill_combination": "Unique skill set:",
    "career_transition": "Diverse perspective:",
    "achievement": "Proven track record:",
    "domain_expertise": "Deep expertise:",
}
_RELEVANCE_SCORES = {"high": 100, "medium": 60, "low": 30}
_DEFAULT_RELEVANCE = 50


def calculate_strategic_tone(result: PreAnalysisResult) -> StrategicTone:
    score = result.context.score
    if score >= 75:
        return "confident"
    if score >= 50:
        return "measured"
    return "humble"


def _company_context_overrides(
    applied_rules: Iterable[RuleEvaluationResult],
    company_name: str,
) -> dict[str, str]:
    """bullet id -> context text from matched ``add_company_context`` actions.

    The first matching rule in priority order wins for a bullet.
    """
    overrides: dict[str, str] = {}
    for evaluation in applied_rules:
        for action in evaluation.actions:
            if action.type != COMPANY_CONTEXT_ACTION or action.target != "bullet":
                continue
            template = action.params.get("context_template")
            if not isinstance(template, str) or not template.strip():
                continue
            text = template.replace("{company}", company_name)
            for target in evaluation.matched_targets:
                overrides.setdefault(target, text)
    return overrides


def _rewrite_instruction(instruction: BulletTransformInstruction, improved: str | None) -> str:
    parts: list[str] = []
    if improved and instruction.improvement_level != "none":
        parts.append(f'Start with: "{improved}"')
    else:
        parts.append(f'Original: "{instruction.original_text}"')

    if instruction.add_metrics and instruction.suggested_metrics:
        parts.append(f"Add metrics: {', '.join(instruction.suggested_metrics)}")
    if instruction.add_keywords and instruction.keywords_to_add:
        parts.append(f"Naturally incorporate: {', '.join(instruction.keywords_to_add)}")
    if instruction.add_soft_skills and instruction.soft_skills_to_weave:
        parts.append(f"Show evidence of: {', '.join(instruction.soft_skills_to_weave)}")
    parts.append(_BULLET_TONE_GUIDANCE[instruction.tone])
    return ". ".join(parts)


def generate_bullet_instructions(
    resume: ResumeContent,
    result: PreAnalysisResult,
    applied_rules: list[RuleEvaluationResult],
    tone: StrategicTone,
) -> list[BulletTransformInstruction]:
    impact_by_key: dict[tuple[str, str], ImpactBullet] = {}
    for record in result.impact.bullets:
        impact_by_key[(record.experience_id, record.original)] = record

    missing_keywords = [hit.keyword for hit in result.context.keyword_coverage.keywords if not hit.found]
    keywords = missing_keywords[:MAX_KEYWORDS_PER_BULLET]
    strong_soft_skills = [item.skill for item in result.soft_skills if item.strength == "strong"]
    soft_skills = strong_soft_skills[:MAX_SOFT_SKILLS_PER_BULLET]

    company = result.company
    add_context = not company.is_well_known and bool(company.company_name)
    context_overrides = _company_context_overrides(applied_rules, company.company_name) if add_context else {}

    instructions: list[BulletTransformInstruction] = []
    for exp in resume.experiences:
        for bullet in exp.bullets:
            record = impact_by_key.get((exp.id, bullet.text))
            level = record.improvement_level if record else "none"
            instruction = BulletTransformInstruction(
                bullet_id=bullet.id,
                experience_id=exp.id,
                original_text=bullet.text,
                add_metrics=level != "none",
                suggested_metrics=list(record.metrics) if record else [],
                add_keywords=bool(keywords),
                keywords_to_add=keywords,
                add_context=add_context,
                context_to_add=context_overrides.get(bullet.id, company.context) if add_context else "",
                add_soft_skills=bool(soft_skills),
                soft_skills_to_weave=soft_skills,
                tone=tone,
                improvement_level=level,
                rewrite_instruction="",
            )
            instructions.append(
                instruction.model_copy(
                    update={"rewrite_instruction": _rewrite_instruction(instruction, record.improved if record else None)}
                )
            )
    return instructions


def generate_summary_instruction(
    resume: ResumeContent,
    result: PreAnalysisResult,
    job: JobData,
    tone: StrategicTone,
) -> SummaryTransformInstruction:
    differentiators = result.uniqueness.differentiators[:MAX_SUMMARY_DIFFERENTIATORS]
    matched_skills = [item.skill for item in result.context.matched_skills if item.strength == "exact"]
    matched_skills = matched_skills[:MAX_SUMMARY_SKILLS]
    company_alignment = None
    if not result.company.is_well_known and job.company_name:
        company_alignment = f"aligned with {job.company_name}'s mission"

    parts = [f"Target role: {job.title}" + (f" at {job.company_name}" if job.company_name else "")]
    if differentiators:
        parts.append(f"Lead with unique value: {', '.join(differentiators)}")
    if matched_skills:
        parts.append(f"Highlight relevant skills: {', '.join(matched_skills)}")
    if company_alignment:
        parts.append(f"Show alignment: {company_alignment}")
    parts.append(_SUMMARY_TONE_GUIDANCE[tone])

    return SummaryTransformInstruction(
        original_summary=resume.summary,
        target_role=job.title,
        target_company=job.company_name or "the company",
        unique_differentiators=differentiators,
        matched_skills=matched_skills,
        company_alignment=company_alignment,
        tone=tone,
        rewrite_instruction=". ".join(parts),
    )


def _why_fit_from_factor(factor: UniquenessFactor) -> WhyFitBullet:
    return WhyFitBullet(
        label=_WHY_FIT_LABELS.get(factor.type, "Distinctive background:"),
        text=factor.description,
        source="uniqueness",
        rarity=factor.rarity,
    )


def generate_why_fit_instruction(result: PreAnalysisResult) -> WhyFitInstruction:
    # Source order is kept; factors are not re-sorted by rarity.
    bullets = [
        _why_fit_from_factor(factor)
        for factor in result.uniqueness.factors
        if factor.rarity in ("rare", "very_rare")
    ][:MAX_WHY_FIT_BULLETS]

    if len(bullets) < MIN_WHY_FIT_BULLETS:
        high = [item for item in result.context.experience_alignments if item.relevance == "high"]
        for alignment in high[: MIN_WHY_FIT_BULLETS - len(bullets)]:
            bullets.append(
                WhyFitBullet(
                    label="Directly relevant:",
                    text=f"{alignment.experience_title} experience - {alignment.explanation}",
                    source="experience",
                    rarity="uncommon",
                )
            )
    return WhyFitInstruction(bullets=bullets)


def generate_skills_reorder_instruction(
    resume: ResumeContent,
    result: PreAnalysisResult,
) -> SkillsReorderInstruction:
    exact = {item.skill.lower() for item in result.context.matched_skills if item.strength == "exact"}
    technical = list(resume.skills.technical)
    matched_first = [skill for skill in technical if skill.lower() in exact]
    others = [skill for skill in technical if skill.lower() not in exact]

    to_add = [
        item.requirement
        for item in result.context.missing_requirements
        if item.importance in ("important", "nice_to_have") and len(item.requirement.split()) <= MAX_SKILL_WORDS
    ][:MAX_SKILLS_TO_ADD]

    soft = list(resume.skills.soft)
    return SkillsReorderInstruction(
        technical=TechnicalSkillsPlan(
            original=technical,
            reordered=matched_first + others,
            matched_first=matched_first,
            to_add=to_add,
        ),
        soft=SoftSkillsPlan(
            original=soft,
            reordered=list(soft),
            emphasized=[item.skill for item in result.soft_skills if item.strength == "strong"],
        ),
    )


def generate_experience_reorder_instruction(
    resume: ResumeContent,
    result: PreAnalysisResult,
) -> ExperienceReorderInstruction:
    """Expose per-experience relevance without reordering.

    ``new_order`` is always the input order; recency ordering is kept and the
    scores are informational only.
    """
    alignments = result.context.experience_alignments
    scores: dict[str, int] = {}
    for exp in resume.experiences:
        alignment = next(
            (item for item in alignments if item.experience_id == exp.id or item.experience_title == exp.title),
            None,
        )
        scores[exp.id] = _RELEVANCE_SCORES.get(alignment.relevance, _DEFAULT_RELEVANCE) if alignment else _DEFAULT_RELEVANCE

    experience_ids = [exp.id for exp in resume.experiences]
    return ExperienceReorderInstruction(
        experience_ids=experience_ids,
        relevance_scores=scores,
        new_order=list(experience_ids),
    )


def generate_transformation_instructions(
    resume: ResumeContent,
    result: PreAnalysisResult,
    job: JobData,
    rules: Iterable[TransformationRule],
) -> TransformationInstructions:
    applied_rules = evaluate_rules(rules, result, resume)
    tone = calculate_strategic_tone(result)

    instructions = TransformationInstructions(
        bullets=generate_bullet_instructions(resume, result, applied_rules, tone),
        summary=generate_summary_instruction(resume, result, job, tone),
        why_fit=generate_why_fit_instruction(result),
        skills=generate_skills_reorder_instruction(resume, result),
        experience_order=generate_experience_reorder_instruction(resume, result),
        applied_rules=applied_rules,
        overall_tone=tone,
    )
    logger.info(
        "transformation_instructions_generated job_id=%s bullets=%s applied_rules=%s tone=%s",
        job.id,
        len(instructions.bullets),
        len(applied_rules),
        tone,
    )
    return instructions

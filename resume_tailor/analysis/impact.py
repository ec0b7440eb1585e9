from __future__ import annotations

import uuid
from typing import Any, get_args

from resume_tailor.ai.types import LLMProvider
from resume_tailor.analysis.llm import (
    as_choice,
    as_dict_list,
    as_int,
    as_str,
    as_str_list,
    clamp_score,
    pick,
    request_analysis_json,
)
from resume_tailor.analysis.prompts import format_resume_for_prompt
from resume_tailor.core.errors import AnalysisError
from resume_tailor.schemas.analysis import (
    ImpactBullet,
    ImpactLevel,
    ImpactResult,
    MetricCategories,
    Suggestion,
    impact_score_label,
)
from resume_tailor.schemas.resume import ResumeContent

ANALYSIS_NAME = "impact"
IMPACT_TEMPERATURE = 0.4
IMPACT_MAX_TOKENS = 4000

IMPACT_SYSTEM_PROMPT = """You are an expert resume writer who turns vague responsibilities into quantified achievement statements.

For every resume bullet, decide whether it already shows measurable impact. If it does not, rewrite it with realistic metrics (percentages, monetary values, time saved, scale or volume, rankings). Never invent facts that the resume does not support; estimates must be plausible from context.

Score the resume's overall quantification from 0 to 100:
- 0-39 weak, 40-64 moderate, 65-84 strong, 85-100 exceptional.

Return only a JSON object:
{
  "score": number,
  "summary": "2-3 sentences",
  "bullets": [
    {
      "bullet_id": "bullet id from the resume",
      "experience_id": "experience id from the resume",
      "experience_title": "job title",
      "company_name": "company",
      "original": "original bullet text, verbatim",
      "improved": "rewritten bullet",
      "metrics": ["metric"],
      "improvement": "none" | "minor" | "major" | "transformed",
      "explanation": "why"
    }
  ],
  "metric_categories": {"percentage": 0, "monetary": 0, "time": 0, "scale": 0, "other": 0},
  "suggestions": [{"area": "area", "recommendation": "action"}]
}

If a bullet is already well quantified, use improvement "none" and keep the original text as "improved"."""


def build_impact_prompt(resume: ResumeContent) -> str:
    numbered: list[str] = []
    for exp in resume.experiences:
        for bullet in exp.bullets:
            numbered.append(
                f'{len(numbered) + 1}. [{exp.title} at {exp.company}] "{bullet.text}" '
                f"(experience_id: {exp.id}, bullet_id: {bullet.id})"
            )

    return (
        "Analyze and quantify the impact of each bullet point in this resume:\n\n"
        f"{format_resume_for_prompt(resume)}\n\n"
        "## Bullets to Analyze\n"
        + "\n".join(numbered)
        + "\n\nFor each bullet, add metrics where they are missing and explain the change. "
        "Return the JSON object described above."
    )


def _bullet_lookup(resume: ResumeContent) -> dict[str, tuple[str, str]]:
    """bullet id -> (experience id, original text)."""
    return {bullet.id: (exp.id, bullet.text) for exp in resume.experiences for bullet in exp.bullets}


def _experience_lookup(resume: ResumeContent) -> dict[str, tuple[str, str]]:
    return {exp.id: (exp.title, exp.company) for exp in resume.experiences}


def parse_impact_payload(payload: dict[str, Any], resume: ResumeContent) -> ImpactResult:
    bullets_by_id = _bullet_lookup(resume)
    experiences = _experience_lookup(resume)
    levels = get_args(ImpactLevel)

    bullets: list[ImpactBullet] = []
    for index, raw in enumerate(as_dict_list(payload.get("bullets"))):
        experience_id = as_str(pick(raw, "experience_id", "experienceId"), f"exp-{index}")
        bullet_id = as_str(pick(raw, "bullet_id", "bulletId", "id"))
        original = as_str(raw.get("original"))
        if bullet_id in bullets_by_id:
            experience_id, known_text = bullets_by_id[bullet_id]
            original = known_text
        else:
            bullet_id = uuid.uuid4().hex

        title, company = experiences.get(experience_id, ("", ""))
        bullets.append(
            ImpactBullet(
                id=bullet_id,
                experience_id=experience_id,
                experience_title=as_str(pick(raw, "experience_title", "experienceTitle"), title or "Unknown Position"),
                company_name=as_str(pick(raw, "company_name", "companyName"), company or "Unknown Company"),
                original=original,
                improved=as_str(raw.get("improved"), original),
                metrics=as_str_list(raw.get("metrics")),
                improvement_level=as_choice(pick(raw, "improvement", "improvement_level"), levels, "none"),
                explanation=as_str(raw.get("explanation")),
            )
        )

    raw_categories = pick(payload, "metric_categories", "metricCategories")
    raw_categories = raw_categories if isinstance(raw_categories, dict) else {}
    score = clamp_score(payload.get("score"))

    return ImpactResult(
        score=score,
        score_label=impact_score_label(score),
        summary=as_str(payload.get("summary"), "Analysis complete."),
        total_bullets=resume.bullet_count(),
        bullets_improved=sum(1 for bullet in bullets if bullet.improvement_level != "none"),
        bullets=bullets,
        metric_categories=MetricCategories(
            **{name: as_int(raw_categories.get(name)) for name in MetricCategories.model_fields}
        ),
        suggestions=[
            Suggestion(
                area=as_str(item.get("area"), "General"),
                recommendation=as_str(item.get("recommendation")),
            )
            for item in as_dict_list(payload.get("suggestions"))
        ],
    )


async def analyze_impact(resume: ResumeContent, *, provider: LLMProvider) -> ImpactResult:
    if resume.bullet_count() == 0:
        raise AnalysisError(
            "Resume must have experience bullets to analyze.",
            analysis=ANALYSIS_NAME,
            code="INSUFFICIENT_CONTENT",
        )

    payload = await request_analysis_json(
        analysis=ANALYSIS_NAME,
        provider=provider,
        system_prompt=IMPACT_SYSTEM_PROMPT,
        user_prompt=build_impact_prompt(resume),
        temperature=IMPACT_TEMPERATURE,
        max_tokens=IMPACT_MAX_TOKENS,
    )
    return parse_impact_payload(payload, resume)

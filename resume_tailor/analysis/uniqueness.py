from __future__ import annotations

import uuid
from typing import Any, get_args

from resume_tailor.ai.types import LLMProvider
from resume_tailor.analysis.llm import (
    as_choice,
    as_dict_list,
    as_str,
    as_str_list,
    clamp_score,
    request_analysis_json,
)
from resume_tailor.analysis.prompts import format_resume_for_prompt
from resume_tailor.core.errors import AnalysisError
from resume_tailor.schemas.analysis import (
    FactorType,
    Rarity,
    Suggestion,
    UniquenessFactor,
    UniquenessResult,
    uniqueness_score_label,
)
from resume_tailor.schemas.resume import ResumeContent

ANALYSIS_NAME = "uniqueness"
UNIQUENESS_TEMPERATURE = 0.5
UNIQUENESS_MAX_TOKENS = 3000

UNIQUENESS_SYSTEM_PROMPT = """You are a career strategist who identifies what makes a candidate stand out from typical applicants.

Look for rare skill combinations, valuable career transitions, unusual experiences, deep domain expertise, distinctive achievement patterns and notable education. Reference actual resume content only.

Score uniqueness from 0 to 100:
- 0-39 low, 40-64 moderate, 65-84 high, 85-100 exceptional.

Return only a JSON object:
{
  "score": number,
  "factors": [
    {
      "type": "skill_combination" | "career_transition" | "unique_experience" | "domain_expertise" | "achievement" | "education",
      "title": "short title",
      "description": "why this is unique",
      "rarity": "uncommon" | "rare" | "very_rare",
      "evidence": ["quote from resume"],
      "suggestion": "how to emphasize it"
    }
  ],
  "summary": "2-3 sentence value proposition",
  "differentiators": ["differentiator"],
  "suggestions": [{"area": "area", "recommendation": "action"}]
}

List the rarest factors first."""


def build_uniqueness_prompt(resume: ResumeContent) -> str:
    return (
        "Analyze this resume for unique differentiators:\n\n"
        f"{format_resume_for_prompt(resume)}\n\n"
        "Identify rare skill combinations, career transitions, distinctive experiences, "
        "specialized expertise and achievement patterns. Return the JSON object described above."
    )


def parse_uniqueness_payload(payload: dict[str, Any]) -> UniquenessResult:
    factor_types = get_args(FactorType)
    rarities = get_args(Rarity)

    factors = [
        UniquenessFactor(
            id=uuid.uuid4().hex,
            type=as_choice(raw.get("type"), factor_types, "unique_experience"),
            title=as_str(raw.get("title"), f"Factor {index + 1}"),
            description=as_str(raw.get("description")),
            rarity=as_choice(raw.get("rarity"), rarities, "uncommon"),
            evidence=as_str_list(raw.get("evidence")),
            suggestion=as_str(raw.get("suggestion")),
        )
        for index, raw in enumerate(as_dict_list(payload.get("factors")))
    ]
    score = clamp_score(payload.get("score"))

    return UniquenessResult(
        score=score,
        score_label=uniqueness_score_label(score),
        factors=factors,
        summary=as_str(payload.get("summary"), "Analysis complete."),
        differentiators=as_str_list(payload.get("differentiators")),
        suggestions=[
            Suggestion(
                area=as_str(item.get("area"), "General"),
                recommendation=as_str(item.get("recommendation")),
            )
            for item in as_dict_list(payload.get("suggestions"))
        ],
    )


async def analyze_uniqueness(resume: ResumeContent, *, provider: LLMProvider) -> UniquenessResult:
    has_skills = bool(resume.skills.technical or resume.skills.soft)
    if not resume.experiences and not resume.education and not has_skills:
        raise AnalysisError(
            "Resume must have experience, education, or skills to analyze.",
            analysis=ANALYSIS_NAME,
            code="INSUFFICIENT_CONTENT",
        )

    payload = await request_analysis_json(
        analysis=ANALYSIS_NAME,
        provider=provider,
        system_prompt=UNIQUENESS_SYSTEM_PROMPT,
        user_prompt=build_uniqueness_prompt(resume),
        temperature=UNIQUENESS_TEMPERATURE,
        max_tokens=UNIQUENESS_MAX_TOKENS,
    )
    return parse_uniqueness_payload(payload)

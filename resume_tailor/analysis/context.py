from __future__ import annotations

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
from resume_tailor.analysis.prompts import format_job_for_prompt, format_resume_for_prompt
from resume_tailor.core.errors import AnalysisError
from resume_tailor.schemas.analysis import (
    ContextResult,
    ContextSuggestion,
    ExperienceAlignment,
    FitAssessment,
    Importance,
    KeywordCoverage,
    KeywordHit,
    MatchedSkill,
    MatchStrength,
    MissingRequirement,
    Priority,
    Relevance,
    SkillSource,
    context_score_label,
)
from resume_tailor.schemas.job import JobData
from resume_tailor.schemas.resume import ResumeContent

ANALYSIS_NAME = "context"
CONTEXT_TEMPERATURE = 0.3
CONTEXT_MAX_TOKENS = 3000

CONTEXT_SYSTEM_PROMPT = """You are a technical recruiter assessing how well a resume translates to a specific job.

Compare the resume against the job description, requirements and skills. Identify skills that match (exact, related or transferable), requirements that are missing and how important they are, how relevant each experience is, which job keywords appear in the resume, and an overall fit assessment.

Score alignment from 0 to 100:
- 0-29 poor, 30-49 weak, 50-69 moderate, 70-84 good, 85-100 excellent.

Return only a JSON object:
{
  "score": number,
  "summary": "2-3 sentences",
  "matched_skills": [
    {"skill": "name", "source": "technical" | "soft" | "experience" | "education", "strength": "exact" | "related" | "transferable", "evidence": "where it shows"}
  ],
  "missing_requirements": [
    {"requirement": "text", "importance": "critical" | "important" | "nice_to_have", "suggestion": "how to address"}
  ],
  "experience_alignments": [
    {"experience_id": "id from resume", "experience_title": "title", "company_name": "company", "relevance": "high" | "medium" | "low", "matched_aspects": ["aspect"], "explanation": "why"}
  ],
  "keyword_coverage": {
    "keywords": [{"keyword": "term", "found": true, "location": "section"}]
  },
  "suggestions": [{"category": "category", "priority": "high" | "medium" | "low", "recommendation": "action"}],
  "fit_assessment": {"strengths": ["strength"], "gaps": ["gap"], "overall_fit": "one sentence"}
}"""


def build_context_prompt(resume: ResumeContent, job: JobData) -> str:
    return (
        "Assess how this resume aligns with the target job.\n\n"
        "# RESUME\n"
        f"{format_resume_for_prompt(resume)}\n\n"
        "# TARGET JOB\n"
        f"{format_job_for_prompt(job)}\n\n"
        "Return the JSON object described above."
    )


def _parse_keyword_coverage(raw: Any) -> KeywordCoverage:
    raw = raw if isinstance(raw, dict) else {}
    keywords = [
        KeywordHit(
            keyword=as_str(item.get("keyword")),
            found=item.get("found") is True,
            location=as_str(item.get("location")) or None,
        )
        for item in as_dict_list(raw.get("keywords"))
        if as_str(item.get("keyword"))
    ]

    if keywords:
        matched = sum(1 for hit in keywords if hit.found)
        total = len(keywords)
    else:
        total = as_int(raw.get("total"))
        matched = min(as_int(raw.get("matched")), total)
    percentage = round(matched * 100 / total) if total else 0
    return KeywordCoverage(matched=matched, total=total, percentage=percentage, keywords=keywords)


def parse_context_payload(payload: dict[str, Any], resume: ResumeContent) -> ContextResult:
    experiences = {exp.id: exp for exp in resume.experiences}

    matched_skills = [
        MatchedSkill(
            skill=as_str(item.get("skill")),
            source=as_choice(item.get("source"), get_args(SkillSource), "technical"),
            strength=as_choice(item.get("strength"), get_args(MatchStrength), "related"),
            evidence=as_str(item.get("evidence")),
        )
        for item in as_dict_list(pick(payload, "matched_skills", "matchedSkills"))
        if as_str(item.get("skill"))
    ]

    missing = [
        MissingRequirement(
            requirement=as_str(item.get("requirement")),
            importance=as_choice(item.get("importance"), get_args(Importance), "important"),
            suggestion=as_str(item.get("suggestion")),
        )
        for item in as_dict_list(pick(payload, "missing_requirements", "missingRequirements"))
        if as_str(item.get("requirement"))
    ]

    alignments: list[ExperienceAlignment] = []
    for item in as_dict_list(pick(payload, "experience_alignments", "experienceAlignments")):
        experience_id = as_str(pick(item, "experience_id", "experienceId"))
        known = experiences.get(experience_id)
        alignments.append(
            ExperienceAlignment(
                experience_id=experience_id,
                experience_title=as_str(
                    pick(item, "experience_title", "experienceTitle"), known.title if known else ""
                ),
                company_name=as_str(pick(item, "company_name", "companyName"), known.company if known else ""),
                relevance=as_choice(item.get("relevance"), get_args(Relevance), "medium"),
                matched_aspects=as_str_list(pick(item, "matched_aspects", "matchedAspects")),
                explanation=as_str(item.get("explanation")),
            )
        )

    raw_fit = pick(payload, "fit_assessment", "fitAssessment")
    raw_fit = raw_fit if isinstance(raw_fit, dict) else {}
    score = clamp_score(payload.get("score"))

    return ContextResult(
        score=score,
        score_label=context_score_label(score),
        summary=as_str(payload.get("summary"), "Analysis complete."),
        matched_skills=matched_skills,
        missing_requirements=missing,
        experience_alignments=alignments,
        keyword_coverage=_parse_keyword_coverage(pick(payload, "keyword_coverage", "keywordCoverage")),
        suggestions=[
            ContextSuggestion(
                category=as_str(item.get("category"), "tailoring"),
                priority=as_choice(item.get("priority"), get_args(Priority), "medium"),
                recommendation=as_str(item.get("recommendation")),
            )
            for item in as_dict_list(payload.get("suggestions"))
        ],
        fit_assessment=FitAssessment(
            strengths=as_str_list(raw_fit.get("strengths")),
            gaps=as_str_list(raw_fit.get("gaps")),
            overall_fit=as_str(pick(raw_fit, "overall_fit", "overallFit")),
        ),
    )


async def analyze_context(resume: ResumeContent, job: JobData, *, provider: LLMProvider) -> ContextResult:
    if not job.description.strip() and not job.requirements:
        raise AnalysisError(
            "Job must have a description or requirements to analyze.",
            analysis=ANALYSIS_NAME,
            code="INSUFFICIENT_CONTENT",
        )
    if not resume.experiences and not (resume.skills.technical or resume.skills.soft):
        raise AnalysisError(
            "Resume must have experience or skills to analyze.",
            analysis=ANALYSIS_NAME,
            code="INSUFFICIENT_CONTENT",
        )

    payload = await request_analysis_json(
        analysis=ANALYSIS_NAME,
        provider=provider,
        system_prompt=CONTEXT_SYSTEM_PROMPT,
        user_prompt=build_context_prompt(resume, job),
        temperature=CONTEXT_TEMPERATURE,
        max_tokens=CONTEXT_MAX_TOKENS,
    )
    return parse_context_payload(payload, resume)

"""Fan out the five pre-analyses for one resume/job pair and merge them.

The three provider-backed analyses run concurrently and settle independently;
a failed one is replaced by a neutral default so the merged result is always
complete. Only when all three fail does the orchestrator raise.
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Any

from resume_tailor.ai.factory import get_llm_provider
from resume_tailor.ai.types import LLMProvider
from resume_tailor.analysis import (
    analyze_context,
    analyze_impact,
    analyze_uniqueness,
    extract_soft_skills,
    research_company,
)
from resume_tailor.core.config import get_scoring_value
from resume_tailor.core.errors import PreAnalysisError
from resume_tailor.schemas.analysis import (
    ContextResult,
    FitAssessment,
    ImpactResult,
    KeywordCoverage,
    PreAnalysisResult,
    PreAnalysisSummary,
    SoftSkillAssessment,
    UniquenessResult,
    context_score_label,
    impact_score_label,
    uniqueness_score_label,
)
from resume_tailor.schemas.job import JobData
from resume_tailor.schemas.resume import ResumeContent

logger = logging.getLogger(__name__)

NEUTRAL_SCORE = 50

_ANALYSIS_LABELS = ("Impact", "Uniqueness", "Context")


def default_impact_result(total_bullets: int = 0) -> ImpactResult:
    return ImpactResult(
        score=NEUTRAL_SCORE,
        score_label=impact_score_label(NEUTRAL_SCORE),
        summary="Impact analysis unavailable",
        total_bullets=total_bullets,
    )


def default_uniqueness_result() -> UniquenessResult:
    return UniquenessResult(
        score=NEUTRAL_SCORE,
        score_label=uniqueness_score_label(NEUTRAL_SCORE),
        summary="Uniqueness analysis unavailable",
    )


def default_context_result() -> ContextResult:
    return ContextResult(
        score=NEUTRAL_SCORE,
        score_label=context_score_label(NEUTRAL_SCORE),
        summary="Context analysis unavailable",
        keyword_coverage=KeywordCoverage(),
        fit_assessment=FitAssessment(overall_fit="Unable to assess"),
    )


def _failure_message(label: str, exc: BaseException) -> str:
    return f"{label} analysis failed: {str(exc) or type(exc).__name__}"


async def run_pre_analysis(
    resume: ResumeContent,
    job: JobData,
    *,
    resume_id: str = "",
    provider: LLMProvider | None = None,
) -> PreAnalysisResult:
    # Raises AI_NOT_CONFIGURED before any call is attempted.
    if provider is None:
        provider = get_llm_provider()
    started = time.perf_counter()

    outcomes = await asyncio.gather(
        analyze_impact(resume, provider=provider),
        analyze_uniqueness(resume, provider=provider),
        analyze_context(resume, job, provider=provider),
        return_exceptions=True,
    )

    company = research_company(job.company_name)
    soft_skills = extract_soft_skills(resume)

    errors: list[str] = []
    failed: list[str] = []
    settled: list[Any] = []
    for label, outcome in zip(_ANALYSIS_LABELS, outcomes):
        if isinstance(outcome, BaseException):
            if not isinstance(outcome, Exception):
                raise outcome
            errors.append(_failure_message(label, outcome))
            failed.append(label.lower())
            settled.append(None)
        else:
            settled.append(outcome)

    impact, uniqueness, context = settled
    if impact is None and uniqueness is None and context is None:
        logger.warning("pre_analysis_all_failed job_id=%s errors=%s", job.id, errors)
        first_error = next(outcome for outcome in outcomes if isinstance(outcome, Exception))
        raise PreAnalysisError(
            "All analyses failed: " + "; ".join(errors),
            errors=errors,
            cause=first_error,
        ) from first_error

    if errors:
        logger.warning("pre_analysis_partial_failure job_id=%s errors=%s", job.id, errors)

    logger.info(
        "pre_analysis_completed job_id=%s failed=%s latency_ms=%s",
        job.id,
        failed,
        int((time.perf_counter() - started) * 1000),
    )
    return PreAnalysisResult(
        impact=impact if impact is not None else default_impact_result(resume.bullet_count()),
        uniqueness=uniqueness if uniqueness is not None else default_uniqueness_result(),
        context=context if context is not None else default_context_result(),
        company=company,
        soft_skills=soft_skills,
        analyzed_at=datetime.now(timezone.utc),
        resume_id=resume_id,
        job_id=job.id,
        failed_analyses=failed,
    )


def _soft_skill_score(soft_skills: list[SoftSkillAssessment]) -> int:
    if not soft_skills:
        return int(get_scoring_value("readiness.soft_skill_default", NEUTRAL_SCORE))
    points = get_scoring_value("readiness.soft_skill_points", {}) or {}
    total = sum(int(points.get(item.strength, 0)) for item in soft_skills)
    return min(100, total)


def _company_score(result: PreAnalysisResult, company_scores: dict[str, Any]) -> int:
    # No company name means nothing to research.
    if not result.company.company_name:
        return int(company_scores.get("missing", NEUTRAL_SCORE))
    if result.company.is_well_known:
        return int(company_scores.get("well_known", 100))
    return int(company_scores.get("unknown", 60))


def summarize_pre_analysis(result: PreAnalysisResult) -> PreAnalysisSummary:
    """Weighted recruiter-readiness view of a pre-analysis result."""
    weights = get_scoring_value("readiness.weights", {}) or {}
    company_scores = get_scoring_value("readiness.company_scores", {}) or {}
    max_items = int(get_scoring_value("readiness.max_top_items", 3))

    soft_score = _soft_skill_score(result.soft_skills)
    company_score = _company_score(result, company_scores)

    weighted = (
        result.impact.score * float(weights.get("impact", 0.30))
        + result.uniqueness.score * float(weights.get("uniqueness", 0.20))
        + result.context.score * float(weights.get("context", 0.25))
        + soft_score * float(weights.get("soft_skills", 0.10))
        + company_score * float(weights.get("company", 0.15))
    )

    strengths = result.uniqueness.differentiators[:2] + result.context.fit_assessment.strengths[:2]
    critical = [
        item.requirement for item in result.context.missing_requirements if item.importance == "critical"
    ]
    gaps = critical[:2] + result.context.fit_assessment.gaps[:2]

    return PreAnalysisSummary(
        overall_score=max(0, min(100, round(weighted))),
        issue_scores={
            "uniqueness": result.uniqueness.score,
            "impact": result.impact.score,
            "context_translation": company_score,
            "cultural_fit": soft_score,
            "customization": result.context.score,
        },
        top_strengths=strengths[:max_items],
        top_gaps=gaps[:max_items],
    )

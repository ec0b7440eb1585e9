from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Iterable

from resume_tailor.ai.types import LLMProvider
from resume_tailor.schemas.analysis import PreAnalysisResult
from resume_tailor.schemas.job import JobData
from resume_tailor.schemas.resume import ResumeContent
from resume_tailor.schemas.rules import TransformationRule
from resume_tailor.schemas.tailoring import (
    EstimatedChanges,
    PhaseTimings,
    PreAnalysisResponse,
    TailoringPlan,
)
from resume_tailor.tailoring.instructions import generate_transformation_instructions
from resume_tailor.tailoring.pre_analysis import run_pre_analysis, summarize_pre_analysis
from resume_tailor.tailoring.rules import get_all_enabled_rules

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


def estimate_changes(result: PreAnalysisResult) -> EstimatedChanges:
    return EstimatedChanges(
        bullets_to_improve=sum(1 for bullet in result.impact.bullets if bullet.improvement_level != "none"),
        differentiators=len(result.uniqueness.differentiators),
        missing_keywords=sum(1 for hit in result.context.keyword_coverage.keywords if not hit.found),
        soft_skills_detected=len(result.soft_skills),
    )


async def run_pre_analysis_report(
    resume: ResumeContent,
    job: JobData,
    *,
    resume_id: str = "",
    provider: LLMProvider | None = None,
) -> PreAnalysisResponse:
    result = await run_pre_analysis(resume, job, resume_id=resume_id, provider=provider)
    return PreAnalysisResponse(
        pre_analysis=result,
        readiness=summarize_pre_analysis(result),
        generated_at=_utc_now(),
    )


async def prepare_tailoring(
    resume: ResumeContent,
    job: JobData,
    *,
    resume_id: str = "",
    provider: LLMProvider | None = None,
    rules: Iterable[TransformationRule] | None = None,
) -> TailoringPlan:
    """Pre-analysis, readiness summary and rewrite instructions for one pair.

    ``rules`` defaults to the enabled rules from the configured rule file.
    """
    started = time.perf_counter()
    result = await run_pre_analysis(resume, job, resume_id=resume_id, provider=provider)
    pre_analysis_ms = _elapsed_ms(started)

    instructions_started = time.perf_counter()
    active_rules = list(rules) if rules is not None else get_all_enabled_rules()
    instructions = generate_transformation_instructions(resume, result, job, active_rules)
    instructions_ms = _elapsed_ms(instructions_started)

    plan = TailoringPlan(
        pre_analysis=result,
        readiness=summarize_pre_analysis(result),
        instructions=instructions,
        estimated_changes=estimate_changes(result),
        timings=PhaseTimings(
            pre_analysis_ms=pre_analysis_ms,
            instructions_ms=instructions_ms,
            total_ms=_elapsed_ms(started),
        ),
        generated_at=_utc_now(),
    )
    logger.info(
        "tailoring_prepared job_id=%s resume_id=%s overall_score=%s total_ms=%s",
        job.id,
        resume_id or "-",
        plan.readiness.overall_score,
        plan.timings.total_ms,
    )
    return plan

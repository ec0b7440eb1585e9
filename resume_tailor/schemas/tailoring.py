from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from .analysis import PreAnalysisResult, PreAnalysisSummary
from .instructions import TransformationInstructions
from .job import JobData
from .resume import ResumeContent


class TailoringRequest(BaseModel):
    resume: ResumeContent
    job: JobData
    resume_id: str = Field(default="", max_length=200)


class EstimatedChanges(BaseModel):
    bullets_to_improve: int = 0
    differentiators: int = 0
    missing_keywords: int = 0
    soft_skills_detected: int = 0


class PhaseTimings(BaseModel):
    pre_analysis_ms: int = 0
    instructions_ms: int = 0
    total_ms: int = 0


class PreAnalysisResponse(BaseModel):
    pre_analysis: PreAnalysisResult
    readiness: PreAnalysisSummary
    generated_at: datetime


class TailoringPlan(BaseModel):
    pre_analysis: PreAnalysisResult
    readiness: PreAnalysisSummary
    instructions: TransformationInstructions
    estimated_changes: EstimatedChanges
    timings: PhaseTimings
    generated_at: datetime

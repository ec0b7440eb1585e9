from .analysis import (
    CompanyResearchResult,
    ContextResult,
    ImpactResult,
    PreAnalysisResult,
    PreAnalysisSummary,
    SoftSkillAssessment,
    UniquenessResult,
)
from .instructions import TransformationInstructions
from .job import JobData
from .resume import ResumeContent
from .rules import RuleCondition, RuleEvaluationResult, TransformationAction, TransformationRule

__all__ = [
    "ResumeContent",
    "JobData",
    "ImpactResult",
    "UniquenessResult",
    "ContextResult",
    "CompanyResearchResult",
    "SoftSkillAssessment",
    "PreAnalysisResult",
    "PreAnalysisSummary",
    "RuleCondition",
    "TransformationAction",
    "TransformationRule",
    "RuleEvaluationResult",
    "TransformationInstructions",
]

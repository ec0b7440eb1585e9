from .company import WELL_KNOWN_COMPANIES, is_well_known_company, research_company
from .context import analyze_context
from .impact import analyze_impact
from .soft_skills import extract_soft_skills
from .uniqueness import analyze_uniqueness

__all__ = [
    "analyze_impact",
    "analyze_uniqueness",
    "analyze_context",
    "research_company",
    "is_well_known_company",
    "WELL_KNOWN_COMPANIES",
    "extract_soft_skills",
]

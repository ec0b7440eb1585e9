from .conditions import MISSING, evaluate_condition, resolve_path
from .instructions import (
    calculate_strategic_tone,
    generate_bullet_instructions,
    generate_experience_reorder_instruction,
    generate_skills_reorder_instruction,
    generate_summary_instruction,
    generate_transformation_instructions,
    generate_why_fit_instruction,
)
from .pre_analysis import run_pre_analysis, summarize_pre_analysis
from .rule_engine import evaluate_rule, evaluate_rules
from .rules import get_all_enabled_rules, get_rule_stats, get_rules, get_rules_by_issue, load_rules

__all__ = [
    "MISSING",
    "resolve_path",
    "evaluate_condition",
    "evaluate_rule",
    "evaluate_rules",
    "run_pre_analysis",
    "summarize_pre_analysis",
    "calculate_strategic_tone",
    "generate_bullet_instructions",
    "generate_summary_instruction",
    "generate_why_fit_instruction",
    "generate_skills_reorder_instruction",
    "generate_experience_reorder_instruction",
    "generate_transformation_instructions",
    "load_rules",
    "get_rules",
    "get_all_enabled_rules",
    "get_rules_by_issue",
    "get_rule_stats",
]

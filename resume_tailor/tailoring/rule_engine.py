from __future__ import annotations

import logging
from typing import Iterable

from resume_tailor.schemas.analysis import PreAnalysisResult
from resume_tailor.schemas.resume import ResumeContent
from resume_tailor.schemas.rules import RuleEvaluationResult, TransformationRule
from resume_tailor.tailoring.conditions import evaluate_condition

logger = logging.getLogger(__name__)


def _matched_targets(rule: TransformationRule, resume: ResumeContent) -> list[str]:
    """Concrete ids in this resume touched by the rule's bullet/experience actions."""
    targets = {action.target for action in rule.actions}
    ids: list[str] = []
    if "experience" in targets:
        ids.extend(exp.id for exp in resume.experiences)
    if "bullet" in targets:
        ids.extend(bullet.id for exp in resume.experiences for bullet in exp.bullets)
    return list(dict.fromkeys(ids))


def evaluate_rule(
    rule: TransformationRule,
    result: PreAnalysisResult,
    resume: ResumeContent,
) -> RuleEvaluationResult:
    matched = rule.enabled and evaluate_condition(rule.condition, result)
    return RuleEvaluationResult(
        rule_id=rule.id,
        rule_name=rule.name,
        matched=matched,
        recruiter_issue=rule.recruiter_issue,
        matched_targets=_matched_targets(rule, resume) if matched else [],
        actions=list(rule.actions) if matched else [],
        strategic_tone=rule.strategic_tone,
    )


def evaluate_rules(
    rules: Iterable[TransformationRule],
    result: PreAnalysisResult,
    resume: ResumeContent,
) -> list[RuleEvaluationResult]:
    """Matched rules only, in ascending priority; ties keep input order."""
    ordered = sorted(rules, key=lambda rule: rule.priority)
    evaluations = [evaluate_rule(rule, result, resume) for rule in ordered]
    matched = [evaluation for evaluation in evaluations if evaluation.matched]
    logger.info("rules_evaluated total=%s matched=%s", len(evaluations), len(matched))
    logger.debug("rules_matched ids=%s", [evaluation.rule_id for evaluation in matched])
    return matched

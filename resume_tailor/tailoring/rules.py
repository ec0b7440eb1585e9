from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from resume_tailor.core.config import settings
from resume_tailor.schemas.rules import RecruiterIssue, TransformationRule

logger = logging.getLogger(__name__)

_RULES_CACHE: tuple[TransformationRule, ...] | None = None
_DEFAULT_RULES_PATH = Path(__file__).resolve().parents[2] / "config" / "tailoring_rules.yaml"


def rules_path() -> Path:
    if settings.tailoring_rules_path:
        return Path(settings.tailoring_rules_path)
    return _DEFAULT_RULES_PATH


def parse_rules(parsed: Any, *, source: str = "<memory>") -> tuple[TransformationRule, ...]:
    if not isinstance(parsed, dict) or not isinstance(parsed.get("rules"), list):
        raise RuntimeError(f"Invalid tailoring rules '{source}': expected a top-level 'rules' list.")

    try:
        rules = tuple(TransformationRule.model_validate(item) for item in parsed["rules"])
    except ValidationError as exc:
        raise RuntimeError(f"Invalid tailoring rule in '{source}': {exc}") from exc

    duplicates = [rule_id for rule_id, count in Counter(rule.id for rule in rules).items() if count > 1]
    if duplicates:
        raise RuntimeError(f"Duplicate tailoring rule ids in '{source}': {', '.join(sorted(duplicates))}")
    return rules


def load_rules(path: Path | None = None) -> tuple[TransformationRule, ...]:
    """Load and validate the rule file. Malformed files fail here, never at evaluation."""
    path = path or rules_path()
    if not path.exists():
        raise RuntimeError(f"Tailoring rules not found at '{path}'. Expected file: config/tailoring_rules.yaml")

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise RuntimeError(f"Failed to read tailoring rules '{path}': {exc}") from exc

    try:
        parsed = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise RuntimeError(f"Invalid YAML in tailoring rules '{path}': {exc}") from exc

    rules = parse_rules(parsed, source=str(path))
    logger.info("tailoring_rules_loaded path=%s count=%s", path, len(rules))
    return rules


def get_rules() -> tuple[TransformationRule, ...]:
    global _RULES_CACHE

    if _RULES_CACHE is None:
        _RULES_CACHE = load_rules()
    return _RULES_CACHE


def get_all_enabled_rules() -> list[TransformationRule]:
    return sorted((rule for rule in get_rules() if rule.enabled), key=lambda rule: rule.priority)


def get_rules_by_issue(issue: RecruiterIssue) -> list[TransformationRule]:
    return [rule for rule in get_all_enabled_rules() if rule.recruiter_issue == issue]


def get_rule_stats() -> dict[str, Any]:
    rules = get_rules()
    enabled = [rule for rule in rules if rule.enabled]
    return {
        "total": len(rules),
        "enabled": len(enabled),
        "by_issue": dict(Counter(rule.recruiter_issue for rule in enabled)),
    }

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

RecruiterIssue = Literal[
    "uniqueness",
    "impact",
    "context_translation",
    "cultural_fit",
    "customization",
]
StrategicTone = Literal["confident", "measured", "humble"]
ConditionType = Literal["AND", "OR", "NOT", "THRESHOLD", "MATCH", "EXISTS"]
ActionTarget = Literal["bullet", "experience", "summary", "skills", "why_fit"]


class RuleCondition(BaseModel):
    """One node of a condition tree.

    ``AND``/``OR``/``NOT`` use ``conditions``; ``THRESHOLD``/``MATCH``/``EXISTS``
    use ``field`` (a dot path into the pre-analysis result), ``operator`` and
    ``value``. Operators stay free-form strings so an unknown operator loads
    fine and simply never matches.
    """

    model_config = ConfigDict(frozen=True)

    type: ConditionType
    conditions: list["RuleCondition"] = Field(default_factory=list)
    field: str | None = None
    operator: str | None = None
    value: Any = None


class TransformationAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    target: ActionTarget
    description: str = ""
    params: dict[str, Any] = Field(default_factory=dict)


class TransformationRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    enabled: bool = True
    priority: int
    recruiter_issue: RecruiterIssue
    strategic_tone: StrategicTone | None = None
    condition: RuleCondition
    actions: list[TransformationAction] = Field(default_factory=list)


class RuleEvaluationResult(BaseModel):
    rule_id: str
    rule_name: str
    matched: bool
    recruiter_issue: RecruiterIssue
    matched_targets: list[str] = Field(default_factory=list)
    actions: list[TransformationAction] = Field(default_factory=list)
    strategic_tone: StrategicTone | None = None

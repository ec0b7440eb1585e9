from __future__ import annotations

import re

from resume_tailor.schemas.analysis import SoftSkillAssessment, SoftSkillStrength
from resume_tailor.schemas.resume import ResumeContent


def _patterns(*sources: str) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(source, re.IGNORECASE) for source in sources)


SOFT_SKILL_PATTERNS: dict[str, tuple[re.Pattern[str], ...]] = {
    "leadership": _patterns(
        r"\b(led|leading|lead|managed|mentored|coached|directed|headed|oversaw)\b",
        r"\b(team of|cross-functional|coordinated|facilitated)\b",
    ),
    "communication": _patterns(
        r"\b(presented|communicated|collaborated|partnered|liaised|reported)\b",
        r"\b(stakeholder|executive|client-facing|articulated|conveyed)\b",
    ),
    "problem_solving": _patterns(
        r"\b(solved|resolved|troubleshot|debugged|diagnosed|identified|analyzed)\b",
        r"\b(optimized|improved|enhanced|streamlined|automated)\b",
    ),
    "adaptability": _patterns(
        r"\b(adapted|pivoted|learned|transitioned|transformed|migrated)\b",
        r"\b(agile|flexible|cross-trained|multi-disciplinary)\b",
    ),
    "collaboration": _patterns(
        r"\b(collaborated|partnered|worked with|teamed|joined forces)\b",
        r"\b(cross-team|interdepartmental|cross-functional)\b",
    ),
    "initiative": _patterns(
        r"\b(initiated|launched|pioneered|spearheaded|proposed|introduced)\b",
        r"\b(drove|championed|advocated|established)\b",
    ),
}

_STRENGTH_ORDER: dict[SoftSkillStrength, int] = {"strong": 0, "moderate": 1, "weak": 2}


def _strength(evidence_count: int) -> SoftSkillStrength:
    if evidence_count >= 4:
        return "strong"
    if evidence_count >= 2:
        return "moderate"
    return "weak"


def extract_soft_skills(resume: ResumeContent) -> list[SoftSkillAssessment]:
    evidence: dict[str, list[str]] = {}
    bullet_ids: dict[str, list[str]] = {}

    for exp in resume.experiences:
        for bullet in exp.bullets:
            for skill, patterns in SOFT_SKILL_PATTERNS.items():
                for pattern in patterns:
                    match = pattern.search(bullet.text)
                    if not match:
                        continue
                    phrases = evidence.setdefault(skill, [])
                    ids = bullet_ids.setdefault(skill, [])
                    if match.group(0) not in phrases:
                        phrases.append(match.group(0))
                    if bullet.id not in ids:
                        ids.append(bullet.id)
                    break

    assessments = [
        SoftSkillAssessment(
            skill=skill.replace("_", " "),
            evidence=phrases,
            strength=_strength(len(phrases)),
            bullet_ids=bullet_ids[skill],
        )
        for skill, phrases in evidence.items()
    ]
    assessments.sort(key=lambda item: _STRENGTH_ORDER[item.strength])
    return assessments

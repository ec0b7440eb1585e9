import sys
import unittest
from datetime import datetime, timezone
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from resume_tailor.analysis.company import research_company  # noqa: E402
from resume_tailor.analysis.impact import parse_impact_payload  # noqa: E402
from resume_tailor.schemas.analysis import (  # noqa: E402
    ExperienceAlignment,
    ImpactBullet,
    KeywordCoverage,
    KeywordHit,
    MatchedSkill,
    MissingRequirement,
    PreAnalysisResult,
    SoftSkillAssessment,
    UniquenessFactor,
)
from resume_tailor.schemas.job import JobData  # noqa: E402
from resume_tailor.schemas.resume import ResumeContent  # noqa: E402
from resume_tailor.schemas.rules import TransformationRule  # noqa: E402
from resume_tailor.tailoring.instructions import (  # noqa: E402
    calculate_strategic_tone,
    generate_bullet_instructions,
    generate_experience_reorder_instruction,
    generate_skills_reorder_instruction,
    generate_summary_instruction,
    generate_transformation_instructions,
    generate_why_fit_instruction,
)
from resume_tailor.tailoring.pre_analysis import (  # noqa: E402
    default_context_result,
    default_impact_result,
    default_uniqueness_result,
)
from resume_tailor.tailoring.rule_engine import evaluate_rules  # noqa: E402


def _resume() -> ResumeContent:
    return ResumeContent.model_validate(
        {
            "contact": {"name": "Dana Reyes"},
            "summary": "Backend engineer focused on payments.",
            "experiences": [
                {
                    "id": "exp-1",
                    "company": "Northwind",
                    "title": "Senior Engineer",
                    "bullets": [
                        {"id": "b1", "text": "Built payment APIs"},
                        {"id": "b2", "text": "Improved test coverage"},
                    ],
                },
                {
                    "id": "exp-2",
                    "company": "Contoso",
                    "title": "Developer",
                    "bullets": [{"id": "b3", "text": "Maintained dashboards"}],
                },
            ],
            "skills": {"technical": ["Go", "python", "SQL", "Kafka"], "soft": ["Mentoring", "Writing"]},
        }
    )


def _job(company: str = "Acme Robotics") -> JobData:
    return JobData(id="job-1", title="Staff Engineer", company_name=company, description="Payments platform.")


def _result(
    *,
    context_score: int = 60,
    company: str = "Acme Robotics",
    impact_bullets=None,
    keywords=None,
    soft_skills=None,
    factors=None,
    alignments=None,
    matched_skills=None,
    missing=None,
    differentiators=None,
) -> PreAnalysisResult:
    keywords = keywords or []
    context = default_context_result().model_copy(
        update={
            "score": context_score,
            "keyword_coverage": KeywordCoverage(keywords=keywords, total=len(keywords)),
            "experience_alignments": alignments or [],
            "matched_skills": matched_skills or [],
            "missing_requirements": missing or [],
        }
    )
    return PreAnalysisResult(
        impact=default_impact_result(3).model_copy(update={"bullets": impact_bullets or []}),
        uniqueness=default_uniqueness_result().model_copy(
            update={"factors": factors or [], "differentiators": differentiators or []}
        ),
        context=context,
        company=research_company(company),
        soft_skills=soft_skills or [],
        analyzed_at=datetime(2026, 1, 5, tzinfo=timezone.utc),
        job_id="job-1",
    )


def _factor(index: int, rarity: str, factor_type: str = "skill_combination") -> UniquenessFactor:
    return UniquenessFactor(
        id=f"f{index}",
        type=factor_type,
        title=f"Factor {index}",
        description=f"Description {index}",
        rarity=rarity,
    )


class StrategicToneTests(unittest.TestCase):
    def test_tone_follows_context_score(self):
        cases = {80: "confident", 75: "confident", 74: "measured", 60: "measured", 50: "measured", 49: "humble", 30: "humble"}
        for score, tone in cases.items():
            self.assertEqual(calculate_strategic_tone(_result(context_score=score)), tone, score)


class BulletInstructionTests(unittest.TestCase):
    def test_one_instruction_per_bullet_in_resume_order(self):
        instructions = generate_bullet_instructions(_resume(), _result(), [], "measured")
        self.assertEqual([item.bullet_id for item in instructions], ["b1", "b2", "b3"])
        self.assertEqual([item.experience_id for item in instructions], ["exp-1", "exp-1", "exp-2"])

    def test_impact_record_joined_by_experience_and_text(self):
        record = ImpactBullet(
            id="b1",
            experience_id="exp-1",
            original="Built payment APIs",
            improved="Built payment APIs handling $2M daily volume",
            metrics=["$2M daily"],
            improvement_level="major",
        )
        stray = ImpactBullet(
            id="zzz",
            experience_id="exp-2",
            original="Built payment APIs",
            improved="wrong",
            improvement_level="transformed",
        )
        instructions = generate_bullet_instructions(
            _resume(), _result(impact_bullets=[record, stray]), [], "confident"
        )
        first, second, _ = instructions
        self.assertTrue(first.add_metrics)
        self.assertEqual(first.suggested_metrics, ["$2M daily"])
        self.assertEqual(first.improvement_level, "major")
        self.assertTrue(first.rewrite_instruction.startswith('Start with: "Built payment APIs handling $2M daily volume"'))
        self.assertIn("Add metrics: $2M daily", first.rewrite_instruction)
        self.assertTrue(first.rewrite_instruction.endswith("Use strong action verbs and assertive language"))
        self.assertFalse(second.add_metrics)
        self.assertEqual(second.improvement_level, "none")
        self.assertTrue(second.rewrite_instruction.startswith('Original: "Improved test coverage"'))

    def test_keywords_and_soft_skills_are_capped(self):
        keywords = [KeywordHit(keyword=word, found=False) for word in ("kafka", "grpc", "terraform", "rust")]
        keywords.insert(1, KeywordHit(keyword="python", found=True))
        soft_skills = [
            SoftSkillAssessment(skill="leadership", strength="strong"),
            SoftSkillAssessment(skill="communication", strength="strong"),
            SoftSkillAssessment(skill="initiative", strength="strong"),
            SoftSkillAssessment(skill="adaptability", strength="moderate"),
        ]
        instructions = generate_bullet_instructions(
            _resume(), _result(keywords=keywords, soft_skills=soft_skills), [], "humble"
        )
        for item in instructions:
            self.assertEqual(item.keywords_to_add, ["kafka", "grpc", "terraform"])
            self.assertEqual(item.soft_skills_to_weave, ["leadership", "communication"])
            self.assertTrue(item.add_keywords)
            self.assertTrue(item.add_soft_skills)
        self.assertIn("Naturally incorporate: kafka, grpc, terraform", instructions[0].rewrite_instruction)
        self.assertIn("Show evidence of: leadership, communication", instructions[0].rewrite_instruction)

    def test_no_missing_keywords_means_no_keyword_step(self):
        instructions = generate_bullet_instructions(
            _resume(), _result(keywords=[KeywordHit(keyword="python", found=True)]), [], "measured"
        )
        self.assertFalse(instructions[0].add_keywords)
        self.assertNotIn("Naturally incorporate", instructions[0].rewrite_instruction)

    def test_company_context_only_for_unknown_companies(self):
        unknown = generate_bullet_instructions(_resume(), _result(company="Acme Robotics"), [], "measured")
        self.assertTrue(all(item.add_context for item in unknown))
        self.assertEqual(unknown[0].context_to_add, "Acme Robotics")

        known = generate_bullet_instructions(_resume(), _result(company="Google"), [], "measured")
        self.assertFalse(any(item.add_context for item in known))
        self.assertEqual(known[0].context_to_add, "")

        unnamed = generate_bullet_instructions(_resume(), _result(company=""), [], "measured")
        self.assertFalse(any(item.add_context for item in unnamed))

    def test_company_context_rule_overrides_placeholder(self):
        rule = TransformationRule.model_validate(
            {
                "id": "explain-company",
                "name": "Explain unknown company",
                "priority": 30,
                "recruiter_issue": "context_translation",
                "condition": {"type": "MATCH", "field": "company.is_well_known", "operator": "equals", "value": False},
                "actions": [
                    {
                        "type": "add_company_context",
                        "target": "bullet",
                        "params": {"context_template": "{company}, a warehouse robotics startup"},
                    }
                ],
            }
        )
        result = _result()
        applied = evaluate_rules([rule], result, _resume())
        instructions = generate_bullet_instructions(_resume(), result, applied, "measured")
        self.assertEqual(
            {item.context_to_add for item in instructions}, {"Acme Robotics, a warehouse robotics startup"}
        )

    def test_anchored_impact_record_lands_on_its_bullet(self):
        resume = ResumeContent.model_validate(
            {
                "contact": {"name": "Dana Reyes"},
                "experiences": [
                    {
                        "id": "exp-1",
                        "company": "Northwind",
                        "title": "Senior Engineer",
                        "bullets": [
                            {"id": "b1", "text": "Led team to cut latency "},
                            {"id": "b2", "text": "Owned the on-call rotation"},
                        ],
                    }
                ],
            }
        )
        impact = parse_impact_payload(
            {
                "score": 55,
                "bullets": [
                    {
                        "bullet_id": "b1",
                        "original": "Led team to cut latency ",
                        "improved": "Led a team of 5 to cut p95 latency by 40%",
                        "metrics": ["40%"],
                        "improvement": "major",
                    },
                    {
                        "bullet_id": "b2",
                        "original": "Owned the on-call rotation.",
                        "improved": "Owned the on-call rotation for 12 services",
                        "metrics": ["12 services"],
                        "improvement": "minor",
                    },
                ],
            },
            resume,
        )
        result = _result().model_copy(update={"impact": impact})
        first, second = generate_bullet_instructions(resume, result, [], "measured")
        self.assertTrue(first.add_metrics)
        self.assertEqual(first.suggested_metrics, ["40%"])
        self.assertEqual(first.improvement_level, "major")
        self.assertTrue(second.add_metrics)
        self.assertEqual(second.suggested_metrics, ["12 services"])

    def test_last_duplicate_impact_record_wins(self):
        records = [
            ImpactBullet(
                id=f"r{index}",
                experience_id="exp-1",
                original="Built payment APIs",
                improved=f"Built payment APIs, version {index}",
                metrics=[f"metric {index}"],
                improvement_level="minor",
            )
            for index in (1, 2)
        ]
        first = generate_bullet_instructions(_resume(), _result(impact_bullets=records), [], "measured")[0]
        self.assertEqual(first.suggested_metrics, ["metric 2"])
        self.assertIn("version 2", first.rewrite_instruction)


class SummaryInstructionTests(unittest.TestCase):
    def test_summary_for_unknown_company(self):
        result = _result(
            differentiators=["A", "B", "C", "D"],
            matched_skills=[
                MatchedSkill(skill="Go", strength="exact"),
                MatchedSkill(skill="Kafka", strength="related"),
                MatchedSkill(skill="SQL", strength="exact"),
            ],
        )
        summary = generate_summary_instruction(_resume(), result, _job(), "measured")
        self.assertEqual(summary.unique_differentiators, ["A", "B", "C"])
        self.assertEqual(summary.matched_skills, ["Go", "SQL"])
        self.assertEqual(summary.company_alignment, "aligned with Acme Robotics's mission")
        self.assertEqual(summary.target_company, "Acme Robotics")
        self.assertEqual(summary.original_summary, "Backend engineer focused on payments.")
        self.assertEqual(
            summary.rewrite_instruction,
            "Target role: Staff Engineer at Acme Robotics. Lead with unique value: A, B, C. "
            "Highlight relevant skills: Go, SQL. Show alignment: aligned with Acme Robotics's mission. "
            "Show strong fit while acknowledging growth areas",
        )

    def test_summary_for_well_known_or_missing_company(self):
        known = generate_summary_instruction(_resume(), _result(company="Stripe"), _job("Stripe"), "confident")
        self.assertIsNone(known.company_alignment)

        unnamed = generate_summary_instruction(_resume(), _result(company=""), _job(""), "humble")
        self.assertIsNone(unnamed.company_alignment)
        self.assertEqual(unnamed.target_company, "the company")
        self.assertEqual(
            unnamed.rewrite_instruction,
            "Target role: Staff Engineer. Emphasize eagerness to contribute and learn",
        )


class WhyFitTests(unittest.TestCase):
    def test_rare_factors_in_source_order(self):
        factors = [
            _factor(1, "rare", "achievement"),
            _factor(2, "uncommon"),
            _factor(3, "very_rare", "domain_expertise"),
            _factor(4, "rare", "education"),
            _factor(5, "very_rare"),
        ]
        why_fit = generate_why_fit_instruction(_result(factors=factors))
        self.assertEqual([item.text for item in why_fit.bullets], ["Description 1", "Description 3", "Description 4"])
        self.assertEqual(
            [item.label for item in why_fit.bullets],
            ["Proven track record:", "Deep expertise:", "Distinctive background:"],
        )
        self.assertTrue(all(item.source == "uniqueness" for item in why_fit.bullets))

    def test_backfills_with_high_relevance_experience(self):
        alignments = [
            ExperienceAlignment(experience_id="exp-1", experience_title="Senior Engineer", relevance="high", explanation="same domain"),
            ExperienceAlignment(experience_id="exp-2", experience_title="Developer", relevance="low"),
        ]
        why_fit = generate_why_fit_instruction(_result(factors=[_factor(1, "rare")], alignments=alignments))
        self.assertEqual(len(why_fit.bullets), 2)
        backfill = why_fit.bullets[1]
        self.assertEqual(backfill.label, "Directly relevant:")
        self.assertEqual(backfill.text, "Senior Engineer experience - same domain")
        self.assertEqual(backfill.source, "experience")
        self.assertEqual(backfill.rarity, "uncommon")

    def test_may_return_fewer_than_two(self):
        why_fit = generate_why_fit_instruction(_result(factors=[_factor(1, "uncommon")]))
        self.assertEqual(why_fit.bullets, [])


class SkillsReorderTests(unittest.TestCase):
    def test_exact_matches_move_first_case_insensitively(self):
        result = _result(
            matched_skills=[
                MatchedSkill(skill="Python", strength="exact"),
                MatchedSkill(skill="kafka", strength="exact"),
                MatchedSkill(skill="SQL", strength="related"),
            ],
            missing=[
                MissingRequirement(requirement="Terraform", importance="important"),
                MissingRequirement(requirement="Kubernetes", importance="critical"),
                MissingRequirement(requirement="Five years leading distributed teams", importance="important"),
                MissingRequirement(requirement="gRPC", importance="nice_to_have"),
                MissingRequirement(requirement="AWS Lambda", importance="important"),
                MissingRequirement(requirement="Redis", importance="nice_to_have"),
            ],
            soft_skills=[
                SoftSkillAssessment(skill="leadership", strength="strong"),
                SoftSkillAssessment(skill="communication", strength="weak"),
            ],
        )
        plan = generate_skills_reorder_instruction(_resume(), result)
        self.assertEqual(plan.technical.original, ["Go", "python", "SQL", "Kafka"])
        self.assertEqual(plan.technical.matched_first, ["python", "Kafka"])
        self.assertEqual(plan.technical.reordered, ["python", "Kafka", "Go", "SQL"])
        self.assertEqual(plan.technical.to_add, ["Terraform", "gRPC", "AWS Lambda"])
        self.assertEqual(plan.soft.reordered, ["Mentoring", "Writing"])
        self.assertEqual(plan.soft.emphasized, ["leadership"])


class ExperienceOrderTests(unittest.TestCase):
    def test_order_is_preserved_and_scores_reported(self):
        alignments = [
            ExperienceAlignment(experience_id="exp-2", relevance="high"),
            ExperienceAlignment(experience_id="other", experience_title="Senior Engineer", relevance="low"),
        ]
        order = generate_experience_reorder_instruction(_resume(), _result(alignments=alignments))
        self.assertEqual(order.experience_ids, ["exp-1", "exp-2"])
        self.assertEqual(order.new_order, ["exp-1", "exp-2"])
        self.assertEqual(order.relevance_scores, {"exp-1": 30, "exp-2": 100})

    def test_unaligned_experiences_get_neutral_score(self):
        order = generate_experience_reorder_instruction(_resume(), _result())
        self.assertEqual(order.relevance_scores, {"exp-1": 50, "exp-2": 50})


class TransformationInstructionsTests(unittest.TestCase):
    def test_assembles_all_sections(self):
        rule = TransformationRule.model_validate(
            {
                "id": "low-impact",
                "name": "Low impact",
                "priority": 10,
                "recruiter_issue": "impact",
                "condition": {"type": "THRESHOLD", "field": "impact.score", "operator": "<", "value": 65},
                "actions": [{"type": "add_metrics", "target": "bullet"}],
            }
        )
        instructions = generate_transformation_instructions(_resume(), _result(context_score=80), _job(), [rule])
        self.assertEqual(instructions.overall_tone, "confident")
        self.assertEqual(len(instructions.bullets), 3)
        self.assertEqual([item.rule_id for item in instructions.applied_rules], ["low-impact"])
        self.assertEqual(instructions.applied_rules[0].matched_targets, ["b1", "b2", "b3"])
        self.assertEqual(instructions.summary.tone, "confident")
        self.assertEqual(instructions.experience_order.new_order, ["exp-1", "exp-2"])


if __name__ == "__main__":
    unittest.main()

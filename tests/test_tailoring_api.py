import json
import os
import sys
import unittest
from pathlib import Path
from unittest.mock import patch

from fastapi.testclient import TestClient

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from resume_tailor.ai.types import ProviderError  # noqa: E402
from resume_tailor.core.errors import TailoringError  # noqa: E402
from resume_tailor.main import app  # noqa: E402

PROVIDER_PATCH = "resume_tailor.tailoring.pre_analysis.get_llm_provider"


class ScriptedProvider:
    """Answers every analysis with the same reply (or raises it)."""

    def __init__(self, reply):
        self.reply = reply

    async def complete(self, *, system_prompt, user_prompt, temperature, max_tokens):
        if isinstance(self.reply, Exception):
            raise self.reply
        return self.reply


class TailoringApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def setUp(self):
        self.payload = {
            "resume_id": "res-42",
            "resume": {
                "contact": {"name": "Dana Reyes", "email": "dana@example.com"},
                "summary": "Backend engineer.",
                "experiences": [
                    {
                        "id": "exp-1",
                        "company": "Northwind",
                        "title": "Senior Engineer",
                        "bullets": [
                            {"id": "b1", "text": "Led the payments API rewrite"},
                            {"id": "b2", "text": "Improved on-call tooling"},
                        ],
                    }
                ],
                "skills": {"technical": ["Python", "Kafka"], "soft": []},
            },
            "job": {
                "id": "job-7",
                "title": "Staff Engineer",
                "company_name": "Acme Robotics",
                "description": "Own the payments platform.",
                "requirements": ["Python", "Terraform"],
            },
        }
        self.reply = json.dumps(
            {
                "score": 55,
                "summary": "Decent.",
                "bullets": [],
                "factors": [],
                "differentiators": ["Payments depth"],
                "matched_skills": [{"skill": "Python", "strength": "exact"}],
                "keyword_coverage": {"keywords": [{"keyword": "terraform", "found": False}]},
            }
        )

    def test_health(self):
        response = self.client.get("/v1/health")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["status"], "healthy")
        self.assertIn("ai_configured", body)
        self.assertGreater(body["rules"]["enabled"], 0)

    def test_pre_analysis_contract(self):
        with patch(PROVIDER_PATCH, return_value=ScriptedProvider(self.reply)):
            response = self.client.post("/v1/tailoring/pre-analysis", json=self.payload)
        self.assertEqual(response.status_code, 200)
        body = response.json()
        analysis = body["pre_analysis"]
        self.assertEqual(analysis["resume_id"], "res-42")
        self.assertEqual(analysis["job_id"], "job-7")
        self.assertEqual(analysis["impact"]["score"], 55)
        self.assertFalse(analysis["company"]["is_well_known"])
        self.assertIn("overall_score", body["readiness"])
        self.assertIn("generated_at", body)

    def test_instructions_contract(self):
        with patch(PROVIDER_PATCH, return_value=ScriptedProvider(self.reply)):
            response = self.client.post("/v1/tailoring/instructions", json=self.payload)
        self.assertEqual(response.status_code, 200)
        body = response.json()
        instructions = body["instructions"]
        self.assertEqual(instructions["overall_tone"], "measured")
        self.assertEqual([item["bullet_id"] for item in instructions["bullets"]], ["b1", "b2"])
        self.assertEqual(instructions["bullets"][0]["keywords_to_add"], ["terraform"])
        self.assertEqual(instructions["experience_order"]["new_order"], ["exp-1"])
        self.assertEqual(instructions["summary"]["target_company"], "Acme Robotics")
        applied = [item["rule_id"] for item in instructions["applied_rules"]]
        self.assertIn("impact-add-metrics", applied)
        self.assertIn("context-explain-unknown-company", applied)
        self.assertEqual(body["estimated_changes"]["missing_keywords"], 1)
        self.assertGreaterEqual(body["timings"]["total_ms"], 0)

    def test_all_analyses_failing_is_bad_gateway(self):
        provider = ScriptedProvider(ProviderError("Rate limit exceeded. Please try again.", kind="rate_limit"))
        with patch(PROVIDER_PATCH, return_value=provider):
            response = self.client.post("/v1/tailoring/instructions", json=self.payload)
        self.assertEqual(response.status_code, 502)
        detail = response.json()["detail"]
        self.assertEqual(detail["code"], "ALL_ANALYSES_FAILED")
        self.assertTrue(detail["message"].startswith("All analyses failed:"))

    def test_missing_ai_configuration_is_unavailable(self):
        with patch.dict(os.environ, {"AI_PROVIDER": "openai", "OPENAI_API_KEY": ""}):
            response = self.client.post("/v1/tailoring/pre-analysis", json=self.payload)
        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()["detail"]["code"], "AI_NOT_CONFIGURED")

    def test_unknown_error_code_is_internal(self):
        with patch(PROVIDER_PATCH, side_effect=TailoringError("unexpected")):
            response = self.client.post("/v1/tailoring/pre-analysis", json=self.payload)
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["detail"]["code"], "UNKNOWN_ERROR")

    def test_duplicate_bullet_ids_rejected(self):
        self.payload["resume"]["experiences"][0]["bullets"][1]["id"] = "b1"
        response = self.client.post("/v1/tailoring/pre-analysis", json=self.payload)
        self.assertEqual(response.status_code, 422)


if __name__ == "__main__":
    unittest.main()

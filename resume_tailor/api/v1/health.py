from fastapi import APIRouter

from resume_tailor.ai.config import is_ai_configured
from resume_tailor.tailoring.rules import get_rule_stats

router = APIRouter()


@router.get("/health", summary="Health Check", description="Check the health status of the application.")
async def health_check():
    return {
        "status": "healthy",
        "ai_configured": is_ai_configured(),
        "rules": get_rule_stats(),
    }

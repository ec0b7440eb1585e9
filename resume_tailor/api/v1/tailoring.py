from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from resume_tailor.core.errors import TailoringError
from resume_tailor.schemas.tailoring import PreAnalysisResponse, TailoringPlan, TailoringRequest
from resume_tailor.services.tailoring_service import prepare_tailoring, run_pre_analysis_report

logger = logging.getLogger(__name__)

router = APIRouter()

_STATUS_BY_CODE = {
    "AI_NOT_CONFIGURED": status.HTTP_503_SERVICE_UNAVAILABLE,
    "INSUFFICIENT_CONTENT": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "ALL_ANALYSES_FAILED": status.HTTP_502_BAD_GATEWAY,
    "AUTH_ERROR": status.HTTP_502_BAD_GATEWAY,
    "RATE_LIMIT": status.HTTP_502_BAD_GATEWAY,
    "API_ERROR": status.HTTP_502_BAD_GATEWAY,
    "EMPTY_RESPONSE": status.HTTP_502_BAD_GATEWAY,
    "PARSE_ERROR": status.HTTP_502_BAD_GATEWAY,
}


def _raise_tailoring_error(exc: TailoringError) -> None:
    status_code = _STATUS_BY_CODE.get(exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR)
    if status_code >= 500:
        logger.warning("tailoring_request_failed code=%s: %s", exc.code, exc)
    raise HTTPException(status_code=status_code, detail={"code": exc.code, "message": str(exc)}) from exc


@router.post("/tailoring/pre-analysis", response_model=PreAnalysisResponse)
async def tailoring_pre_analysis(payload: TailoringRequest):
    try:
        return await run_pre_analysis_report(payload.resume, payload.job, resume_id=payload.resume_id)
    except TailoringError as exc:
        _raise_tailoring_error(exc)


@router.post("/tailoring/instructions", response_model=TailoringPlan)
async def tailoring_instructions(payload: TailoringRequest):
    try:
        return await prepare_tailoring(payload.resume, payload.job, resume_id=payload.resume_id)
    except TailoringError as exc:
        _raise_tailoring_error(exc)

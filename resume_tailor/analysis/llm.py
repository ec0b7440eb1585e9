from __future__ import annotations

import logging
import math
import time
from typing import Any, Iterable, TypeVar

from resume_tailor.ai.json_recovery import recover_json
from resume_tailor.ai.types import LLMProvider, ProviderError, ProviderErrorKind
from resume_tailor.core.errors import AnalysisError, ErrorCode, JSONRecoveryError

logger = logging.getLogger(__name__)

_PROVIDER_ERROR_CODES: dict[ProviderErrorKind, ErrorCode] = {
    "auth": "AUTH_ERROR",
    "rate_limit": "RATE_LIMIT",
    "api": "API_ERROR",
    "timeout": "API_ERROR",
}
_NEUTRAL_SCORE = 50

T = TypeVar("T", bound=str)


def _provider_message(exc: ProviderError) -> str:
    return str(exc) or f"AI provider error ({exc.kind})"


async def request_analysis_json(
    *,
    analysis: str,
    provider: LLMProvider,
    system_prompt: str,
    user_prompt: str,
    temperature: float,
    max_tokens: int,
) -> dict[str, Any]:
    """Call the provider once and recover a JSON object from its reply.

    Every failure surfaces as ``AnalysisError`` with a taxonomy code and the
    underlying exception chained.
    """
    started = time.perf_counter()
    try:
        text = await provider.complete(
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            temperature=temperature,
            max_tokens=max_tokens,
        )
    except ProviderError as exc:
        logger.warning(
            "analysis_provider_failed analysis=%s kind=%s prompt_len=%s: %s",
            analysis,
            exc.kind,
            len(user_prompt),
            exc,
        )
        raise AnalysisError(
            _provider_message(exc),
            analysis=analysis,
            code=_PROVIDER_ERROR_CODES.get(exc.kind, "API_ERROR"),
            cause=exc,
        ) from exc
    except Exception as exc:
        logger.exception("analysis_provider_unexpected analysis=%s", analysis)
        raise AnalysisError(
            f"Failed to run {analysis} analysis: {exc}",
            analysis=analysis,
            code="UNKNOWN_ERROR",
            cause=exc,
        ) from exc

    if not text or not text.strip():
        raise AnalysisError("No response received from AI", analysis=analysis, code="EMPTY_RESPONSE")

    try:
        payload = recover_json(text, context=f"{analysis} analysis")
    except JSONRecoveryError as exc:
        raise AnalysisError(
            f"Failed to parse AI response: {exc}",
            analysis=analysis,
            code="PARSE_ERROR",
            cause=exc,
        ) from exc

    logger.info(
        "analysis_response_parsed analysis=%s latency_ms=%s response_len=%s",
        analysis,
        int((time.perf_counter() - started) * 1000),
        len(text),
    )
    return payload


# Coercion helpers for untrusted provider payloads.


def pick(raw: dict[str, Any], *keys: str) -> Any:
    """First non-None value among ``keys`` (models mix snake_case and camelCase)."""
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return None


def clamp_score(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        if isinstance(value, str):
            try:
                value = float(value.strip())
            except ValueError:
                return _NEUTRAL_SCORE
        else:
            return _NEUTRAL_SCORE
    if math.isnan(value):
        return _NEUTRAL_SCORE
    if math.isinf(value):
        return 100 if value > 0 else 0
    return max(0, min(100, int(round(value))))


def as_int(value: Any, default: int = 0) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return max(0, value)
    if isinstance(value, float) and math.isfinite(value):
        return max(0, int(value))
    return default


def as_str(value: Any, default: str = "") -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def as_str_list(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value.strip()] if value.strip() else []
    if not isinstance(value, list):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


def as_dict_list(value: Any) -> list[dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def as_choice(value: Any, allowed: Iterable[T], default: T) -> T:
    if isinstance(value, str):
        normalized = value.strip().lower().replace("-", "_").replace(" ", "_")
        for option in allowed:
            if option == normalized:
                return option
    return default

from __future__ import annotations

import logging
import os
from typing import Optional

from openai import (
    APIError,
    APITimeoutError,
    AsyncOpenAI,
    AuthenticationError,
    RateLimitError,
)

from resume_tailor.ai.types import ProviderError

logger = logging.getLogger(__name__)


class OpenAIProvider:
    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_s: float = 60.0,
        max_retries: int = 2,
    ):
        self._model = model
        self._response_format = (os.getenv("OPENAI_RESPONSE_FORMAT") or "").strip().lower()
        key = (api_key or os.getenv("OPENAI_API_KEY") or "").strip()
        if not key:
            raise RuntimeError("OPENAI_API_KEY is missing")

        self._client = AsyncOpenAI(
            api_key=key,
            base_url=(base_url or os.getenv("OPENAI_BASE_URL") or None),
            timeout=float(os.getenv("OPENAI_TIMEOUT_S", str(timeout_s))),
            max_retries=int(os.getenv("OPENAI_MAX_RETRIES", str(max_retries))),
        )

    async def complete(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_tokens: int,
    ) -> str:
        create_kwargs = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if self._response_format == "json":
            create_kwargs["response_format"] = {"type": "json_object"}

        try:
            response = await self._client.chat.completions.create(**create_kwargs)
        except AuthenticationError as exc:
            raise ProviderError("Invalid API key", kind="auth") from exc
        except RateLimitError as exc:
            raise ProviderError("Rate limit exceeded. Please try again.", kind="rate_limit") from exc
        except APITimeoutError as exc:
            raise ProviderError("AI provider request timed out", kind="timeout") from exc
        except APIError as exc:
            logger.warning("openai_completion_failed model=%s prompt_len=%s: %s", self._model, len(user_prompt), exc)
            raise ProviderError(f"AI API error: {exc}", kind="api") from exc

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

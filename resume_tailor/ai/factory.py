from resume_tailor.ai.config import is_ai_configured, load_ai_config
from resume_tailor.ai.types import LLMProvider
from resume_tailor.core.errors import TailoringError

from resume_tailor.ai.providers.openai_provider import OpenAIProvider


def get_llm_provider() -> LLMProvider:
    cfg = load_ai_config()

    if not is_ai_configured():
        raise TailoringError(
            "AI is not configured. Set AI_PROVIDER=openai and OPENAI_API_KEY.",
            code="AI_NOT_CONFIGURED",
        )

    if cfg.provider == "openai":
        return OpenAIProvider(model=cfg.model)

    raise ValueError(f"Unsupported AI_PROVIDER='{cfg.provider}'")

from typing import Literal, Protocol

ProviderErrorKind = Literal["auth", "rate_limit", "api", "timeout"]


class ProviderError(RuntimeError):
    def __init__(self, message: str, *, kind: ProviderErrorKind = "api"):
        super().__init__(message)
        self.kind = kind


class LLMProvider(Protocol):
    async def complete(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_tokens: int,
    ) -> str: ...

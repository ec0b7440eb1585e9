from __future__ import annotations

from typing import Literal

ErrorCode = Literal[
    "AI_NOT_CONFIGURED",
    "INSUFFICIENT_CONTENT",
    "EMPTY_RESPONSE",
    "PARSE_ERROR",
    "AUTH_ERROR",
    "RATE_LIMIT",
    "API_ERROR",
    "ALL_ANALYSES_FAILED",
    "UNKNOWN_ERROR",
]


class TailoringError(RuntimeError):
    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode = "UNKNOWN_ERROR",
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.cause = cause


class AnalysisError(TailoringError):
    def __init__(
        self,
        message: str,
        *,
        analysis: str,
        code: ErrorCode = "UNKNOWN_ERROR",
        cause: BaseException | None = None,
    ):
        super().__init__(message, code=code, cause=cause)
        self.analysis = analysis


class JSONRecoveryError(TailoringError):
    def __init__(self, message: str, *, excerpt: str, cause: BaseException | None = None):
        super().__init__(message, code="PARSE_ERROR", cause=cause)
        self.excerpt = excerpt


class PreAnalysisError(TailoringError):
    def __init__(self, message: str, *, errors: list[str], cause: BaseException | None = None):
        super().__init__(message, code="ALL_ANALYSES_FAILED", cause=cause)
        self.errors = errors

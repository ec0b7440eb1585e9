"""Recover structured JSON from free-form language-model output.

Providers often wrap JSON in prose or markdown fences, or emit JSON-like text
with relaxed syntax (single quotes, bare keys, trailing commas, raw newlines in
strings, truncated closers). ``recover_json`` runs a fixed extraction pass and
a fixed repair pass over the text and either returns a parsed object or raises
``JSONRecoveryError`` with a bounded excerpt of the failing candidate.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable

from resume_tailor.core.config import settings
from resume_tailor.core.errors import JSONRecoveryError

logger = logging.getLogger(__name__)

_FENCE = "```"
_FIRST_FENCE_RE = re.compile(r"```([\s\S]*?)```")
_LANG_TAG_RE = re.compile(r"^[ \t]*[A-Za-z][\w+-]*[ \t]*\r?\n")
_UNQUOTED_KEY_RE = re.compile(r"([{,]\s*)([A-Za-z_$][\w$-]*)(\s*:)")
_TRAILING_COMMA_RE = re.compile(r",(\s*[\]}])")
_KEY_QUOTING_PASSES = 3
_CONTROL_ESCAPES = {"\n": "\\n", "\r": "\\r", "\t": "\\t"}
_CLOSERS = {"{": "}", "[": "]"}


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------


def _strip_lang_tag(block: str) -> str:
    return _LANG_TAG_RE.sub("", block, count=1).strip()


def _looks_like_object(candidate: str | None) -> bool:
    return bool(candidate) and candidate.startswith("{")


def _end_anchored_fence(text: str) -> str | None:
    close = text.rfind(_FENCE)
    if close <= 0:
        return None
    opening = text.rfind(_FENCE, 0, close)
    if opening == -1:
        return None
    return _strip_lang_tag(text[opening + len(_FENCE) : close])


def _first_fence(text: str) -> str | None:
    match = _FIRST_FENCE_RE.search(text)
    if not match:
        return None
    return _strip_lang_tag(match.group(1))


def _balanced_object(text: str, start: int) -> str | None:
    depth = 0
    in_string = False
    escape_next = False
    for index in range(start, len(text)):
        char = text[index]
        if escape_next:
            escape_next = False
            continue
        if char == "\\":
            escape_next = True
            continue
        if char == '"':
            in_string = not in_string
            continue
        if in_string:
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start : index + 1]
    return None


def extract_json_candidate(text: str) -> str:
    """Pick the most plausible JSON object span out of a raw response."""
    cleaned = (text or "").strip().lstrip("\ufeff").strip()

    fenced = _end_anchored_fence(cleaned)
    if _looks_like_object(fenced):
        return fenced  # type: ignore[return-value]

    fenced = _first_fence(cleaned)
    if _looks_like_object(fenced):
        return fenced  # type: ignore[return-value]

    start = cleaned.find("{")
    if start == -1:
        return cleaned

    balanced = _balanced_object(cleaned, start)
    if balanced is not None:
        return balanced

    # Truncated output: take everything from the first opener and let repair close it.
    end = cleaned.rfind("}")
    if end > start:
        return cleaned[start : end + 1]
    return cleaned[start:]


# ---------------------------------------------------------------------------
# Repair
# ---------------------------------------------------------------------------


def _map_segments(
    text: str,
    *,
    outside: Callable[[str], str] | None = None,
    inside: Callable[[str], str] | None = None,
) -> str:
    """Apply ``outside`` to text between double-quoted literals and ``inside`` to the literals."""
    parts: list[str] = []
    start = 0
    index = 0
    length = len(text)
    while index < length:
        if text[index] != '"':
            index += 1
            continue
        segment = text[start:index]
        parts.append(outside(segment) if outside else segment)
        cursor = index + 1
        while cursor < length:
            char = text[cursor]
            if char == "\\":
                cursor += 2
                continue
            if char == '"':
                break
            cursor += 1
        end = min(cursor + 1, length)
        literal = text[index:end]
        parts.append(inside(literal) if inside else literal)
        index = end
        start = end
    tail = text[start:]
    parts.append(outside(tail) if outside else tail)
    return "".join(parts)


def _normalize_quotes(text: str) -> str:
    out: list[str] = []
    in_double = False
    in_single = False
    index = 0
    length = len(text)
    while index < length:
        char = text[index]
        if in_double:
            out.append(char)
            if char == "\\" and index + 1 < length:
                out.append(text[index + 1])
                index += 2
                continue
            if char == '"':
                in_double = False
        elif in_single:
            if char == "\\" and index + 1 < length:
                following = text[index + 1]
                out.append("'" if following == "'" else char + following)
                index += 2
                continue
            if char == "'":
                out.append('"')
                in_single = False
            elif char == '"':
                out.append('\\"')
            else:
                out.append(char)
        else:
            if char == '"':
                in_double = True
            elif char == "'":
                in_single = True
                char = '"'
            out.append(char)
        index += 1
    return "".join(out)


def _strip_comments(text: str) -> str:
    out: list[str] = []
    in_string = False
    index = 0
    length = len(text)
    while index < length:
        char = text[index]
        if in_string:
            out.append(char)
            if char == "\\" and index + 1 < length:
                out.append(text[index + 1])
                index += 2
                continue
            if char == '"':
                in_string = False
            index += 1
            continue
        if char == '"':
            in_string = True
            out.append(char)
            index += 1
            continue
        if text.startswith("//", index):
            newline = text.find("\n", index)
            index = length if newline == -1 else newline
            continue
        if text.startswith("/*", index):
            close = text.find("*/", index + 2)
            index = length if close == -1 else close + 2
            continue
        out.append(char)
        index += 1
    return "".join(out)


def _quote_keys(segment: str) -> str:
    return _UNQUOTED_KEY_RE.sub(r'\1"\2"\3', segment)


def _quote_unquoted_keys(text: str) -> str:
    current = text
    for _ in range(_KEY_QUOTING_PASSES):
        updated = _map_segments(current, outside=_quote_keys)
        if updated == current:
            break
        current = updated
    return current


def _remove_trailing_commas(text: str) -> str:
    return _map_segments(text, outside=lambda segment: _TRAILING_COMMA_RE.sub(r"\1", segment))


def _escape_control_chars(literal: str) -> str:
    for raw, escaped in _CONTROL_ESCAPES.items():
        literal = literal.replace(raw, escaped)
    return literal


def _escape_string_control_chars(text: str) -> str:
    return _map_segments(text, inside=_escape_control_chars)


def _balance_brackets(text: str) -> str:
    stack: list[str] = []
    in_string = False
    escape_next = False
    for char in text:
        if escape_next:
            escape_next = False
            continue
        if in_string:
            if char == "\\":
                escape_next = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char in _CLOSERS:
            stack.append(char)
        elif char in ("}", "]"):
            if stack and _CLOSERS[stack[-1]] == char:
                stack.pop()

    if not stack and not in_string:
        return text

    repaired = text
    if in_string:
        if escape_next:
            repaired = repaired[:-1]
        repaired += '"'
    repaired = repaired.rstrip()
    if repaired.endswith(","):
        repaired = repaired[:-1]
    return repaired + "".join(_CLOSERS[opener] for opener in reversed(stack))


def repair_json(candidate: str) -> str:
    """Repair relaxed JSON syntax. Steps run in a fixed order; each relies on the previous one."""
    repaired = _normalize_quotes(candidate)
    repaired = _strip_comments(repaired)
    repaired = _quote_unquoted_keys(repaired)
    repaired = _remove_trailing_commas(repaired)
    repaired = _escape_string_control_chars(repaired)
    return _balance_brackets(repaired)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def _excerpt(text: str) -> str:
    limit = settings.parse_error_excerpt_chars
    if len(text) <= limit * 2:
        return text
    return f"{text[:limit]} ... {text[-limit:]}"


def recover_json(raw_text: str, *, context: str = "AI response") -> dict[str, Any]:
    candidate = extract_json_candidate(raw_text)
    repaired = repair_json(candidate)
    try:
        parsed = json.loads(repaired)
    except json.JSONDecodeError as exc:
        excerpt = _excerpt(repaired)
        logger.warning("json_recovery_failed context=%s error=%s excerpt=%r", context, exc.msg, excerpt)
        raise JSONRecoveryError(
            f"Failed to parse {context}: {exc.msg} (line {exc.lineno}, column {exc.colno}). Excerpt: {excerpt}",
            excerpt=excerpt,
            cause=exc,
        ) from exc

    if not isinstance(parsed, dict):
        excerpt = _excerpt(repaired)
        raise JSONRecoveryError(
            f"Failed to parse {context}: expected a JSON object, got {type(parsed).__name__}",
            excerpt=excerpt,
        )
    return parsed

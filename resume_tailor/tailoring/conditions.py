"""Total evaluator for rule condition trees.

Malformed nodes (missing field, unknown operator, type mismatch) evaluate to
``False``; nothing here raises.
"""

from __future__ import annotations

import logging
import operator
from collections.abc import Mapping
from typing import Any, Callable

from pydantic import BaseModel

from resume_tailor.schemas.rules import RuleCondition

logger = logging.getLogger(__name__)


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()

_THRESHOLD_OPERATORS: dict[str, Callable[[float, float], bool]] = {
    "<": operator.lt,
    "<=": operator.le,
    "=": operator.eq,
    ">=": operator.ge,
    ">": operator.gt,
}


def resolve_path(source: Any, path: str) -> Any:
    """Follow a dot path through mappings, model attributes and list indexes.

    Returns ``MISSING`` as soon as any hop is absent or ``None``.
    """
    current = source
    for part in path.split("."):
        if current is None or current is MISSING:
            return MISSING
        if isinstance(current, Mapping):
            current = current.get(part, MISSING)
        elif isinstance(current, BaseModel):
            if part not in type(current).model_fields:
                return MISSING
            current = getattr(current, part)
        elif isinstance(current, (list, tuple)):
            if not part.lstrip("-").isdigit():
                return MISSING
            index = int(part)
            if not -len(current) <= index < len(current):
                return MISSING
            current = current[index]
        else:
            return MISSING
    if current is None:
        return MISSING
    return current


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _threshold(condition: RuleCondition, source: Any) -> bool:
    if not condition.field or condition.operator is None:
        return False
    compare = _THRESHOLD_OPERATORS.get(condition.operator)
    if compare is None:
        return False
    value = resolve_path(source, condition.field)
    if not _is_number(value) or not _is_number(condition.value):
        return False
    return compare(value, condition.value)


def _contains(haystack: Any, needle: Any) -> bool:
    if not isinstance(needle, str):
        return False
    needle = needle.lower()
    if isinstance(haystack, str):
        return needle in haystack.lower()
    if isinstance(haystack, (list, tuple)):
        return any(needle in str(item).lower() for item in haystack)
    return False


def _strictly_equal(left: Any, right: Any) -> bool:
    """Equality without cross-type coercion; ``False`` never equals ``0``."""
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if _is_number(left) and _is_number(right):
        return left == right
    return type(left) is type(right) and left == right


def _match(condition: RuleCondition, source: Any) -> bool:
    if not condition.field or condition.value is None:
        return False
    value = resolve_path(source, condition.field)
    if condition.operator == "in":
        if isinstance(condition.value, (list, tuple)):
            return value is not MISSING and any(_strictly_equal(value, item) for item in condition.value)
        return False
    if condition.operator == "contains":
        return _contains(value, condition.value)
    if value is MISSING:
        return False
    return _strictly_equal(value, condition.value)


def _exists(condition: RuleCondition, source: Any) -> bool:
    if not condition.field:
        return False
    value = resolve_path(source, condition.field)
    if value is MISSING:
        return False
    if isinstance(value, (str, list, tuple, dict)):
        return len(value) > 0
    return True


def evaluate_condition(condition: RuleCondition, source: Any) -> bool:
    kind = condition.type
    children = condition.conditions

    # An empty boolean node is vacuously satisfied.
    if kind == "AND":
        return all(evaluate_condition(child, source) for child in children)
    if kind == "OR":
        return not children or any(evaluate_condition(child, source) for child in children)
    if kind == "NOT":
        return not children or not evaluate_condition(children[0], source)
    if kind == "THRESHOLD":
        return _threshold(condition, source)
    if kind == "MATCH":
        return _match(condition, source)
    if kind == "EXISTS":
        return _exists(condition, source)

    logger.debug("condition_unknown_type type=%s", kind)
    return False

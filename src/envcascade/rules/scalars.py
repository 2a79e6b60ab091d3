"""
Scalar type rules: strings, numbers, integers and booleans.

Values read from the environment or a dotenv file are always strings, so the
numeric and boolean rules convert textual input. Defaults declared in code
may already be of the target type and pass through unchanged.
"""

import math
import re
from typing import Any

from envcascade.rules.base import Rule, RuleResult

_INT_RE = re.compile(r"^\s*[+-]?\d+\s*$")
_FLOAT_RE = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$")

TRUTHY = frozenset({"true", "yes", "on", "1"})
FALSY = frozenset({"false", "no", "off", "0"})


class String(Rule):
    """
    Value must be a string.

    Usage:
        String()
        String(allow_empty=True)
    """

    rule_type = "string"

    def __init__(self, allow_empty: bool = False) -> None:
        self.allow_empty = allow_empty

    def check(self, value: Any) -> RuleResult:
        if not isinstance(value, str):
            return self._fail("must be a string", value)
        if not value and not self.allow_empty:
            return self._fail("is not allowed to be empty", value)
        return self._pass(value)

    def __repr__(self) -> str:
        return f"String(allow_empty={self.allow_empty})"


class Number(Rule):
    """Value must be numeric; numeric strings become ``int`` or ``float``."""

    rule_type = "number"
    message = "must be a number"

    def check(self, value: Any) -> RuleResult:
        number = _to_number(value)
        if number is None:
            return self._fail(self.message, value)
        return self._pass(number)


class Integer(Number):
    """Value must be a whole number."""

    rule_type = "integer"

    def check(self, value: Any) -> RuleResult:
        result = super().check(value)
        if not result.ok:
            return result
        number = result.value
        if isinstance(number, float):
            if not number.is_integer():
                return self._fail("must be an integer", value)
            number = int(number)
        return self._pass(number)


class Boolean(Rule):
    """Value must be a boolean or one of true/false, yes/no, on/off, 1/0."""

    rule_type = "boolean"

    def check(self, value: Any) -> RuleResult:
        if isinstance(value, bool):
            return self._pass(value)
        if isinstance(value, str):
            text = value.strip().lower()
            if text in TRUTHY:
                return self._pass(True)
            if text in FALSY:
                return self._pass(False)
        return self._fail("must be a boolean", value)


def _to_number(value: Any) -> int | float | None:
    """Convert ``value`` to a finite int/float, or None if it is not numeric."""
    # bool is an int subclass but never a valid number here
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        if _INT_RE.match(value):
            return int(value)
        if _FLOAT_RE.match(value):
            number = float(value)
            return number if math.isfinite(number) else None
    return None

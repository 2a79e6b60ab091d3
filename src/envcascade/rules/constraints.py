"""
Constraint rules: accepted values, patterns, ports and URIs.
"""

import re
from typing import Any
from urllib.parse import urlsplit

from envcascade.exceptions import ConfigurationError
from envcascade.rules.base import Rule, RuleResult
from envcascade.rules.scalars import Integer


class OneOf(Rule):
    """
    Value must be one of an accepted set.

    String input also matches a non-string choice by its text form, so
    ``OneOf(1, 2)`` accepts ``"2"`` and yields ``2``.

    Usage:
        OneOf("development", "production", "test")
    """

    rule_type = "one_of"

    def __init__(self, *values: Any) -> None:
        if not values:
            raise ConfigurationError("OneOf requires at least one accepted value")
        self.values = values

    def check(self, value: Any) -> RuleResult:
        for choice in self.values:
            if value == choice and type(value) is type(choice):
                return self._pass(choice)
        if isinstance(value, str):
            for choice in self.values:
                if str(choice) == value:
                    return self._pass(choice)
        accepted = ", ".join(str(v) for v in self.values)
        return self._fail(f"must be one of [{accepted}]", value)

    def __repr__(self) -> str:
        return f"OneOf({', '.join(repr(v) for v in self.values)})"


class Pattern(Rule):
    """
    String value must match a regular expression (searched, not anchored).

    Usage:
        Pattern(r"^[a-z]+://")
    """

    rule_type = "pattern"

    def __init__(self, regex: str | re.Pattern) -> None:
        try:
            self.regex = re.compile(regex)
        except re.error as e:
            raise ConfigurationError(f"Invalid pattern {regex!r}: {e}") from e

    def check(self, value: Any) -> RuleResult:
        if not isinstance(value, str):
            return self._fail("must be a string", value)
        if not self.regex.search(value):
            return self._fail(
                f'with value "{value}" fails to match the required pattern: /{self.regex.pattern}/',
                value,
            )
        return self._pass(value)

    def __repr__(self) -> str:
        return f"Pattern({self.regex.pattern!r})"


class Port(Integer):
    """Value must be a TCP/UDP port number (0-65535)."""

    rule_type = "port"
    message = "must be a valid port"

    def check(self, value: Any) -> RuleResult:
        result = super().check(value)
        if not result.ok or not 0 <= result.value <= 65535:
            return self._fail(self.message, value)
        return result


class Uri(Rule):
    """
    Value must be an absolute URI, optionally restricted to given schemes.

    Usage:
        Uri()
        Uri(schemes=["postgres", "postgresql"])
    """

    rule_type = "uri"

    def __init__(self, schemes: list[str] | tuple[str, ...] | None = None) -> None:
        if isinstance(schemes, str):
            schemes = (schemes,)
        self.schemes = tuple(s.lower() for s in schemes) if schemes else None

    def check(self, value: Any) -> RuleResult:
        if not isinstance(value, str):
            return self._fail("must be a string", value)
        try:
            parts = urlsplit(value)
        except ValueError:
            parts = None
        if parts is None or not parts.scheme or not (parts.netloc or parts.path):
            return self._fail("must be a valid uri", value)
        if self.schemes and parts.scheme.lower() not in self.schemes:
            return self._fail(
                f"must be a valid uri with a scheme matching the {'|'.join(self.schemes)} pattern",
                value,
            )
        return self._pass(value)

    def __repr__(self) -> str:
        return f"Uri(schemes={list(self.schemes) if self.schemes else None})"

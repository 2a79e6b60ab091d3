"""
Base classes for validation rules.

A rule is called with a resolved value and answers with a RuleResult: either
success carrying the (possibly coerced) value, or failure carrying a
human-readable message such as ``must be a number``. The key name is not part
of the message; the schema validator prefixes it.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from envcascade.exceptions import ConfigurationError


@dataclass(frozen=True)
class RuleResult:
    """
    Result of applying a rule to a value.

    Attributes:
        ok: True when the value satisfied the rule
        value: Coerced value on success (the input value on failure)
        error: Validator message on failure, None on success
    """

    ok: bool
    value: Any = None
    error: str | None = None


class Rule(ABC):
    """
    Abstract base class for validation rules.

    Usage:
        class Even(Rule):
            rule_type = "even"

            def check(self, value):
                if int(value) % 2:
                    return self._fail("must be even")
                return self._pass(int(value))
    """

    @property
    @abstractmethod
    def rule_type(self) -> str:
        """Return the type of this rule (e.g., 'string', 'number')."""
        pass

    @abstractmethod
    def check(self, value: Any) -> RuleResult:
        """
        Validate a single value.

        Args:
            value: Raw value from the winning resolution layer

        Returns:
            RuleResult with the coerced value or an error message
        """
        pass

    def __call__(self, value: Any) -> RuleResult:
        return self.check(value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

    def _pass(self, value: Any) -> RuleResult:
        return RuleResult(ok=True, value=value)

    def _fail(self, message: str, value: Any = None) -> RuleResult:
        return RuleResult(ok=False, value=value, error=message)


class CallableRule(Rule):
    """
    Adapts a plain function into a rule.

    The function receives the value and returns ``None`` (or ``True``) on
    success, an error string (or ``False``) on failure, or a RuleResult.
    """

    rule_type = "callable"

    def __init__(self, func: Callable[[Any], Any]) -> None:
        self.func = func

    def check(self, value: Any) -> RuleResult:
        outcome = self.func(value)
        if isinstance(outcome, RuleResult):
            return outcome
        if outcome is None or outcome is True:
            return self._pass(value)
        if outcome is False:
            return self._fail("is invalid", value)
        if isinstance(outcome, str):
            return self._fail(outcome, value)
        raise ConfigurationError(
            f"Validator {self.func!r} returned {type(outcome).__name__}; "
            f"expected None, bool, str or RuleResult"
        )

    def __repr__(self) -> str:
        return f"CallableRule({getattr(self.func, '__name__', self.func)!r})"


def as_rule(validator: Rule | Callable[[Any], Any]) -> Rule:
    """Return ``validator`` as a Rule, wrapping plain callables."""
    if isinstance(validator, Rule):
        return validator
    if callable(validator):
        return CallableRule(validator)
    raise ConfigurationError(f"Validator must be a Rule or callable, got {type(validator).__name__}")

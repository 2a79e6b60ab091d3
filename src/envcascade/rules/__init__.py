"""
Validation rules for configuration keys.

Usage:
    from envcascade.rules import Number, String, OneOf

    spec = {
        "PORT": KeyRule(Number(), default=3000),
        "MODE": KeyRule(OneOf("dev", "prod"), required=True),
    }
"""

from envcascade.rules.base import CallableRule, Rule, RuleResult, as_rule
from envcascade.rules.constraints import OneOf, Pattern, Port, Uri
from envcascade.rules.scalars import Boolean, Integer, Number, String

__all__ = [
    # Base classes
    "Rule",
    "RuleResult",
    "CallableRule",
    "as_rule",
    # Rules
    "String",
    "Number",
    "Integer",
    "Boolean",
    "OneOf",
    "Pattern",
    "Port",
    "Uri",
]

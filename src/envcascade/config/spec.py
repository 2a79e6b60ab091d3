"""
Configuration spec declarations.

A ConfigSpec maps each recognised key to a KeyRule: the rule its value must
satisfy, whether it is required, and an optional default.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from envcascade.exceptions import ConfigurationError
from envcascade.rules import Rule, as_rule


class _NotSet:
    """Sentinel for "no value supplied by this layer"."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NOT_SET"

    def __bool__(self) -> bool:
        return False


NOT_SET: Any = _NotSet()


@dataclass(frozen=True)
class KeyRule:
    """
    Declaration for a single configuration key.

    Attributes:
        validate: Rule (or plain callable) applied to the resolved value
        required: Whether resolution must find a value for the key
        default: Fallback used when neither environment nor file supplies the key
    """

    validate: Rule | Callable[[Any], Any]
    required: bool = False
    default: Any = field(default=NOT_SET)

    def __post_init__(self) -> None:
        object.__setattr__(self, "validate", as_rule(self.validate))

    @property
    def has_default(self) -> bool:
        return self.default is not NOT_SET


ConfigSpec = Mapping[str, KeyRule]


def normalize_spec(spec: Mapping[str, KeyRule | Mapping[str, Any]]) -> ConfigSpec:
    """
    Normalise a spec into an immutable mapping of KeyRule.

    Entries may already be KeyRule instances or plain dicts with
    ``validate``, ``required`` and ``default`` keys.

    Raises:
        ConfigurationError: If the spec or one of its entries is malformed
    """
    if not isinstance(spec, Mapping):
        raise ConfigurationError(f"Configuration spec must be a mapping, got {type(spec).__name__}")

    rules: dict[str, KeyRule] = {}
    for key, entry in spec.items():
        if not isinstance(key, str) or not key:
            raise ConfigurationError(f"Configuration keys must be non-empty strings, got {key!r}")
        if isinstance(entry, KeyRule):
            rules[key] = entry
        elif isinstance(entry, Mapping):
            unknown = set(entry) - {"validate", "required", "default"}
            if unknown:
                raise ConfigurationError(
                    f'"{key}" has unknown rule fields: {", ".join(sorted(unknown))}',
                    details={"key": key},
                )
            if "validate" not in entry:
                raise ConfigurationError(f'"{key}" is missing a validate rule', details={"key": key})
            rules[key] = KeyRule(
                validate=entry["validate"],
                required=bool(entry.get("required", False)),
                default=entry.get("default", NOT_SET),
            )
        else:
            raise ConfigurationError(
                f'"{key}" must be declared with a KeyRule or a mapping, got {type(entry).__name__}',
                details={"key": key},
            )
    return MappingProxyType(rules)

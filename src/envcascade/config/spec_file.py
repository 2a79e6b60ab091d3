"""
YAML configuration spec files.

Lets a spec live next to the dotenv files instead of in code::

    keys:
      DATABASE_URL: {type: uri, required: true}
      PORT: {type: port, default: 3000}
      MODE: {type: one_of, values: [dev, prod], required: true}
      SLUG: {type: pattern, pattern: "^[a-z-]+$"}
"""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import yaml

from envcascade.config.spec import NOT_SET, KeyRule
from envcascade.exceptions import ConfigurationError
from envcascade.rules import Boolean, Integer, Number, OneOf, Pattern, Port, Rule, String, Uri


def _as_list(key: str, fields: dict[str, Any], name: str) -> list[Any] | None:
    """Pop a list-valued field; a lone scalar becomes a one-item list."""
    value = fields.pop(name, None)
    if value is None:
        return None
    if isinstance(value, (str, int, float, bool)):
        return [value]
    if not isinstance(value, list):
        raise ConfigurationError(
            f'"{key}" field {name!r} must be a list or a single value, got {type(value).__name__}',
            details={"key": key, "field": name},
        )
    return value


def _uri(key: str, fields: dict[str, Any]) -> Rule:
    schemes = _as_list(key, fields, "schemes")
    return Uri(schemes=[str(s) for s in schemes] if schemes else None)


def _one_of(key: str, fields: dict[str, Any]) -> Rule:
    values = _as_list(key, fields, "values")
    if not values:
        raise ConfigurationError(f'"{key}" of type one_of needs a non-empty values list', details={"key": key})
    return OneOf(*values)


def _pattern(key: str, fields: dict[str, Any]) -> Rule:
    regex = fields.pop("pattern", None)
    if not isinstance(regex, str) or not regex:
        raise ConfigurationError(f'"{key}" of type pattern needs a non-empty pattern', details={"key": key})
    return Pattern(regex)


# rule type -> builder taking the key name and its remaining YAML fields
RULE_BUILDERS: dict[str, Callable[[str, dict[str, Any]], Rule]] = {
    "string": lambda key, f: String(allow_empty=bool(f.pop("allow_empty", False))),
    "number": lambda key, f: Number(),
    "integer": lambda key, f: Integer(),
    "boolean": lambda key, f: Boolean(),
    "port": lambda key, f: Port(),
    "uri": _uri,
    "one_of": _one_of,
    "pattern": _pattern,
}


def _build_rule(key: str, fields: dict[str, Any]) -> KeyRule:
    fields = dict(fields)
    rule_type = fields.pop("type", "string")
    builder = RULE_BUILDERS.get(rule_type)
    if builder is None:
        raise ConfigurationError(
            f'"{key}" has unknown type: {rule_type}\n'
            f"  Suggestion: Use one of {', '.join(sorted(RULE_BUILDERS))}",
            details={"key": key, "type": rule_type},
        )
    try:
        rule = builder(key, fields)
    except TypeError as e:
        raise ConfigurationError(f'"{key}" has invalid {rule_type} settings: {e}', details={"key": key}) from e
    required = bool(fields.pop("required", False))
    default = fields.pop("default", NOT_SET)
    if fields:
        raise ConfigurationError(
            f'"{key}" has unknown fields: {", ".join(sorted(fields))}',
            details={"key": key},
        )
    return KeyRule(validate=rule, required=required, default=default)


def load_spec_file(path: str | Path) -> dict[str, KeyRule]:
    """
    Load a configuration spec from a YAML file.

    Args:
        path: Path to the YAML spec file

    Returns:
        Mapping of key name to KeyRule

    Raises:
        ConfigurationError: If the file is missing, unparsable or malformed
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigurationError(f"Spec file not found: {path}", details={"path": str(path)})

    with open(path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            mark = getattr(e, "problem_mark", None)
            location = f" at line {mark.line + 1}, column {mark.column + 1}" if mark else ""
            raise ConfigurationError(
                f"Error parsing spec file{location}:\n  {e}\n  File: {path}",
                details={"path": str(path)},
            ) from e

    keys = data.get("keys") if isinstance(data, dict) else None
    if not isinstance(keys, dict):
        raise ConfigurationError(
            f"Spec file must contain a 'keys' mapping: {path}",
            details={"path": str(path)},
        )

    spec: dict[str, KeyRule] = {}
    for key, fields in keys.items():
        if fields is None:
            fields = {}
        if not isinstance(fields, dict):
            raise ConfigurationError(f'"{key}" must be a mapping of rule fields', details={"key": key})
        spec[str(key)] = _build_rule(str(key), fields)
    return spec

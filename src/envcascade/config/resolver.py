"""
Precedence resolution.

Merges the three layers per key, highest first:
process environment > file-based value > declared default.

An empty string is still a value: an empty environment variable beats a
non-empty file entry.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

from envcascade.config.spec import NOT_SET, ConfigSpec

NOT_SUPPLIED = "--"

Layer = Literal["default", "dotenv", "env"]


@dataclass(frozen=True)
class TraceEntry:
    """
    What each layer contributed for one key, and which layer won.

    Attributes:
        default: Declared default, or "--"
        dotenv: Value from the source file, or "--"
        env: Value from the process environment, or "--"
        is_extra: True for keys not declared in the spec
        resolved_from: Winning layer, or None if no layer supplied a value
        resolved_value: Raw value from the winning layer (None if unresolved)
    """

    default: Any = NOT_SUPPLIED
    dotenv: Any = NOT_SUPPLIED
    env: Any = NOT_SUPPLIED
    is_extra: bool = False
    resolved_from: Layer | None = None
    resolved_value: Any = None

    @property
    def resolved(self) -> bool:
        return self.resolved_from is not None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camelCase dictionary used in reports and JSON output."""
        return {
            "default": self.default,
            "dotenv": self.dotenv,
            "env": self.env,
            "isExtra": self.is_extra,
            "resolvedFrom": self.resolved_from,
            "resolvedValue": self.resolved_value,
        }


@dataclass
class Resolution:
    """
    Output of one resolution pass.

    Attributes:
        values: Raw resolved value per declared key (None when unresolved)
        trace: TraceEntry per declared key and per extra key
        extras: Keys found in the source file but not declared in the spec
        unresolved: Declared keys that no layer supplied
    """

    values: dict[str, Any] = field(default_factory=dict)
    trace: dict[str, TraceEntry] = field(default_factory=dict)
    extras: list[str] = field(default_factory=list)
    unresolved: list[str] = field(default_factory=list)


def _pick(env: Any, dotenv: Any, default: Any) -> tuple[Layer | None, Any]:
    """Return the winning layer and its value."""
    if env is not NOT_SET:
        return "env", env
    if dotenv is not NOT_SET:
        return "dotenv", dotenv
    if default is not NOT_SET:
        return "default", default
    return None, None


def _shown(value: Any) -> Any:
    return NOT_SUPPLIED if value is NOT_SET else value


def resolve_key(
    key: str,
    environ: Mapping[str, str],
    dotenv: Mapping[str, str],
    default: Any = NOT_SET,
    is_extra: bool = False,
) -> TraceEntry:
    """Resolve a single key across the three layers."""
    env_value = environ.get(key, NOT_SET)
    dotenv_value = dotenv.get(key, NOT_SET)
    resolved_from, resolved_value = _pick(env_value, dotenv_value, default)
    return TraceEntry(
        default=_shown(default),
        dotenv=_shown(dotenv_value),
        env=_shown(env_value),
        is_extra=is_extra,
        resolved_from=resolved_from,
        resolved_value=resolved_value,
    )


def resolve(spec: ConfigSpec, dotenv: Mapping[str, str], environ: Mapping[str, str]) -> Resolution:
    """
    Resolve every declared key and trace every extra key.

    Extras are keys present in the source file but absent from the spec.
    Undeclared process environment variables are ambient (PATH, HOME, ...)
    and are never reported as extras, though an extra file key that is also
    set in the environment resolves from the environment.

    Args:
        spec: Normalised configuration spec
        dotenv: Values parsed from the source file
        environ: Process environment snapshot

    Returns:
        Resolution with values and trace built in the same pass
    """
    resolution = Resolution()

    for key, rule in spec.items():
        entry = resolve_key(key, environ, dotenv, default=rule.default)
        resolution.trace[key] = entry
        resolution.values[key] = entry.resolved_value
        if not entry.resolved:
            resolution.unresolved.append(key)

    for key in dotenv:
        if key in spec:
            continue
        resolution.trace[key] = resolve_key(key, environ, dotenv, is_extra=True)
        resolution.extras.append(key)

    return resolution

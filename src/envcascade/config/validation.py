"""
Schema validation of resolved values.

Every declared key is checked before anything is reported, so one pass
yields the complete list of missing keys and the complete list of invalid
values.
"""

from dataclasses import dataclass, field
from typing import Any

from envcascade.config.resolver import Resolution
from envcascade.config.spec import ConfigSpec
from envcascade.utils.logging import get_logger

logger = get_logger("envcascade.config.validation")


@dataclass
class ValidationOutcome:
    """
    Result of validating one resolution pass.

    Attributes:
        missing_keys: ``"<key>" is required, but missing`` per absent required key
        validation_errors: ``"<key>" <message>`` per failing key or rejected extra
        coerced: Validated (possibly converted) value per declared key
    """

    missing_keys: list[str] = field(default_factory=list)
    validation_errors: list[str] = field(default_factory=list)
    coerced: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.missing_keys and not self.validation_errors


def missing_message(key: str) -> str:
    return f'"{key}" is required, but missing'


def invalid_message(key: str, message: str) -> str:
    return f'"{key}" {message}'


def extra_message(key: str) -> str:
    return f'"{key}" is not allowed'


def validate(spec: ConfigSpec, resolution: Resolution, allow_extras: bool = False) -> ValidationOutcome:
    """
    Validate resolved values against the spec.

    A key that no layer supplied is either missing (when required) or left
    as None (when optional); its rule is not applied. A key that resolved,
    from any layer including its default, is checked by its rule and never
    counted as missing.

    Args:
        spec: Normalised configuration spec
        resolution: Output of the precedence resolver
        allow_extras: Accept undeclared keys from the source file

    Returns:
        ValidationOutcome with every failure collected
    """
    outcome = ValidationOutcome()

    for key, rule in spec.items():
        entry = resolution.trace[key]

        if not entry.resolved:
            outcome.coerced[key] = None
            if rule.required:
                outcome.missing_keys.append(missing_message(key))
            continue

        try:
            result = rule.validate(entry.resolved_value)
        except (TypeError, ValueError) as e:
            logger.debug(f"Validator for {key} raised {type(e).__name__}: {e}")
            outcome.validation_errors.append(invalid_message(key, f"could not be validated: {e}"))
            continue

        if result.ok:
            outcome.coerced[key] = result.value
        else:
            outcome.validation_errors.append(invalid_message(key, result.error or "is invalid"))

    if not allow_extras:
        for key in resolution.extras:
            outcome.validation_errors.append(extra_message(key))

    return outcome

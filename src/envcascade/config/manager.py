"""
Configuration manager.

Runs source loading, precedence resolution and schema validation once, at
construction, and exposes the validated values and the per-key trace.

Usage:
    from envcascade import ConfigManager, KeyRule
    from envcascade.rules import Number, String

    class AppConfig(ConfigManager):
        def provide_config_spec(self):
            return {
                "DATABASE_URL": KeyRule(String(), required=True),
                "PORT": KeyRule(Number(), default=3000),
            }

    config = AppConfig({"use_env": {"folder": "."}})
    port = config.get("PORT")
"""

import os
import re
import sys
from collections.abc import Callable, Iterator, Mapping
from types import MappingProxyType
from typing import Any

from envcascade.config.loader import ResolutionOptions, load_source
from envcascade.config.resolver import TraceEntry, resolve
from envcascade.config.spec import ConfigSpec, KeyRule, normalize_spec
from envcascade.config.validation import validate
from envcascade.exceptions import ConfigurationError, InvalidConfigurationError
from envcascade.utils.logging import get_logger

logger = get_logger("envcascade.config.manager")

SpecSource = Mapping[str, KeyRule | Mapping[str, Any]] | Callable[[], Mapping[str, Any]]
Reporter = Callable[[InvalidConfigurationError], None]


def report_invalid_configuration(error: InvalidConfigurationError) -> None:
    """
    Default reporter for ``exit_on_error``: log every failure, then exit(1).
    """
    logger.error(error.message)
    for message in error.missing_keys:
        logger.error(f"  missing: {message}")
    for message in error.validation_errors:
        logger.error(f"  invalid: {message}")
    sys.exit(1)


def _trace_requested(environ: Mapping[str, str]) -> bool:
    """True when the DEBUG variable contains the ``trace`` token."""
    tokens = re.split(r"[,\s]+", environ.get("DEBUG", "").lower())
    return "trace" in tokens


class ConfigManager:
    """
    Resolved, validated, read-only configuration.

    The spec comes from ``provide_config_spec()``, which returns the ``spec``
    argument by default; subclasses may override it instead.

    Args:
        options: ResolutionOptions or a mapping of option names
        spec: ConfigSpec mapping, or a zero-argument function returning one
        environ: Environment snapshot (default: a copy of ``os.environ``)
        reporter: Called with the error when ``exit_on_error`` is set
            (default: log and exit with status 1)

    Raises:
        BadEnvironmentKeyError: Environment key for the source file is unset
        MissingEnvironmentFileError: Source file missing and not allowed to be
        InvalidConfigurationError: Validation failed and ``exit_on_error`` is off
        ConfigurationError: Options or spec are malformed
    """

    def __init__(
        self,
        options: ResolutionOptions | Mapping[str, Any] | None = None,
        *,
        spec: SpecSource | None = None,
        environ: Mapping[str, str] | None = None,
        reporter: Reporter | None = None,
    ) -> None:
        if options is None:
            options = ResolutionOptions()
        elif isinstance(options, Mapping):
            options = ResolutionOptions.from_dict(options)
        self.options: ResolutionOptions = options
        self._spec_source = spec
        self._reporter = reporter or report_invalid_configuration
        self._environ = MappingProxyType(dict(os.environ if environ is None else environ))

        self.spec: ConfigSpec = normalize_spec(self.provide_config_spec())

        dotenv = load_source(self.options, self._environ)
        resolution = resolve(self.spec, dotenv, self._environ)
        outcome = validate(self.spec, resolution, allow_extras=self.options.allow_extras)

        if not outcome.ok:
            error = InvalidConfigurationError(outcome.missing_keys, outcome.validation_errors)
            if self.options.exit_on_error:
                self._reporter(error)
            raise error

        self._values = MappingProxyType(outcome.coerced)
        self._trace = MappingProxyType(resolution.trace)
        logger.debug(
            f"Resolved {len(self._values)} key(s) "
            f"({len(resolution.extras)} extra) for {type(self).__name__}"
        )

        if _trace_requested(self._environ):
            for line in self.format_trace():
                logger.info(line)

    def provide_config_spec(self) -> Mapping[str, Any]:
        """Return the configuration spec; override in subclasses to declare one."""
        source = self._spec_source
        if source is None:
            raise ConfigurationError(
                f"{type(self).__name__} has no configuration spec. "
                f"Pass spec=... or override provide_config_spec()"
            )
        if callable(source):
            return source()
        return source

    @classmethod
    def register(
        cls,
        options: ResolutionOptions | Mapping[str, Any] | None = None,
        *,
        replace: bool = False,
        **kwargs: Any,
    ) -> "ConfigManager":
        """
        Construct a manager and install it as the process-wide config.

        Raises ConfigurationError if one is already registered, unless
        ``replace`` is set. The check happens before resolution runs.
        """
        from envcascade.config.singleton import ConfigRegistry

        if not replace and ConfigRegistry.is_registered():
            raise ConfigurationError("A configuration is already registered; pass replace=True to install another one")
        return ConfigRegistry.install(cls(options, **kwargs), replace=replace)

    def get(self, key: str, default: Any = None) -> Any:
        """Return the validated value for ``key``, or ``default`` if undeclared."""
        return self._values.get(key, default)

    def trace(self) -> dict[str, TraceEntry]:
        """Return the per-key trace, extras included."""
        return dict(self._trace)

    def trace_dict(self) -> dict[str, dict[str, Any]]:
        """Return the trace as camelCase dictionaries."""
        return {key: entry.to_dict() for key, entry in self._trace.items()}

    def format_trace(self) -> list[str]:
        """Render one human-readable line per trace entry."""
        lines = []
        for key, entry in self._trace.items():
            marker = " (extra)" if entry.is_extra else ""
            lines.append(
                f"{key}{marker}: env={entry.env!r} dotenv={entry.dotenv!r} "
                f"default={entry.default!r} -> {entry.resolved_from or 'unresolved'} "
                f"({entry.resolved_value!r})"
            )
        return lines

    def as_dict(self) -> dict[str, Any]:
        """Return a copy of all declared keys and their values."""
        return dict(self._values)

    def __getitem__(self, key: str) -> Any:
        if key not in self._values:
            raise KeyError(f"Config key '{key}' not declared")
        return self._values[key]

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def keys(self):
        return self._values.keys()

    def values(self):
        return self._values.values()

    def items(self):
        return self._values.items()

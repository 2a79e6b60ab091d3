"""
Source file loading.

Locates the dotenv-style file for the current environment (an explicit path,
``<folder>/config/<env>.env``, or a caller-supplied resolver function) and
parses it into a key/value mapping.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from dotenv.parser import Binding, parse_stream

from envcascade.exceptions import BadEnvironmentKeyError, ConfigurationError, MissingEnvironmentFileError
from envcascade.utils.logging import get_logger

logger = get_logger("envcascade.config.loader")

DEFAULT_ENV_KEY = "NODE_ENV"

# camelCase option names accepted by ResolutionOptions.from_dict
_OPTION_ALIASES = {
    "useFile": "use_file",
    "useEnv": "use_env",
    "useFunction": "use_function",
    "envKey": "env_key",
    "exitOnError": "exit_on_error",
    "allowExtras": "allow_extras",
    "allowMissingEnvFile": "allow_missing_env_file",
    "rootDir": "root_dir",
}


@dataclass(frozen=True)
class UseEnv:
    """The ``use_env`` strategy: read ``<folder>/config/<env>.env``."""

    folder: str = ""

    @classmethod
    def coerce(cls, value: "UseEnv | Mapping[str, str] | str") -> "UseEnv":
        """Accept a UseEnv, a bare folder string or a ``{"folder": ...}`` mapping."""
        if isinstance(value, UseEnv):
            return value
        if isinstance(value, (str, Path)):
            return cls(folder=str(value))
        if isinstance(value, Mapping):
            if "folder" not in value:
                raise ConfigurationError("use_env requires a 'folder' entry")
            return cls(folder=str(value["folder"]))
        raise ConfigurationError(f"use_env must be a folder or {{'folder': ...}}, got {type(value).__name__}")


@dataclass(frozen=True)
class ResolutionOptions:
    """
    How to find the file-based source, plus resolution policy flags.

    At most one of ``use_file``, ``use_env`` and ``use_function`` may be set;
    with none set, ``use_env`` with an empty folder is assumed. Instances are
    immutable and hashable.

    Attributes:
        use_file: Literal path to a single source file (relative to root_dir)
        use_env: ``UseEnv`` (or ``{"folder": ...}``); the file is ``<folder>/config/<env>.env``
        use_function: ``f(root_dir, env_value) -> path`` for custom layouts
        env_key: Environment variable naming the current environment
        exit_on_error: Report and exit the process on invalid configuration
        allow_extras: Accept file keys that the spec does not declare
        allow_missing_env_file: Treat a missing source file as empty
        root_dir: Process root used for relative paths (default: cwd)
    """

    use_file: str | Path | None = None
    use_env: UseEnv | None = None
    use_function: Callable[[Path, str], str | Path] | None = None
    env_key: str = DEFAULT_ENV_KEY
    exit_on_error: bool = True
    allow_extras: bool = False
    allow_missing_env_file: bool = False
    root_dir: Path | None = field(default=None)

    def __post_init__(self) -> None:
        strategies = [s for s in (self.use_file, self.use_env, self.use_function) if s is not None]
        if len(strategies) > 1:
            raise ConfigurationError("Only one of use_file, use_env and use_function may be set")
        if self.use_env is not None:
            object.__setattr__(self, "use_env", UseEnv.coerce(self.use_env))
        if self.use_function is not None and not callable(self.use_function):
            raise ConfigurationError("use_function must be callable")
        if not self.env_key:
            object.__setattr__(self, "env_key", DEFAULT_ENV_KEY)
        if self.root_dir is not None:
            object.__setattr__(self, "root_dir", Path(self.root_dir))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ResolutionOptions":
        """Build options from a mapping using snake_case or camelCase names."""
        kwargs: dict[str, Any] = {}
        for name, value in data.items():
            attr = _OPTION_ALIASES.get(name, name)
            if attr not in cls.__dataclass_fields__:
                raise ConfigurationError(f"Unknown resolution option: {name}")
            kwargs[attr] = value
        return cls(**kwargs)

    @property
    def root(self) -> Path:
        return self.root_dir if self.root_dir is not None else Path.cwd()


def _environment_value(options: ResolutionOptions, environ: Mapping[str, str]) -> str:
    value = environ.get(options.env_key)
    if value is None:
        raise BadEnvironmentKeyError(options.env_key)
    return value


def resolve_source_path(options: ResolutionOptions, environ: Mapping[str, str]) -> Path:
    """
    Work out which file holds the file-based values.

    Args:
        options: Resolution options
        environ: Environment snapshot used for the environment key lookup

    Returns:
        Absolute or root-relative path of the source file

    Raises:
        BadEnvironmentKeyError: If an env-keyed strategy is used and the key is unset
    """
    root = options.root

    if options.use_file is not None:
        return root / Path(options.use_file)

    env_value = _environment_value(options, environ)

    if options.use_function is not None:
        path = Path(options.use_function(root, env_value))
        return path if path.is_absolute() else root / path

    folder = options.use_env.folder if options.use_env is not None else ""
    return root / folder / "config" / f"{env_value}.env"


def _literal_value(binding: Binding) -> str:
    # Unquoted values keep everything after "=", including " #..." text
    line = binding.original.string.lstrip().splitlines()[0]
    raw = line.partition("=")[2].strip()
    if raw[:1] in ("'", '"'):
        return binding.value
    return raw


def read_env_file(path: Path) -> dict[str, str]:
    """
    Parse a dotenv file into a mapping.

    ``KEY=VALUE`` lines are kept verbatim: no ``${VAR}`` interpolation and no
    inline comment stripping for unquoted values. Quoted values are unquoted.
    Comment lines, blank lines and bare keys without ``=`` are skipped.
    """
    try:
        with open(path, encoding="utf-8") as stream:
            bindings = list(parse_stream(stream))
    except PermissionError as e:
        raise PermissionError(
            f"Permission denied reading environment file: {path}\n"
            f"  Error: {e}\n"
            f"  Suggestion: Check file permissions"
        ) from e

    values: dict[str, str] = {}
    for binding in bindings:
        if binding.error:
            logger.warning(f"Could not parse line {binding.original.line} of {path}, skipping it")
            continue
        if binding.key is None or binding.value is None:
            continue
        values[binding.key] = _literal_value(binding)
    return values


def load_source(options: ResolutionOptions, environ: Mapping[str, str]) -> dict[str, str]:
    """
    Locate and parse the file-based source.

    Args:
        options: Resolution options
        environ: Environment snapshot

    Returns:
        Key/value mapping from the file (empty if the file is missing and
        ``allow_missing_env_file`` is set)

    Raises:
        BadEnvironmentKeyError: If the environment key is not set
        MissingEnvironmentFileError: If the file does not exist and missing
            files are not allowed
    """
    path = resolve_source_path(options, environ)

    if not path.is_file():
        if options.allow_missing_env_file:
            logger.warning(f"Environment file not found, continuing without it: {path}")
            return {}
        raise MissingEnvironmentFileError(str(path))

    values = read_env_file(path)
    logger.debug(f"Loaded {len(values)} value(s) from {path}")
    return values

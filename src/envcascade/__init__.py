"""
envcascade - layered, validated application configuration.

Resolves each declared key from the process environment, an
environment-specific dotenv file and declared defaults, validates the result
and records which layer supplied every value.
"""

__version__ = "0.1.0"

# Global config
from envcascade.config.singleton import config

# Resolution API
from envcascade.config import (
    NOT_SET,
    ConfigManager,
    KeyRule,
    ResolutionOptions,
    TraceEntry,
    load_spec_file,
)

# Exceptions
from envcascade.exceptions import (
    BadEnvironmentKeyError,
    ConfigurationError,
    EnvCascadeError,
    InvalidConfigurationError,
    MissingEnvironmentFileError,
)

# Logging utilities
from envcascade.utils.logging import get_logger, setup_logging

__all__ = [
    # Core
    "ConfigManager",
    "KeyRule",
    "ResolutionOptions",
    "TraceEntry",
    "NOT_SET",
    "load_spec_file",
    # Global config
    "config",
    # Exceptions
    "EnvCascadeError",
    "ConfigurationError",
    "BadEnvironmentKeyError",
    "MissingEnvironmentFileError",
    "InvalidConfigurationError",
    # Logging
    "get_logger",
    "setup_logging",
]

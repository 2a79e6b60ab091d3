"""
envcascade exception hierarchy.

All domain-specific exceptions inherit from EnvCascadeError, making it easy
to catch any library error with a single base class while still allowing
fine-grained handling when needed.

Hierarchy::

    EnvCascadeError
    ├── ConfigurationError            - bad options, bad spec, bad spec file
    ├── BadEnvironmentKeyError        - env key lookup absent from environment
    ├── MissingEnvironmentFileError   - resolved source file does not exist
    └── InvalidConfigurationError     - missing required keys / failed validation
"""

from __future__ import annotations


class EnvCascadeError(Exception):
    """Base exception for all envcascade errors."""

    def __init__(self, message: str, *, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


# --- Setup -------------------------------------------------------------------


class ConfigurationError(EnvCascadeError):
    """Raised when resolution options or a configuration spec are malformed."""


# --- Source loading ----------------------------------------------------------


class BadEnvironmentKeyError(EnvCascadeError):
    """Raised when the environment key used to pick a source file is not set."""

    def __init__(self, env_key: str) -> None:
        super().__init__(f"Bad environment key: {env_key}", details={"env_key": env_key})
        self.env_key = env_key


class MissingEnvironmentFileError(EnvCascadeError):
    """Raised when the resolved source file does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(
            f"Fatal error loading environment. The following file is missing: {path}",
            details={"path": path},
        )
        self.path = path


# --- Validation --------------------------------------------------------------


class InvalidConfigurationError(EnvCascadeError):
    """Raised once every key has been checked and at least one failed.

    ``missing_keys`` and ``validation_errors`` hold the full, non-short-circuited
    lists of messages.
    """

    def __init__(
        self,
        missing_keys: list[str] | None = None,
        validation_errors: list[str] | None = None,
    ) -> None:
        missing_keys = list(missing_keys or [])
        validation_errors = list(validation_errors or [])
        super().__init__(
            "Invalid Configuration",
            details={"missing_keys": missing_keys, "validation_errors": validation_errors},
        )
        self.missing_keys = missing_keys
        self.validation_errors = validation_errors

"""
Process-wide configuration registry.

A host resolves its configuration once at startup with
``ConfigManager.register(...)`` and reads it anywhere afterwards through the
``config`` proxy. Configuration is not reloaded: once a manager is installed,
installing a different one requires ``replace=True``.
"""

import threading
from collections.abc import Iterator
from typing import Any

from envcascade.config.manager import ConfigManager
from envcascade.exceptions import ConfigurationError
from envcascade.utils.logging import get_logger

logger = get_logger("envcascade.config.singleton")


class ConfigRegistry:
    """Holds the installed ConfigManager; all access goes through the lock."""

    _manager: ConfigManager | None = None
    _lock = threading.Lock()

    @classmethod
    def install(cls, manager: ConfigManager, *, replace: bool = False) -> ConfigManager:
        """
        Install ``manager`` as the process-wide configuration.

        Raises:
            ConfigurationError: If a different manager is already installed
                and ``replace`` is not set
        """
        with cls._lock:
            current = cls._manager
            if current is not None and current is not manager and not replace:
                raise ConfigurationError(
                    f"A configuration is already registered ({type(current).__name__}); "
                    "pass replace=True to install another one",
                )
            cls._manager = manager
        logger.debug(f"Registered {type(manager).__name__} with {len(manager)} key(s)")
        return manager

    @classmethod
    def current(cls) -> ConfigManager | None:
        with cls._lock:
            return cls._manager

    @classmethod
    def is_registered(cls) -> bool:
        return cls.current() is not None

    @classmethod
    def reset(cls) -> None:
        """Forget the installed manager (for tests)."""
        with cls._lock:
            cls._manager = None


def get_config() -> ConfigManager | None:
    """Return the registered ConfigManager, or None before registration."""
    return ConfigRegistry.current()


def _require() -> ConfigManager:
    manager = ConfigRegistry.current()
    if manager is None:
        raise ConfigurationError("No configuration registered. Call ConfigManager.register() first.")
    return manager


class ConfigProxy:
    """
    Read-only view of the registered configuration.

    Usage:
        from envcascade import config
        url = config["DATABASE_URL"]
        port = config.get("PORT", 3000)
        config.resolved_from("PORT")   # "env", "dotenv", "default" or None

    ``get`` returns ``default`` only for keys the spec does not declare (or
    before registration). A declared optional key that no layer supplied
    reads as None.
    """

    def __getitem__(self, key: str) -> Any:
        return _require()[key]

    def get(self, key: str, default: Any = None) -> Any:
        manager = get_config()
        if manager is None or key not in manager:
            return default
        return manager[key]

    def resolved_from(self, key: str) -> str | None:
        """Layer that supplied ``key``; None if unresolved, undeclared or unregistered."""
        manager = get_config()
        if manager is None:
            return None
        entry = manager.trace().get(key)
        return entry.resolved_from if entry is not None else None

    def trace(self) -> dict[str, dict[str, Any]]:
        """camelCase trace of the registered manager, or {} before registration."""
        manager = get_config()
        return manager.trace_dict() if manager is not None else {}

    @property
    def registered(self) -> bool:
        return ConfigRegistry.is_registered()

    def __contains__(self, key: object) -> bool:
        manager = get_config()
        return manager is not None and key in manager

    def __iter__(self) -> Iterator[str]:
        manager = get_config()
        return iter(manager) if manager is not None else iter(())

    def __len__(self) -> int:
        manager = get_config()
        return len(manager) if manager is not None else 0

    def __repr__(self) -> str:
        manager = get_config()
        if manager is None:
            return "<ConfigProxy (unregistered)>"
        return f"<ConfigProxy {type(manager).__name__}: {len(manager)} key(s)>"


config = ConfigProxy()

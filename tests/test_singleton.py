"""
Tests for the process-wide configuration registry and proxy.
"""

import threading

import pytest

from envcascade import ConfigManager, KeyRule, config
from envcascade.config.loader import ResolutionOptions
from envcascade.config.singleton import ConfigRegistry, get_config
from envcascade.exceptions import ConfigurationError
from envcascade.rules import String


@pytest.fixture(autouse=True)
def reset_registry():
    ConfigRegistry.reset()
    yield
    ConfigRegistry.reset()


@pytest.fixture
def options(root):
    return ResolutionOptions(use_file="testconfigs/config/test1.env", exit_on_error=False, root_dir=root)


class TestConfigRegistry:
    def test_unset_by_default(self):
        assert get_config() is None
        assert ConfigRegistry.is_registered() is False

    def test_register_installs_manager(self, options, spec):
        manager = ConfigManager.register(options, spec=spec, environ={"NODE_ENV": "test"})
        assert get_config() is manager
        assert ConfigRegistry.is_registered() is True

    def test_register_on_subclass(self, root, spec):
        class AppConfig(ConfigManager):
            def provide_config_spec(self):
                return spec

        manager = AppConfig.register(
            {"use_file": "testconfigs/config/test1.env", "exit_on_error": False, "root_dir": root},
            environ={"NODE_ENV": "test"},
        )
        assert isinstance(get_config(), AppConfig)
        assert get_config() is manager

    def test_second_register_rejected(self, options, spec):
        first = ConfigManager.register(options, spec=spec, environ={})
        with pytest.raises(ConfigurationError, match="already registered"):
            ConfigManager.register(options, spec=spec, environ={"TEST1": "other"})
        assert get_config() is first

    def test_second_register_with_replace(self, options, spec):
        ConfigManager.register(options, spec=spec, environ={})
        second = ConfigManager.register(options, replace=True, spec=spec, environ={"TEST1": "other"})
        assert get_config() is second
        assert config["TEST1"] == "other"

    def test_installing_same_manager_twice_is_allowed(self, options, spec):
        manager = ConfigManager(options, spec=spec, environ={})
        ConfigRegistry.install(manager)
        assert ConfigRegistry.install(manager) is manager

    def test_concurrent_install_keeps_one(self, options, spec):
        managers = [ConfigManager(options, spec=spec, environ={}) for _ in range(8)]
        failures = []

        def install(manager):
            try:
                ConfigRegistry.install(manager)
            except ConfigurationError:
                failures.append(manager)

        threads = [threading.Thread(target=install, args=(m,)) for m in managers]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(failures) == 7
        assert get_config() in managers
        assert get_config() not in failures

    def test_reset(self, options, spec):
        ConfigManager.register(options, spec=spec, environ={})
        ConfigRegistry.reset()
        assert get_config() is None


class TestConfigProxy:
    def test_unregistered(self):
        assert config.registered is False
        assert config.get("TEST1", "fallback") == "fallback"
        assert "TEST1" not in config
        assert list(config) == []
        assert len(config) == 0
        assert config.trace() == {}
        assert config.resolved_from("TEST1") is None
        assert "unregistered" in repr(config)
        with pytest.raises(ConfigurationError, match="No configuration registered"):
            _ = config["TEST1"]

    def test_reads_registered_manager(self, options, spec):
        ConfigManager.register(options, spec=spec, environ={"NODE_ENV": "test"})
        assert config.registered is True
        assert config["TEST1"] == "abc"
        assert config.get("TEST3") == 3333
        assert "TEST2" in config
        assert list(config) == ["TEST1", "TEST2", "TEST3", "TEST4"]
        assert len(config) == 4

    def test_undeclared_key(self, options, spec):
        ConfigManager.register(options, spec=spec, environ={})
        assert config.get("NOPE", "fallback") == "fallback"
        with pytest.raises(KeyError, match="not declared"):
            _ = config["NOPE"]

    def test_declared_but_unresolved_key_reads_none(self, options, spec):
        extended = dict(spec, OPTIONAL=KeyRule(String()))
        ConfigManager.register(options, spec=extended, environ={})
        assert config.get("OPTIONAL", "fallback") is None
        assert config.resolved_from("OPTIONAL") is None

    def test_resolved_from(self, options, spec):
        ConfigManager.register(options, spec=spec, environ={"TEST2": "7"})
        assert config.resolved_from("TEST1") == "dotenv"
        assert config.resolved_from("TEST2") == "env"
        assert config.resolved_from("TEST3") == "default"
        assert config.resolved_from("NOPE") is None

    def test_trace_is_camel_case(self, options, spec):
        ConfigManager.register(options, spec=spec, environ={"TEST1": "def"})
        trace = config.trace()
        assert trace["TEST1"]["resolvedFrom"] == "env"
        assert trace["TEST1"]["dotenv"] == "abc"
        assert trace["TEST3"]["env"] == "--"

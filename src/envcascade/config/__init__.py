"""
Configuration resolution.

Source loading, precedence resolution, schema validation and the
ConfigManager facade that ties them together.
"""

from envcascade.config.loader import ResolutionOptions, UseEnv, load_source, resolve_source_path
from envcascade.config.manager import ConfigManager, report_invalid_configuration
from envcascade.config.resolver import NOT_SUPPLIED, Resolution, TraceEntry, resolve
from envcascade.config.singleton import ConfigProxy, ConfigRegistry, config, get_config
from envcascade.config.spec import NOT_SET, KeyRule, normalize_spec
from envcascade.config.spec_file import load_spec_file
from envcascade.config.validation import ValidationOutcome, validate

__all__ = [
    "ConfigManager",
    "KeyRule",
    "ResolutionOptions",
    "UseEnv",
    "TraceEntry",
    "Resolution",
    "ValidationOutcome",
    "NOT_SET",
    "NOT_SUPPLIED",
    "load_source",
    "resolve_source_path",
    "resolve",
    "validate",
    "normalize_spec",
    "load_spec_file",
    "report_invalid_configuration",
    "ConfigRegistry",
    "ConfigProxy",
    "get_config",
    "config",
]

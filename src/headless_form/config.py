"""
Configuration module for headless-form.

Handles environment variables and default settings.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _env_flag(name: str, default: bool) -> bool:
    return os.getenv(name, str(default).lower()).lower() == "true"


@dataclass
class HeadlessFormConfig:
    """Configuration settings for headless-form."""

    # Validator defaults (v0 compatibility switches)
    treat_null_as_undefined: bool = False
    allow_forbidden_values: bool = False

    # Schema setup
    strict_input_type: bool = False
    check_schema_structure: bool = True

    # Tracing settings
    enable_tracing: bool = False
    trace_verbose: bool = False
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "HeadlessFormConfig":
        """
        Create configuration from environment variables.

        If an environment variable is not set, uses the class field default value.
        """
        _defaults = cls()

        return cls(
            treat_null_as_undefined=_env_flag(
                "HEADLESS_FORM_TREAT_NULL_AS_UNDEFINED", _defaults.treat_null_as_undefined
            ),
            allow_forbidden_values=_env_flag(
                "HEADLESS_FORM_ALLOW_FORBIDDEN_VALUES", _defaults.allow_forbidden_values
            ),
            strict_input_type=_env_flag("HEADLESS_FORM_STRICT_INPUT_TYPE", _defaults.strict_input_type),
            check_schema_structure=_env_flag(
                "HEADLESS_FORM_CHECK_SCHEMA_STRUCTURE", _defaults.check_schema_structure
            ),
            enable_tracing=_env_flag("HEADLESS_FORM_ENABLE_TRACING", _defaults.enable_tracing),
            trace_verbose=_env_flag("HEADLESS_FORM_TRACE_VERBOSE", _defaults.trace_verbose),
            log_level=os.getenv("HEADLESS_FORM_LOG_LEVEL", _defaults.log_level).upper(),
        )


config = HeadlessFormConfig.from_env()


def get_config() -> HeadlessFormConfig:
    """Get the current configuration."""
    return config


def update_config(**kwargs) -> HeadlessFormConfig:
    """Update configuration settings."""
    global config
    for key, value in kwargs.items():
        if hasattr(config, key):
            setattr(config, key, value)
    return config


def reset_config() -> HeadlessFormConfig:
    """Reload configuration from the environment."""
    global config
    config = HeadlessFormConfig.from_env()
    return config

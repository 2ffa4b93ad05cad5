"""Convenience exports for the configuration package."""

from .constants import *  # noqa: F401,F403
from .loader import ConfigError, load_config
from .logging_conf import JSONFormatter, configure_logging
from .schemas import AnalysisConfig, DataConfig, OutputConfig, ScenarioConfig
from .settings import ENV_PREFIX, Settings, get_settings, reset_settings_cache

__all__ = [
    "AnalysisConfig",
    "ConfigError",
    "DataConfig",
    "ENV_PREFIX",
    "JSONFormatter",
    "OutputConfig",
    "ScenarioConfig",
    "Settings",
    "configure_logging",
    "get_settings",
    "load_config",
    "reset_settings_cache",
]

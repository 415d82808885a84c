"""Configuration management module for the Career Portal Scanner."""

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import load_app_config, load_config
from .models import (
    AppConfig,
    EmailConfig,
    ExportConfig,
    LogFormat,
    LogLevel,
    LoggingConfig,
    ScheduleConfig,
    ScrapingConfig,
    SelectorConfig,
    SourceConfig,
    StrategyType,
)
from .registry import SourceRegistry, load_registry

__all__ = [
    # Loader functions
    "load_config",
    "load_app_config",
    "load_environment_config",
    "load_registry",
    # Configuration models
    "AppConfig",
    "SourceConfig",
    "SelectorConfig",
    "ScrapingConfig",
    "ExportConfig",
    "ScheduleConfig",
    "EmailConfig",
    "LoggingConfig",
    "EnvironmentConfig",
    "SourceRegistry",
    # Enums
    "StrategyType",
    "LogLevel",
    "LogFormat",
    # Exceptions
    "ConfigurationError",
]

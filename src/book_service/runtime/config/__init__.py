"""Configuration models and loaders."""

from .config_data import (
    AppConfig,
    ConfigData,
    CORSConfig,
    DatabaseConfig,
    LoggingConfig,
    PaginationConfig,
)
from .config_template import load_templated_yaml, substitute_env_vars
from .settings import EnvironmentVariables

__all__ = [
    "AppConfig",
    "ConfigData",
    "CORSConfig",
    "DatabaseConfig",
    "EnvironmentVariables",
    "LoggingConfig",
    "PaginationConfig",
    "load_templated_yaml",
    "substitute_env_vars",
]

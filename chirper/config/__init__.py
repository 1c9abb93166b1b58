"""
Configuration management module.

Usage:
    from chirper.config import settings

    database_url = settings.database_url

    from chirper.config import get_database_config, is_production
"""

from .settings import (
    settings,
    ConfigurationError,
    validate_configuration,
    get_environment,
    get_database_url,
    get_database_config,
    get_logging_config,
    is_development,
    is_production,
    is_testing,
)

from .environment import (
    Environment,
    EnvironmentDetector,
    ConfigurationPaths,
)

__all__ = [
    "settings",
    "ConfigurationError",
    "validate_configuration",
    "get_environment",
    "get_database_url",
    "get_database_config",
    "get_logging_config",
    "is_development",
    "is_production",
    "is_testing",
    "Environment",
    "EnvironmentDetector",
    "ConfigurationPaths",
]

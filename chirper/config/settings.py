"""
Configuration management using Dynaconf.

This module provides centralized configuration with support for:
- Environment-specific settings sections
- Environment variable overrides (CHIRPER_ prefix)
- Configuration validation
"""

import os
from typing import Any, Dict

from dynaconf import Dynaconf, Validator

from .environment import ConfigurationPaths, EnvironmentDetector

PATHS = ConfigurationPaths()


def get_environment() -> str:
    """
    Detect the current environment using the EnvironmentDetector.

    Returns:
        Current environment name
    """
    return EnvironmentDetector.detect_environment().value


settings = Dynaconf(
    # Environment settings
    envvar_prefix="CHIRPER",
    environments=True,
    env=get_environment(),

    # Configuration files
    settings_files=[PATHS.settings_file],
    secrets=PATHS.secrets_file,

    # Environment variables
    load_dotenv=True,
    dotenv_path=PATHS.env_file,

    validators=[
        # Application settings
        Validator("app_name", must_exist=True, is_type_of=str),
        Validator("version", must_exist=True, is_type_of=str),

        # Database settings
        Validator("database_url", must_exist=True, is_type_of=str),
        Validator("db_pool_size", must_exist=True, is_type_of=int, gte=1),
        Validator("db_max_overflow", must_exist=True, is_type_of=int, gte=0),
        Validator("db_pool_timeout", must_exist=True, is_type_of=int, gte=1),
        Validator("db_pool_recycle", must_exist=True, is_type_of=int, gte=1),
        Validator("db_echo", must_exist=True, is_type_of=bool),

        # Logging settings
        Validator("log_level", must_exist=True, is_type_of=str, is_in=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
        Validator("log_format", must_exist=True, is_type_of=str, is_in=["json", "console"]),

        # Users
        Validator("default_user_image", must_exist=True, is_type_of=str),
    ]
)


class ConfigurationError(Exception):
    """Raised when configuration validation fails."""
    pass


def validate_configuration() -> None:
    """
    Validate the current configuration.

    Raises:
        ConfigurationError: If configuration validation fails.
    """
    try:
        settings.validators.validate()

        if get_environment() == "production":
            if settings.database_url.startswith("sqlite"):
                raise ConfigurationError("SQLite is not supported in production")
            if settings.db_echo:
                raise ConfigurationError("SQL echo should be disabled in production")

    except Exception as e:
        raise ConfigurationError(f"Configuration validation failed: {str(e)}")


def get_database_url() -> str:
    """
    Get the database URL for the current environment.

    Returns:
        Database connection URL
    """
    return settings.database_url


def is_development() -> bool:
    """Check if running in development environment."""
    return get_environment() == "development"


def is_production() -> bool:
    """Check if running in production environment."""
    return get_environment() == "production"


def is_testing() -> bool:
    """Check if running in test environment."""
    return get_environment() == "test"


def get_database_config() -> Dict[str, Any]:
    """
    Get engine configuration as a dictionary.

    Returns:
        Database configuration dictionary
    """
    return {
        "database_url": settings.database_url,
        "echo": settings.db_echo,
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_timeout": settings.db_pool_timeout,
        "pool_recycle": settings.db_pool_recycle,
    }


def get_logging_config() -> Dict[str, Any]:
    """
    Get logging configuration as a dictionary.

    Returns:
        Logging configuration dictionary
    """
    return {
        "level": settings.log_level,
        "format": settings.log_format,
        "mask_sensitive": settings.get("mask_sensitive_logs", True),
    }


# Validate configuration on import (can be disabled for testing)
if not os.getenv("SKIP_CONFIG_VALIDATION"):
    validate_configuration()

"""
Environment detection and configuration paths.

This module decides which settings section (development, test, production)
is active and where the configuration files live.
"""

import os
import sys
from enum import Enum
from pathlib import Path
from typing import Optional


class Environment(str, Enum):
    """Supported application environments."""
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TEST = "test"


class EnvironmentDetector:
    """Utility class for environment detection."""

    ENV_VARS = ("CHIRPER_ENVIRONMENT", "ENVIRONMENT")

    @staticmethod
    def detect_environment() -> Environment:
        """
        Detect the current environment.

        Detection priority:
        1. CHIRPER_ENVIRONMENT environment variable
        2. ENVIRONMENT environment variable
        3. Running under pytest (test environment)
        4. Default to development

        Returns:
            Detected environment
        """
        for var in EnvironmentDetector.ENV_VARS:
            env_value = os.getenv(var)
            if env_value:
                env_value = env_value.lower().strip()
                try:
                    return Environment(env_value)
                except ValueError:
                    print(f"Warning: Invalid environment value '{env_value}' in {var}")

        if "pytest" in sys.modules or "PYTEST_CURRENT_TEST" in os.environ:
            return Environment.TEST

        return Environment.DEVELOPMENT

    @staticmethod
    def is_development() -> bool:
        """Check if running in development environment."""
        return EnvironmentDetector.detect_environment() == Environment.DEVELOPMENT

    @staticmethod
    def is_production() -> bool:
        """Check if running in production environment."""
        return EnvironmentDetector.detect_environment() == Environment.PRODUCTION

    @staticmethod
    def is_testing() -> bool:
        """Check if running in test environment."""
        return EnvironmentDetector.detect_environment() == Environment.TEST


class ConfigurationPaths:
    """Utility class for managing configuration file paths."""

    def __init__(self, project_root: Optional[Path] = None):
        """
        Initialize configuration paths.

        Args:
            project_root: Project root directory (auto-detected if not provided)
        """
        if project_root is None:
            # chirper/config/environment.py -> project root
            self.project_root = Path(__file__).parent.parent.parent
        else:
            self.project_root = project_root

        self.config_dir = self.project_root / "config"

    @property
    def settings_file(self) -> Path:
        """Path to the main settings file."""
        return self.config_dir / "settings.toml"

    @property
    def secrets_file(self) -> Path:
        """Path to the optional secrets file."""
        return self.config_dir / ".secrets.toml"

    @property
    def env_file(self) -> Path:
        """Path to the optional .env file."""
        return self.project_root / ".env"

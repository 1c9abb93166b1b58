"""
Structured logging utilities.

This module configures structlog for the data layer with service metadata,
timestamps and sensitive data masking, and routes stdlib logging through
the same output stream.
"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import structlog
from structlog.types import EventDict, Processor

from chirper.config.settings import get_environment, get_logging_config, settings


class SensitiveDataProcessor:
    """
    Processor to mask sensitive data in log entries.

    Identifies and masks sensitive fields so password hashes and contact
    details are never written to logs.
    """

    def __init__(self):
        """Initialize sensitive data processor."""
        self.sensitive_keys = {
            "password",
            "passwd",
            "secret",
            "token",
            "api_key",
            "authorization",
            "cookie",
            "email",
        }

        self.mask_value = "***MASKED***"

    def __call__(self, logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
        """
        Process log entry and mask sensitive data.

        Args:
            logger: Logger instance
            method_name: Log method name
            event_dict: Log event dictionary

        Returns:
            Updated event dictionary with masked sensitive data
        """
        return self._mask_dict(event_dict)

    def _mask_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        masked_data = {}

        for key, value in data.items():
            if self._is_sensitive_key(key):
                masked_data[key] = self.mask_value
            elif isinstance(value, dict):
                masked_data[key] = self._mask_dict(value)
            elif isinstance(value, list):
                masked_data[key] = self._mask_list(value)
            else:
                masked_data[key] = value

        return masked_data

    def _mask_list(self, data: list) -> list:
        masked_list = []

        for item in data:
            if isinstance(item, dict):
                masked_list.append(self._mask_dict(item))
            elif isinstance(item, list):
                masked_list.append(self._mask_list(item))
            else:
                masked_list.append(item)

        return masked_list

    def _is_sensitive_key(self, key: str) -> bool:
        key_lower = key.lower()
        return any(sensitive in key_lower for sensitive in self.sensitive_keys)


class TimestampProcessor:
    """Processor to add an ISO UTC timestamp to log entries."""

    def __call__(self, logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
        return event_dict


class ServiceInfoProcessor:
    """
    Processor to add service information to log entries.

    Adds the application name, version and environment to every entry.
    """

    def __init__(self):
        """Initialize service info processor."""
        self.service_info = {
            "service": settings.get("app_name", "chirper"),
            "version": settings.get("version", "0.1.0"),
            "environment": get_environment(),
        }

    def __call__(self, logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.update(self.service_info)
        return event_dict


def build_processors(log_format: str, mask_sensitive: bool = True) -> List[Processor]:
    """
    Build the structlog processor chain.

    Args:
        log_format: Either "json" or "console"
        mask_sensitive: Whether to mask sensitive keys

    Returns:
        Ordered list of processors ending with a renderer
    """
    processors: List[Processor] = [
        structlog.contextvars.merge_contextvars,
        ServiceInfoProcessor(),
        TimestampProcessor(),
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if mask_sensitive:
        processors.append(SensitiveDataProcessor())

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    return processors


def configure_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """
    Configure structlog and stdlib logging.

    Call once at process startup, before the first repository is used.

    Args:
        level: Log level name (uses settings if not provided)
        log_format: "json" or "console" (uses settings if not provided)
    """
    config = get_logging_config()
    level = (level or config["level"]).upper()
    log_format = log_format or config["format"]

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level, logging.INFO),
    )

    structlog.configure(
        processors=build_processors(log_format, mask_sensitive=config["mask_sensitive"]),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a configured structlog logger.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


def bind_log_context(**values: Any) -> None:
    """Bind values (e.g. a request id) to every subsequent log entry in this context."""
    structlog.contextvars.bind_contextvars(**values)


def clear_log_context() -> None:
    """Clear all values bound with bind_log_context."""
    structlog.contextvars.clear_contextvars()

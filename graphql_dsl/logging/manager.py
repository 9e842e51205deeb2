"""
Logging manager for graphql_dsl.

Handlers are attached to the ``graphql_dsl`` package logger only, so that
configuring this library never rewires an application's root logger.
"""

import logging
import sys
from typing import Dict, Optional

from ..config import LoggingConfig, LogLevel
from .filters import SensitiveDataFilter
from .formatters import StructuredFormatter

PACKAGE_LOGGER = "graphql_dsl"


class LoggingManager:
    """Centralized logging manager."""

    def __init__(self, logger_name: str = PACKAGE_LOGGER) -> None:
        """Initialize logging manager."""
        self.logger_name = logger_name
        self._configured = False
        self._handlers: Dict[str, logging.Handler] = {}

    def setup_logging(self, config: LoggingConfig, stream=None) -> None:
        """
        Setup logging based on configuration.

        Args:
            config: Logging configuration
            stream: Output stream for the console handler (defaults to stderr)
        """
        if self._configured:
            self.cleanup()

        logger = logging.getLogger(self.logger_name)
        logger.setLevel(getattr(logging, LogLevel(config.level).value))

        handler = logging.StreamHandler(stream or sys.stderr)
        formatter: logging.Formatter
        if config.enable_structured:
            formatter = StructuredFormatter()
        else:
            formatter = logging.Formatter(config.format)
        handler.setFormatter(formatter)
        if config.mask_sensitive_data:
            handler.addFilter(SensitiveDataFilter())

        logger.addHandler(handler)
        self._handlers["console"] = handler

        for component, level in config.component_levels.items():
            logging.getLogger(component).setLevel(getattr(logging, LogLevel(level).value))

        self._configured = True
        logger.debug("Logging system configured")

    def set_level(self, level: LogLevel, component: Optional[str] = None) -> None:
        """
        Set logging level.

        Args:
            level: New logging level
            component: Specific component (None for the package logger)
        """
        logging.getLogger(component or self.logger_name).setLevel(
            getattr(logging, LogLevel(level).value)
        )

    def cleanup(self) -> None:
        """Remove and close the handlers this manager installed."""
        logger = logging.getLogger(self.logger_name)
        for handler in self._handlers.values():
            logger.removeHandler(handler)
            handler.close()
        self._handlers.clear()
        self._configured = False

    def is_configured(self) -> bool:
        """Check if logging is configured."""
        return self._configured


# Global logging manager instance
_logging_manager = LoggingManager()


def setup_logging(config: Optional[LoggingConfig] = None, stream=None) -> None:
    """
    Setup logging with configuration.

    Args:
        config: Logging configuration (defaults to LoggingConfig())
        stream: Output stream for the console handler
    """
    _logging_manager.setup_logging(config or LoggingConfig(), stream=stream)


def cleanup_logging() -> None:
    """Cleanup logging system."""
    _logging_manager.cleanup()

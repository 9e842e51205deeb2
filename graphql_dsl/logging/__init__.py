"""
Logging support for graphql_dsl.

Provides structured output and masking of credentials that travel in request
headers.
"""

from .filters import SensitiveDataFilter
from .formatters import StructuredFormatter
from .manager import LoggingManager, cleanup_logging, setup_logging

__all__ = [
    "LoggingManager",
    "setup_logging",
    "cleanup_logging",
    "StructuredFormatter",
    "SensitiveDataFilter",
]

"""
Logging filters for graphql_dsl.

Request headers routinely carry bearer tokens and API keys; this filter masks
them before a record reaches any handler.
"""

import logging
import re
from typing import List, Pattern


class SensitiveDataFilter(logging.Filter):
    """Filter to mask sensitive data in log messages."""

    def __init__(self) -> None:
        """Initialize sensitive data filter."""
        super().__init__()

        # Patterns for sensitive data
        self.patterns: List[Pattern[str]] = [
            # Bearer tokens
            re.compile(r"(bearer\s+)([A-Za-z0-9\-._~+/]+=*)", re.IGNORECASE),
            # API keys and tokens
            re.compile(
                r"""((?:api[_-]?key|token|secret)["']?\s*[:=]\s*["']?)([^\s"',}]+)""",
                re.IGNORECASE,
            ),
            # Authorization headers with a non-bearer scheme
            re.compile(
                r"""(authorization["']?\s*[:=]\s*["']?)(?!bearer\s)([^\s"',}]+)""",
                re.IGNORECASE,
            ),
            # URLs with credentials
            re.compile(r"(https?://[^:/\s]+):([^@\s]+)@", re.IGNORECASE),
        ]

        # Replacement patterns
        self.replacements = [
            r"\1***MASKED***",
            r"\1***MASKED***",
            r"\1***MASKED***",
            r"\1:***MASKED***@",
        ]

    def mask(self, message: str) -> str:
        """Apply all masking patterns to a message."""
        for pattern, replacement in zip(self.patterns, self.replacements):
            message = pattern.sub(replacement, message)
        return message

    def filter(self, record: logging.LogRecord) -> bool:
        """Filter log record to mask sensitive data."""
        record.msg = self.mask(record.getMessage())
        record.args = ()
        return True

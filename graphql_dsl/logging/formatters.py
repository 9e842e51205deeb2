"""
Logging formatters for graphql_dsl.

The client and transport attach request details to their records through
``extra=``; StructuredFormatter groups those under a ``request`` object so a
log pipeline can index GraphQL calls without parsing messages.
"""

import json
import logging
from datetime import datetime
from typing import Any, Dict

# Attributes every LogRecord carries; anything else arrived through ``extra=``.
_RESERVED = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}

REQUEST_FIELDS = ("operation_name", "url", "status_code", "duration", "document_bytes")


class StructuredFormatter(logging.Formatter):
    """
    JSON structured logging formatter.

    Each record becomes one JSON line with ``timestamp``, ``level``,
    ``logger``, ``message`` and ``source``. Request fields go under
    ``request``, other extra fields under ``context``.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "source": f"{record.module}:{record.funcName}:{record.lineno}",
        }

        request: Dict[str, Any] = {}
        context: Dict[str, Any] = {}
        for key, value in record.__dict__.items():
            if key in _RESERVED:
                continue
            if key in REQUEST_FIELDS:
                request[key] = value
            else:
                context[key] = value

        if request:
            log_data["request"] = request
        if context:
            log_data["context"] = context
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str, ensure_ascii=False)

# src/repo_dashboard/logging_config.py
"""
Logging configuration.

Supports two formats:
- text: human-readable, for the terminal
- json: one JSON object per line, for log shipping
"""
import json
import logging
import sys
from typing import Any, Dict


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log_record: Dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "module": record.module,
            "line": record.lineno,
        }
        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_record)


def setup_logging(level="INFO", log_format="text"):
    """Attach a stderr handler to the root logger. Calling it twice is a no-op."""
    root_logger = logging.getLogger()
    if root_logger.handlers:
        return

    root_logger.setLevel(level.upper())
    handler = logging.StreamHandler(sys.stderr)

    if log_format.lower() == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))

    root_logger.addHandler(handler)

    logging.getLogger("urllib3").setLevel(logging.WARNING)

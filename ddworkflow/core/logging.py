"""Structured logging configuration."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from ddworkflow.core.config import AppSettings

# Attributes every LogRecord carries; anything else arrived through ``extra``.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

# Promoted to the top level so one run can be followed across records.
CORRELATION_FIELDS = ("driver_state", "deployment_id", "process_instance_id")


class JsonFormatter(logging.Formatter):
    """One JSON object per record, keyed by the driver's run state."""

    def __init__(self, service_name: str) -> None:
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc)
            .isoformat()
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service_name,
        }

        extra = {key: value for key, value in vars(record).items() if key not in _RECORD_ATTRS}
        for field in CORRELATION_FIELDS:
            if field in extra:
                log_entry[field] = extra.pop(field)
        if extra:
            log_entry["extra"] = extra

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


def configure_logging(settings: AppSettings) -> None:
    """Configure root logger and quiet the engine's third-party loggers."""

    level = getattr(logging, settings.log_level, logging.INFO)

    handler = logging.StreamHandler(stream=sys.stdout)
    if settings.log_json:
        handler.setFormatter(JsonFormatter(settings.service_name))
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    # SpiffWorkflow logs every task transition at INFO.
    library_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for logger_name in ("sqlalchemy.engine", "sqlalchemy.pool", "spiff", "spiff.task", "spiff.workflow"):
        logging.getLogger(logger_name).setLevel(library_level)

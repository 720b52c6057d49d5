from __future__ import annotations

import json
import logging
import sys

from ddworkflow.core.config import AppSettings
from ddworkflow.core.logging import JsonFormatter, configure_logging


def test_json_formatter_includes_service_and_extra() -> None:
    record = logging.LogRecord(
        name="ddworkflow.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg="Deploying process from %s",
        args=("processes/simple-process.bpmn",),
        exc_info=None,
    )
    record.deployment_id = "abc"
    record.resource = "processes/simple-process.bpmn"

    payload = json.loads(JsonFormatter("direct-debit-workflow").format(record))

    assert payload["message"] == "Deploying process from processes/simple-process.bpmn"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "ddworkflow.test"
    assert payload["service"] == "direct-debit-workflow"
    assert payload["deployment_id"] == "abc"
    assert payload["extra"] == {"resource": "processes/simple-process.bpmn"}
    assert payload["timestamp"].endswith("Z")


def test_json_formatter_renders_exceptions() -> None:
    try:
        raise ValueError("boom")
    except ValueError:
        exc_info = sys.exc_info()

    record = logging.LogRecord("ddworkflow.test", logging.ERROR, __file__, 1, "failed", (), exc_info)
    payload = json.loads(JsonFormatter("svc").format(record))

    assert "ValueError: boom" in payload["exception"]


def test_configure_logging_installs_single_handler() -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        configure_logging(AppSettings(log_level="WARNING", log_json=True))

        assert root.level == logging.WARNING
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)
        assert logging.getLogger("spiff").level == logging.WARNING
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


def test_json_formatter_promotes_driver_state() -> None:
    record = logging.makeLogRecord(
        {
            "name": "ddworkflow.application",
            "levelno": logging.INFO,
            "levelname": "INFO",
            "msg": "Process instance started:",
            "driver_state": "started",
            "process_instance_id": "0b8c5f7e-0000-4000-8000-000000000000",
        }
    )

    payload = json.loads(JsonFormatter("direct-debit-workflow").format(record))

    assert payload["driver_state"] == "started"
    assert payload["process_instance_id"] == "0b8c5f7e-0000-4000-8000-000000000000"
    assert "extra" not in payload

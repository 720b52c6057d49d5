"""Embedded BPMN process engine backed by SpiffWorkflow and SQLAlchemy."""

from __future__ import annotations

__all__ = [
    "EngineConfig",
    "ProcessEngine",
    "ProcessEngineError",
    "ProcessInstanceInfo",
    "build_process_engine",
    "get_engine_config",
]

from .config import EngineConfig, get_engine_config  # noqa: E402
from .descriptors import ProcessInstanceInfo  # noqa: E402
from .engine import ProcessEngine, build_process_engine  # noqa: E402
from .exceptions import ProcessEngineError  # noqa: E402

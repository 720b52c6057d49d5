"""Errors raised by the embedded process engine."""

from __future__ import annotations


class ProcessEngineError(RuntimeError):
    """Base class for process engine errors."""


class UnsupportedDriverError(ProcessEngineError):
    """Raised when the configured JDBC driver has no Python counterpart."""


class SchemaMissingError(ProcessEngineError):
    """Raised when schema updates are disabled and engine tables are absent."""


class ResourceNotFoundError(ProcessEngineError):
    """Raised when a deployment resource is not on the classpath."""


class BpmnParseError(ProcessEngineError):
    """Raised when a deployment resource is not a valid BPMN document."""


class ProcessDefinitionNotFoundError(ProcessEngineError):
    """Raised when no deployed process definition matches a key."""


class EngineClosedError(ProcessEngineError):
    """Raised when a closed engine is used."""

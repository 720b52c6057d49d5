"""One-shot driver: configure the engine, deploy, start one instance, close."""

from __future__ import annotations

import argparse
import logging
import sys
from enum import Enum
from typing import Callable, List, Optional

from ddworkflow.core.config import AppSettings, get_settings
from ddworkflow.core.logging import configure_logging
from ddworkflow.core.properties import ApplicationProperties
from ddworkflow.core.resources import Classpath, classpath_from_settings
from ddworkflow.workflow_engine import (
    EngineConfig,
    ProcessEngine,
    ProcessInstanceInfo,
    build_process_engine,
    get_engine_config,
)

LOGGER = logging.getLogger("ddworkflow.application")

EngineFactory = Callable[[EngineConfig, Classpath], ProcessEngine]


class DriverState(str, Enum):
    """Lifecycle states of a single application run."""

    UNSTARTED = "unstarted"
    CONFIGURED = "configured"
    DEPLOYED = "deployed"
    STARTED = "started"
    CLOSED = "closed"
    FAILED = "failed"


class WorkflowApplicationError(RuntimeError):
    """Base class for driver step failures."""


class EngineConstructionError(WorkflowApplicationError):
    """Raised when the process engine cannot be built."""


class DeploymentError(WorkflowApplicationError):
    """Raised when the process resource cannot be deployed."""


class InstanceStartError(WorkflowApplicationError):
    """Raised when the process instance cannot be started."""


class EngineCloseError(WorkflowApplicationError):
    """Reported, never raised, when releasing the engine fails."""


class _DriverLogAdapter(logging.LoggerAdapter):
    """Stamps every record with the driver state current when it was logged."""

    def process(self, msg, kwargs):
        extra = dict(kwargs.get("extra") or {})
        extra.setdefault("driver_state", self.extra["application"].state.value)
        kwargs["extra"] = extra
        return msg, kwargs


class DirectDebitWorkflowApplication:
    """Runs the configure/deploy/start/close sequence exactly once."""

    def __init__(
        self,
        *,
        settings: Optional[AppSettings] = None,
        properties_file: Optional[str] = None,
        classpath: Optional[Classpath] = None,
        engine_factory: EngineFactory = build_process_engine,
        dump_config: bool = False,
    ) -> None:
        self._settings = settings or get_settings()
        self._properties_file = properties_file or self._settings.properties_file
        self._classpath = classpath or classpath_from_settings(self._settings)
        self._engine_factory = engine_factory
        self._dump_config = dump_config

        self.properties: Optional[ApplicationProperties] = None
        self.engine_config: Optional[EngineConfig] = None
        self.engine: Optional[ProcessEngine] = None
        self.process_instance: Optional[ProcessInstanceInfo] = None
        self.close_error: Optional[EngineCloseError] = None
        self.state = DriverState.UNSTARTED
        self.history: List[DriverState] = [DriverState.UNSTARTED]
        self._log = _DriverLogAdapter(LOGGER, {"application": self})

    def run(self) -> ProcessInstanceInfo:
        """Execute every step in order; any failure aborts the rest.

        The engine, once built, is closed on every exit path.
        """

        if self.state is not DriverState.UNSTARTED:
            raise WorkflowApplicationError(f"Application already ran (state: {self.state.value})")

        try:
            self._configure()
            self._deploy()
            instance = self._start()
        except Exception as exc:
            failed_from = self.state
            self._transition(DriverState.FAILED)
            self._log.error(
                "Run failed after state %s: %s",
                failed_from.value,
                exc,
                extra={"failed_from": failed_from.value, "error_type": type(exc).__name__},
            )
            raise
        finally:
            self._close_engine()

        self._transition(DriverState.CLOSED)
        return instance

    def _configure(self) -> None:
        self.properties = ApplicationProperties.load(self._properties_file, self._classpath)
        if self._dump_config:
            self.properties.dump()
        self.engine_config = get_engine_config(self.properties)

        try:
            self.engine = self._engine_factory(self.engine_config, self._classpath)
        except Exception as exc:  # noqa: BLE001
            self._log.error("Failed to create process engine: %s", exc)
            raise EngineConstructionError(f"Process engine initialization failed: {exc}") from exc
        self._transition(DriverState.CONFIGURED)

    def _deploy(self) -> None:
        resource = self.engine_config.process_resource
        self._log.info("Deploying process from %s", resource)
        try:
            deployment = (
                self.engine.repository_service.create_deployment()
                .name(resource)
                .add_classpath_resource(resource)
                .deploy()
            )
        except Exception as exc:  # noqa: BLE001
            self._log.error("Failed to deploy process: %s", exc)
            raise DeploymentError(f"Process deployment failed: {exc}") from exc

        self._log.info("Process deployed successfully", extra={"deployment_id": str(deployment.id)})
        self._transition(DriverState.DEPLOYED)

    def _start(self) -> ProcessInstanceInfo:
        key = self.engine_config.process_definition_key
        self._log.info("Starting process instance for key %s", key)
        try:
            instance = self.engine.runtime_service.start_process_instance_by_key(key)
        except Exception as exc:  # noqa: BLE001
            self._log.error("Failed to start process instance: %s", exc)
            raise InstanceStartError(f"Process instance start failed: {exc}") from exc

        self.process_instance = instance
        self._transition(DriverState.STARTED)
        self._log.info("Process instance started:")
        self._log.info("  Instance ID: %s", instance.id, extra={"process_instance_id": str(instance.id)})
        self._log.info("  Process Definition Key: %s", instance.process_definition_key)
        self._log.info("  Process Definition ID: %s", instance.process_definition_id)
        self._log.info("  Business Key: %s", instance.business_key)
        self._log.info("  Is Ended: %s", instance.ended)
        self._log.info("  Is Suspended: %s", instance.suspended)
        return instance

    def _close_engine(self) -> None:
        if self.engine is None:
            return
        try:
            self.engine.close()
        except Exception as exc:  # noqa: BLE001
            self.close_error = EngineCloseError(f"Error while closing process engine: {exc}")
            self._log.error("%s", self.close_error, exc_info=exc)

    def _transition(self, state: DriverState) -> None:
        self._log.debug(
            "driver_state_changed",
            extra={"driver_state": state.value, "from_state": self.state.value},
        )
        self.state = state
        self.history.append(state)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Deploy and start the direct debit BPMN process.")
    parser.add_argument("--properties", default=None, help="Properties resource name on the classpath.")
    parser.add_argument(
        "--classpath",
        action="append",
        default=[],
        help="Extra directory searched for resources before the bundled ones (repeatable).",
    )
    parser.add_argument("--dump-config", action="store_true", help="Log the loaded properties, passwords masked.")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging.")
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None, *, engine_factory: EngineFactory = build_process_engine) -> int:
    args = parse_args(argv)
    settings = get_settings()
    if args.verbose:
        settings = settings.model_copy(update={"log_level": "DEBUG"})
    configure_logging(settings)

    app = DirectDebitWorkflowApplication(
        settings=settings,
        properties_file=args.properties,
        classpath=classpath_from_settings(settings, args.classpath),
        engine_factory=engine_factory,
        dump_config=args.dump_config,
    )

    LOGGER.info("Starting direct debit workflow application")
    try:
        app.run()
    except Exception as exc:  # noqa: BLE001
        LOGGER.error("Application failed: %s", exc, exc_info=True)
        return 1

    LOGGER.info("Application completed successfully")
    return 0


if __name__ == "__main__":
    sys.exit(main())

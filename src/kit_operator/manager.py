"""Register controllers with kopf and run the operator."""

from __future__ import annotations

import logging
import threading
from typing import Any

import kopf

from . import health
from .config import OperatorConfig
from .constants import API_GROUP_VERSION, ResourceKind
from .controllers.base import Controller
from .dispatch import Dispatcher
from .status import Status

logger = logging.getLogger(__name__)


def _is_parked(body: Any) -> bool:
    """True when the last pass failed fatally for the current generation.

    Fatal errors are not retried by the periodic resync; a spec change
    (new generation) makes the object eligible again.
    """
    status = body.get("status", {}) or {}
    generation = (body.get("metadata", {}) or {}).get("generation")
    return status.get("phase") == Status.ERROR.value and status.get("observedGeneration") == generation


def register_handlers(
    registry: kopf.OperatorRegistry,
    dispatcher: Dispatcher,
    config: OperatorConfig,
    kind: ResourceKind,
) -> None:
    """Register the kopf handlers that deliver triggers for one kind to the dispatcher."""

    def handle_reconcile(body: kopf.Body, patch: kopf.Patch, retry: int = 0, **_: Any) -> None:
        dispatcher.dispatch(kind, body, patch, retry=retry)

    def handle_resync(body: kopf.Body, patch: kopf.Patch, retry: int = 0, **_: Any) -> None:
        meta = body.get("metadata", {}) or {}
        if meta.get("deletionTimestamp") or _is_parked(body):
            return
        dispatcher.dispatch(kind, body, patch, retry=retry)

    def handle_finalize(body: kopf.Body, patch: kopf.Patch, retry: int = 0, **_: Any) -> None:
        dispatcher.dispatch(kind, body, patch, retry=retry)

    plural = kind.plural
    for decorator in (kopf.on.create, kopf.on.update, kopf.on.resume):
        decorator(API_GROUP_VERSION, kind.value, id=f"reconcile-{plural}", registry=registry)(handle_reconcile)
    kopf.timer(
        API_GROUP_VERSION,
        kind.value,
        id=f"resync-{plural}",
        interval=config.resync_interval_seconds,
        initial_delay=config.resync_interval_seconds,
        registry=registry,
    )(handle_resync)
    kopf.on.delete(API_GROUP_VERSION, kind.value, id=f"finalize-{plural}", registry=registry)(handle_finalize)


class Runnable:
    """A configured operator ready to be started."""

    def __init__(self, dispatcher: Dispatcher, registry: kopf.OperatorRegistry, config: OperatorConfig):
        self.dispatcher = dispatcher
        self.registry = registry
        self.config = config
        self._server: Any = None

        @kopf.on.startup(registry=registry)
        def configure(settings: kopf.OperatorSettings, **_: Any) -> None:
            """Configure the operator."""
            # Use annotations so progress does not conflict with status updates
            settings.persistence.progress_storage = kopf.AnnotationsProgressStorage()
            settings.persistence.diffbase_storage = kopf.AnnotationsDiffBaseStorage()
            settings.persistence.finalizer = "kit.k8s.sh/kopf-finalizer"

            settings.posting.level = logging.WARNING
            settings.networking.request_timeout = 30.0
            settings.execution.max_workers = self.config.max_workers

            self._server = health.start_health_server(self.config.metrics_port, lambda: self.dispatcher.ready)
            logger.info(f"Metrics and health endpoints listening on port {self.config.metrics_port}")

        @kopf.on.cleanup(registry=registry)
        def shutdown(**_: Any) -> None:
            """Let in-flight passes observe cancellation and stop serving health checks."""
            if self.dispatcher.stop_flag is not None:
                self.dispatcher.stop_flag.set()
            if self._server is not None:
                self._server.shutdown()
                self._server = None

    def start(self, stop_flag: threading.Event | None = None) -> None:
        """Run the operator until ``stop_flag`` is set or the process is signalled.

        Only the peering leader reconciles; standby instances stay paused.
        """
        stop_flag = stop_flag if stop_flag is not None else threading.Event()
        self.dispatcher.stop_flag = stop_flag

        kinds = ", ".join(kind.value for kind in self.dispatcher.kinds)
        logger.info(f"Starting operator for {kinds}")
        kopf.run(
            registry=self.registry,
            standalone=self.config.standalone,
            peering_name=None if self.config.standalone else self.config.peering_name,
            priority=self.config.peering_priority,
            clusterwide=self.config.namespace is None,
            namespaces=[self.config.namespace] if self.config.namespace else [],
            stop_flag=stop_flag,
        )


class Manager:
    """Builds runnables from a set of controllers."""

    def __init__(self, config: OperatorConfig | None = None):
        self.config = config or OperatorConfig()

    def register_controllers(self, *controllers: Controller) -> Runnable:
        """Register controllers, one per kind.

        Raises:
            ValueError: If two controllers claim the same kind or none is given
        """
        if not controllers:
            raise ValueError("at least one controller is required")

        dispatcher = Dispatcher(self.config)
        for controller in controllers:
            dispatcher.register(controller)

        registry = kopf.OperatorRegistry()
        for kind in dispatcher.kinds:
            register_handlers(registry, dispatcher, self.config, kind)
        return Runnable(dispatcher, registry, self.config)

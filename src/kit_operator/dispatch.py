"""Route reconcile triggers to the controller registered for their kind."""

from __future__ import annotations

import logging
import threading
import time
from contextlib import contextmanager
from typing import Any, Iterator, Mapping

import kopf

from . import metrics
from .config import OperatorConfig
from .constants import ResourceKind
from .controllers.base import Controller, ensure_finalizer, remove_finalizer
from .errors import ReconcileCancelled
from .objects import DesiredObject
from .status import Result, Status
from .tracing import trace_span
from .utils.conditions import set_ready_condition, set_reconcile_failed_condition, set_waiting_condition
from .utils.context import ReconcileContext, new_correlation_id, with_correlation_id
from .utils.errors import sanitize_exception
from .utils.events import (
    emit_reconcile_failed,
    emit_resource_created,
    emit_resource_deleted,
    emit_waiting,
)

logger = logging.getLogger(__name__)

ObjectKey = tuple[ResourceKind, str, str]


def backoff_delay(retry: int, base: float, maximum: float) -> float:
    """Exponential backoff for the given retry count, capped at ``maximum``."""
    if retry < 0:
        retry = 0
    # Cap the exponent so huge retry counts cannot overflow
    return min(base * (2 ** min(retry, 32)), maximum)


class Dispatcher:
    """Resolve a controller by kind and run one pass for one object.

    The registration map is fixed once the operator starts. At most one pass
    per object key runs at a time; a trigger for a key already in flight is
    deferred rather than run in parallel.
    """

    def __init__(self, config: OperatorConfig | None = None, stop_flag: threading.Event | None = None):
        self.config = config or OperatorConfig()
        self.stop_flag = stop_flag
        self._controllers: dict[ResourceKind, Controller] = {}
        self._in_flight: set[ObjectKey] = set()
        self._lock = threading.Lock()

    def register(self, controller: Controller) -> None:
        kind = controller.kind()
        if kind in self._controllers:
            raise ValueError(
                f"controller {controller.name()} conflicts with {self._controllers[kind].name()} for kind {kind.value}"
            )
        self._controllers[kind] = controller
        logger.info(f"Registered controller {controller.name()} for {kind.value}")

    def controller_for(self, kind: ResourceKind) -> Controller:
        try:
            return self._controllers[kind]
        except KeyError:
            raise LookupError(f"no controller registered for kind {kind.value}") from None

    @property
    def kinds(self) -> list[ResourceKind]:
        return list(self._controllers)

    @property
    def ready(self) -> bool:
        return bool(self._controllers) and not (self.stop_flag is not None and self.stop_flag.is_set())

    def in_flight(self, key: ObjectKey) -> bool:
        with self._lock:
            return key in self._in_flight

    @contextmanager
    def _claim(self, key: ObjectKey) -> Iterator[bool]:
        with self._lock:
            if key in self._in_flight:
                claimed = False
            else:
                self._in_flight.add(key)
                claimed = True
        try:
            yield claimed
        finally:
            if claimed:
                with self._lock:
                    self._in_flight.discard(key)

    def dispatch(
        self,
        kind: ResourceKind,
        body: Mapping[str, Any],
        patch: kopf.Patch,
        retry: int = 0,
    ) -> Result:
        """Run one reconcile or finalize pass for ``body``.

        Returns:
            The controller's result when no requeue is needed

        Raises:
            kopf.TemporaryError: To requeue (waiting, transient error, coalesced trigger)
            kopf.PermanentError: On a fatal result
        """
        controller = self.controller_for(kind)
        obj = DesiredObject.from_body(kind, body)
        key: ObjectKey = (kind, obj.namespace, obj.name)

        with self._claim(key) as claimed:
            if not claimed:
                metrics.requeue_total.labels(kind=kind.value, reason="coalesced").inc()
                raise kopf.TemporaryError(
                    f"{kind.value} {obj.namespace}/{obj.name} is already being reconciled",
                    delay=self.config.coalesce_delay_seconds,
                )
            with with_correlation_id(new_correlation_id()):
                return self._run(controller, obj, body, patch, retry)

    def _run(
        self,
        controller: Controller,
        obj: DesiredObject,
        body: Mapping[str, Any],
        patch: kopf.Patch,
        retry: int,
    ) -> Result:
        kind = obj.kind.value
        operation = "finalize" if obj.deleting else "reconcile"
        ctx = ReconcileContext.for_object(
            kind,
            obj.meta,
            stop_flag=self.stop_flag,
            timeout=self.config.reconcile_timeout_seconds,
        )
        ctx.log.debug(
            f"Starting {operation} pass",
            event=operation,
            reason="Started",
            controller_name=controller.name(),
            retry=retry,
        )

        metrics.reconcile_total.labels(kind=kind, result="started").inc()
        start_time = time.time()
        try:
            with trace_span(f"{operation}_{controller.name()}", kind=kind, attributes={"resource.name": obj.name}):
                if obj.deleting:
                    result = controller.finalize(ctx, obj)
                else:
                    # The token must be in place before anything is created externally
                    if ensure_finalizer(dict(body.get("metadata", {})), patch):
                        ctx.log.debug("Added finalizer", reason="FinalizerAdded")
                    result = controller.reconcile(ctx, obj)
        except ReconcileCancelled as e:
            metrics.reconcile_total.labels(kind=kind, result="cancelled").inc()
            ctx.log.warning(f"{operation.capitalize()} cancelled: {e}", reason="Cancelled")
            raise kopf.TemporaryError(str(e), delay=self.config.waiting_requeue_seconds) from e
        except Exception as e:
            raise self._handle_exception(ctx, obj, body, patch, e, retry) from e
        finally:
            duration = time.time() - start_time
            metrics.reconcile_duration_seconds.labels(kind=kind).observe(duration)

        return self._handle_result(ctx, obj, body, patch, result)

    def _handle_result(
        self,
        ctx: ReconcileContext,
        obj: DesiredObject,
        body: Mapping[str, Any],
        patch: kopf.Patch,
        result: Result,
    ) -> Result:
        kind = obj.kind.value
        previous = obj.status.get("phase")
        self._patch_status(obj, patch, result)
        metrics.resource_status_total.labels(kind=kind, status=result.status.value).inc()

        if result.requeue:
            metrics.reconcile_total.labels(kind=kind, result="waiting").inc()
            metrics.requeue_total.labels(kind=kind, reason="waiting").inc()
            ctx.log.info(f"Waiting: {result.reason}", reason="Waiting")
            if previous != Status.WAITING.value:
                emit_waiting(body, result.reason)
            raise kopf.TemporaryError(result.reason, delay=self.config.waiting_requeue_seconds)

        if result.fatal:
            metrics.reconcile_total.labels(kind=kind, result="fatal").inc()
            ctx.log.error(f"Reconciliation failed permanently: {result.reason}", reason="Fatal")
            emit_reconcile_failed(body, result.reason)
            raise kopf.PermanentError(result.reason)

        metrics.reconcile_total.labels(kind=kind, result="success").inc()
        if result.status is Status.TERMINATED:
            if remove_finalizer(dict(body.get("metadata", {})), patch):
                ctx.log.info("Finalizer removed", event="deletion", reason="FinalizerRemoved")
                emit_resource_deleted(body, f"{kind} {obj.name}")
        elif previous != Status.CREATED.value:
            ctx.log.info(f"{kind} {obj.name} is ready", reason="Created")
            emit_resource_created(body, f"{kind} {obj.name}")
        return result

    def _handle_exception(
        self,
        ctx: ReconcileContext,
        obj: DesiredObject,
        body: Mapping[str, Any],
        patch: kopf.Patch,
        error: Exception,
        retry: int,
    ) -> kopf.TemporaryError:
        """Record a transient failure and build the backoff requeue."""
        kind = obj.kind.value
        sanitized = sanitize_exception(error)
        delay = backoff_delay(retry, self.config.backoff_base_seconds, self.config.backoff_max_seconds)

        metrics.error_total.labels(kind=kind, error_type=type(error).__name__).inc()
        metrics.reconcile_total.labels(kind=kind, result="error").inc()
        metrics.requeue_total.labels(kind=kind, reason="error").inc()
        ctx.log.error("Reconciliation failed", error=error, reason="ReconciliationFailed", retry=retry, delay=delay)
        emit_reconcile_failed(body, f"Reconciliation failed: {sanitized}")

        conditions = set_reconcile_failed_condition(
            obj.status.get("conditions", []), True, sanitized, obj.generation
        )
        patch.status["conditions"] = conditions
        patch.status["reason"] = sanitized
        return kopf.TemporaryError(f"Reconciliation failed: {sanitized}", delay=delay)

    def _patch_status(self, obj: DesiredObject, patch: kopf.Patch, result: Result) -> None:
        conditions = obj.status.get("conditions", [])
        ready = result.status is Status.CREATED
        conditions = set_ready_condition(
            conditions, ready, result.reason or result.status.value, obj.generation, reason=result.status.value
        )
        conditions = set_waiting_condition(
            conditions, result.requeue, result.reason, obj.generation
        )
        conditions = set_reconcile_failed_condition(
            conditions, result.fatal, result.reason, obj.generation
        )
        patch.status.update({
            "phase": result.status.value,
            "reason": result.reason,
            "conditions": conditions,
            "observedGeneration": obj.generation,
        })

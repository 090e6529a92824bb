"""Structured logging configuration for the KIT operator."""

from __future__ import annotations

import json
import logging
import sys
from typing import Any

from .constants import CONTROLLER_NAME
from .utils.errors import sanitize_dict, sanitize_exception


def setup_structured_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
    # botocore is chatty at INFO when credentials are resolved
    logging.getLogger("botocore").setLevel(logging.WARNING)


def log_resource_event(
    logger: logging.Logger,
    controller: str,
    resource_kind: str,
    resource_name: str,
    namespace: str,
    uid: str,
    event: str,
    reason: str,
    message: str,
    level: int = logging.INFO,
    **kwargs: Any,
) -> None:
    """Log a structured resource event."""
    if not logger.isEnabledFor(level):
        return
    log_data = {
        "controller": controller,
        "resource": resource_kind,
        "name": resource_name,
        "namespace": namespace,
        "uid": uid,
        "event": event,
        "reason": reason,
        "message": message,
    }
    log_data.update(sanitize_dict(kwargs))
    logger.log(level, json.dumps(log_data, default=str))


class ResourceLogger:
    """Logger bound to one resource for the duration of one pass.

    Every record carries the pass correlation id so that the lines of a
    single reconcile can be grouped.
    """

    def __init__(
        self,
        logger: logging.Logger,
        resource_kind: str,
        meta: dict[str, Any],
        correlation_id: str | None = None,
        controller: str = CONTROLLER_NAME,
    ):
        self.logger = logger
        self.resource_kind = resource_kind
        self.controller = controller
        self.name = meta.get("name", "unknown")
        self.namespace = meta.get("namespace", "default")
        self.uid = meta.get("uid", "unknown")
        self.correlation_id = correlation_id

    def _emit(self, level: int, message: str, event: str, reason: str, **kwargs: Any) -> None:
        if self.correlation_id:
            kwargs.setdefault("correlation_id", self.correlation_id)
        log_resource_event(
            self.logger,
            controller=self.controller,
            resource_kind=self.resource_kind,
            resource_name=self.name,
            namespace=self.namespace,
            uid=self.uid,
            event=event,
            reason=reason,
            message=message,
            level=level,
            **kwargs,
        )

    def debug(self, message: str, event: str = "debug", reason: str = "Debug", **kwargs: Any) -> None:
        self._emit(logging.DEBUG, message, event, reason, **kwargs)

    def info(self, message: str, event: str = "info", reason: str = "Info", **kwargs: Any) -> None:
        self._emit(logging.INFO, message, event, reason, **kwargs)

    def warning(self, message: str, event: str = "warning", reason: str = "Warning", **kwargs: Any) -> None:
        self._emit(logging.WARNING, message, event, reason, **kwargs)

    def error(
        self,
        message: str,
        error: Exception | None = None,
        event: str = "error",
        reason: str = "Error",
        **kwargs: Any,
    ) -> None:
        """Log an error, attaching the sanitized exception when given."""
        if error is not None:
            kwargs["error"] = sanitize_exception(error)
            kwargs["error_type"] = type(error).__name__
        self._emit(logging.ERROR, message, event, reason, **kwargs)

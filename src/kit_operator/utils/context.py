"""Per-pass reconcile context and correlation IDs."""

from __future__ import annotations

import contextvars
import logging
import threading
import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator

from ..errors import ReconcileCancelled
from ..logging import ResourceLogger

# Context variable for storing correlation ID
correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id", default=None
)


def new_correlation_id() -> str:
    return uuid.uuid4().hex[:16]


def get_correlation_id() -> str | None:
    """Get the correlation ID from the current context."""
    return correlation_id.get()


@contextmanager
def with_correlation_id(corr_id: str) -> Iterator[str]:
    """Context manager to set a correlation ID for the duration of a block.

    Args:
        corr_id: Correlation ID to use

    Yields:
        The correlation ID
    """
    token = correlation_id.set(corr_id)
    try:
        yield corr_id
    finally:
        correlation_id.reset(token)


@dataclass
class ReconcileContext:
    """Handle threaded through one reconcile or finalize pass.

    Carries the pass logger and the cancellation sources: the engine stop
    flag and a deadline on the monotonic clock. Controllers call
    :meth:`check` before every blocking cloud call.
    """

    log: ResourceLogger
    correlation_id: str
    stop_flag: threading.Event | None = None
    deadline: float | None = None

    @classmethod
    def for_object(
        cls,
        kind: str,
        meta: dict[str, Any],
        stop_flag: threading.Event | None = None,
        timeout: float | None = None,
        logger: logging.Logger | None = None,
    ) -> ReconcileContext:
        corr_id = get_correlation_id() or new_correlation_id()
        log = ResourceLogger(logger or logging.getLogger("kit_operator"), kind, meta, corr_id)
        deadline = time.monotonic() + timeout if timeout is not None else None
        return cls(log=log, correlation_id=corr_id, stop_flag=stop_flag, deadline=deadline)

    def check(self) -> None:
        """Raise ReconcileCancelled if the engine is stopping or the pass is out of time."""
        if self.stop_flag is not None and self.stop_flag.is_set():
            raise ReconcileCancelled("operator is shutting down")
        if self.deadline is not None and time.monotonic() >= self.deadline:
            raise ReconcileCancelled("reconcile deadline exceeded")

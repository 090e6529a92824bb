"""Utilities for emitting Kubernetes events."""

from __future__ import annotations

from typing import Any

import kopf

from ..constants import (
    EVENT_REASON_RECONCILE_FAILED,
    EVENT_REASON_RESOURCE_CREATED,
    EVENT_REASON_RESOURCE_DELETED,
    EVENT_REASON_WAITING,
)


def emit_event(
    body: Any,
    reason: str,
    message: str,
    type_: str = "Normal",
) -> None:
    """Emit a Kubernetes event.

    Args:
        body: Resource body the event refers to
        reason: Event reason
        message: Event message
        type_: Event type (Normal or Warning)
    """
    kopf.event(
        body,
        reason=reason,
        message=message,
        type=type_,
    )


def emit_reconcile_failed(body: Any, message: str) -> None:
    """Emit reconcile failed event."""
    emit_event(body, EVENT_REASON_RECONCILE_FAILED, message, type_="Warning")


def emit_waiting(body: Any, message: str) -> None:
    """Emit waiting-for-dependencies event."""
    emit_event(body, EVENT_REASON_WAITING, message)


def emit_resource_created(body: Any, resource: str) -> None:
    """Emit external resource created event."""
    emit_event(body, EVENT_REASON_RESOURCE_CREATED, f"{resource} created")


def emit_resource_deleted(body: Any, resource: str) -> None:
    """Emit external resource deleted event."""
    emit_event(body, EVENT_REASON_RESOURCE_DELETED, f"{resource} deleted")

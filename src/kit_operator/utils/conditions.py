"""Utilities for managing Kubernetes conditions."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from ..constants import COND_READY, COND_RECONCILE_FAILED, COND_WAITING


def update_condition(
    conditions: list[dict[str, Any]],
    condition_type: str,
    status: str,
    reason: str,
    message: str,
    observed_generation: int | None = None,
) -> list[dict[str, Any]]:
    """Update or add a condition to the conditions list.

    Args:
        conditions: List of existing conditions
        condition_type: Type of condition
        status: Status of condition ("True", "False", "Unknown")
        reason: Reason for the condition
        message: Human-readable message
        observed_generation: Generation when condition was observed

    Returns:
        Updated list of conditions
    """
    now = datetime.now(timezone.utc).isoformat()
    conditions = [dict(cond) for cond in conditions]

    existing_idx = None
    for idx, cond in enumerate(conditions):
        if cond.get("type") == condition_type:
            existing_idx = idx
            break

    new_condition: dict[str, Any] = {
        "type": condition_type,
        "status": status,
        "reason": reason,
        "message": message,
        "lastTransitionTime": now,
    }

    if observed_generation is not None:
        new_condition["observedGeneration"] = observed_generation

    if existing_idx is not None:
        existing = conditions[existing_idx]
        # Only update lastTransitionTime if status changed
        if existing.get("status") == status:
            new_condition["lastTransitionTime"] = existing.get("lastTransitionTime", now)
        conditions[existing_idx] = new_condition
    else:
        conditions.append(new_condition)

    return conditions


def set_ready_condition(
    conditions: list[dict[str, Any]],
    status: bool,
    message: str,
    observed_generation: int | None = None,
    reason: str | None = None,
) -> list[dict[str, Any]]:
    """Set the Ready condition."""
    return update_condition(
        conditions,
        COND_READY,
        "True" if status else "False",
        reason or ("Ready" if status else "NotReady"),
        message,
        observed_generation,
    )


def set_waiting_condition(
    conditions: list[dict[str, Any]],
    waiting: bool,
    message: str,
    observed_generation: int | None = None,
) -> list[dict[str, Any]]:
    """Set the Waiting condition."""
    return update_condition(
        conditions,
        COND_WAITING,
        "True" if waiting else "False",
        "WaitingForDependencies" if waiting else "DependenciesReady",
        message,
        observed_generation,
    )


def set_reconcile_failed_condition(
    conditions: list[dict[str, Any]],
    failed: bool,
    message: str,
    observed_generation: int | None = None,
) -> list[dict[str, Any]]:
    """Set the ReconcileFailed condition."""
    return update_condition(
        conditions,
        COND_RECONCILE_FAILED,
        "True" if failed else "False",
        "ReconcileFailed" if failed else "ReconcileSucceeded",
        message,
        observed_generation,
    )

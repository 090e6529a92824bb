"""Base controller class shared by every resource kind."""

from __future__ import annotations

import abc
from typing import Any

import kopf

from ..constants import FINALIZER, ResourceKind
from ..objects import DesiredObject
from ..status import Result
from ..utils.context import ReconcileContext


class Controller(abc.ABC):
    """Contract every resource-kind controller implements.

    Controllers keep no state between passes: each call re-derives the
    current state from the cloud and converges from there. Both methods must
    be idempotent. Dependency waits are returned as ``Result.waiting``;
    transient failures are raised and retried by the dispatcher with backoff.
    """

    @abc.abstractmethod
    def name(self) -> str:
        """Stable identifier used in logs and metrics."""

    @abc.abstractmethod
    def kind(self) -> ResourceKind:
        """Desired-state kind this controller handles."""

    @abc.abstractmethod
    def reconcile(self, ctx: ReconcileContext, obj: DesiredObject) -> Result:
        """Converge external state toward ``obj``."""

    @abc.abstractmethod
    def finalize(self, ctx: ReconcileContext, obj: DesiredObject) -> Result:
        """Drive the external resource to absent; success when already absent."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name()} for {self.kind().value}>"


def ensure_finalizer(meta: dict[str, Any], patch: kopf.Patch) -> bool:
    """Ensure finalizer is present in metadata.

    Returns:
        True if the finalizer had to be added
    """
    finalizers = list(meta.get("finalizers", []) or [])
    if FINALIZER in finalizers:
        return False
    finalizers.append(FINALIZER)
    patch.metadata["finalizers"] = finalizers
    return True


def remove_finalizer(meta: dict[str, Any], patch: kopf.Patch) -> bool:
    """Remove finalizer from metadata.

    Returns:
        True if the finalizer was present
    """
    finalizers = list(meta.get("finalizers", []) or [])
    if FINALIZER not in finalizers:
        return False
    finalizers.remove(FINALIZER)
    patch.metadata["finalizers"] = finalizers if finalizers else None
    return True

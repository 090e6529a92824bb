"""Read-only view of a desired-state object."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from .constants import LABEL_CLUSTER_NAME, ResourceKind


@dataclass(frozen=True)
class DesiredObject:
    """A custom resource as seen by a controller during one pass."""

    kind: ResourceKind
    name: str
    namespace: str
    uid: str = ""
    generation: int = 0
    spec: dict[str, Any] = field(default_factory=dict)
    status: dict[str, Any] = field(default_factory=dict)
    labels: dict[str, str] = field(default_factory=dict)
    finalizers: tuple[str, ...] = ()
    deletion_timestamp: str | None = None

    @classmethod
    def from_body(cls, kind: ResourceKind, body: Mapping[str, Any]) -> DesiredObject:
        meta = body.get("metadata", {}) or {}
        return cls(
            kind=kind,
            name=meta.get("name", ""),
            namespace=meta.get("namespace", "default"),
            uid=meta.get("uid", ""),
            generation=meta.get("generation", 0) or 0,
            spec=dict(body.get("spec", {}) or {}),
            status=dict(body.get("status", {}) or {}),
            labels=dict(meta.get("labels", {}) or {}),
            finalizers=tuple(meta.get("finalizers", []) or ()),
            deletion_timestamp=meta.get("deletionTimestamp"),
        )

    @property
    def deleting(self) -> bool:
        """True once the deletion marker is set; it is never unset."""
        return self.deletion_timestamp is not None

    @property
    def cluster_name(self) -> str:
        return self.spec.get("clusterName") or self.labels.get(LABEL_CLUSTER_NAME) or self.name

    @property
    def meta(self) -> dict[str, Any]:
        return {"name": self.name, "namespace": self.namespace, "uid": self.uid}

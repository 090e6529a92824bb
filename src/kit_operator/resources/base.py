"""Helpers for projecting control plane subresources as child objects."""

from __future__ import annotations

import abc
from typing import Any

from kubernetes.client.exceptions import ApiException

from ..constants import API_GROUP_VERSION, CONTROLLER_NAME, LABEL_CLUSTER_NAME, LABEL_MANAGED_BY, ResourceKind
from ..errors import ObjectNotFound
from ..objects import DesiredObject
from ..services.kube import KubeObjectStore
from ..utils.context import ReconcileContext


def object_name(cluster_name: str, suffix: str = "") -> str:
    """Deterministic child object name for a cluster."""
    if not suffix:
        return cluster_name
    return f"{cluster_name}-{suffix}"


def object_meta(control_plane: DesiredObject, suffix: str = "") -> dict[str, Any]:
    """Metadata for a child object owned by a control plane."""
    return {
        "name": object_name(control_plane.name, suffix),
        "namespace": control_plane.namespace,
        "labels": {
            LABEL_CLUSTER_NAME: control_plane.name,
            LABEL_MANAGED_BY: CONTROLLER_NAME,
        },
        "ownerReferences": [
            {
                "apiVersion": API_GROUP_VERSION,
                "kind": ResourceKind.CONTROL_PLANE.value,
                "name": control_plane.name,
                "uid": control_plane.uid,
                "controller": True,
                "blockOwnerDeletion": True,
            }
        ],
    }


class Projection(abc.ABC):
    """Ensures one child object exists for a control plane.

    The child is reconciled against the cloud by its own controller; a
    projection only makes sure the declarative object is there.
    """

    kind: ResourceKind
    suffix: str = ""

    def __init__(self, store: KubeObjectStore):
        self.store = store

    @abc.abstractmethod
    def desired_spec(self, control_plane: DesiredObject) -> dict[str, Any]:
        """Spec the child is created with."""

    def create(self, ctx: ReconcileContext, control_plane: DesiredObject) -> None:
        """Create the child object if it does not exist.

        Lookup errors other than not-found propagate.
        """
        name = object_name(control_plane.name, self.suffix)
        ctx.check()
        try:
            existing = self.store.get(self.kind, control_plane.namespace, name)
        except ObjectNotFound:
            self._create(ctx, control_plane)
            return
        self.reconcile_existing(ctx, control_plane, existing)

    def delete(self, ctx: ReconcileContext, control_plane: DesiredObject) -> None:
        """Delete the child object; an absent child counts as deleted."""
        name = object_name(control_plane.name, self.suffix)
        ctx.check()
        self.store.delete(self.kind, control_plane.namespace, name)
        ctx.log.debug(f"Deleted {self.kind.value} object {name}", reason="ChildDeleted", child=name)

    def reconcile_existing(self, ctx: ReconcileContext, control_plane: DesiredObject, existing: dict[str, Any]) -> None:
        """Hook for kinds that correct drift on an existing child. Default is existence-only."""

    def _create(self, ctx: ReconcileContext, control_plane: DesiredObject) -> None:
        body = {
            "apiVersion": API_GROUP_VERSION,
            "kind": self.kind.value,
            "metadata": object_meta(control_plane, self.suffix),
            "spec": self.desired_spec(control_plane),
        }
        ctx.check()
        try:
            self.store.create(self.kind, control_plane.namespace, body)
        except ApiException as e:
            # A racing pass created it first
            if e.status != 409:
                raise
            ctx.log.info(f"{self.kind.value} object {body['metadata']['name']} already exists", reason="AlreadyExists")
            return
        ctx.log.debug(
            f"Created {self.kind.value} object for cluster {control_plane.name}",
            reason="ChildCreated",
            child=body["metadata"]["name"],
        )

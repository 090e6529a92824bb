"""Controller for ControlPlane resources."""

from __future__ import annotations

from ..constants import ResourceKind
from ..objects import DesiredObject
from ..resources import AutoScalingGroupProjection, NatGatewayProjection, Projection
from ..services.kube import KubeObjectStore
from ..status import Result
from ..tracing import trace_span
from ..utils.context import ReconcileContext
from .base import Controller


class ControlPlaneController(Controller):
    """Fans a ControlPlane out into its child objects.

    Children are reconciled against the cloud by their own controllers.
    Finalize deletes them explicitly; their owner references let garbage
    collection remove any that are left behind.
    """

    def __init__(self, store: KubeObjectStore, projections: list[Projection] | None = None):
        self.store = store
        self.projections = projections if projections is not None else [
            NatGatewayProjection(store),
            AutoScalingGroupProjection(store),
        ]

    def name(self) -> str:
        return "control-plane"

    def kind(self) -> ResourceKind:
        return ResourceKind.CONTROL_PLANE

    def reconcile(self, ctx: ReconcileContext, obj: DesiredObject) -> Result:
        with trace_span("reconcile_control_plane", kind=self.kind().value, attributes={"cluster.name": obj.name}):
            for projection in self.projections:
                projection.create(ctx, obj)
        return Result.created()

    def finalize(self, ctx: ReconcileContext, obj: DesiredObject) -> Result:
        ctx.log.info(f"Control plane {obj.name} is being deleted", event="deletion", reason="Deletion")
        with trace_span("finalize_control_plane", kind=self.kind().value, attributes={"cluster.name": obj.name}):
            for projection in reversed(self.projections):
                projection.delete(ctx, obj)
        return Result.terminated()

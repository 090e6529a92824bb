"""AutoScalingGroup child object of a control plane."""

from __future__ import annotations

from typing import Any

from .. import metrics
from ..constants import ResourceKind
from ..objects import DesiredObject
from ..utils.context import ReconcileContext
from .base import Projection, object_name

DEFAULT_MASTER_INSTANCE_COUNT = 3


class AutoScalingGroupProjection(Projection):
    """Projects the control plane's master nodes as an AutoScalingGroup object.

    Unlike the NAT gateway, an existing child whose instance count no longer
    matches the control plane is patched.
    """

    kind = ResourceKind.AUTO_SCALING_GROUP
    suffix = "asg"

    def desired_spec(self, control_plane: DesiredObject) -> dict[str, Any]:
        master = control_plane.spec.get("master", {}) or {}
        return {
            "clusterName": control_plane.name,
            "instanceCount": master.get("instanceCount", DEFAULT_MASTER_INSTANCE_COUNT),
        }

    def reconcile_existing(self, ctx: ReconcileContext, control_plane: DesiredObject, existing: dict[str, Any]) -> None:
        desired = self.desired_spec(control_plane)
        current = existing.get("spec", {}) or {}
        if current.get("instanceCount") == desired["instanceCount"]:
            return

        name = object_name(control_plane.name, self.suffix)
        metrics.drift_detected_total.labels(kind=self.kind.value, resource_type="instance_count").inc()
        ctx.check()
        self.store.patch(self.kind, control_plane.namespace, name, {"spec": {"instanceCount": desired["instanceCount"]}})
        ctx.log.info(
            f"Updated instance count of {name}",
            reason="DriftCorrected",
            previous=current.get("instanceCount"),
            desired=desired["instanceCount"],
        )

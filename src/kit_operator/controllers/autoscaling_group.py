"""Controller for AutoScalingGroup resources."""

from __future__ import annotations

from botocore.exceptions import ClientError

from .. import metrics
from ..builders.autoscaling_group import create_asg_config_from_spec
from ..config import OperatorConfig
from ..constants import ResourceKind
from ..errors import InconsistentStateError
from ..objects import DesiredObject
from ..services.aws.base import AutoScalingAPI, EC2API, ELBV2API, error_code
from ..services.aws.models import AutoScalingGroup, AutoScalingGroupConfig
from ..status import Result
from ..tracing import trace_span
from ..utils.context import ReconcileContext
from .base import Controller

KIND = ResourceKind.AUTO_SCALING_GROUP


class AutoScalingGroupController(Controller):
    """Create autoscaling groups in AWS and keep their target group attached.

    Each pass walks Absent -> Creating -> Attaching -> Converged, deciding
    where it stands purely from what AWS reports.
    """

    def __init__(
        self,
        autoscaling: AutoScalingAPI,
        ec2: EC2API,
        elbv2: ELBV2API,
        config: OperatorConfig | None = None,
    ):
        self.autoscaling = autoscaling
        self.ec2 = ec2
        self.elbv2 = elbv2
        self.config = config or OperatorConfig()

    def name(self) -> str:
        return "auto-scaling-group"

    def kind(self) -> ResourceKind:
        return KIND

    def reconcile(self, ctx: ReconcileContext, obj: DesiredObject) -> Result:
        try:
            desired = create_asg_config_from_spec(obj.name, obj.spec, self.config)
        except ValueError as e:
            ctx.log.error(f"Invalid spec: {e}", reason="ValidationFailed")
            return Result.error(str(e))

        with trace_span("reconcile_auto_scaling_group", kind=KIND.value, attributes={"asg.name": obj.name}):
            try:
                existing = self._get_group(ctx, obj.name)
            except InconsistentStateError as e:
                ctx.log.error(str(e), reason="InconsistentState")
                return Result.error(str(e))

            if existing is None:
                waiting = self._create_group(ctx, desired)
                if waiting is not None:
                    return waiting
            else:
                ctx.log.debug(
                    f"Discovered autoscaling group {obj.name} for cluster {desired.cluster_name}",
                    reason="Discovered",
                )

            return self._reconcile_target_group(ctx, desired)

    def finalize(self, ctx: ReconcileContext, obj: DesiredObject) -> Result:
        with trace_span("finalize_auto_scaling_group", kind=KIND.value, attributes={"asg.name": obj.name}):
            try:
                existing = self._get_group(ctx, obj.name)
            except InconsistentStateError as e:
                ctx.log.error(str(e), reason="InconsistentState")
                return Result.error(str(e))

            if existing is None:
                return Result.terminated(f"autoscaling group {obj.name} not found")
            if existing.deleting:
                ctx.log.debug(f"Autoscaling group {obj.name} is already being deleted", reason="DeleteInProgress")
                return Result.terminated(f"autoscaling group {obj.name} is being deleted")

            ctx.check()
            self.autoscaling.delete_auto_scaling_group(existing.name, force_delete=True)
            ctx.log.info(f"Deleted autoscaling group {existing.name}", reason="Deleted")
            return Result.terminated(f"autoscaling group {existing.name} deleted")

    def _get_group(self, ctx: ReconcileContext, name: str) -> AutoScalingGroup | None:
        ctx.check()
        groups = self.autoscaling.describe_auto_scaling_groups(name)
        if not groups:
            return None
        if len(groups) > 1:
            raise InconsistentStateError(f"expected one autoscaling group named {name}, found {len(groups)}")
        return groups[0]

    def _create_group(self, ctx: ReconcileContext, desired: AutoScalingGroupConfig) -> Result | None:
        """Create the group once its subnets exist.

        Returns:
            A waiting result while subnets are missing, otherwise None
        """
        ctx.check()
        subnet_ids = self.ec2.private_subnet_ids(desired.cluster_name)
        if not subnet_ids:
            ctx.log.info(
                f"No private subnets for cluster {desired.cluster_name} yet",
                reason="WaitingForSubnets",
            )
            return Result.waiting("waiting for private subnets")

        ctx.check()
        try:
            self.autoscaling.create_auto_scaling_group(desired, subnet_ids)
        except ClientError as e:
            # A racing pass created it first
            if error_code(e) != "AlreadyExists":
                raise
            ctx.log.info(f"Autoscaling group {desired.name} already exists", reason="AlreadyExists")
            return None

        ctx.log.info(
            f"Created autoscaling group {desired.name} for cluster {desired.cluster_name}",
            reason="Created",
            subnets=subnet_ids,
            desired_capacity=desired.desired_capacity,
        )
        return None

    def _reconcile_target_group(self, ctx: ReconcileContext, desired: AutoScalingGroupConfig) -> Result:
        ctx.check()
        attached = self.autoscaling.describe_target_group_attachments(desired.name)

        # A deleted target group can still be reported as attached, so look it up separately
        ctx.check()
        target_group = self.elbv2.get_target_group(desired.target_group_name)
        if target_group is None:
            ctx.log.info(f"Target group {desired.target_group_name} does not exist yet", reason="WaitingForTargetGroup")
            return Result.waiting("waiting for target group")

        stale = [arn for arn in attached if arn != target_group.arn]
        if stale:
            metrics.drift_detected_total.labels(kind=KIND.value, resource_type="target_group").inc()
            ctx.check()
            self.autoscaling.detach_target_groups(desired.name, stale)
            ctx.log.info(
                f"Detached stale target groups from autoscaling group {desired.name}",
                reason="DriftDetected",
                stale_target_groups=stale,
            )
            return Result.waiting("waiting for target group attachment")

        if target_group.arn not in attached:
            ctx.check()
            self.autoscaling.attach_target_groups(desired.name, [target_group.arn])
            ctx.log.info(
                f"Attached autoscaling group {desired.name} to target group {target_group.name}",
                reason="Attached",
            )
            return Result.created()

        ctx.log.debug(
            f"Autoscaling group {desired.name} is attached to target group {target_group.name}",
            reason="Converged",
        )
        return Result.created()

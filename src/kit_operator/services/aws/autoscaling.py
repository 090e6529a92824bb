"""AWS Auto Scaling client implementation."""

from __future__ import annotations

import logging

from botocore.exceptions import ClientError

from ... import metrics
from .base import AWSServiceClient
from .models import AutoScalingGroup, AutoScalingGroupConfig

logger = logging.getLogger(__name__)


class AutoScalingClient(AWSServiceClient):
    """Autoscaling group operations over boto3."""

    service = "autoscaling"

    def describe_auto_scaling_groups(self, name: str) -> list[AutoScalingGroup]:
        response = self._call("describe_auto_scaling_groups", AutoScalingGroupNames=[name])
        return [AutoScalingGroup.from_api(group) for group in response.get("AutoScalingGroups", [])]

    def create_auto_scaling_group(self, config: AutoScalingGroupConfig, subnet_ids: list[str]) -> None:
        """Create an autoscaling group.

        Tags are propagated to launched instances so that nodes can be
        traced back to their cluster.
        """
        try:
            self._call(
                "create_auto_scaling_group",
                AutoScalingGroupName=config.name,
                DesiredCapacity=config.desired_capacity,
                MinSize=config.min_size,
                MaxSize=config.max_size,
                LaunchTemplate={"LaunchTemplateName": config.launch_template_name},
                VPCZoneIdentifier=",".join(subnet_ids),
                Tags=[
                    {
                        "ResourceId": config.name,
                        "ResourceType": "auto-scaling-group",
                        "Key": key,
                        "Value": value,
                        "PropagateAtLaunch": True,
                    }
                    for key, value in sorted(config.tags.items())
                ],
            )
            metrics.cloud_operations_total.labels(service=self.service, operation="create", result="success").inc()
        except ClientError:
            metrics.cloud_operations_total.labels(service=self.service, operation="create", result="failed").inc()
            raise

    def delete_auto_scaling_group(self, name: str, force_delete: bool = True) -> None:
        try:
            self._call("delete_auto_scaling_group", AutoScalingGroupName=name, ForceDelete=force_delete)
            metrics.cloud_operations_total.labels(service=self.service, operation="delete", result="success").inc()
        except ClientError:
            metrics.cloud_operations_total.labels(service=self.service, operation="delete", result="failed").inc()
            raise

    def describe_target_group_attachments(self, name: str) -> list[str]:
        response = self._call("describe_load_balancer_target_groups", AutoScalingGroupName=name)
        return [
            attachment["LoadBalancerTargetGroupARN"]
            for attachment in response.get("LoadBalancerTargetGroups", [])
        ]

    def attach_target_groups(self, name: str, arns: list[str]) -> None:
        self._call("attach_load_balancer_target_groups", AutoScalingGroupName=name, TargetGroupARNs=arns)
        metrics.cloud_operations_total.labels(service=self.service, operation="attach", result="success").inc()

    def detach_target_groups(self, name: str, arns: list[str]) -> None:
        self._call("detach_load_balancer_target_groups", AutoScalingGroupName=name, TargetGroupARNs=arns)
        metrics.cloud_operations_total.labels(service=self.service, operation="detach", result="success").inc()

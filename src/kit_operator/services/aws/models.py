"""Models for AWS infrastructure operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ...constants import ASG_STATUS_DELETE_IN_PROGRESS


@dataclass
class AutoScalingGroup:
    """Observed state of an autoscaling group."""

    name: str
    arn: str | None = None
    status: str | None = None
    desired_capacity: int = 0
    min_size: int = 0
    max_size: int = 0
    launch_template_name: str | None = None
    subnet_ids: list[str] = field(default_factory=list)
    target_group_arns: list[str] = field(default_factory=list)
    tags: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> AutoScalingGroup:
        """Build from a DescribeAutoScalingGroups entry."""
        launch_template = data.get("LaunchTemplate") or {}
        zone_identifier = data.get("VPCZoneIdentifier") or ""
        return cls(
            name=data["AutoScalingGroupName"],
            arn=data.get("AutoScalingGroupARN"),
            status=data.get("Status"),
            desired_capacity=data.get("DesiredCapacity", 0),
            min_size=data.get("MinSize", 0),
            max_size=data.get("MaxSize", 0),
            launch_template_name=launch_template.get("LaunchTemplateName"),
            subnet_ids=[s for s in zone_identifier.split(",") if s],
            target_group_arns=list(data.get("TargetGroupARNs", [])),
            tags={t["Key"]: t["Value"] for t in data.get("Tags", [])},
        )

    @property
    def deleting(self) -> bool:
        return self.status == ASG_STATUS_DELETE_IN_PROGRESS


@dataclass
class TargetGroup:
    """Observed state of a load balancer target group."""

    name: str
    arn: str
    vpc_id: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> TargetGroup:
        return cls(
            name=data["TargetGroupName"],
            arn=data["TargetGroupArn"],
            vpc_id=data.get("VpcId"),
        )


@dataclass
class AutoScalingGroupConfig:
    """Desired configuration used to create an autoscaling group."""

    name: str
    cluster_name: str
    desired_capacity: int
    min_size: int
    max_size: int
    launch_template_name: str
    target_group_name: str
    tags: dict[str, str] = field(default_factory=dict)

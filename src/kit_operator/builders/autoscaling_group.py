"""Builder for autoscaling group configurations."""

from __future__ import annotations

from typing import Any

from ..config import OperatorConfig
from ..constants import TAG_CLUSTER_NAME, TAG_NAME
from ..services.aws.models import AutoScalingGroupConfig


def create_asg_config_from_spec(
    name: str,
    spec: dict[str, Any],
    config: OperatorConfig,
) -> AutoScalingGroupConfig:
    """Create an autoscaling group configuration from an AutoScalingGroup spec.

    The launch template and target group share the group's name unless the
    spec overrides them.

    Args:
        name: AutoScalingGroup object name, also the external group name
        spec: AutoScalingGroup CRD spec
        config: Operator configuration holding the size bound policy

    Returns:
        Configuration for the autoscaling client

    Raises:
        ValueError: If the spec is invalid
    """
    cluster_name = spec.get("clusterName") or name
    instance_count = spec.get("instanceCount", config.asg_min_size)
    if not isinstance(instance_count, int) or isinstance(instance_count, bool):
        raise ValueError(f"instanceCount must be an integer, got {instance_count!r}")
    if instance_count < config.asg_min_size or instance_count > config.asg_max_size:
        raise ValueError(
            f"instanceCount {instance_count} outside of allowed range "
            f"[{config.asg_min_size}, {config.asg_max_size}]"
        )

    return AutoScalingGroupConfig(
        name=name,
        cluster_name=cluster_name,
        desired_capacity=instance_count,
        min_size=config.asg_min_size,
        max_size=config.asg_max_size,
        launch_template_name=spec.get("launchTemplateName") or name,
        target_group_name=spec.get("targetGroupName") or name,
        tags={TAG_NAME: name, TAG_CLUSTER_NAME: cluster_name},
    )

"""AWS service adapters."""

from .autoscaling import AutoScalingClient
from .base import AutoScalingAPI, EC2API, ELBV2API
from .ec2 import EC2Client
from .elbv2 import ELBV2Client
from .models import AutoScalingGroup, AutoScalingGroupConfig, TargetGroup

__all__ = [
    "AutoScalingAPI",
    "AutoScalingClient",
    "AutoScalingGroup",
    "AutoScalingGroupConfig",
    "EC2API",
    "EC2Client",
    "ELBV2API",
    "ELBV2Client",
    "TargetGroup",
]

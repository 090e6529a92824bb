"""Child objects projected from a control plane."""

from .autoscaling_group import AutoScalingGroupProjection
from .base import Projection, object_meta, object_name
from .nat_gateway import NatGatewayProjection

__all__ = [
    "AutoScalingGroupProjection",
    "NatGatewayProjection",
    "Projection",
    "object_meta",
    "object_name",
]

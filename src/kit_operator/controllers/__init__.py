"""Resource-kind controllers."""

from .autoscaling_group import AutoScalingGroupController
from .base import Controller, ensure_finalizer, remove_finalizer
from .control_plane import ControlPlaneController

__all__ = [
    "AutoScalingGroupController",
    "Controller",
    "ControlPlaneController",
    "ensure_finalizer",
    "remove_finalizer",
]

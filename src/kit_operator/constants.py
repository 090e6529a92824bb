"""Constants for the KIT infrastructure operator."""

from __future__ import annotations

from enum import Enum

# API Group
API_GROUP = "kit.k8s.sh"
API_VERSION = "v1alpha1"
API_GROUP_VERSION = f"{API_GROUP}/{API_VERSION}"


class ResourceKind(str, Enum):
    """Desired-state kinds known to the operator."""

    CONTROL_PLANE = "ControlPlane"
    AUTO_SCALING_GROUP = "AutoScalingGroup"
    NAT_GATEWAY = "NatGateway"
    SUBNET = "Subnet"
    LAUNCH_TEMPLATE = "LaunchTemplate"
    TARGET_GROUP = "TargetGroup"

    @property
    def plural(self) -> str:
        return f"{self.value.lower()}s"


# Labels
LABEL_MANAGED_BY = f"{API_GROUP}/managed-by"
LABEL_CLUSTER_NAME = f"{API_GROUP}/cluster-name"

# AWS tags
TAG_NAME = "Name"
TAG_CLUSTER_NAME = f"{API_GROUP}/cluster-name"
TAG_SUBNET_TYPE = f"{API_GROUP}/subnet-type"
SUBNET_TYPE_PRIVATE = "private"

# Provider lifecycle status reported while an autoscaling group is being removed
ASG_STATUS_DELETE_IN_PROGRESS = "Delete in progress"

# Finalizers
FINALIZER = f"{API_GROUP}/finalizer"

CONTROLLER_NAME = "kit-operator"

# Condition Types
COND_READY = "Ready"
COND_WAITING = "Waiting"
COND_RECONCILE_FAILED = "ReconcileFailed"

# Event Reasons
EVENT_REASON_RECONCILE_FAILED = "ReconcileFailed"
EVENT_REASON_WAITING = "WaitingForDependencies"
EVENT_REASON_RESOURCE_CREATED = "ResourceCreated"
EVENT_REASON_RESOURCE_DELETED = "ResourceDeleted"

"""Shared fixtures for unit tests."""

from __future__ import annotations

from typing import Any
from unittest.mock import Mock

import kopf
import pytest
from botocore.exceptions import ClientError

from kit_operator.config import OperatorConfig
from kit_operator.constants import ASG_STATUS_DELETE_IN_PROGRESS, ResourceKind
from kit_operator.controllers.autoscaling_group import AutoScalingGroupController
from kit_operator.objects import DesiredObject
from kit_operator.services.aws.models import AutoScalingGroup, AutoScalingGroupConfig, TargetGroup
from kit_operator.utils.context import ReconcileContext


class FakeCloud:
    """In-memory autoscaling, EC2 and ELBv2 APIs that record every call in order."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []
        self.groups: dict[str, list[AutoScalingGroup]] = {}
        self.attachments: dict[str, list[str]] = {}
        self.subnets: dict[str, list[str]] = {}
        self.target_groups: dict[str, TargetGroup] = {}
        self.errors: dict[str, Exception] = {}

    def _record(self, operation: str, *args: Any) -> None:
        self.calls.append((operation, args))
        if operation in self.errors:
            raise self.errors[operation]

    def operations(self, name: str | None = None) -> list[str]:
        ops = [op for op, _ in self.calls]
        return [op for op in ops if op == name] if name else ops

    # Setup helpers
    def add_group(self, name: str, status: str | None = None) -> AutoScalingGroup:
        group = AutoScalingGroup(name=name, status=status, desired_capacity=2, min_size=1, max_size=4)
        self.groups.setdefault(name, []).append(group)
        return group

    def add_target_group(self, name: str) -> TargetGroup:
        target_group = TargetGroup(
            name=name,
            arn=f"arn:aws:elasticloadbalancing:us-west-2:123456789012:targetgroup/{name}/abc",
        )
        self.target_groups[name] = target_group
        return target_group

    # AutoScalingAPI
    def describe_auto_scaling_groups(self, name: str) -> list[AutoScalingGroup]:
        self._record("describe_auto_scaling_groups", name)
        return list(self.groups.get(name, []))

    def create_auto_scaling_group(self, config: AutoScalingGroupConfig, subnet_ids: list[str]) -> None:
        self._record("create_auto_scaling_group", config, list(subnet_ids))
        self.groups[config.name] = [
            AutoScalingGroup(
                name=config.name,
                desired_capacity=config.desired_capacity,
                min_size=config.min_size,
                max_size=config.max_size,
                launch_template_name=config.launch_template_name,
                subnet_ids=list(subnet_ids),
                tags=dict(config.tags),
            )
        ]

    def delete_auto_scaling_group(self, name: str, force_delete: bool = True) -> None:
        self._record("delete_auto_scaling_group", name, force_delete)
        for group in self.groups.get(name, []):
            group.status = ASG_STATUS_DELETE_IN_PROGRESS

    def describe_target_group_attachments(self, name: str) -> list[str]:
        self._record("describe_target_group_attachments", name)
        return list(self.attachments.get(name, []))

    def attach_target_groups(self, name: str, arns: list[str]) -> None:
        self._record("attach_target_groups", name, list(arns))
        self.attachments.setdefault(name, []).extend(arns)

    def detach_target_groups(self, name: str, arns: list[str]) -> None:
        self._record("detach_target_groups", name, list(arns))
        self.attachments[name] = [arn for arn in self.attachments.get(name, []) if arn not in arns]

    # EC2API
    def private_subnet_ids(self, cluster_name: str) -> list[str]:
        self._record("private_subnet_ids", cluster_name)
        return list(self.subnets.get(cluster_name, []))

    # ELBV2API
    def get_target_group(self, name: str) -> TargetGroup | None:
        self._record("get_target_group", name)
        return self.target_groups.get(name)


def client_error(code: str, operation: str = "Operation") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


def asg_body(
    name: str = "asg-for-cluster-x",
    cluster: str = "cluster-x",
    instance_count: int = 2,
    target_group: str | None = "tg-x",
    deleting: bool = False,
    finalizers: list[str] | None = None,
    status: dict[str, Any] | None = None,
) -> dict[str, Any]:
    spec: dict[str, Any] = {"clusterName": cluster, "instanceCount": instance_count}
    if target_group:
        spec["targetGroupName"] = target_group
    meta: dict[str, Any] = {
        "name": name,
        "namespace": "default",
        "uid": "uid-1",
        "generation": 1,
        "finalizers": list(finalizers or []),
    }
    if deleting:
        meta["deletionTimestamp"] = "2024-01-01T00:00:00Z"
    return {
        "apiVersion": "kit.k8s.sh/v1alpha1",
        "kind": "AutoScalingGroup",
        "metadata": meta,
        "spec": spec,
        "status": dict(status or {}),
    }


@pytest.fixture
def cloud() -> FakeCloud:
    return FakeCloud()


@pytest.fixture
def config() -> OperatorConfig:
    return OperatorConfig(waiting_requeue_seconds=10.0, backoff_base_seconds=1.0, backoff_max_seconds=60.0)


@pytest.fixture
def asg_controller(cloud: FakeCloud, config: OperatorConfig) -> AutoScalingGroupController:
    return AutoScalingGroupController(cloud, cloud, cloud, config)


@pytest.fixture
def ctx() -> ReconcileContext:
    return ReconcileContext.for_object("AutoScalingGroup", {"name": "asg-for-cluster-x", "namespace": "default"})


@pytest.fixture
def asg_object() -> DesiredObject:
    return DesiredObject.from_body(ResourceKind.AUTO_SCALING_GROUP, asg_body())


@pytest.fixture(autouse=True)
def kopf_events(monkeypatch: pytest.MonkeyPatch) -> Mock:
    """Capture events instead of posting them to a cluster."""
    event = Mock()
    monkeypatch.setattr(kopf, "event", event)
    return event


@pytest.fixture
def make_body():
    return asg_body


@pytest.fixture
def make_client_error():
    return client_error

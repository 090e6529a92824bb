"""Wire-level tests for the boto3 adapters."""

from __future__ import annotations

from datetime import datetime, timezone

import boto3
import pytest
from botocore.exceptions import ClientError
from botocore.stub import Stubber

from kit_operator.config import OperatorConfig
from kit_operator.constants import ASG_STATUS_DELETE_IN_PROGRESS
from kit_operator.services.aws import AutoScalingClient, EC2Client, ELBV2Client
from kit_operator.services.aws.base import error_code
from kit_operator.services.aws.models import AutoScalingGroupConfig
from kit_operator.services.aws.session import create_client, create_session

TG_ARN = "arn:aws:elasticloadbalancing:us-west-2:123456789012:targetgroup/tg-x/abc"


def boto_client(service: str):
    return boto3.client(
        service,
        region_name="us-west-2",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )


def group_response(name: str, status: str | None = None) -> dict:
    group = {
        "AutoScalingGroupName": name,
        "AutoScalingGroupARN": f"arn:aws:autoscaling:us-west-2:123456789012:autoScalingGroup:uuid:autoScalingGroupName/{name}",
        "MinSize": 1,
        "MaxSize": 4,
        "DesiredCapacity": 2,
        "DefaultCooldown": 300,
        "AvailabilityZones": ["us-west-2a"],
        "HealthCheckType": "EC2",
        "CreatedTime": datetime(2024, 1, 1, tzinfo=timezone.utc),
        "LaunchTemplate": {"LaunchTemplateName": name},
        "VPCZoneIdentifier": "sn-1,sn-2",
        "TargetGroupARNs": [TG_ARN],
        "Tags": [{"Key": "Name", "Value": name}],
    }
    if status:
        group["Status"] = status
    return {"AutoScalingGroups": [group]}


@pytest.fixture
def autoscaling():
    client = boto_client("autoscaling")
    with Stubber(client) as stubber:
        yield AutoScalingClient(client), stubber
        stubber.assert_no_pending_responses()


@pytest.fixture
def ec2():
    client = boto_client("ec2")
    with Stubber(client) as stubber:
        yield EC2Client(client), stubber
        stubber.assert_no_pending_responses()


@pytest.fixture
def elbv2():
    client = boto_client("elbv2")
    with Stubber(client) as stubber:
        yield ELBV2Client(client), stubber
        stubber.assert_no_pending_responses()


class TestAutoScalingClient:
    """Test cases for AutoScalingClient."""

    def test_describe_parses_groups(self, autoscaling):
        client, stubber = autoscaling
        stubber.add_response(
            "describe_auto_scaling_groups",
            group_response("asg-for-cluster-x", ASG_STATUS_DELETE_IN_PROGRESS),
            {"AutoScalingGroupNames": ["asg-for-cluster-x"]},
        )

        groups = client.describe_auto_scaling_groups("asg-for-cluster-x")

        assert len(groups) == 1
        group = groups[0]
        assert group.name == "asg-for-cluster-x"
        assert group.desired_capacity == 2
        assert group.subnet_ids == ["sn-1", "sn-2"]
        assert group.launch_template_name == "asg-for-cluster-x"
        assert group.target_group_arns == [TG_ARN]
        assert group.deleting is True

    def test_describe_empty(self, autoscaling):
        client, stubber = autoscaling
        stubber.add_response("describe_auto_scaling_groups", {"AutoScalingGroups": []})

        assert client.describe_auto_scaling_groups("missing") == []

    def test_create_request_shape(self, autoscaling):
        """Test the create request, including tags propagated to instances."""
        client, stubber = autoscaling
        config = AutoScalingGroupConfig(
            name="asg-for-cluster-x",
            cluster_name="cluster-x",
            desired_capacity=2,
            min_size=1,
            max_size=4,
            launch_template_name="asg-for-cluster-x",
            target_group_name="tg-x",
            tags={"Name": "asg-for-cluster-x", "kit.k8s.sh/cluster-name": "cluster-x"},
        )
        tag = {"ResourceId": "asg-for-cluster-x", "ResourceType": "auto-scaling-group", "PropagateAtLaunch": True}
        stubber.add_response(
            "create_auto_scaling_group",
            {},
            {
                "AutoScalingGroupName": "asg-for-cluster-x",
                "DesiredCapacity": 2,
                "MinSize": 1,
                "MaxSize": 4,
                "LaunchTemplate": {"LaunchTemplateName": "asg-for-cluster-x"},
                "VPCZoneIdentifier": "sn-1,sn-2",
                "Tags": [
                    {**tag, "Key": "Name", "Value": "asg-for-cluster-x"},
                    {**tag, "Key": "kit.k8s.sh/cluster-name", "Value": "cluster-x"},
                ],
            },
        )

        client.create_auto_scaling_group(config, ["sn-1", "sn-2"])

    def test_create_already_exists_is_raised(self, autoscaling):
        """Test that the adapter surfaces AlreadyExists for the controller to interpret."""
        client, stubber = autoscaling
        stubber.add_client_error("create_auto_scaling_group", service_error_code="AlreadyExists")
        config = AutoScalingGroupConfig(
            name="asg-for-cluster-x",
            cluster_name="cluster-x",
            desired_capacity=2,
            min_size=1,
            max_size=4,
            launch_template_name="asg-for-cluster-x",
            target_group_name="tg-x",
        )

        with pytest.raises(ClientError) as exc_info:
            client.create_auto_scaling_group(config, ["sn-1"])

        assert error_code(exc_info.value) == "AlreadyExists"

    def test_force_delete(self, autoscaling):
        client, stubber = autoscaling
        stubber.add_response(
            "delete_auto_scaling_group",
            {},
            {"AutoScalingGroupName": "asg-for-cluster-x", "ForceDelete": True},
        )

        client.delete_auto_scaling_group("asg-for-cluster-x")

    def test_target_group_attachments(self, autoscaling):
        client, stubber = autoscaling
        stubber.add_response(
            "describe_load_balancer_target_groups",
            {"LoadBalancerTargetGroups": [{"LoadBalancerTargetGroupARN": TG_ARN, "State": "InService"}]},
            {"AutoScalingGroupName": "asg-for-cluster-x"},
        )

        assert client.describe_target_group_attachments("asg-for-cluster-x") == [TG_ARN]

    def test_attach_and_detach(self, autoscaling):
        client, stubber = autoscaling
        expected = {"AutoScalingGroupName": "asg-for-cluster-x", "TargetGroupARNs": [TG_ARN]}
        stubber.add_response("attach_load_balancer_target_groups", {}, expected)
        stubber.add_response("detach_load_balancer_target_groups", {}, expected)

        client.attach_target_groups("asg-for-cluster-x", [TG_ARN])
        client.detach_target_groups("asg-for-cluster-x", [TG_ARN])


class TestEC2Client:
    """Test cases for EC2Client."""

    def test_private_subnets_filtered_by_cluster_tag(self, ec2):
        client, stubber = ec2
        filters = [
            {"Name": "tag:kit.k8s.sh/cluster-name", "Values": ["cluster-x"]},
            {"Name": "tag:kit.k8s.sh/subnet-type", "Values": ["private"]},
        ]
        stubber.add_response(
            "describe_subnets",
            {"Subnets": [{"SubnetId": "sn-2"}], "NextToken": "page-2"},
            {"Filters": filters},
        )
        stubber.add_response(
            "describe_subnets",
            {"Subnets": [{"SubnetId": "sn-1"}]},
            {"Filters": filters, "NextToken": "page-2"},
        )

        assert client.private_subnet_ids("cluster-x") == ["sn-1", "sn-2"]

    def test_no_subnets(self, ec2):
        client, stubber = ec2
        stubber.add_response("describe_subnets", {"Subnets": []})

        assert client.private_subnet_ids("cluster-x") == []


class TestELBV2Client:
    """Test cases for ELBV2Client."""

    def test_get_target_group(self, elbv2):
        client, stubber = elbv2
        stubber.add_response(
            "describe_target_groups",
            {"TargetGroups": [{"TargetGroupName": "tg-x", "TargetGroupArn": TG_ARN, "VpcId": "vpc-1"}]},
            {"Names": ["tg-x"]},
        )

        target_group = client.get_target_group("tg-x")

        assert target_group is not None
        assert target_group.arn == TG_ARN
        assert target_group.vpc_id == "vpc-1"

    def test_missing_target_group_is_none(self, elbv2):
        client, stubber = elbv2
        stubber.add_client_error("describe_target_groups", service_error_code="TargetGroupNotFound")

        assert client.get_target_group("tg-x") is None

    def test_other_errors_propagate(self, elbv2):
        client, stubber = elbv2
        stubber.add_client_error("describe_target_groups", service_error_code="Throttling")

        with pytest.raises(ClientError):
            client.get_target_group("tg-x")


class TestSession:
    """Test cases for client construction."""

    def test_client_uses_configured_region_and_retry_mode(self):
        config = OperatorConfig(aws_region="us-west-2")

        client = create_client(create_session(config), "autoscaling", config)

        assert client.meta.region_name == "us-west-2"
        assert client.meta.config.retries["mode"] == "standard"

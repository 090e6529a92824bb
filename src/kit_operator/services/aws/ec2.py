"""AWS EC2 client implementation."""

from __future__ import annotations

from ...constants import SUBNET_TYPE_PRIVATE, TAG_CLUSTER_NAME, TAG_SUBNET_TYPE
from .base import AWSServiceClient


class EC2Client(AWSServiceClient):
    """Subnet lookups over boto3."""

    service = "ec2"

    def private_subnet_ids(self, cluster_name: str) -> list[str]:
        """Return the private subnet IDs tagged for a cluster, sorted."""
        subnet_ids: list[str] = []
        params = {
            "Filters": [
                {"Name": f"tag:{TAG_CLUSTER_NAME}", "Values": [cluster_name]},
                {"Name": f"tag:{TAG_SUBNET_TYPE}", "Values": [SUBNET_TYPE_PRIVATE]},
            ],
        }
        while True:
            response = self._call("describe_subnets", **params)
            subnet_ids.extend(subnet["SubnetId"] for subnet in response.get("Subnets", []))
            next_token = response.get("NextToken")
            if not next_token:
                break
            params["NextToken"] = next_token
        return sorted(subnet_ids)

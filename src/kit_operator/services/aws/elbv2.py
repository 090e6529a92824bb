"""AWS Elastic Load Balancing v2 client implementation."""

from __future__ import annotations

from botocore.exceptions import ClientError

from .base import AWSServiceClient, error_code
from .models import TargetGroup


class ELBV2Client(AWSServiceClient):
    """Target group lookups over boto3."""

    service = "elbv2"

    def get_target_group(self, name: str) -> TargetGroup | None:
        try:
            response = self._call("describe_target_groups", Names=[name])
        except ClientError as e:
            if error_code(e) == "TargetGroupNotFound":
                return None
            raise
        groups = response.get("TargetGroups", [])
        if not groups:
            return None
        return TargetGroup.from_api(groups[0])

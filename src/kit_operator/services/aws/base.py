"""Cloud API interfaces consumed by the controllers."""

from __future__ import annotations

import logging
import time
from typing import Any, Protocol

from botocore.exceptions import BotoCoreError, ClientError

from ... import metrics
from ...tracing import trace_span
from ...utils.errors import sanitize_exception
from ...utils.rate_limit import rate_limit_aws
from .models import AutoScalingGroup, AutoScalingGroupConfig, TargetGroup

logger = logging.getLogger(__name__)


def error_code(error: Exception) -> str | None:
    """Return the AWS error code of a ClientError, or None."""
    if isinstance(error, ClientError):
        return error.response.get("Error", {}).get("Code")
    return None


class AWSServiceClient:
    """Thin wrapper over a boto3 client.

    Each call is rate limited, timed and counted. Errors are logged and
    re-raised unchanged; retry policy belongs to the dispatcher.
    """

    service: str = "aws"

    def __init__(self, client: Any):
        self.client = client

    def _call(self, operation: str, **params: Any) -> dict[str, Any]:
        start_time = time.time()
        try:
            with trace_span(f"{self.service}.{operation}", attributes={"aws.service": self.service}):
                response = rate_limit_aws(getattr(self.client, operation))(**params)
            metrics.api_call_total.labels(api_type=self.service, operation=operation, result="success").inc()
            return response
        except (ClientError, BotoCoreError) as e:
            metrics.api_call_total.labels(api_type=self.service, operation=operation, result="error").inc()
            logger.debug(f"{self.service}.{operation} failed: {sanitize_exception(e)}")
            raise
        finally:
            duration = time.time() - start_time
            metrics.api_call_duration_seconds.labels(api_type=self.service, operation=operation).observe(duration)


class AutoScalingAPI(Protocol):
    """Protocol defining autoscaling group operations."""

    def describe_auto_scaling_groups(self, name: str) -> list[AutoScalingGroup]:
        """Return every group matching the name (zero or one when consistent)."""
        ...

    def create_auto_scaling_group(self, config: AutoScalingGroupConfig, subnet_ids: list[str]) -> None:
        """Create a group from configuration in the given subnets."""
        ...

    def delete_auto_scaling_group(self, name: str, force_delete: bool = True) -> None:
        """Delete a group, terminating its instances when force_delete is set."""
        ...

    def describe_target_group_attachments(self, name: str) -> list[str]:
        """Return the target group ARNs attached to a group."""
        ...

    def attach_target_groups(self, name: str, arns: list[str]) -> None:
        """Attach target groups to a group."""
        ...

    def detach_target_groups(self, name: str, arns: list[str]) -> None:
        """Detach target groups from a group."""
        ...


class EC2API(Protocol):
    """Protocol defining the subnet lookups the controllers need."""

    def private_subnet_ids(self, cluster_name: str) -> list[str]:
        """Return the private subnet IDs tagged for a cluster."""
        ...


class ELBV2API(Protocol):
    """Protocol defining target group lookups."""

    def get_target_group(self, name: str) -> TargetGroup | None:
        """Return the target group with the given name, or None."""
        ...

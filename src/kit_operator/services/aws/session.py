"""Factory for boto3 clients."""

from __future__ import annotations

from typing import Any

import boto3
from botocore.config import Config

from ...config import OperatorConfig


def create_session(config: OperatorConfig) -> boto3.session.Session:
    """Create a boto3 session using the default credential chain.

    Credentials come from the pod identity (IRSA) or the environment; the
    operator never reads keys from its own resources.
    """
    return boto3.session.Session(region_name=config.aws_region)


def create_client(session: boto3.session.Session, service: str, config: OperatorConfig) -> Any:
    """Create a boto3 client with the operator's timeouts."""
    client_config = Config(
        retries={"max_attempts": config.aws_max_attempts, "mode": "standard"},
        connect_timeout=config.aws_connect_timeout,
        read_timeout=config.aws_read_timeout,
        user_agent_extra="kit-operator",
    )
    return session.client(service, config=client_config)

"""Main entry point for the KIT infrastructure operator."""

from __future__ import annotations

import logging
import sys
import threading

from .config import OperatorConfig
from .controllers import AutoScalingGroupController, Controller, ControlPlaneController
from .errors import ConfigurationError
from .logging import setup_structured_logging
from .manager import Manager
from .services.aws import AutoScalingClient, EC2Client, ELBV2Client
from .services.aws.session import create_client, create_session
from .services.kube import KubeObjectStore, get_k8s_client
from .tracing import initialize_tracing

logger = logging.getLogger(__name__)


def build_controllers(config: OperatorConfig, store: KubeObjectStore) -> list[Controller]:
    """Create the controllers with clients bound to the configured region."""
    session = create_session(config)
    return [
        ControlPlaneController(store),
        AutoScalingGroupController(
            AutoScalingClient(create_client(session, "autoscaling", config)),
            EC2Client(create_client(session, "ec2", config)),
            ELBV2Client(create_client(session, "elbv2", config)),
            config,
        ),
    ]


def main() -> int:
    try:
        config = OperatorConfig.from_env()
    except ConfigurationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    setup_structured_logging(config.log_level)
    initialize_tracing()

    store = KubeObjectStore(get_k8s_client())
    stop_flag = threading.Event()
    runnable = Manager(config).register_controllers(*build_controllers(config, store))
    runnable.start(stop_flag)
    logger.info("Operator stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())

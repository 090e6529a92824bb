"""Operator configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .errors import ConfigurationError

DEFAULT_WAITING_REQUEUE_SECONDS = 10.0
DEFAULT_BACKOFF_BASE_SECONDS = 1.0
DEFAULT_BACKOFF_MAX_SECONDS = 300.0
DEFAULT_COALESCE_DELAY_SECONDS = 2.0
DEFAULT_RESYNC_INTERVAL_SECONDS = 300.0
DEFAULT_RECONCILE_TIMEOUT_SECONDS = 120.0

# Size bound policy for control plane autoscaling groups
DEFAULT_ASG_MIN_SIZE = 1
DEFAULT_ASG_MAX_SIZE = 4


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from e


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from e


@dataclass(frozen=True)
class OperatorConfig:
    """Runtime configuration for the operator."""

    aws_region: str | None = None
    aws_max_attempts: int = 3
    aws_connect_timeout: float = 10.0
    aws_read_timeout: float = 30.0

    metrics_port: int = 8080
    log_level: str = "INFO"
    max_workers: int = 4

    waiting_requeue_seconds: float = DEFAULT_WAITING_REQUEUE_SECONDS
    backoff_base_seconds: float = DEFAULT_BACKOFF_BASE_SECONDS
    backoff_max_seconds: float = DEFAULT_BACKOFF_MAX_SECONDS
    coalesce_delay_seconds: float = DEFAULT_COALESCE_DELAY_SECONDS
    resync_interval_seconds: float = DEFAULT_RESYNC_INTERVAL_SECONDS
    reconcile_timeout_seconds: float = DEFAULT_RECONCILE_TIMEOUT_SECONDS

    asg_min_size: int = DEFAULT_ASG_MIN_SIZE
    asg_max_size: int = DEFAULT_ASG_MAX_SIZE

    standalone: bool = False
    peering_name: str = "kit-leader-election"
    peering_priority: int = 0
    namespace: str | None = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Check bounds that would otherwise surface as confusing runtime errors.

        Raises:
            ConfigurationError: If a value is out of range
        """
        if self.asg_min_size < 0:
            raise ConfigurationError("ASG_MIN_SIZE must not be negative")
        if self.asg_max_size < self.asg_min_size:
            raise ConfigurationError("ASG_MAX_SIZE must be greater than or equal to ASG_MIN_SIZE")
        if self.max_workers < 1:
            raise ConfigurationError("MAX_WORKERS must be at least 1")
        if self.aws_max_attempts < 1:
            raise ConfigurationError("AWS_MAX_ATTEMPTS must be at least 1")
        for name, value in (
            ("WAITING_REQUEUE_SECONDS", self.waiting_requeue_seconds),
            ("BACKOFF_BASE_SECONDS", self.backoff_base_seconds),
            ("COALESCE_DELAY_SECONDS", self.coalesce_delay_seconds),
            ("RESYNC_INTERVAL_SECONDS", self.resync_interval_seconds),
            ("RECONCILE_TIMEOUT_SECONDS", self.reconcile_timeout_seconds),
        ):
            if value <= 0:
                raise ConfigurationError(f"{name} must be positive")
        if self.backoff_max_seconds < self.backoff_base_seconds:
            raise ConfigurationError("BACKOFF_MAX_SECONDS must be greater than or equal to BACKOFF_BASE_SECONDS")

    @classmethod
    def from_env(cls) -> OperatorConfig:
        """Load configuration from environment variables."""
        return cls(
            aws_region=os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION"),
            aws_max_attempts=_env_int("AWS_MAX_ATTEMPTS", 3),
            aws_connect_timeout=_env_float("AWS_CONNECT_TIMEOUT_SECONDS", 10.0),
            aws_read_timeout=_env_float("AWS_READ_TIMEOUT_SECONDS", 30.0),
            metrics_port=_env_int("METRICS_PORT", 8080),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            max_workers=_env_int("MAX_WORKERS", 4),
            waiting_requeue_seconds=_env_float("WAITING_REQUEUE_SECONDS", DEFAULT_WAITING_REQUEUE_SECONDS),
            backoff_base_seconds=_env_float("BACKOFF_BASE_SECONDS", DEFAULT_BACKOFF_BASE_SECONDS),
            backoff_max_seconds=_env_float("BACKOFF_MAX_SECONDS", DEFAULT_BACKOFF_MAX_SECONDS),
            coalesce_delay_seconds=_env_float("COALESCE_DELAY_SECONDS", DEFAULT_COALESCE_DELAY_SECONDS),
            resync_interval_seconds=_env_float("RESYNC_INTERVAL_SECONDS", DEFAULT_RESYNC_INTERVAL_SECONDS),
            reconcile_timeout_seconds=_env_float("RECONCILE_TIMEOUT_SECONDS", DEFAULT_RECONCILE_TIMEOUT_SECONDS),
            asg_min_size=_env_int("ASG_MIN_SIZE", DEFAULT_ASG_MIN_SIZE),
            asg_max_size=_env_int("ASG_MAX_SIZE", DEFAULT_ASG_MAX_SIZE),
            standalone=_env_bool("STANDALONE", False),
            peering_name=os.getenv("PEERING_NAME", "kit-leader-election"),
            peering_priority=_env_int("PEERING_PRIORITY", 0),
            namespace=os.getenv("WATCH_NAMESPACE") or None,
        )

"""Utility functions for the KIT operator."""

from .conditions import (
    set_ready_condition,
    set_reconcile_failed_condition,
    set_waiting_condition,
    update_condition,
)
from .errors import sanitize_dict, sanitize_error_message, sanitize_exception
from .rate_limit import RateLimiter, rate_limit_aws, rate_limit_k8s

__all__ = [
    "update_condition",
    "set_ready_condition",
    "set_waiting_condition",
    "set_reconcile_failed_condition",
    "sanitize_error_message",
    "sanitize_exception",
    "sanitize_dict",
    "RateLimiter",
    "rate_limit_k8s",
    "rate_limit_aws",
]

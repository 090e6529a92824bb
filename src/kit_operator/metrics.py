"""Prometheus metrics for the KIT operator."""

from prometheus_client import Counter, Histogram

# Reconciliation metrics
reconcile_total = Counter(
    "kit_operator_reconcile_total",
    "Total number of reconcile and finalize passes",
    ["kind", "result"],
)

reconcile_duration_seconds = Histogram(
    "kit_operator_reconcile_duration_seconds",
    "Duration of reconcile and finalize passes in seconds",
    ["kind"],
    buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

requeue_total = Counter(
    "kit_operator_requeue_total",
    "Total number of requeues scheduled by the dispatcher",
    ["kind", "reason"],
)

resource_status_total = Counter(
    "kit_operator_resource_status_total",
    "Status outcomes recorded on reconciled objects",
    ["kind", "status"],
)

error_total = Counter(
    "kit_operator_error_total",
    "Total number of errors raised while reconciling",
    ["kind", "error_type"],
)

# Cloud operation metrics
cloud_operations_total = Counter(
    "kit_operator_cloud_operations_total",
    "Total number of mutating cloud operations",
    ["service", "operation", "result"],
)

# Configuration drift detection metrics
drift_detected_total = Counter(
    "kit_operator_drift_detected_total",
    "Total number of configuration drift detections",
    ["kind", "resource_type"],
)

# API call metrics
api_call_total = Counter(
    "kit_operator_api_call_total",
    "Total number of API calls",
    ["api_type", "operation", "result"],
)

api_call_duration_seconds = Histogram(
    "kit_operator_api_call_duration_seconds",
    "Duration of API calls in seconds",
    ["api_type", "operation"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0],
)

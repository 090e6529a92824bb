"""Desired-state object store backed by the Kubernetes API."""

from __future__ import annotations

import time
from typing import Any

from kubernetes import client, config
from kubernetes.client.exceptions import ApiException

from .. import metrics
from ..constants import API_GROUP, API_VERSION, ResourceKind
from ..errors import ObjectNotFound
from ..utils.rate_limit import rate_limit_k8s


def get_k8s_client() -> client.CustomObjectsApi:
    """Get Kubernetes CustomObjectsApi client.

    Returns:
        CustomObjectsApi instance
    """
    try:
        config.load_incluster_config()
    except config.ConfigException:
        config.load_kube_config()

    return client.CustomObjectsApi()


class KubeObjectStore:
    """Get, create, patch and delete namespaced custom objects of the operator's API group."""

    def __init__(self, api: Any):
        self.api = api

    def _call(
        self, operation: str, kind: ResourceKind, namespace: str, object_name: str, func: Any, **kwargs: Any
    ) -> Any:
        start_time = time.time()
        try:
            result = rate_limit_k8s(func)(
                group=API_GROUP,
                version=API_VERSION,
                namespace=namespace,
                plural=kind.plural,
                **kwargs,
            )
            metrics.api_call_total.labels(api_type="k8s", operation=operation, result="success").inc()
            return result
        except ApiException as e:
            metrics.api_call_total.labels(api_type="k8s", operation=operation, result="error").inc()
            if e.status == 404:
                raise ObjectNotFound(kind.value, namespace, object_name) from e
            raise
        finally:
            duration = time.time() - start_time
            metrics.api_call_duration_seconds.labels(api_type="k8s", operation=operation).observe(duration)

    def get(self, kind: ResourceKind, namespace: str, name: str) -> dict[str, Any]:
        """Get an object.

        Raises:
            ObjectNotFound: If the object does not exist
            ApiException: On any other API error
        """
        return self._call(
            f"get_{kind.plural}", kind, namespace, name, self.api.get_namespaced_custom_object, name=name
        )

    def create(self, kind: ResourceKind, namespace: str, body: dict[str, Any]) -> dict[str, Any]:
        name = body.get("metadata", {}).get("name", "")
        return self._call(
            f"create_{kind.plural}", kind, namespace, name, self.api.create_namespaced_custom_object, body=body
        )

    def patch(self, kind: ResourceKind, namespace: str, name: str, body: dict[str, Any]) -> dict[str, Any]:
        return self._call(
            f"patch_{kind.plural}",
            kind,
            namespace,
            name,
            self.api.patch_namespaced_custom_object,
            name=name,
            body=body,
        )

    def delete(self, kind: ResourceKind, namespace: str, name: str) -> None:
        """Delete an object; an absent object counts as deleted."""
        try:
            self._call(
                f"delete_{kind.plural}", kind, namespace, name, self.api.delete_namespaced_custom_object, name=name
            )
        except ObjectNotFound:
            pass

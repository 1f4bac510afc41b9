"""Cluster layer: the injected handle onto the Kubernetes API."""

from kube_testkit.cluster.client import ClusterClient, CreateResult, load_api_client

__all__ = [
    "ClusterClient",
    "CreateResult",
    "load_api_client",
]

"""Thin typed wrapper over the Kubernetes API used by bootstrap and verification."""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any

from kubernetes import client, config
from kubernetes.client.rest import ApiException

from kube_testkit.errors import ManifestError, UnsupportedKindError

if TYPE_CHECKING:
    from kube_testkit.install.models import ResourceRef

logger = logging.getLogger(__name__)

# kind -> (api attribute, method suffix, namespaced)
_ROUTES: dict[str, tuple[str, str, bool]] = {
    "CustomResourceDefinition": ("_apiextensions", "custom_resource_definition", False),
    "ClusterRole": ("_rbac", "cluster_role", False),
    "ClusterRoleBinding": ("_rbac", "cluster_role_binding", False),
    "Role": ("_rbac", "namespaced_role", True),
    "RoleBinding": ("_rbac", "namespaced_role_binding", True),
}

# Messages the API server returns for a container whose log does not exist yet
_LOG_NOT_READY_MARKERS = ("waiting to start", "ContainerCreating", "PodInitializing")


class CreateResult(str, Enum):
    """Outcome of a create request."""

    CREATED = "created"
    ALREADY_EXISTS = "already_exists"


def load_api_client(kubeconfig: str | None = None, context: str | None = None) -> client.ApiClient:
    """Load in-cluster or kubeconfig-based configuration and return an ApiClient."""
    try:
        config.load_incluster_config()
        return client.ApiClient(client.Configuration.get_default_copy())
    except config.ConfigException:
        pass
    kwargs: dict[str, Any] = {}
    if kubeconfig:
        kwargs["config_file"] = str(kubeconfig)
    if context:
        kwargs["context"] = context
    config.load_kube_config(**kwargs)
    return client.ApiClient(client.Configuration.get_default_copy())


class ClusterClient:
    """Point-in-time cluster operations: discovery, create, read, pod list and pod log.

    NotFound and AlreadyExists are turned into values here; every other
    ApiException propagates to the caller unchanged.
    """

    def __init__(self, api_client: client.ApiClient) -> None:
        self.api_client = api_client
        self._core = client.CoreV1Api(api_client)
        self._rbac = client.RbacAuthorizationV1Api(api_client)
        self._apiextensions = client.ApiextensionsV1Api(api_client)
        self._custom = client.CustomObjectsApi(api_client)

    @classmethod
    def from_kubeconfig(cls, kubeconfig: str | None = None, context: str | None = None) -> ClusterClient:
        return cls(load_api_client(kubeconfig, context))

    # -------------------------------------------------------------------------
    # Discovery
    # -------------------------------------------------------------------------

    def api_resource_kinds(self, group: str, version: str) -> list[str] | None:
        """Return the kinds served under group/version, or None if it is not served."""
        try:
            resources = self._custom.get_api_resources(group=group, version=version)
        except ApiException as e:
            if e.status == 404:
                return None
            raise
        return [r.kind for r in (resources.resources or [])]

    # -------------------------------------------------------------------------
    # Objects
    # -------------------------------------------------------------------------

    def _route(self, kind: str | None) -> tuple[Any, str, bool]:
        if kind not in _ROUTES:
            raise UnsupportedKindError(f"No API route for kind {kind!r}")
        api_attr, suffix, namespaced = _ROUTES[kind]
        return getattr(self, api_attr), suffix, namespaced

    def exists(self, ref: ResourceRef) -> bool:
        """Return True if the named object referenced by ``ref`` exists."""
        api, suffix, namespaced = self._route(ref.kind)
        kwargs: dict[str, Any] = {"name": ref.name}
        if namespaced:
            kwargs["namespace"] = ref.namespace or "default"
        try:
            getattr(api, f"read_{suffix}")(**kwargs)
        except ApiException as e:
            if e.status == 404:
                return False
            raise
        return True

    def create(self, body: dict[str, Any], namespace: str | None = None) -> CreateResult:
        """Submit a create request; a 409 Conflict is reported as ALREADY_EXISTS."""
        api, suffix, namespaced = self._route(body.get("kind"))
        kwargs: dict[str, Any] = {"body": body}
        if namespaced:
            ns = namespace or (body.get("metadata") or {}).get("namespace")
            if not ns:
                raise ManifestError(f"{body.get('kind')} requires a namespace")
            kwargs["namespace"] = ns
        try:
            getattr(api, f"create_{suffix}")(**kwargs)
        except ApiException as e:
            if e.status == 409:
                logger.debug("%s already exists: %s", body.get("kind"), e.reason)
                return CreateResult.ALREADY_EXISTS
            raise
        return CreateResult.CREATED

    # -------------------------------------------------------------------------
    # Pods
    # -------------------------------------------------------------------------

    def list_pods(self, namespace: str, label_selector: str) -> list[Any]:
        """List pods matching ``label_selector``, in API order."""
        pod_list = self._core.list_namespaced_pod(namespace=namespace, label_selector=label_selector)
        return list(pod_list.items or [])

    def read_pod_log(self, name: str, namespace: str, container: str | None = None) -> str:
        """Return the current log of a pod container; empty if the container has not started."""
        kwargs: dict[str, Any] = {"name": name, "namespace": namespace}
        if container:
            kwargs["container"] = container
        try:
            log = self._core.read_namespaced_pod_log(**kwargs)
        except ApiException as e:
            body = str(e.body or "")
            if e.status == 400 and any(m in body for m in _LOG_NOT_READY_MARKERS):
                return ""
            raise
        return log or ""

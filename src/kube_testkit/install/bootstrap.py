"""Suite setup: install the CRDs, the edit ClusterRole and namespace permissions."""

from __future__ import annotations

import copy
import logging
import threading
from typing import Any

from kube_testkit.cluster import ClusterClient
from kube_testkit.config import Settings
from kube_testkit.install.crd import wait_for_crd
from kube_testkit.install.installer import ensure
from kube_testkit.install.manifests import load_bundled_manifest
from kube_testkit.install.models import Collection, InstallationOutcome, ResourceRef

logger = logging.getLogger(__name__)

INSTANCE_CRD = "crd-instance.yaml"
TEST_CRD = "crd-test.yaml"
USER_CLUSTER_ROLE = "user-cluster-role.yaml"
OPERATOR_ROLE = "role.yaml"
OPERATOR_ROLE_BINDING = "role-binding.yaml"


def _renamed(ref: ResourceRef, body: dict[str, Any], name: str) -> tuple[ResourceRef, dict[str, Any]]:
    body = copy.deepcopy(body)
    body["metadata"]["name"] = name
    return ref.model_copy(update={"name": name}), body


def _namespaced(ref: ResourceRef, body: dict[str, Any], namespace: str) -> tuple[ResourceRef, dict[str, Any]]:
    body = copy.deepcopy(body)
    body["metadata"]["namespace"] = namespace
    return ref.model_copy(update={"namespace": namespace}), body


def setup_cluster_resources(
    cluster: ClusterClient | None,
    settings: Settings,
    collection: Collection | None = None,
    cancel: threading.Event | None = None,
) -> dict[ResourceRef, InstallationOutcome]:
    """Install the Instance and Test CRDs, wait for them, then the edit ClusterRole.

    In collect mode nothing is sent to the cluster and the CRD wait is skipped.
    """
    outcomes: dict[ResourceRef, InstallationOutcome] = {}

    for manifest in (INSTANCE_CRD, TEST_CRD):
        ref, body = load_bundled_manifest(manifest)
        outcomes[ref] = ensure(cluster, ref, body, collection)

    if collection is None:
        test_ref, _ = load_bundled_manifest(TEST_CRD)
        wait_for_crd(
            cluster,
            test_ref.kind,
            test_ref.version,
            settings.crd_timeout,
            group=test_ref.group,
            cancel=cancel,
        )

    ref, body = _renamed(*load_bundled_manifest(USER_CLUSTER_ROLE), settings.cluster_role_name)
    outcomes[ref] = ensure(cluster, ref, body, collection)
    return outcomes


def setup_namespace_resources(
    cluster: ClusterClient | None,
    namespace: str,
    service_account: str = "yaks",
    collection: Collection | None = None,
) -> dict[ResourceRef, InstallationOutcome]:
    """Install the operator Role and bind it to ``service_account`` in ``namespace``."""
    outcomes: dict[ResourceRef, InstallationOutcome] = {}

    ref, body = _namespaced(*load_bundled_manifest(OPERATOR_ROLE), namespace)
    outcomes[ref] = ensure(cluster, ref, body, collection)

    ref, body = _namespaced(*load_bundled_manifest(OPERATOR_ROLE_BINDING), namespace)
    for subject in body.get("subjects") or []:
        if subject.get("kind") == "ServiceAccount":
            subject["name"] = service_account
            subject["namespace"] = namespace
    outcomes[ref] = ensure(cluster, ref, body, collection)
    return outcomes

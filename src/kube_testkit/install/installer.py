"""Idempotent, additive-only install of cluster resources."""

from __future__ import annotations

import logging
from typing import Any

from kube_testkit.cluster import ClusterClient, CreateResult
from kube_testkit.install.crd import is_crd_installed
from kube_testkit.install.manifests import CRD_KIND
from kube_testkit.install.models import Collection, InstallationOutcome, ResourceRef

logger = logging.getLogger(__name__)


def is_installed(cluster: ClusterClient, ref: ResourceRef, body: dict[str, Any]) -> bool:
    """CRDs are checked through discovery, everything else by a named read."""
    if body.get("kind") == CRD_KIND:
        return is_crd_installed(cluster, ref.kind, ref.version, ref.group)
    return cluster.exists(ref)


def ensure(
    cluster: ClusterClient | None,
    ref: ResourceRef,
    body: dict[str, Any],
    collection: Collection | None = None,
) -> InstallationOutcome:
    """Install ``body`` unless ``ref`` is already present.

    With a collection the body is appended to it and the cluster is not
    contacted at all. Existing resources are never updated or deleted.
    """
    if collection is not None:
        collection.add(body)
        logger.debug("Collected %s", ref)
        return InstallationOutcome.COLLECTED
    if cluster is None:
        raise ValueError("A cluster client is required unless collecting")

    if is_installed(cluster, ref, body):
        logger.debug("%s already present", ref)
        return InstallationOutcome.ALREADY_PRESENT

    if cluster.create(body, namespace=ref.namespace) is CreateResult.ALREADY_EXISTS:
        logger.info("%s was installed concurrently", ref)
        return InstallationOutcome.ALREADY_PRESENT
    logger.info("Installed %s", ref)
    return InstallationOutcome.INSTALLED

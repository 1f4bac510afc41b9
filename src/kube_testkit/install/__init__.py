"""Install layer: idempotent bootstrap of cluster-scoped test resources."""

from kube_testkit.install.bootstrap import setup_cluster_resources, setup_namespace_resources
from kube_testkit.install.crd import is_crd_installed, wait_for_crd
from kube_testkit.install.installer import ensure, is_installed
from kube_testkit.install.manifests import load_bundled_manifest, parse_manifest
from kube_testkit.install.models import Collection, InstallationOutcome, ResourceRef

__all__ = [
    "Collection",
    "InstallationOutcome",
    "ResourceRef",
    "ensure",
    "is_crd_installed",
    "is_installed",
    "load_bundled_manifest",
    "parse_manifest",
    "setup_cluster_resources",
    "setup_namespace_resources",
    "wait_for_crd",
]

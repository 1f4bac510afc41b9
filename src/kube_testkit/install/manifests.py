"""Parse raw YAML/JSON manifests into a ResourceRef plus body."""

from __future__ import annotations

from importlib import resources
from typing import Any

import yaml

from kube_testkit.errors import ManifestError
from kube_testkit.install.models import ResourceRef

CRD_KIND = "CustomResourceDefinition"


def _split_api_version(api_version: str) -> tuple[str, str]:
    """Split 'group/version' into (group, version); core resources have no group."""
    if "/" in api_version:
        group, version = api_version.split("/", 1)
        return group, version
    return "", api_version


def _served_version(spec: dict[str, Any]) -> str | None:
    """First served version of a CRD spec (apiextensions v1, or v1beta1 'version')."""
    for v in spec.get("versions") or []:
        if v.get("served", True) and v.get("name"):
            return v["name"]
    return spec.get("version")


def parse_manifest(raw: bytes | str) -> tuple[ResourceRef, dict[str, Any]]:
    """Parse a single-document manifest.

    For a CustomResourceDefinition the returned ref names the served type
    (spec.group, spec.names.kind, first served version) since its presence is
    decided through discovery. For any other kind the ref names the object.

    Raises:
        ManifestError: invalid YAML/JSON or missing apiVersion, kind or metadata.name
    """
    try:
        body = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ManifestError("Manifest is not valid YAML or JSON", details=str(e)) from e
    if not isinstance(body, dict):
        raise ManifestError("Manifest must be a mapping")

    api_version = body.get("apiVersion")
    kind = body.get("kind")
    metadata = body.get("metadata") or {}
    name = metadata.get("name")
    if not api_version or not kind or not name:
        raise ManifestError("Manifest requires apiVersion, kind and metadata.name")

    if kind == CRD_KIND:
        spec = body.get("spec") or {}
        served_kind = (spec.get("names") or {}).get("kind")
        version = _served_version(spec)
        if not spec.get("group") or not served_kind or not version:
            raise ManifestError(f"CRD {name} requires spec.group, spec.names.kind and a served version")
        return ResourceRef(group=spec["group"], kind=served_kind, version=version, name=name), body

    group, version = _split_api_version(api_version)
    ref = ResourceRef(group=group, kind=kind, version=version, name=name, namespace=metadata.get("namespace"))
    return ref, body


def load_bundled_manifest(name: str) -> tuple[ResourceRef, dict[str, Any]]:
    """Parse a manifest shipped with the package."""
    path = resources.files("kube_testkit.install").joinpath("deploy").joinpath(name)
    try:
        raw = path.read_bytes()
    except FileNotFoundError as e:
        raise ManifestError(f"No bundled manifest named {name!r}") from e
    return parse_manifest(raw)

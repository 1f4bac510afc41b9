"""Detect custom resource types through discovery and wait for them to be served."""

from __future__ import annotations

import logging
import threading
import time

from kube_testkit.cluster import ClusterClient
from kube_testkit.errors import VerificationTimeout
from kube_testkit.verification.polling import sleep_or_cancel

logger = logging.getLogger(__name__)

CRD_GROUP = "yaks.citrusframework.org"

# Seconds between discovery checks; not configurable per call
CRD_POLL_INTERVAL = 2.0


def is_crd_installed(cluster: ClusterClient, kind: str, version: str, group: str = CRD_GROUP) -> bool:
    """Return True if discovery reports ``kind`` under group/version."""
    kinds = cluster.api_resource_kinds(group, version)
    return kinds is not None and kind in kinds


def wait_for_crd(
    cluster: ClusterClient,
    kind: str,
    version: str,
    timeout: float,
    group: str = CRD_GROUP,
    cancel: threading.Event | None = None,
) -> None:
    """Poll discovery every CRD_POLL_INTERVAL seconds until ``kind`` is served.

    Discovery errors other than "not found" propagate immediately.

    Raises:
        VerificationTimeout: ``timeout`` seconds elapsed without a match
    """
    start = time.monotonic()
    deadline = start + timeout
    attempts = 0
    while True:
        attempts += 1
        if is_crd_installed(cluster, kind, version, group):
            logger.info("CRD %s (%s/%s) is registered", kind, group, version)
            return
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            break
        logger.warning("Waiting for CRD %s (%s/%s) - retry in %gs", kind, group, version, CRD_POLL_INTERVAL)
        sleep_or_cancel(min(CRD_POLL_INTERVAL, remaining), cancel)
        if time.monotonic() >= deadline:
            break
    raise VerificationTimeout(
        f"CRD {kind} ({group}/{version}) is not registered after {attempts} checks",
        timeout=timeout,
        attempts=attempts,
        elapsed=time.monotonic() - start,
    )

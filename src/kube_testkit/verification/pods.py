"""Wait for a labeled pod set to have a running, ready pod."""

from __future__ import annotations

import logging
import threading

from kube_testkit.cluster import ClusterClient
from kube_testkit.verification.models import PodObservation
from kube_testkit.verification.polling import PollPolicy, poll_until

logger = logging.getLogger(__name__)


def observe_pods(cluster: ClusterClient, namespace: str, selector: str) -> list[PodObservation]:
    """Snapshot all pods matching ``selector`` in API list order."""
    return [PodObservation.from_pod(p) for p in cluster.list_pods(namespace, selector)]


def find_running_pod(cluster: ClusterClient, namespace: str, selector: str) -> PodObservation | None:
    """Return the first pod that is Running with all containers ready, if any."""
    for pod in observe_pods(cluster, namespace, selector):
        if pod.is_running_and_ready:
            return pod
    return None


def wait_running(
    cluster: ClusterClient,
    namespace: str,
    selector: str,
    policy: PollPolicy,
    cancel: threading.Event | None = None,
) -> PodObservation:
    """Poll until a pod matching ``selector`` is running and ready.

    Raises VerificationTimeout naming the selector when the budget runs out.
    """
    pod = poll_until(
        lambda: find_running_pod(cluster, namespace, selector),
        policy,
        description=f"Pods matching '{selector}' are not running",
        waiting=f"Waiting for running pod '{selector}'",
        cancel=cancel,
    )
    logger.info("Verified pod '%s' state running", pod.name)
    return pod

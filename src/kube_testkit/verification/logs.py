"""Wait for a pod container log to contain a message."""

from __future__ import annotations

import logging
import threading

from kube_testkit.cluster import ClusterClient
from kube_testkit.verification.models import PodObservation
from kube_testkit.verification.polling import PollPolicy, poll_until

logger = logging.getLogger(__name__)


def read_log(cluster: ClusterClient, pod: PodObservation, container: str | None = None) -> str:
    """Current log text of ``container``, or of the pod's default container."""
    return cluster.read_pod_log(pod.name, pod.namespace, container or pod.default_log_container)


def wait_for_log_contains(
    cluster: ClusterClient,
    pod: PodObservation,
    text: str,
    policy: PollPolicy,
    container: str | None = None,
    cancel: threading.Event | None = None,
) -> None:
    """Poll the pod log until ``text`` appears (case-sensitive substring match).

    An empty log is a non-match, not an error.
    """
    poll_until(
        lambda: True if text in read_log(cluster, pod, container) else None,
        policy,
        description=f"Pod '{pod.name}' has not printed message '{text}'",
        waiting=f"Waiting for pod '{pod.name}' to log message",
        cancel=cancel,
    )
    logger.info("Verified pod '%s' logs contain '%s'", pod.name, text)

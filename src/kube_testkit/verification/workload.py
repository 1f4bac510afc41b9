"""Running-state check followed by an optional log check for a named workload."""

from __future__ import annotations

import threading

from kube_testkit.cluster import ClusterClient
from kube_testkit.verification.logs import wait_for_log_contains
from kube_testkit.verification.models import PodObservation
from kube_testkit.verification.pods import wait_running
from kube_testkit.verification.polling import PollPolicy


def verify_workload(
    cluster: ClusterClient,
    namespace: str,
    selector: str,
    policy: PollPolicy,
    log_message: str | None = None,
    container: str | None = None,
    cancel: threading.Event | None = None,
) -> PodObservation:
    """Wait for a running pod, then for ``log_message`` in its log if given."""
    pod = wait_running(cluster, namespace, selector, policy, cancel=cancel)
    if log_message is not None:
        wait_for_log_contains(cluster, pod, log_message, policy, container=container, cancel=cancel)
    return pod

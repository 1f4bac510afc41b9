"""Verification layer: bounded polling of pod state and pod logs."""

from kube_testkit.verification.logs import read_log, wait_for_log_contains
from kube_testkit.verification.models import ContainerReadiness, PodObservation
from kube_testkit.verification.pods import find_running_pod, observe_pods, wait_running
from kube_testkit.verification.polling import PollPolicy, poll_until, sleep_or_cancel
from kube_testkit.verification.workload import verify_workload

__all__ = [
    "ContainerReadiness",
    "PodObservation",
    "PollPolicy",
    "find_running_pod",
    "observe_pods",
    "poll_until",
    "read_log",
    "sleep_or_cancel",
    "verify_workload",
    "wait_for_log_contains",
    "wait_running",
]

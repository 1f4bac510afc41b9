"""Tests for the running-pod verifier."""

from __future__ import annotations

import pytest
from kubernetes.client.rest import ApiException

from kube_testkit.errors import VerificationTimeout
from kube_testkit.verification import PodObservation, PollPolicy, find_running_pod, wait_running

from tests.conftest import FakeCluster, make_pod

SELECTOR = "camel.apache.org/integration=hello"


class TestPodObservation:
    def test_from_pod(self) -> None:
        pod = make_pod("hello-1", ready=(True, False), containers=["integration", "sidecar"])

        obs = PodObservation.from_pod(pod)

        assert obs.name == "hello-1"
        assert obs.namespace == "test"
        assert obs.phase == "Running"
        assert [(c.name, c.ready) for c in obs.containers] == [("integration", True), ("sidecar", False)]
        assert obs.declared_containers == ["integration", "sidecar"]

    def test_running_with_all_containers_ready(self) -> None:
        assert PodObservation.from_pod(make_pod("p", ready=(True, True))).is_running_and_ready

    def test_running_with_unready_container_is_not_ready(self) -> None:
        assert not PodObservation.from_pod(make_pod("p", ready=(False,))).is_running_and_ready

    def test_ready_containers_but_pending_is_not_ready(self) -> None:
        assert not PodObservation.from_pod(make_pod("p", phase="Pending", ready=(True,))).is_running_and_ready

    def test_running_without_container_statuses_is_not_ready(self) -> None:
        assert not PodObservation.from_pod(make_pod("p", ready=())).is_running_and_ready


class TestFindRunningPod:
    def test_first_ready_pod_in_list_order_wins(self) -> None:
        cluster = FakeCluster(
            pod_lists=[[make_pod("pending", phase="Pending"), make_pod("ready-a"), make_pod("ready-b")]]
        )

        pod = find_running_pod(cluster, "test", SELECTOR)

        assert pod is not None
        assert pod.name == "ready-a"

    def test_no_pods(self) -> None:
        assert find_running_pod(FakeCluster(), "test", SELECTOR) is None


class TestWaitRunning:
    def test_succeeds_on_second_poll(self) -> None:
        cluster = FakeCluster(
            pod_lists=[
                [make_pod("hello-1", phase="Pending", ready=(False,))],
                [make_pod("hello-1")],
            ]
        )

        pod = wait_running(cluster, "test", SELECTOR, PollPolicy(max_attempts=3, delay=0.01))

        assert pod.name == "hello-1"
        assert len(cluster.list_calls) == 2
        assert cluster.list_calls[0] == ("test", SELECTOR)

    def test_no_matching_pods_times_out_after_full_budget(self) -> None:
        cluster = FakeCluster()

        with pytest.raises(VerificationTimeout) as exc_info:
            wait_running(cluster, "test", SELECTOR, PollPolicy(max_attempts=3, delay=0.01))

        err = exc_info.value
        assert len(cluster.list_calls) == 3
        assert err.timeout == pytest.approx(0.03)
        assert 0.025 <= err.elapsed < 1.0
        assert SELECTOR in str(err)
        assert "after 3 attempts" in str(err)

    def test_running_pod_with_unready_containers_times_out(self) -> None:
        cluster = FakeCluster(pod_lists=[[make_pod("hello-1", ready=(False, False))]])

        with pytest.raises(VerificationTimeout):
            wait_running(cluster, "test", SELECTOR, PollPolicy(max_attempts=2, delay=0.01))

    def test_api_error_propagates_immediately(self) -> None:
        cluster = FakeCluster()
        calls = []

        def failing_list(namespace, label_selector):
            calls.append(1)
            raise ApiException(status=500, reason="Internal Server Error")

        cluster.list_pods = failing_list

        with pytest.raises(ApiException):
            wait_running(cluster, "test", SELECTOR, PollPolicy(max_attempts=3, delay=0.01))

        assert len(calls) == 1

"""Pytest configuration and fixtures for kube-testkit tests."""

from __future__ import annotations

from typing import Any, Iterable

import pytest
from kubernetes import client

from kube_testkit.cluster import CreateResult
from kube_testkit.install.models import ResourceRef


# -------------------------------------------------------------------------
# Builders
# -------------------------------------------------------------------------


def make_pod(
    name: str,
    phase: str = "Running",
    ready: Iterable[bool] = (True,),
    containers: list[str] | None = None,
    namespace: str = "test",
) -> client.V1Pod:
    """Build a V1Pod with one container status per ``ready`` flag."""
    flags = list(ready)
    if containers is None:
        containers = [f"c{i}" for i in range(max(len(flags), 1))]
    statuses = [
        client.V1ContainerStatus(
            name=containers[i],
            ready=flag,
            restart_count=0,
            image="busybox:latest",
            image_id="",
        )
        for i, flag in enumerate(flags)
    ]
    return client.V1Pod(
        metadata=client.V1ObjectMeta(name=name, namespace=namespace),
        spec=client.V1PodSpec(containers=[client.V1Container(name=c) for c in containers]),
        status=client.V1PodStatus(phase=phase, container_statuses=statuses or None),
    )


# -------------------------------------------------------------------------
# Fakes
# -------------------------------------------------------------------------


class FakeCluster:
    """In-memory stand-in for ClusterClient.

    ``pod_lists`` and ``logs`` are consumed one entry per call; the last entry
    repeats once the list is exhausted.
    """

    def __init__(
        self,
        pod_lists: list[list[client.V1Pod]] | None = None,
        logs: list[str] | None = None,
    ) -> None:
        self.served: dict[tuple[str, str], list[str]] = {}
        self.objects: set[tuple[str, str | None, str]] = set()
        self.created: list[dict[str, Any]] = []
        self.pod_lists = pod_lists or [[]]
        self.logs = logs or [""]
        self.list_calls: list[tuple[str, str]] = []
        self.log_calls: list[tuple[str, str, str | None]] = []

    def api_resource_kinds(self, group: str, version: str) -> list[str] | None:
        return self.served.get((group, version))

    def exists(self, ref: ResourceRef) -> bool:
        return (ref.kind, ref.namespace, ref.name) in self.objects

    def create(self, body: dict[str, Any], namespace: str | None = None) -> CreateResult:
        self.created.append(body)
        kind = body["kind"]
        key = (kind, namespace, body["metadata"]["name"])
        if key in self.objects:
            return CreateResult.ALREADY_EXISTS
        self.objects.add(key)
        if kind == "CustomResourceDefinition":
            spec = body["spec"]
            for v in spec["versions"]:
                self.served.setdefault((spec["group"], v["name"]), []).append(spec["names"]["kind"])
        return CreateResult.CREATED

    def list_pods(self, namespace: str, label_selector: str) -> list[client.V1Pod]:
        index = min(len(self.list_calls), len(self.pod_lists) - 1)
        self.list_calls.append((namespace, label_selector))
        return self.pod_lists[index]

    def read_pod_log(self, name: str, namespace: str, container: str | None = None) -> str:
        index = min(len(self.log_calls), len(self.logs) - 1)
        self.log_calls.append((name, namespace, container))
        return self.logs[index]


class FakeClock:
    """Monotonic clock that only advances when something sleeps."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def monotonic(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


# -------------------------------------------------------------------------
# Fixtures
# -------------------------------------------------------------------------


@pytest.fixture
def cluster() -> FakeCluster:
    return FakeCluster()


@pytest.fixture
def clock(monkeypatch: pytest.MonkeyPatch) -> FakeClock:
    """Replace wall-clock time in the polling code with a FakeClock."""
    fake = FakeClock()
    monkeypatch.setattr("kube_testkit.verification.polling.time", fake)
    monkeypatch.setattr("kube_testkit.install.crd.time", fake)
    return fake

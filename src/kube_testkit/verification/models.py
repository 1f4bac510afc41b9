"""Read-only snapshots of pod state taken at one poll tick."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ContainerReadiness(BaseModel):
    """Readiness flag of one container."""

    model_config = ConfigDict(frozen=True)

    name: str
    ready: bool


class PodObservation(BaseModel):
    """Pod phase and container readiness as observed at one tick."""

    model_config = ConfigDict(frozen=True)

    name: str
    namespace: str
    phase: str
    containers: list[ContainerReadiness] = Field(
        default_factory=list,
        description="Container readiness in status order",
    )
    declared_containers: list[str] = Field(
        default_factory=list,
        description="Container names in pod spec order",
    )

    @property
    def is_running_and_ready(self) -> bool:
        """Phase is Running and every container reports ready."""
        return self.phase == "Running" and bool(self.containers) and all(c.ready for c in self.containers)

    @property
    def default_log_container(self) -> str | None:
        """Container to read logs from when none is named.

        With more than one container the first declared one is used; with a
        single container the API server's default applies.
        """
        if len(self.declared_containers) > 1:
            return self.declared_containers[0]
        return None

    @classmethod
    def from_pod(cls, pod: Any) -> PodObservation:
        """Build an observation from a V1Pod."""
        status = pod.status
        spec = pod.spec
        containers = [
            ContainerReadiness(name=cs.name, ready=bool(cs.ready))
            for cs in (getattr(status, "container_statuses", None) or [])
        ]
        return cls(
            name=pod.metadata.name,
            namespace=pod.metadata.namespace or "default",
            phase=getattr(status, "phase", None) or "Unknown",
            containers=containers,
            declared_containers=[c.name for c in (getattr(spec, "containers", None) or [])],
        )

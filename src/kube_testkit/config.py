"""Configuration and environment for kube-testkit."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from kube_testkit.verification.polling import PollPolicy


class Settings(BaseSettings):
    """Settings loaded from environment and .env."""

    model_config = SettingsConfigDict(
        env_prefix="KUBE_TESTKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Kubernetes
    kubeconfig: Path | None = Field(
        default=None,
        description="Path to kubeconfig; uses KUBECONFIG env or default location if unset",
    )
    context: str | None = Field(default=None, description="Kubernetes context to use")
    namespace: str = Field(default="default", description="Namespace test workloads run in")

    # Verification
    max_attempts: int = Field(default=150, ge=1, description="Poll attempts before giving up")
    delay_between_attempts: float = Field(
        default=2.0,
        ge=0.0,
        description="Seconds between poll attempts",
    )
    workload_label: str = Field(
        default="camel.apache.org/integration",
        description="Label key that selects the pods of a named workload",
    )

    # Bootstrap
    crd_timeout: float = Field(
        default=25.0,
        gt=0.0,
        description="Seconds to wait for installed CRDs to show up in discovery",
    )
    cluster_role_name: str = Field(default="yaks:edit", description="Name of the edit ClusterRole")
    service_account: str = Field(
        default="yaks",
        description="Service account bound to the operator Role in a test namespace",
    )

    def poll_policy(self) -> PollPolicy:
        """Default PollPolicy for verification calls."""
        return PollPolicy(max_attempts=self.max_attempts, delay=self.delay_between_attempts)


def get_settings() -> Settings:
    """Return validated settings instance."""
    return Settings()

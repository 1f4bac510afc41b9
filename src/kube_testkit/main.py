"""CLI entrypoint for kube-testkit."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from kube_testkit import __version__
from kube_testkit.cluster import ClusterClient
from kube_testkit.config import Settings, get_settings
from kube_testkit.errors import VerificationTimeout
from kube_testkit.install import (
    Collection,
    InstallationOutcome,
    ResourceRef,
    setup_cluster_resources,
    setup_namespace_resources,
)
from kube_testkit.verification import PollPolicy, verify_workload


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="kube-testkit: bootstrap test resources and verify workloads on Kubernetes.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--kubeconfig",
        type=Path,
        default=None,
        help="Path to kubeconfig (default: KUBECONFIG env or ~/.kube/config)",
    )
    parser.add_argument("--context", default=None, help="Kubernetes context to use")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    sub = parser.add_subparsers(dest="command", required=True)

    install = sub.add_parser("install", help="Install CRDs, the edit ClusterRole and namespace permissions")
    install.add_argument(
        "--collect",
        action="store_true",
        help="Print the resources as YAML instead of installing them",
    )
    install.add_argument(
        "--namespace",
        "-n",
        default=None,
        help="Also install the operator Role and RoleBinding in this namespace",
    )

    verify = sub.add_parser("verify", help="Verify a workload pod is running and optionally logged a message")
    verify.add_argument("name", help="Workload name, matched against the workload label")
    verify.add_argument("--namespace", "-n", default=None, help="Namespace (default: from env or 'default')")
    verify.add_argument("--log-message", default=None, help="Wait for this text in the pod log")
    verify.add_argument("--container", default=None, help="Container to read logs from")
    verify.add_argument("--max-attempts", type=int, default=None, help="Poll attempts (default: from env)")
    verify.add_argument("--delay", type=float, default=None, help="Seconds between attempts (default: from env)")
    return parser.parse_args(argv)


def _cluster(args: argparse.Namespace, settings: Settings) -> ClusterClient:
    kubeconfig = args.kubeconfig or settings.kubeconfig
    return ClusterClient.from_kubeconfig(
        str(kubeconfig) if kubeconfig else None,
        args.context or settings.context,
    )


def _print_outcomes(outcomes: dict[ResourceRef, InstallationOutcome], console: Console) -> None:
    table = Table(title="Installed resources")
    table.add_column("Resource")
    table.add_column("Outcome")
    for ref, outcome in outcomes.items():
        table.add_row(str(ref), outcome.value)
    console.print(table)


def _install(args: argparse.Namespace, settings: Settings, console: Console) -> int:
    collection = Collection() if args.collect else None
    cluster = None if args.collect else _cluster(args, settings)
    outcomes = setup_cluster_resources(cluster, settings, collection)
    if args.namespace:
        outcomes.update(
            setup_namespace_resources(cluster, args.namespace, settings.service_account, collection)
        )
    if collection is not None:
        print(collection.render(), end="")
    else:
        _print_outcomes(outcomes, console)
    return 0


def _verify(args: argparse.Namespace, settings: Settings, console: Console) -> int:
    policy = PollPolicy(
        max_attempts=args.max_attempts or settings.max_attempts,
        delay=args.delay if args.delay is not None else settings.delay_between_attempts,
    )
    selector = f"{settings.workload_label}={args.name}"
    pod = verify_workload(
        _cluster(args, settings),
        args.namespace or settings.namespace,
        selector,
        policy,
        log_message=args.log_message,
        container=args.container,
    )
    console.print(f"[bold green]Verified[/bold green] pod {pod.name} ({selector})")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for kube-testkit CLI."""
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
    )
    logger = logging.getLogger("kube_testkit")
    logger.setLevel(logging.INFO if args.verbose else logging.WARNING)

    console = Console()
    try:
        settings = get_settings()
        if args.command == "install":
            return _install(args, settings, console)
        return _verify(args, settings, console)
    except VerificationTimeout as e:
        console.print(f"[bold red]Timeout:[/bold red] {e}")
        return 1
    except Exception as e:
        logging.exception("kube-testkit failed")
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())

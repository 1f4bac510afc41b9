"""Kubernetes test-automation add-on: cluster bootstrap and runtime verification."""

__version__ = "0.1.0"

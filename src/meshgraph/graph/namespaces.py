"""Requested namespaces and control-plane exclusion."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import timedelta

from pydantic import BaseModel


class NamespaceInfo(BaseModel):
    """A namespace requested for the graph and its query window."""

    name: str
    duration: timedelta
    is_istio: bool = False


def istio_namespaces(namespaces: Mapping[str, NamespaceInfo]) -> set[str]:
    """Return the names of requested namespaces flagged as mesh control plane."""
    return {name for name, info in namespaces.items() if info.is_istio}


def exclusion_clause(namespaces: Mapping[str, NamespaceInfo]) -> str:
    """Render a PromQL matcher excluding control-plane destination namespaces.

    Returns an empty string when nothing is excluded so the matcher is
    omitted from the query entirely.
    """
    excluded = istio_namespaces(namespaces)
    if not excluded:
        return ""
    regex = "|".join(sorted(excluded))
    return f',destination_service_namespace!~"{regex}"'

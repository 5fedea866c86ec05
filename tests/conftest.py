"""Root conftest - shared namespace fixtures."""

from __future__ import annotations

from datetime import timedelta

import pytest

from meshgraph.graph.namespaces import NamespaceInfo


@pytest.fixture()
def namespaces() -> dict[str, NamespaceInfo]:
    """bookinfo plus the istio-system control plane, 10 minute windows."""
    return {
        "bookinfo": NamespaceInfo(name="bookinfo", duration=timedelta(minutes=10)),
        "istio-system": NamespaceInfo(
            name="istio-system", duration=timedelta(minutes=10), is_istio=True
        ),
    }

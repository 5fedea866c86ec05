"""Canonical node identity for telemetry-derived graph nodes.

The same logical node is reached independently from several metric queries
(as a caller in one, as a callee in another), so the ID must depend only on
the identity fields and the graph type, never on call order.

Resolution is a decision table: each graph type lists candidate node kinds in
priority order, and the first candidate whose identifying labels are present
wins. When nothing resolves the node is classified ``unknown``.
"""

from __future__ import annotations

from collections.abc import Callable

from meshgraph.graph.types import UNKNOWN, GraphType, NodeType

_Resolved = tuple[str, NodeType] | None
_Candidate = Callable[[str, str, str, str, str], _Resolved]


def is_ok(telemetry_val: str) -> bool:
    """Return True if a telemetry label carries a usable value."""
    return telemetry_val != "" and telemetry_val != UNKNOWN


def _workload(namespace: str, service: str, workload: str, app: str, version: str) -> _Resolved:
    if is_ok(workload):
        return f"wl_{namespace}_{workload}", NodeType.WORKLOAD
    return None


def _service(namespace: str, service: str, workload: str, app: str, version: str) -> _Resolved:
    if is_ok(service):
        return f"svc_{namespace}_{service}", NodeType.SERVICE
    return None


def _app(namespace: str, service: str, workload: str, app: str, version: str) -> _Resolved:
    if is_ok(app):
        return f"app_{namespace}_{app}", NodeType.APP
    return None


def _versioned_app(
    namespace: str, service: str, workload: str, app: str, version: str
) -> _Resolved:
    if not is_ok(app):
        return None
    if is_ok(version):
        return f"vapp_{namespace}_{app}_{version}", NodeType.APP
    return f"vapp_{namespace}_{app}", NodeType.APP


# Service graphs are initially processed as workload graphs.
_RESOLUTION_ORDER: dict[GraphType, tuple[_Candidate, ...]] = {
    GraphType.WORKLOAD: (_workload, _service),
    GraphType.SERVICE: (_workload, _service),
    GraphType.APP: (_app, _workload, _service),
    GraphType.VERSIONED_APP: (_versioned_app, _workload, _service),
}


def node_id(
    service_namespace: str,
    service: str,
    workload_namespace: str,
    workload: str,
    app: str,
    version: str,
    graph_type: GraphType | str,
) -> tuple[str, NodeType]:
    """Resolve telemetry attributes to ``(id, node_type)``.

    Empty strings mean the dimension is absent. The workload namespace is
    preferred over the service namespace. Never raises: unresolvable input
    yields a ``NodeType.UNKNOWN`` node.
    """
    namespace = workload_namespace if is_ok(workload_namespace) else service_namespace

    for candidate in _RESOLUTION_ORDER[GraphType(graph_type)]:
        resolved = candidate(namespace, service, workload, app, version)
        if resolved is not None:
            return resolved

    if is_ok(namespace):
        return f"unknown_{namespace}", NodeType.UNKNOWN
    return UNKNOWN, NodeType.UNKNOWN

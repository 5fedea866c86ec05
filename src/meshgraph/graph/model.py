"""Traffic graph data model.

A ``TrafficMap`` maps node ID to ``Node``; each node owns its outgoing
edges. The map is produced by the upstream graph builder and then mutated in
place by the appenders of one pipeline run.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from meshgraph.graph.identity import node_id
from meshgraph.graph.types import GraphType, NodeType


@dataclass(eq=False)
class Edge:
    """Directed edge owned by ``source``."""

    source: Node
    dest: Node
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def key(self) -> tuple[str, str]:
        return (self.source.id, self.dest.id)


@dataclass(eq=False)
class Node:
    """A graph node. Deduplicated by ``id``, never by attribute comparison."""

    id: str
    node_type: NodeType
    namespace: str
    workload: str = ""
    app: str = ""
    version: str = ""
    service: str = ""
    edges: list[Edge] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def add_edge(self, dest: Node) -> Edge:
        edge = Edge(source=self, dest=dest)
        self.edges.append(edge)
        return edge


TrafficMap = dict[str, Node]


def new_node(
    service_namespace: str,
    service: str,
    workload_namespace: str,
    workload: str,
    app: str,
    version: str,
    graph_type: GraphType | str,
) -> Node:
    """Create a node whose ID comes from the canonical identity resolver."""
    nid, node_type = node_id(
        service_namespace, service, workload_namespace, workload, app, version, graph_type
    )
    namespace = workload_namespace or service_namespace
    return Node(
        id=nid,
        node_type=node_type,
        namespace=namespace,
        workload=workload,
        app=app,
        version=version,
        service=service,
    )


def add_node(traffic_map: TrafficMap, node: Node) -> Node:
    """Insert ``node`` unless a node with the same ID exists; return the stored one."""
    return traffic_map.setdefault(node.id, node)


def iter_edges(traffic_map: TrafficMap) -> Iterator[Edge]:
    for node in traffic_map.values():
        yield from node.edges


def find_edge(traffic_map: TrafficMap, source_id: str, dest_id: str) -> Edge | None:
    source = traffic_map.get(source_id)
    if source is None:
        return None
    for edge in source.edges:
        if edge.dest.id == dest_id:
            return edge
    return None

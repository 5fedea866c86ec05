"""Service mesh traffic graph and its enrichment pipeline.

The upstream builder produces a ``TrafficMap``; appenders run by the
``AppenderPipeline`` then add derived information to its edges.
"""

from meshgraph.graph.identity import is_ok, node_id
from meshgraph.graph.model import Edge, Node, TrafficMap, new_node
from meshgraph.graph.namespaces import NamespaceInfo, istio_namespaces
from meshgraph.graph.options import GraphOptions
from meshgraph.graph.pipeline import AppenderPipeline
from meshgraph.graph.types import GraphType, NodeType

__all__ = [
    "AppenderPipeline",
    "Edge",
    "GraphOptions",
    "GraphType",
    "NamespaceInfo",
    "Node",
    "NodeType",
    "TrafficMap",
    "is_ok",
    "istio_namespaces",
    "new_node",
    "node_id",
]

"""Tests for the traffic graph model, namespaces and graph options."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError

from meshgraph.config.settings import Settings
from meshgraph.graph.model import TrafficMap, add_node, find_edge, iter_edges, new_node
from meshgraph.graph.namespaces import NamespaceInfo, exclusion_clause, istio_namespaces
from meshgraph.graph.options import GraphOptions
from meshgraph.graph.types import GraphType, NodeType

# ── Model ────────────────────────────────────────────────────────────


class TestTrafficMap:
    def test_new_node_uses_canonical_id(self):
        node = new_node("bookinfo", "", "bookinfo", "reviews-v1", "reviews", "v1", "workload")
        assert node.id == "wl_bookinfo_reviews-v1"
        assert node.node_type == NodeType.WORKLOAD
        assert node.namespace == "bookinfo"
        assert node.edges == []
        assert node.metadata == {}

    def test_add_node_dedups_by_id(self):
        traffic_map: TrafficMap = {}
        first = add_node(traffic_map, new_node("", "", "bookinfo", "a", "", "", "workload"))
        second = add_node(traffic_map, new_node("", "", "bookinfo", "a", "", "", "workload"))
        assert first is second
        assert len(traffic_map) == 1

    def test_add_edge_is_owned_by_source(self):
        src = new_node("", "", "bookinfo", "a", "", "", "workload")
        dst = new_node("", "", "bookinfo", "b", "", "", "workload")
        edge = src.add_edge(dst)
        assert src.edges == [edge]
        assert dst.edges == []
        assert edge.key == ("wl_bookinfo_a", "wl_bookinfo_b")

    def test_find_and_iter_edges(self):
        traffic_map: TrafficMap = {}
        src = add_node(traffic_map, new_node("", "", "bookinfo", "a", "", "", "workload"))
        dst = add_node(traffic_map, new_node("", "", "bookinfo", "b", "", "", "workload"))
        edge = src.add_edge(dst)

        assert find_edge(traffic_map, src.id, dst.id) is edge
        assert find_edge(traffic_map, dst.id, src.id) is None
        assert find_edge(traffic_map, "missing", dst.id) is None
        assert list(iter_edges(traffic_map)) == [edge]


# ── Namespace exclusion ──────────────────────────────────────────────


class TestNamespaceExclusion:
    def test_istio_namespaces(self, namespaces):
        assert istio_namespaces(namespaces) == {"istio-system"}

    def test_empty_input(self):
        assert istio_namespaces({}) == set()
        assert exclusion_clause({}) == ""

    def test_no_istio_namespace_omits_clause(self):
        ns = {"bookinfo": NamespaceInfo(name="bookinfo", duration=timedelta(minutes=1))}
        assert exclusion_clause(ns) == ""

    def test_clause_is_sorted_alternation(self):
        window = timedelta(minutes=1)
        ns = {
            "istio-system": NamespaceInfo(name="istio-system", duration=window, is_istio=True),
            "bookinfo": NamespaceInfo(name="bookinfo", duration=window),
            "istio-config": NamespaceInfo(name="istio-config", duration=window, is_istio=True),
        }
        assert exclusion_clause(ns) == ',destination_service_namespace!~"istio-config|istio-system"'


# ── Options ──────────────────────────────────────────────────────────


class TestGraphOptions:
    def test_build_from_settings(self):
        settings = Settings(
            graph_type="app", inject_service_nodes=False, graph_duration_seconds=300
        )
        qt = datetime(2025, 1, 1, tzinfo=UTC)
        opts = GraphOptions.build(["bookinfo", "istio-system"], settings, query_time=qt)

        assert opts.graph_type == GraphType.APP
        assert opts.inject_service_nodes is False
        assert opts.query_time == qt
        assert opts.namespaces["bookinfo"].duration == timedelta(seconds=300)
        assert opts.namespaces["bookinfo"].is_istio is False
        assert opts.namespaces["istio-system"].is_istio is True
        assert opts.appenders is None

    def test_build_overrides(self):
        opts = GraphOptions.build(
            ["bookinfo"],
            Settings(),
            duration=timedelta(minutes=5),
            graph_type="versionedApp",
            inject_service_nodes=True,
            appenders=["securityPolicy"],
        )
        assert opts.graph_type == GraphType.VERSIONED_APP
        assert opts.namespaces["bookinfo"].duration == timedelta(minutes=5)
        assert opts.appenders == ["securityPolicy"]

    def test_invalid_graph_type_rejected(self):
        with pytest.raises(ValidationError):
            GraphOptions(graph_type="bogus")

"""Tests for meshgraph.graph.identity -- canonical node identity."""

from __future__ import annotations

import pytest

from meshgraph.graph.identity import is_ok, node_id
from meshgraph.graph.types import GraphType, NodeType

# ---------------------------------------------------------------------------
# is_ok
# ---------------------------------------------------------------------------


class TestIsOk:
    def test_empty_is_not_ok(self):
        assert is_ok("") is False

    def test_unknown_is_not_ok(self):
        assert is_ok("unknown") is False

    def test_value_is_ok(self):
        assert is_ok("reviews") is True


# ---------------------------------------------------------------------------
# Workload / service graphs
# ---------------------------------------------------------------------------


class TestWorkloadGraph:
    @pytest.mark.parametrize("graph_type", [GraphType.WORKLOAD, GraphType.SERVICE])
    def test_workload_node(self, graph_type):
        nid, kind = node_id(
            "bookinfo", "reviews", "bookinfo", "reviews-v1", "reviews", "v1", graph_type
        )
        assert nid == "wl_bookinfo_reviews-v1"
        assert kind == NodeType.WORKLOAD

    def test_service_only_node(self):
        nid, kind = node_id("bookinfo", "reviews", "", "", "", "", GraphType.WORKLOAD)
        assert nid == "svc_bookinfo_reviews"
        assert kind == NodeType.SERVICE

    def test_unknown_workload_falls_back_to_service(self):
        nid, kind = node_id(
            "bookinfo", "reviews", "unknown", "unknown", "unknown", "unknown", GraphType.WORKLOAD
        )
        assert nid == "svc_bookinfo_reviews"
        assert kind == NodeType.SERVICE

    def test_app_is_ignored_in_workload_graph(self):
        nid, kind = node_id("", "", "bookinfo", "", "reviews", "v1", GraphType.WORKLOAD)
        assert kind == NodeType.UNKNOWN
        assert nid == "unknown_bookinfo"

    def test_workload_namespace_preferred(self):
        nid, _ = node_id("istio-system", "reviews", "bookinfo", "reviews-v1", "", "", "workload")
        assert nid == "wl_bookinfo_reviews-v1"


# ---------------------------------------------------------------------------
# App graphs
# ---------------------------------------------------------------------------


class TestAppGraph:
    def test_app_node(self):
        nid, kind = node_id(
            "bookinfo", "reviews", "bookinfo", "reviews-v1", "reviews", "v1", GraphType.APP
        )
        assert nid == "app_bookinfo_reviews"
        assert kind == NodeType.APP

    def test_versioned_app_node(self):
        nid, kind = node_id(
            "bookinfo", "reviews", "bookinfo", "reviews-v1", "reviews", "v1", "versionedApp"
        )
        assert nid == "vapp_bookinfo_reviews_v1"
        assert kind == NodeType.APP

    def test_versioned_app_without_version(self):
        nid, kind = node_id("bookinfo", "", "bookinfo", "", "reviews", "", GraphType.VERSIONED_APP)
        assert nid == "vapp_bookinfo_reviews"
        assert kind == NodeType.APP

    def test_app_graph_falls_back_to_workload(self):
        nid, kind = node_id("bookinfo", "", "bookinfo", "reviews-v1", "", "", GraphType.APP)
        assert nid == "wl_bookinfo_reviews-v1"
        assert kind == NodeType.WORKLOAD

    def test_app_graph_falls_back_to_service(self):
        nid, kind = node_id("bookinfo", "reviews", "", "", "", "", GraphType.VERSIONED_APP)
        assert nid == "svc_bookinfo_reviews"
        assert kind == NodeType.SERVICE

    def test_graph_type_accepts_plain_string(self):
        assert node_id("bookinfo", "", "bookinfo", "", "reviews", "v2", "versionedApp") == (
            "vapp_bookinfo_reviews_v2",
            NodeType.APP,
        )


# ---------------------------------------------------------------------------
# Unknown / determinism
# ---------------------------------------------------------------------------


class TestUnknownAndDeterminism:
    def test_all_empty_is_unknown(self):
        nid, kind = node_id("", "", "", "", "", "", GraphType.APP)
        assert nid == "unknown"
        assert kind == NodeType.UNKNOWN

    def test_unknown_source_telemetry(self):
        nid, kind = node_id("unknown", "", "unknown", "unknown", "unknown", "unknown", "workload")
        assert nid == "unknown"
        assert kind == NodeType.UNKNOWN

    @pytest.mark.parametrize("graph_type", list(GraphType))
    def test_identical_inputs_identical_ids(self, graph_type):
        args = ("bookinfo", "ratings", "bookinfo", "ratings-v1", "ratings", "v1", graph_type)
        first = node_id(*args)
        node_id("other", "svc", "other", "wl", "app", "v9", graph_type)
        assert node_id(*args) == first

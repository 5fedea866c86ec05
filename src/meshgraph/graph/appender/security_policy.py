"""Security policy appender.

Annotates every existing edge with the percentage of its traffic that used
mutual TLS. The appender is written against the generic
``connection_security_policy`` label, but only ``mutual_tls`` is reported.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from datetime import datetime

import structlog

from meshgraph.graph.appender.base import (
    Appender,
    AppenderGlobalInfo,
    AppenderNamespaceInfo,
    prom_query,
)
from meshgraph.graph.identity import is_ok, node_id
from meshgraph.graph.model import TrafficMap, iter_edges
from meshgraph.graph.namespaces import NamespaceInfo, exclusion_clause
from meshgraph.graph.types import IS_MTLS, ISTIO_REQUESTS_METRIC, GraphType, NodeType
from meshgraph.observability.base import VectorSample

logger = structlog.get_logger()

SECURITY_POLICY_APPENDER_NAME = "securityPolicy"
POLICY_MTLS = "mutual_tls"

GROUP_BY_LABELS = (
    "source_workload_namespace",
    "source_workload",
    "source_app",
    "source_version",
    "destination_service_namespace",
    "destination_service_name",
    "destination_workload_namespace",
    "destination_workload",
    "destination_app",
    "destination_version",
    "connection_security_policy",
)

PolicyRates = dict[str, float]
EdgeKey = tuple[str, str]


class SecurityPolicyAggregator:
    """Policy rates keyed by ``(source_id, dest_id)``.

    A later rate for the same key and policy replaces the earlier one.
    """

    def __init__(self) -> None:
        self._rates: dict[EdgeKey, PolicyRates] = {}

    def add(self, policy: str, rate: float, source_id: str, dest_id: str) -> None:
        self._rates.setdefault((source_id, dest_id), {})[policy] = rate

    def get(self, source_id: str, dest_id: str) -> PolicyRates | None:
        return self._rates.get((source_id, dest_id))

    def keys(self) -> Iterator[EdgeKey]:
        return iter(self._rates)

    def __contains__(self, key: object) -> bool:
        return key in self._rates

    def __len__(self) -> int:
        return len(self._rates)


def mtls_percentage(rates: Mapping[str, float]) -> float | None:
    """Percentage of ``rates`` carried over mutual TLS.

    Returns None when the total rate is zero.
    """
    mtls = 0.0
    other = 0.0
    for policy, rate in rates.items():
        if policy == POLICY_MTLS:
            mtls = rate
        else:
            other += rate
    total = mtls + other
    if total == 0:
        return None
    return mtls / total * 100


class SecurityPolicyAppender(Appender):
    """Adds the mutual TLS percentage to graph edges.

    Name: securityPolicy
    """

    name = SECURITY_POLICY_APPENDER_NAME

    def __init__(
        self,
        graph_type: GraphType,
        inject_service_nodes: bool,
        namespaces: Mapping[str, NamespaceInfo],
        query_time: datetime,
    ) -> None:
        self.graph_type = GraphType(graph_type)
        self.inject_service_nodes = inject_service_nodes
        self.namespaces = namespaces
        self.query_time = query_time

    async def append_graph(
        self,
        traffic_map: TrafficMap,
        global_info: AppenderGlobalInfo,
        namespace_info: AppenderNamespaceInfo,
    ) -> None:
        if not traffic_map:
            return

        source = global_info.get_metric_source()
        namespace = namespace_info.namespace
        logger.debug("security_policy_resolving", namespace=namespace)

        # Destination telemetry reports the security policy. Traffic entering
        # the namespace may include istio components (e.g. ingressgateway)
        # outside the requested namespaces; it is dropped in apply() because
        # it maps to no edge.
        out_samples = await prom_query(
            self.build_outbound_query(namespace), self.query_time, source, self
        )
        in_samples = await prom_query(
            self.build_inbound_query(namespace), self.query_time, source, self
        )

        aggregator = SecurityPolicyAggregator()
        self.populate(aggregator, out_samples)
        self.populate(aggregator, in_samples)

        updated = apply_security_policy(traffic_map, aggregator)
        logger.info(
            "security_policy_applied",
            namespace=namespace,
            samples=len(out_samples) + len(in_samples),
            keys=len(aggregator),
            edges_updated=updated,
        )

    def _window(self, namespace: str) -> int:
        return int(self.namespaces[namespace].duration.total_seconds())

    def build_outbound_query(self, namespace: str) -> str:
        """Requests arriving in ``namespace`` from workloads outside it."""
        return (
            f"sum(rate({ISTIO_REQUESTS_METRIC}{{reporter=\"destination\","
            f"source_workload_namespace!=\"{namespace}\","
            f"destination_service_namespace=\"{namespace}\"}}"
            f"[{self._window(namespace)}s]) > 0) by ({','.join(GROUP_BY_LABELS)})"
        )

    def build_inbound_query(self, namespace: str) -> str:
        """Requests leaving ``namespace``, minus control-plane destinations."""
        return (
            f"sum(rate({ISTIO_REQUESTS_METRIC}{{reporter=\"destination\","
            f"source_workload_namespace=\"{namespace}\""
            f"{exclusion_clause(self.namespaces)}}}"
            f"[{self._window(namespace)}s]) > 0) by ({','.join(GROUP_BY_LABELS)})"
        )

    def populate(
        self,
        aggregator: SecurityPolicyAggregator,
        samples: list[VectorSample],
    ) -> None:
        for sample in samples:
            labels = sample.metric
            missing = [label for label in GROUP_BY_LABELS if label not in labels]
            if missing:
                logger.warning(
                    "security_policy_sample_skipped",
                    reason="missing expected labels",
                    missing=missing,
                    labels=labels,
                )
                continue

            source_ns = labels["source_workload_namespace"]
            source_wl = labels["source_workload"]
            source_app = labels["source_app"]
            source_ver = labels["source_version"]
            dest_svc_ns = labels["destination_service_namespace"]
            dest_svc = labels["destination_service_name"]
            dest_wl_ns = labels["destination_workload_namespace"]
            dest_wl = labels["destination_workload"]
            dest_app = labels["destination_app"]
            dest_ver = labels["destination_version"]
            csp = labels["connection_security_policy"]
            rate = sample.value

            source_id, _ = node_id(
                source_ns, "", source_ns, source_wl, source_app, source_ver, self.graph_type
            )
            dest_id, dest_type = node_id(
                dest_svc_ns, dest_svc, dest_wl_ns, dest_wl, dest_app, dest_ver, self.graph_type
            )

            # A service node can't be injected in front of a service node, or
            # without a destination service name.
            if self.inject_service_nodes and dest_type != NodeType.SERVICE and is_ok(dest_svc):
                svc_id, _ = node_id(dest_svc_ns, dest_svc, "", "", "", "", self.graph_type)
                aggregator.add(csp, rate, source_id, svc_id)
                aggregator.add(csp, rate, svc_id, dest_id)
            else:
                aggregator.add(csp, rate, source_id, dest_id)


def apply_security_policy(
    traffic_map: TrafficMap,
    aggregator: SecurityPolicyAggregator,
) -> int:
    """Write the mTLS percentage onto edges with aggregated rates.

    Edges without rates keep their metadata untouched. Returns the number of
    edges written.
    """
    updated = 0
    for edge in iter_edges(traffic_map):
        rates = aggregator.get(edge.source.id, edge.dest.id)
        if rates is None:
            continue
        percentage = mtls_percentage(rates)
        if percentage is None:
            logger.debug(
                "security_policy_zero_rate",
                source=edge.source.id,
                dest=edge.dest.id,
            )
            continue
        edge.metadata[IS_MTLS] = percentage
        updated += 1
    return updated

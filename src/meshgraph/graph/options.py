"""Per-build graph request parameters."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime, timedelta

from pydantic import BaseModel, Field

from meshgraph.config.settings import Settings
from meshgraph.graph.namespaces import NamespaceInfo
from meshgraph.graph.types import GraphType


class GraphOptions(BaseModel):
    """Parameters shared by every appender of one pipeline run.

    ``query_time`` is the single evaluation instant for all metric queries of
    the run, so every appender sees the same point-in-time snapshot.
    """

    graph_type: GraphType = GraphType.WORKLOAD
    inject_service_nodes: bool = True
    namespaces: dict[str, NamespaceInfo] = Field(default_factory=dict)
    query_time: datetime = Field(default_factory=lambda: datetime.now(UTC))
    appenders: list[str] | None = None

    @classmethod
    def build(
        cls,
        namespaces: Iterable[str],
        settings: Settings,
        *,
        duration: timedelta | None = None,
        query_time: datetime | None = None,
        graph_type: GraphType | str | None = None,
        inject_service_nodes: bool | None = None,
        appenders: list[str] | None = None,
    ) -> GraphOptions:
        """Build options for ``namespaces``, falling back to ``settings`` defaults."""
        window = duration or timedelta(seconds=settings.graph_duration_seconds)
        infos = {
            name: NamespaceInfo(
                name=name,
                duration=window,
                is_istio=name == settings.istio_namespace,
            )
            for name in namespaces
        }
        return cls(
            graph_type=GraphType(graph_type or settings.graph_type),
            inject_service_nodes=(
                settings.inject_service_nodes
                if inject_service_nodes is None
                else inject_service_nodes
            ),
            namespaces=infos,
            query_time=query_time or datetime.now(UTC),
            appenders=appenders,
        )

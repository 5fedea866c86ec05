"""Structured exception hierarchy for graph building.

All meshgraph domain exceptions extend ``MeshGraphError``. Fatal conditions
(an unusable metrics backend, a failed query) propagate up to the appender
pipeline, which aborts the run and re-raises them as ``GraphBuildError``.
"""

from __future__ import annotations

from typing import Any


class MeshGraphError(Exception):
    """Base exception for all meshgraph domain errors."""

    title: str = "Graph Error"

    def __init__(
        self,
        detail: str = "",
        *,
        extra: dict[str, Any] | None = None,
    ) -> None:
        self.detail = detail or self.title
        self.extra = extra or {}
        super().__init__(self.detail)


class MetricSourceError(MeshGraphError):
    """The metrics backend client could not be constructed."""

    title = "Metric Source Unavailable"


class PrometheusQueryError(MeshGraphError):
    title = "Prometheus Query Failed"


class UnknownAppenderError(MeshGraphError):
    title = "Unknown Appender"


class GraphBuildError(MeshGraphError):
    """Raised by the pipeline driver when a run is aborted."""

    title = "Graph Build Aborted"

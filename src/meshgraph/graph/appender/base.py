"""Appender interface and the context shared across one pipeline run."""

from __future__ import annotations

import threading
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import datetime
from functools import partial
from typing import Any

import structlog

from meshgraph.config.settings import Settings
from meshgraph.graph.model import TrafficMap
from meshgraph.observability.base import MetricSource, VectorSample
from meshgraph.observability.factory import create_metric_source

logger = structlog.get_logger()

MetricSourceFactory = Callable[[], MetricSource]


class AppenderGlobalInfo:
    """State shared by every appender invocation of one pipeline run.

    The metric source is created lazily on first use, exactly once, even when
    several namespaces are processed concurrently.

    Parameters
    ----------
    metric_source_factory:
        Builds the metric source. Defaults to ``create_metric_source`` with
        the given (or default) settings.
    settings:
        Used only by the default factory.
    """

    def __init__(
        self,
        metric_source_factory: MetricSourceFactory | None = None,
        settings: Settings | None = None,
    ) -> None:
        if metric_source_factory is None:
            metric_source_factory = partial(create_metric_source, settings or Settings())
        self._factory = metric_source_factory
        self._metric_source: MetricSource | None = None
        self._lock = threading.Lock()
        self.vendor_info: dict[str, Any] = {}

    @property
    def metric_source(self) -> MetricSource | None:
        return self._metric_source

    def get_metric_source(self) -> MetricSource:
        """Return the shared metric source, creating it on first call.

        Factory errors propagate and leave the handle unset.
        """
        source = self._metric_source
        if source is not None:
            return source
        with self._lock:
            if self._metric_source is None:
                self._metric_source = self._factory()
                logger.debug("appender_metric_source_created")
            return self._metric_source

    async def close(self) -> None:
        with self._lock:
            source, self._metric_source = self._metric_source, None
        if source is not None:
            await source.close()


class AppenderNamespaceInfo:
    """Per-namespace context for one appender pass."""

    def __init__(self, namespace: str) -> None:
        self.namespace = namespace
        self.vendor_info: dict[str, Any] = {}


class Appender(ABC):
    """Adds one dimension of derived information to a traffic map."""

    name: str

    @abstractmethod
    async def append_graph(
        self,
        traffic_map: TrafficMap,
        global_info: AppenderGlobalInfo,
        namespace_info: AppenderNamespaceInfo,
    ) -> None:
        """Mutate ``traffic_map`` in place. Fatal conditions are raised."""


async def prom_query(
    query: str,
    query_time: datetime,
    source: MetricSource,
    appender: Appender,
) -> list[VectorSample]:
    """Run an instant query on behalf of ``appender`` and log its timing."""
    if not query:
        return []

    start = time.monotonic()
    samples = await source.query_vector(query, query_time)
    logger.debug(
        "appender_query_completed",
        appender=appender.name,
        samples=len(samples),
        duration_ms=round((time.monotonic() - start) * 1000, 2),
    )
    return samples

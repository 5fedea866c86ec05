"""Telemetry backends used by graph appenders."""

from meshgraph.observability.base import MetricSource, VectorSample

__all__ = ["MetricSource", "VectorSample"]

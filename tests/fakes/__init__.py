"""Test doubles for the metrics backend."""

from tests.fakes.metric_source import QUERY_TIME, ScriptedMetricSource, make_sample

__all__ = ["QUERY_TIME", "ScriptedMetricSource", "make_sample"]

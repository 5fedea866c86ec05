from meshgraph.observability.prometheus.client import PrometheusSource

__all__ = ["PrometheusSource"]

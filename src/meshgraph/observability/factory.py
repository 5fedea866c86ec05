"""Factory for creating the metric source from application settings."""

import httpx
import structlog

from meshgraph.config.settings import Settings
from meshgraph.exceptions import MetricSourceError
from meshgraph.observability.base import MetricSource
from meshgraph.observability.prometheus import PrometheusSource

logger = structlog.get_logger()


def create_metric_source(settings: Settings) -> MetricSource:
    """Create the Prometheus-backed metric source.

    Raises:
        MetricSourceError: if no Prometheus URL is configured or the client
            cannot be built from the configured values.
    """
    if not settings.prometheus_url:
        raise MetricSourceError("prometheus_url is not configured")

    try:
        source = PrometheusSource(
            url=settings.prometheus_url,
            timeout=settings.prometheus_timeout_seconds,
            bearer_token=settings.prometheus_bearer_token,
            verify_ssl=settings.prometheus_verify_ssl,
        )
    except (httpx.InvalidURL, ValueError, TypeError) as exc:
        raise MetricSourceError(
            f"Cannot create Prometheus client: {exc}",
            extra={"prometheus_url": settings.prometheus_url},
        ) from exc

    logger.info("metric_source_initialized", source="prometheus", url=settings.prometheus_url)
    return source

"""Prometheus instant-query client."""

from __future__ import annotations

from datetime import datetime
from typing import Any

import httpx
import structlog

from meshgraph.exceptions import PrometheusQueryError
from meshgraph.observability.base import MetricSource, VectorSample

logger = structlog.get_logger()

_DEFAULT_TIMEOUT = 30.0


class PrometheusSource(MetricSource):
    """MetricSource backed by the Prometheus HTTP API.

    Every failure (transport, HTTP status, API error, unexpected result type)
    raises ``PrometheusQueryError``. Retries are left to the caller.
    """

    source_name = "prometheus"

    def __init__(
        self,
        url: str,
        timeout: float = _DEFAULT_TIMEOUT,
        bearer_token: str = "",
        verify_ssl: bool = True,
    ) -> None:
        self._url = url.rstrip("/")
        headers: dict[str, str] = {"Accept": "application/json"}
        if bearer_token:
            headers["Authorization"] = f"Bearer {bearer_token}"
        self._client = httpx.AsyncClient(
            base_url=self._url,
            headers=headers,
            timeout=timeout,
            verify=verify_ssl,
        )

    @property
    def url(self) -> str:
        return self._url

    async def close(self) -> None:
        await self._client.aclose()

    async def query_vector(
        self,
        query: str,
        query_time: datetime,
    ) -> list[VectorSample]:
        params = {"query": query, "time": f"{query_time.timestamp():.3f}"}
        try:
            resp = await self._client.get("/api/v1/query", params=params)
            resp.raise_for_status()
            body = resp.json()
        except httpx.HTTPStatusError as exc:
            raise PrometheusQueryError(
                f"HTTP {exc.response.status_code} from Prometheus",
                extra={"query": query},
            ) from exc
        except httpx.HTTPError as exc:
            raise PrometheusQueryError(
                f"Prometheus request failed: {exc}",
                extra={"query": query},
            ) from exc
        except ValueError as exc:
            raise PrometheusQueryError(
                "Prometheus returned a non-JSON body",
                extra={"query": query},
            ) from exc

        return self._parse_vector(body, query)

    @staticmethod
    def _parse_vector(body: dict[str, Any], query: str) -> list[VectorSample]:
        if body.get("status") != "success":
            raise PrometheusQueryError(
                f"{body.get('errorType', 'error')}: {body.get('error', 'unknown error')}",
                extra={"query": query},
            )

        data = body.get("data", {})
        result_type = data.get("resultType")
        if result_type != "vector":
            raise PrometheusQueryError(
                f"No handling of result type {result_type}",
                extra={"query": query},
            )

        for warning in body.get("warnings", []):
            logger.warning("prometheus_query_warning", warning=warning, query=query)

        samples: list[VectorSample] = []
        for item in data.get("result", []):
            timestamp, value = item.get("value", [0, "NaN"])
            samples.append(
                VectorSample(
                    metric=item.get("metric", {}),
                    value=float(value),
                    timestamp=float(timestamp),
                )
            )
        return samples

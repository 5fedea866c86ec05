"""Appender pipeline driver.

Runs the ordered appenders against a shared traffic map for every requested
namespace. Namespaces are processed concurrently; within a namespace the
appenders run in order. Any appender failure aborts the whole run.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Iterable, Sequence

import structlog

from meshgraph.config.settings import Settings
from meshgraph.exceptions import GraphBuildError
from meshgraph.graph.appender.base import (
    Appender,
    AppenderGlobalInfo,
    AppenderNamespaceInfo,
)
from meshgraph.graph.appender.registry import parse_appenders
from meshgraph.graph.model import TrafficMap
from meshgraph.graph.options import GraphOptions

logger = structlog.get_logger()

_DEFAULT_MAX_CONCURRENCY = 8


class AppenderPipeline:
    """Drive an ordered list of appenders over one traffic map.

    Parameters
    ----------
    appenders:
        Appenders in run order.
    global_info:
        Shared run context; a fresh one is created when omitted.
    max_concurrency:
        Maximum namespaces processed at the same time.
    """

    def __init__(
        self,
        appenders: Sequence[Appender],
        global_info: AppenderGlobalInfo | None = None,
        max_concurrency: int = _DEFAULT_MAX_CONCURRENCY,
    ) -> None:
        self._appenders = list(appenders)
        self.global_info = global_info or AppenderGlobalInfo()
        self._max_concurrency = max(1, max_concurrency)

    @classmethod
    def from_options(
        cls,
        options: GraphOptions,
        global_info: AppenderGlobalInfo | None = None,
        settings: Settings | None = None,
    ) -> AppenderPipeline:
        """Build a pipeline for the appenders requested in ``options``."""
        resolved = settings or Settings()
        return cls(
            parse_appenders(options),
            global_info or AppenderGlobalInfo(settings=resolved),
            resolved.appender_max_concurrency,
        )

    @property
    def appender_names(self) -> list[str]:
        return [a.name for a in self._appenders]

    async def run(self, traffic_map: TrafficMap, namespaces: Iterable[str]) -> TrafficMap:
        """Apply every appender for every namespace and return ``traffic_map``.

        Raises:
            GraphBuildError: if any appender fails. The original exception is
                chained as ``__cause__``.
        """
        namespace_list = list(namespaces)
        start = time.time()
        sem = asyncio.Semaphore(self._max_concurrency)

        async def _bounded(namespace: str) -> None:
            async with sem:
                await self._run_namespace(traffic_map, namespace)

        tasks = [asyncio.create_task(_bounded(ns)) for ns in namespace_list]
        try:
            await asyncio.gather(*tasks)
        except Exception as exc:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.error(
                "appender_pipeline_aborted",
                namespaces=namespace_list,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise GraphBuildError(
                f"Graph build aborted: {exc}",
                extra={"namespaces": namespace_list},
            ) from exc

        logger.info(
            "appender_pipeline_completed",
            namespaces=len(namespace_list),
            appenders=self.appender_names,
            duration_ms=round((time.time() - start) * 1000, 2),
        )
        return traffic_map

    async def _run_namespace(self, traffic_map: TrafficMap, namespace: str) -> None:
        namespace_info = AppenderNamespaceInfo(namespace)
        for appender in self._appenders:
            start = time.time()
            await appender.append_graph(traffic_map, self.global_info, namespace_info)
            logger.debug(
                "appender_completed",
                appender=appender.name,
                namespace=namespace,
                duration_ms=round((time.time() - start) * 1000, 2),
            )

    async def close(self) -> None:
        """Close the shared metric source, if one was created."""
        await self.global_info.close()

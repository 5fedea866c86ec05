"""Appender registry: resolves requested appender names to instances."""

from __future__ import annotations

from collections.abc import Callable

import structlog

from meshgraph.exceptions import UnknownAppenderError
from meshgraph.graph.appender.base import Appender
from meshgraph.graph.appender.security_policy import (
    SECURITY_POLICY_APPENDER_NAME,
    SecurityPolicyAppender,
)
from meshgraph.graph.options import GraphOptions

logger = structlog.get_logger()

AppenderBuilder = Callable[[GraphOptions], Appender]


def _security_policy(options: GraphOptions) -> Appender:
    return SecurityPolicyAppender(
        graph_type=options.graph_type,
        inject_service_nodes=options.inject_service_nodes,
        namespaces=options.namespaces,
        query_time=options.query_time,
    )


# Registration order is the default run order.
APPENDER_BUILDERS: dict[str, AppenderBuilder] = {
    SECURITY_POLICY_APPENDER_NAME: _security_policy,
}


def parse_appenders(options: GraphOptions) -> list[Appender]:
    """Build the appenders requested in ``options``.

    ``options.appenders`` of None selects every registered appender. Names
    keep their requested order; duplicates are dropped.

    Raises:
        UnknownAppenderError: if a requested name is not registered.
    """
    names = list(APPENDER_BUILDERS) if options.appenders is None else options.appenders

    appenders: list[Appender] = []
    seen: set[str] = set()
    for raw in names:
        name = raw.strip()
        if not name or name in seen:
            continue
        builder = APPENDER_BUILDERS.get(name)
        if builder is None:
            raise UnknownAppenderError(
                f"Unknown appender '{name}'. Available: {list(APPENDER_BUILDERS)}",
                extra={"appender": name},
            )
        seen.add(name)
        appenders.append(builder(options))

    logger.debug("appenders_parsed", appenders=[a.name for a in appenders])
    return appenders

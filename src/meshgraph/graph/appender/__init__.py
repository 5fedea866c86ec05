"""Graph appenders: composable enrichment stages over a traffic map."""

from meshgraph.graph.appender.base import (
    Appender,
    AppenderGlobalInfo,
    AppenderNamespaceInfo,
)
from meshgraph.graph.appender.registry import parse_appenders
from meshgraph.graph.appender.security_policy import (
    SecurityPolicyAggregator,
    SecurityPolicyAppender,
)

__all__ = [
    "Appender",
    "AppenderGlobalInfo",
    "AppenderNamespaceInfo",
    "SecurityPolicyAggregator",
    "SecurityPolicyAppender",
    "parse_appenders",
]

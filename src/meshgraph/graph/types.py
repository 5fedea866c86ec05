"""Shared graph enums and constants."""

from __future__ import annotations

import enum


class GraphType(enum.StrEnum):
    """Selects how telemetry labels fold into graph nodes."""

    APP = "app"
    VERSIONED_APP = "versionedApp"
    WORKLOAD = "workload"
    SERVICE = "service"


class NodeType(enum.StrEnum):
    APP = "app"
    SERVICE = "service"
    WORKLOAD = "workload"
    UNKNOWN = "unknown"


# Telemetry value reported when the proxy could not determine a label.
UNKNOWN = "unknown"

# Edge metadata keys
IS_MTLS = "isMTLS"

# Istio request telemetry
ISTIO_REQUESTS_METRIC = "istio_requests_total"

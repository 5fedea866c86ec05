"""meshgraph: service mesh traffic graph enrichment."""

__version__ = "0.1.0"

"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """meshgraph configuration loaded from environment variables."""

    # Application
    app_name: str = "meshgraph"
    app_version: str = "0.1.0"
    environment: str = "development"  # development, staging, production

    # Observability: Prometheus
    prometheus_url: str = "http://localhost:9090"
    prometheus_timeout_seconds: float = 30.0
    prometheus_bearer_token: str = ""
    prometheus_verify_ssl: bool = True

    # Mesh
    istio_namespace: str = "istio-system"

    # Graph
    graph_type: str = "workload"  # app, versionedApp, workload, service
    inject_service_nodes: bool = True
    graph_duration_seconds: int = 600
    appender_max_concurrency: int = 8

    model_config = {
        "env_prefix": "MESHGRAPH_",
        "env_file": ".env",
        "extra": "ignore",
    }


settings = Settings()

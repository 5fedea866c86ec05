"""Base interface for metric data sources.

Appenders query telemetry through this interface so the graph pipeline does
not depend on a particular backend client.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from pydantic import BaseModel, Field


class VectorSample(BaseModel):
    """One labeled instantaneous sample of an instant-vector result."""

    metric: dict[str, str] = Field(default_factory=dict)
    value: float
    timestamp: float = 0.0


class MetricSource(ABC):
    """Abstract interface for metric querying."""

    source_name: str

    @abstractmethod
    async def query_vector(
        self,
        query: str,
        query_time: datetime,
    ) -> list[VectorSample]:
        """Evaluate an instant query at ``query_time``.

        Returns the samples of the resulting instant vector.
        """

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying transport."""

"""API models for the NaaS control endpoints."""

from typing import Any, Optional

from pydantic import BaseModel, Field


class ConfigUpdateRequest(BaseModel):
    """Partial engine configuration; omitted fields keep their current values."""

    model_config = {"extra": "allow"}

    error_rate: Optional[float] = Field(
        None,
        alias="errorRate",
        description="Percentage of eligible requests that receive an injected error",
    )

    def changes(self) -> dict[str, Any]:
        data = self.model_dump(by_alias=True, exclude_unset=True)
        data.update(self.model_extra or {})
        return data


class StatsResponse(BaseModel):
    """Snapshot of the running engine."""

    config: dict[str, Any]
    environment: str
    version: str
    disabled: bool = False


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    service: str = "NaaS"

"""Health check response body."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: Literal["ok"] = "ok"
    service: str = Field(default="starauth", description="Service name")
    environment: str = Field(description="APP_ENV the process runs with")
    database: Literal["connected", "disconnected"] = Field(
        description="Result of a trivial query against DATABASE_URL",
    )

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator


class AddTargetRequest(BaseModel):
    url: str = Field(..., description="endpoint to keep warm")
    min_interval_ms: int = Field(..., description="lower bound of the randomized delay (inclusive)")
    max_interval_ms: int = Field(..., description="upper bound of the randomized delay (inclusive)")
    timeout_ms: int = Field(5000, description="per-request timeout")
    method: str = Field("GET", description="HTTP method used for each ping")
    auto_start: bool = Field(False, description="start pinging right after the target is added")


class TargetDefinition(BaseModel):
    """One entry of the startup targets file.

    Accepts the millisecond fields used by the API as well as the legacy
    ``min_delay``/``max_delay`` pair expressed in minutes.
    """

    url: str
    min_interval_ms: int | None = None
    max_interval_ms: int | None = None
    min_delay: int | None = Field(None, description="legacy: minutes")
    max_delay: int | None = Field(None, description="legacy: minutes")
    timeout_ms: int | None = None
    method: str = "GET"
    auto_start: bool = False

    @model_validator(mode="after")
    def _resolve_intervals(self) -> "TargetDefinition":
        if self.min_interval_ms is None and self.min_delay is not None:
            self.min_interval_ms = self.min_delay * 60_000
        if self.max_interval_ms is None and self.max_delay is not None:
            self.max_interval_ms = self.max_delay * 60_000
        if self.min_interval_ms is None or self.max_interval_ms is None:
            raise ValueError("interval bounds are required (min_interval_ms/max_interval_ms)")
        return self

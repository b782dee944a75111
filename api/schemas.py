from typing import Any

from pydantic import BaseModel, ConfigDict


class ScheduleRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    caseDetails: str | None = None


class ScheduleResponse(BaseModel):
    schedule: dict[str, Any] | None = None
    rawResponse: str


class ErrorResponse(BaseModel):
    error: str
    details: str | None = None

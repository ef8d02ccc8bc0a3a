"""Common shared schemas used across multiple domains."""

from typing import Literal, Optional

from pydantic import BaseModel, Field


PortFeePolicyName = Literal["heuristic", "exact"]


class Position(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)


class ErrorResponse(BaseModel):
    """Error body for domain validation failures."""
    detail: str
    field: str
    value: str
    request_id: Optional[str] = None

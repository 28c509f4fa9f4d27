"""Core schemas for the application."""

from typing import List
from pydantic import BaseModel


class HealthCheck(BaseModel):
    """Schema for health check response."""
    service_name: str
    status: str
    unsupported_features: List[str] = []


class ErrorResponse(BaseModel):
    """Schema for domain error responses."""
    detail: str
    error: str

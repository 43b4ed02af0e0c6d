"""
API Response Schemas

This module defines the Pydantic models for API responses.
"""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response model for the health endpoint."""
    status: str = Field(..., description="Service status")
    visits_pending: int = Field(..., description="Visits waiting to be written")
    visits_written: int = Field(..., description="Visits written since startup")
    visits_dropped: int = Field(..., description="Visits dropped because the queue was full")

"""
Visit Event Model

One record of a single redirect. The request path fills in the raw
fields; the pipeline worker fills in the enrichment fields after dequeue.
The model is frozen, so enrichment always produces a new copy and an
event handed to the pipeline can never change under the worker.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    """Default clock for visit timestamps."""
    return datetime.now(timezone.utc)


class VisitEvent(BaseModel):
    """A single redirect occurrence, as written to the visit log."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    # Raw request fields (set by the producer)
    timestamp: datetime = Field(..., alias="time", description="UTC creation time")
    slug: str = Field(..., description="The requested slug")
    ip: str = Field(default="", description="Resolved client IP address")
    user_agent: str = Field(default="", description="Raw User-Agent header")
    referer: str = Field(default="", description="Referer header")
    query_params: str = Field(default="", description="Raw query string")
    language: str = Field(default="", description="Accept-Language header")

    # Enrichment fields (set by the worker)
    device_type: str = Field(default="", description="tablet, mobile, desktop, bot or unknown")
    browser: str = ""
    browser_version: str = ""
    os: str = ""
    os_version: str = ""
    is_bot: bool = False
    country: str = Field(default="", description="ISO country code")
    city: str = Field(default="", description="English city name")

    def to_json_line(self) -> str:
        """Serialize as one line of the visit log."""
        return self.model_dump_json(by_alias=True) + "\n"

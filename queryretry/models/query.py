"""Query request and response models."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing_extensions import Literal


class QueryRequest(BaseModel):
    """A range query forwarded unchanged through every pipeline stage."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(default="/api/v1/query_range", description="API path on the backend")
    query: str = Field(..., description="Query expression")
    start: int = Field(..., description="Range start, epoch milliseconds")
    end: int = Field(..., description="Range end, epoch milliseconds")
    step: int = Field(..., gt=0, description="Resolution step in milliseconds")
    timeout: Optional[float] = Field(None, gt=0, description="Per-request timeout in seconds")
    params: Dict[str, str] = Field(default_factory=dict, description="Extra query parameters")

    @model_validator(mode="after")
    def validate_range(self) -> "QueryRequest":
        """Validate the range is not inverted."""
        if self.end < self.start:
            raise ValueError("end must not be before start")
        return self

    def to_params(self) -> Dict[str, str]:
        """Encode the request as URL query parameters (seconds-based)."""
        params = dict(self.params)
        params.update({
            "query": self.query,
            "start": _format_seconds(self.start),
            "end": _format_seconds(self.end),
            "step": _format_seconds(self.step),
        })
        if self.timeout is not None:
            params["timeout"] = f"{self.timeout:g}s"
        return params


class QueryResponse(BaseModel):
    """Response returned by the backend query API."""

    status: Literal["success", "error"]
    data: Any = None
    error_type: Optional[str] = Field(None, alias="errorType")
    error: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


def _format_seconds(milliseconds: int) -> str:
    seconds, millis = divmod(milliseconds, 1000)
    if millis == 0:
        return str(seconds)
    return f"{seconds}.{millis:03d}"

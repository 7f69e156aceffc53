"""Pydantic models for the CDN edge request/response envelope.

The shapes follow the CloudFront origin-response trigger event::

    {"Records": [{"cf": {"request": {...}, "response": {...}}}]}

Unknown keys are kept on the models so that a response handed back
untouched serialises to exactly what the edge sent.
"""
from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class InvalidEventError(ValueError):
    """Raised when an incoming event lacks the CloudFront records."""


class HeaderEntry(BaseModel):
    key: str
    value: str


class EdgeRequest(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    uri: str
    querystring: str = ""
    method: str = "GET"
    headers: dict[str, list[HeaderEntry]] = Field(default_factory=dict)


class EdgeResponse(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    status: int | str
    status_description: str | None = Field(None, alias="statusDescription")
    headers: dict[str, list[HeaderEntry]] = Field(default_factory=dict)
    body: str | None = None
    body_encoding: Literal["base64", "text"] | None = Field(None, alias="bodyEncoding")

    def to_record(self) -> dict[str, Any]:
        """Serialise back to the edge's camelCase dict, keeping only keys that were set."""
        return self.model_dump(by_alias=True, exclude_unset=True)


def parse_event(event: Any) -> tuple[EdgeRequest, EdgeResponse]:
    """Extract the (request, response) pair from a CloudFront event."""

    try:
        cf = event["Records"][0]["cf"]
    except (KeyError, IndexError, TypeError) as exc:
        raise InvalidEventError("Invalid event structure") from exc
    if not cf:
        raise InvalidEventError("Invalid event structure")
    try:
        request = EdgeRequest.model_validate(cf["request"])
        response = EdgeResponse.model_validate(cf["response"])
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidEventError(f"Invalid event structure: {exc}") from exc
    return request, response

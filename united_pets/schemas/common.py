"""
United Pets Backend — Shared Schema Building Blocks
====================================================

What:  Base classes and cross-resource response models.
Why:   The web client speaks camelCase JSON (`addedBy`, `adoptionStatus`,
       `totalDonated`); Python code stays snake_case.
How:   `CamelModel` sets an alias generator; `OpenDocument` additionally keeps
       unknown fields so opaque descriptive data (pet age, image URL, campaign
       description, ...) round-trips without a schema change.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Strict model: camelCase on the wire, unknown fields ignored."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OpenDocument(CamelModel):
    """Model that keeps unknown fields in `model_extra`."""

    model_config = ConfigDict(extra="allow")

    def extra_fields(self) -> Dict[str, Any]:
        return dict(self.model_extra or {})


def strip_keys(fields: Dict[str, Any], protected: set) -> Dict[str, Any]:
    """
    Remove server-controlled keys from opaque client data.

    `protected` holds snake_case names; their camelCase aliases are removed too,
    so neither `addedBy` nor `added_by` can sneak into a stored document.
    """
    blocked = protected | {to_camel(name) for name in protected}
    return {key: value for key, value in fields.items() if key not in blocked}


class MessageResponse(CamelModel):
    message: str


class DeleteResponse(CamelModel):
    deleted: bool = True
    id: str


class ErrorResponse(BaseModel):
    """
    Error body returned by every global exception handler.

    Example:
        {"error": "forbidden", "message": "Only the owner or an admin ...",
         "request_id": "a1b2c3d4"}
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="healthy or unhealthy")
    version: str
    database: str = Field(description="connected or disconnected")
    uptime_seconds: float

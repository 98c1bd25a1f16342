"""Common Pydantic schemas."""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_serializer


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = {
        "from_attributes": True,
        "validate_assignment": True,
        "arbitrary_types_allowed": True,
    }


class FieldError(BaseSchema):
    """Single validation failure."""

    field: str = Field(..., description="Offending field")
    message: str = Field(..., description="What is wrong with it")


class SuccessResponse(BaseSchema):
    """Generic success envelope."""

    success: bool = Field(True, description="Success status")
    message: Optional[str] = Field(None, description="Success message")
    data: Optional[Dict[str, Any]] = Field(None, description="Payload")

    @model_serializer(mode="wrap")
    def omit_empty(self, handler):
        # message and data are optional keys, never nulls
        payload = handler(self)
        for key in ("message", "data"):
            if payload.get(key) is None:
                payload.pop(key, None)
        return payload


class ErrorResponse(BaseSchema):
    """Error envelope."""

    success: bool = Field(False, description="Success status")
    message: str = Field(..., description="Error message")
    error_code: Optional[str] = Field(None, description="Error code")
    errors: Optional[List[FieldError]] = Field(None, description="Per-field errors")
    details: Optional[Dict[str, Any]] = Field(None, description="Error details")


class HealthResponse(BaseSchema):
    """Health check response."""

    success: bool = Field(True, description="Success status")
    message: str = Field(..., description="Status message")
    version: str = Field(..., description="Application version")
    timestamp: str = Field(..., description="Server time, ISO 8601")

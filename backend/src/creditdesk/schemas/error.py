"""Structured error response schemas."""
from datetime import datetime
from typing import Any
from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Detailed error information."""

    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    field: str | None = Field(default=None, description="Field that caused the error (for validation errors)")
    value: Any | None = Field(default=None, description="Invalid value (for validation errors)")


class ErrorResponse(BaseModel):
    """Standard error response structure.

    This provides consistent error responses across the API with:
    - Machine-readable error codes
    - Human-readable messages
    - Remediation hints
    - Request tracing information
    """

    error: str = Field(..., description="Error type (e.g., 'ValidationError', 'NotFound', 'DatabaseError')")
    message: str = Field(..., description="Primary error message")
    details: list[ErrorDetail] | None = Field(
        default=None, description="Detailed error information (for validation errors)"
    )
    remediation: str | None = Field(default=None, description="Suggestion for fixing the error")
    request_id: str | None = Field(default=None, description="Request ID for tracing")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Error timestamp")

    class Config:
        """Pydantic configuration."""

        json_schema_extra = {
            "example": {
                "error": "ValidationError",
                "message": "Request validation failed",
                "details": [
                    {
                        "code": "invalid_amount",
                        "message": "Input should be greater than 0",
                        "field": "body.amount_paid",
                        "value": 0,
                    }
                ],
                "remediation": "Provide a positive amount (e.g., 25.00)",
                "request_id": "req_1234567890",
                "timestamp": "2026-01-15T10:30:00Z",
            }
        }


# Error codes enum for consistency
class ErrorCode:
    """Standard error codes used across the API."""

    # Validation errors (400/422)
    INVALID_EMAIL = "invalid_email"
    INVALID_AMOUNT = "invalid_amount"
    INVALID_DATE = "invalid_date"
    INVALID_MAC_ADDRESS = "invalid_mac_address"
    MISSING_REQUIRED_FIELD = "missing_required_field"
    INVALID_ENUM_VALUE = "invalid_enum_value"
    VALIDATION_ERROR = "validation_error"

    # Storage errors (503)
    DATABASE_ERROR = "database_error"

    # Internal errors (500)
    INTERNAL_ERROR = "internal_error"


# Remediation hints for common errors
REMEDIATION_HINTS = {
    ErrorCode.INVALID_EMAIL: "Provide a valid email address in the format: user@example.com",
    ErrorCode.INVALID_AMOUNT: "Provide a positive amount (e.g., 25.00)",
    ErrorCode.INVALID_MAC_ADDRESS: "Use XX:XX:XX:XX:XX:XX, XX-XX-XX-XX-XX-XX or XXXXXXXXXXXX",
    ErrorCode.DATABASE_ERROR: "The operation was rolled back. Check the details and try again.",
}

"""Common Pydantic schemas shared across the API."""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Single-message error response."""

    success: bool = False
    error: str


class ValidationErrorResponse(BaseModel):
    """Itemized validation failure response."""

    success: bool = False
    errors: list[str]


class MessageResponse(BaseModel):
    """Simple message response."""

    success: bool = True
    message: str

"""
Authorization check models.

Provides the Pydantic schemas returned by the query-credential check and
the default error body for unmatched routes.
"""

from pydantic import BaseModel, Field


class AuthStatusResponse(BaseModel):
    """Authorization status body: the HTTP status code echoed as ``code``."""
    code: int = Field(
        ...,
        description="HTTP status code of the response"
    )


class ErrorResponse(BaseModel):
    """Error response schema."""
    detail: str = Field(
        ...,
        min_length=1,
        description="Error message"
    )

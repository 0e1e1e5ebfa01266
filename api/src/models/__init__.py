"""Data models for the FastAPI service.

This package contains Pydantic models for response serialization.
"""

from api.src.models.auth import AuthStatusResponse, ErrorResponse

__all__ = ["AuthStatusResponse", "ErrorResponse"]

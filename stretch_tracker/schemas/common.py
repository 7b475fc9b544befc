"""
Shared schema primitives used across the API.
"""
from typing import Any, Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard `{code, message, details}` envelope returned for all 4xx/5xx responses."""
    code: str
    message: str
    details: Optional[dict[str, Any]] = None


# Reusable OpenAPI `responses=` entries
NOT_FOUND = {404: {"model": ErrorResponse, "description": "Stretch not found (STRETCH_NOT_FOUND)."}}
DUPLICATE = {409: {"model": ErrorResponse, "description": "Name already used (DUPLICATE_NAME)."}}
INVALID = {422: {"model": ErrorResponse, "description": "Field rules failed (VALIDATION_FAILED)."}}

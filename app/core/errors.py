# app/core/errors.py
"""
Typed failures raised by the resource access services.

Every class maps to exactly one HTTP status; ``app.main`` renders them as
``{"detail": ...}`` responses. Permission denials are *not* exceptions inside
the evaluator, they only become one of these once a service decides how to
surface them.
"""
from typing import Dict, Optional

from fastapi import status


class AccessError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST
    default_detail: str = "Request could not be completed"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)

    @property
    def headers(self) -> Optional[Dict[str, str]]:
        return None


class Unauthenticated(AccessError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Not authenticated"

    @property
    def headers(self) -> Optional[Dict[str, str]]:
        return {"WWW-Authenticate": "Bearer"}


class NotFound(AccessError):
    """Missing, or present but not readable by the principal."""
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class Forbidden(AccessError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Insufficient permissions"


class Conflict(AccessError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Operation conflicts with the current state"


class ValidationFailure(AccessError):
    """A referenced id (category, team, user) does not resolve for this principal."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid reference"

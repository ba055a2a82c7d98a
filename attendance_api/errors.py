"""
Application Errors
Domain failures carrying a stable machine-checkable kind
"""

from fastapi import HTTPException, status


class AppError(HTTPException):
    """Base class for errors surfaced to API callers"""

    kind = "error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Request failed"

    def __init__(self, detail: str = None):
        super().__init__(status_code=type(self).status_code, detail=detail or self.default_detail)


class InvalidPeriod(AppError):
    kind = "invalid_period"
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid period"


class InvalidScope(AppError):
    kind = "invalid_scope"
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid scope. Supported options: overall, region, group"


class MissingScopeId(AppError):
    kind = "missing_scope_id"
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "A scope id is required for this scope"


class Forbidden(AppError):
    # Never mention whether the target exists
    kind = "forbidden"
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Access denied for the requested scope"


class NotFound(AppError):
    kind = "not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class Conflict(AppError):
    kind = "conflict"
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Resource already exists"


class StoreFailure(AppError):
    kind = "store_failure"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal server error"

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base for errors rendered as ``{"error": ..., "code": ...}`` JSON."""

    status_code = 500
    code = "internal_error"
    message = "Internal server error"

    def __init__(self, message: str | None = None, headers: dict | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message
        self.headers = headers


class Unauthenticated(AppError):
    status_code = 401
    code = "unauthenticated"
    message = "Authentication required"


class AccountInactive(AppError):
    status_code = 403
    code = "account_inactive"
    message = "Account is inactive"


class InsufficientRole(AppError):
    status_code = 403
    code = "insufficient_role"
    message = "Insufficient role permissions"


class InsufficientPermission(AppError):
    status_code = 403
    code = "insufficient_permission"
    message = "Insufficient permissions"


class AccessDenied(AppError):
    status_code = 403
    code = "access_denied"
    message = "Access denied"


class FeatureDisabled(AppError):
    status_code = 403
    code = "feature_disabled"
    message = "This feature is currently disabled"


class ValidationFailed(AppError):
    status_code = 400
    code = "validation_failed"
    message = "Validation failed"


class InvalidCredentials(AppError):
    status_code = 401
    code = "invalid_credentials"
    message = "Invalid credentials"


class NotFound(AppError):
    status_code = 404
    code = "not_found"
    message = "Not found"


class Conflict(AppError):
    status_code = 409
    code = "conflict"
    message = "Conflict"


class RateLimited(AppError):
    status_code = 429
    code = "rate_limited"
    message = "Too many requests"


async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "code": exc.code},
        headers=exc.headers,
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = [
        {
            "field": ".".join(str(p) for p in err.get("loc", ()) if p != "body"),
            "message": err.get("msg", ""),
        }
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={
            "error": ValidationFailed.message,
            "code": ValidationFailed.code,
            "details": details,
        },
    )


async def generic_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"error": AppError.message, "code": AppError.code},
    )

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from typing import Any, Dict, List, Optional


class APIException(HTTPException):
    """Base for the API error taxonomy; carries a stable default message and optional extra payload."""
    status_code_default: int = 400
    message: str = "Bad request"

    def __init__(self, detail: Optional[str] = None, status_code: Optional[int] = None, extra: Optional[Dict[str, Any]] = None):
        super().__init__(status_code=status_code or self.status_code_default, detail=detail or self.message)
        self.extra = extra or {}


class ValidationFailed(APIException):
    status_code_default = 400
    message = "Validation failed"


class DuplicateIdentity(APIException):
    status_code_default = 400
    message = "User already exists with this email or phone number"


class InvalidCredentials(APIException):
    status_code_default = 401
    message = "Invalid credentials"


class VerificationRequired(APIException):
    status_code_default = 401
    message = "Please verify your phone number first"

    def __init__(self, user_id: str, detail: Optional[str] = None):
        super().__init__(detail=detail, extra={"requiresVerification": True, "userId": user_id})
        self.user_id = user_id


class Unauthenticated(APIException):
    status_code_default = 401
    message = "Access denied. No token provided."


class InvalidToken(APIException):
    status_code_default = 401
    message = "Invalid token."


class TokenExpired(APIException):
    status_code_default = 401
    message = "Token expired."


class StaleIdentity(APIException):
    status_code_default = 401
    message = "Token is valid but user no longer exists."


class NotVerified(APIException):
    status_code_default = 401
    message = "User account not verified."


class Forbidden(APIException):
    status_code_default = 403
    message = "Access denied. Admin privileges required."


class NotFound(APIException):
    status_code_default = 404
    message = "Not found"


class RateLimited(APIException):
    status_code_default = 429
    message = "Too many requests. Please try again later."


class ServerError(APIException):
    status_code_default = 500
    message = "Internal server error"


def create_error_response(error_message: str, extra: Optional[Dict[str, Any]] = None) -> dict:
    """Create a standardized error response"""
    body = {
        "success": False,
        "error": error_message,
    }
    if extra:
        body.update(extra)
    return body


def _format_validation_errors(errors: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    formatted = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        msg = str(err.get("msg", "Invalid value"))
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        formatted.append({"field": ".".join(loc), "msg": msg})
    return formatted


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Custom exception handler for HTTPException"""
    extra = getattr(exc, "extra", None)
    return JSONResponse(
        status_code=exc.status_code,
        content=create_error_response(exc.detail, extra),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report field validation failures as 400 with a per-field list"""
    return JSONResponse(
        status_code=400,
        content={"success": False, "errors": _format_validation_errors(exc.errors())},
    )

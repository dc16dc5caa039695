# backend/utils/errors.py
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class EcoHubError(Exception):
    """Base class for errors recovered at the request boundary.

    ``detail`` is shown to the client as-is, so it must never carry internal state.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Internal server error"

    def __init__(self, detail: str = None):
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class ValidationError(EcoHubError):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Invalid request"


class AuthError(EcoHubError):
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Invalid email or password"


class TokenExpired(EcoHubError):
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Token expired"


class TokenInvalid(EcoHubError):
    status_code = status.HTTP_403_FORBIDDEN
    detail = "Invalid token"


class AccountSuspended(EcoHubError):
    status_code = status.HTTP_403_FORBIDDEN
    detail = "Account suspended. Please contact support."


class PermissionDenied(EcoHubError):
    status_code = status.HTTP_403_FORBIDDEN
    detail = "Forbidden"


class NotFound(EcoHubError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Not found"


class RateLimited(EcoHubError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    detail = "Too many requests. Please slow down."


# Errors that mean "who are you?" rather than "you may not"
_CHALLENGE_ERRORS = (AuthError, TokenExpired)


async def ecohub_error_handler(request: Request, exc: EcoHubError):
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, _CHALLENGE_ERRORS) else None
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=headers)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Report the first problem only, in the same {"detail": str} shape as other errors
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"{field}: {first.get('msg')}" if field else first.get("msg", message)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": message})


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(EcoHubError, ecohub_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

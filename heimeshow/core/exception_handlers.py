"""
FastAPI exception handlers

Every error leaves the API in the same ``ErrorResponse`` envelope.
"""

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from heimeshow.core.exceptions import HeimeShowException, SignInRequired
from heimeshow.schemas.response import ErrorDetail, ErrorResponse, SignInRequiredResponse

logger = logging.getLogger(__name__)


def _envelope(response: ErrorResponse, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=response.model_dump(mode="json"))


async def heimeshow_exception_handler(request: Request, exc: HeimeShowException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{exc.code}: {exc.message}")
    else:
        logger.info(f"{exc.code}: {exc.message}")
    return _envelope(
        ErrorResponse(error=ErrorDetail(code=exc.code, message=exc.message, details=exc.details)),
        exc.status_code,
    )


async def sign_in_required_handler(request: Request, exc: SignInRequired) -> JSONResponse:
    return _envelope(
        SignInRequiredResponse(
            error=ErrorDetail(code="SIGN_IN_REQUIRED", message=str(exc), details={"return_to": exc.return_to}),
            redirect=exc.redirect,
        ),
        status.HTTP_401_UNAUTHORIZED,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = "NOT_FOUND" if exc.status_code == status.HTTP_404_NOT_FOUND else "HTTP_ERROR"
    return _envelope(
        ErrorResponse(error=ErrorDetail(code=code, message=str(exc.detail))),
        exc.status_code,
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info(f"Request validation failed on {request.url.path}: {exc.errors()}")
    return _envelope(
        ErrorResponse(
            error=ErrorDetail(
                code="VALIDATION_ERROR",
                message="Request validation failed",
                details={"errors": [
                    {"loc": [str(part) for part in error.get("loc", ())], "msg": error.get("msg", "")}
                    for error in exc.errors()
                ]},
            )
        ),
        422,
    )


async def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Internal server error: {exc}", exc_info=exc)
    return _envelope(
        ErrorResponse(error=ErrorDetail(code="INTERNAL_ERROR", message="An internal server error occurred")),
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


EXCEPTION_HANDLERS = {
    HeimeShowException: heimeshow_exception_handler,
    SignInRequired: sign_in_required_handler,
    StarletteHTTPException: http_exception_handler,
    RequestValidationError: validation_error_handler,
    Exception: internal_error_handler,
}


def register_exception_handlers(app):
    for exception_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exception_class, handler)

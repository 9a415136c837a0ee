"""Exception handlers that turn failures into the uniform error envelope."""

import logging

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from ..core.logging_config import redact
from ..exceptions import DatabaseError, DocfolioException, ErrorCode

logger = logging.getLogger(__name__)


async def docfolio_exception_handler(request: Request, exc: DocfolioException) -> JSONResponse:
    """
    Handle custom exceptions and return structured JSON responses.

    Client errors are logged at warning level, server errors at error level.

    Args:
        request: FastAPI request object
        exc: DocfolioException instance

    Returns:
        JSONResponse with error details
    """
    level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    logger.log(
        level,
        f"DocfolioException: {exc.error_code.value}",
        extra={
            "error_code": exc.error_code.value,
            "path": request.url.path,
            "method": request.method,
            "details": exc.details,
            "status_code": exc.status_code
        }
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Request body or query failed schema validation."""
    errors = jsonable_encoder(exc.errors())
    first = errors[0]["msg"] if errors else "Invalid request"
    logger.warning(
        "Request validation failed",
        extra={"path": request.url.path, "method": request.method, "errors": len(errors)},
    )
    return JSONResponse(
        status_code=422,
        content={
            "success": False,
            "message": first,
            "error": ErrorCode.VALIDATION_ERROR.value,
            "details": {"errors": errors},
        },
    )


async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Store failure that no service translated; report the store's message."""
    logger.error(
        "Unhandled database error",
        exc_info=exc,
        extra={"path": request.url.path, "method": request.method},
    )
    error = DatabaseError(redact(str(exc.__cause__ or exc)))
    return JSONResponse(status_code=error.status_code, content=error.to_dict())

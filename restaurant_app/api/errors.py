# restaurant_app/api/errors.py
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from restaurant_app.domain.errors import (
    AuthenticationError,
    CapacityError,
    ConfigurationError,
    ForbiddenError,
    MalformedPayloadError,
    NotFoundError,
    PersistenceError,
    ProviderError,
    ServiceError,
    ValidationError,
)
from restaurant_app.utils.logging import get_logger

logger = get_logger(__name__)

# jedyna tabela blad domeny -> status HTTP
STATUS_BY_ERROR = {
    ValidationError: 400,
    MalformedPayloadError: 400,
    AuthenticationError: 401,
    ForbiddenError: 403,
    NotFoundError: 404,
    CapacityError: 409,
    PersistenceError: 500,
    ConfigurationError: 500,
    ProviderError: 502,
}


def status_for(exc: ServiceError) -> int:
    for cls in type(exc).__mro__:
        if cls in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[cls]
    return 500


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.kind}: {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.kind, "message": exc.message},
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"{location}: {first.get('msg', 'invalid input')}" if location else "Invalid request"
    return JSONResponse(
        status_code=400,
        content={"error": ValidationError.kind, "message": message},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

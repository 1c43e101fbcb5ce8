import logging
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from cardshop.domain.exceptions import (
    DomainException, InvalidRequestError, UnauthorizedError, NotFoundError,
    BusinessRuleViolation, UpstreamError, StoreError
)

logger = logging.getLogger(__name__)

# Порядок важен: первый подходящий класс определяет статус
_STATUS_BY_EXCEPTION = (
    (InvalidRequestError, status.HTTP_400_BAD_REQUEST),
    (BusinessRuleViolation, status.HTTP_400_BAD_REQUEST),
    (UnauthorizedError, status.HTTP_401_UNAUTHORIZED),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (UpstreamError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (StoreError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)

# Клиенту не отдаем детали внутренних сбоев
_GENERIC_MESSAGES = {
    UpstreamError: "Catalog service error",
    StoreError: "Database error",
}


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    for exc_type, status_code in _STATUS_BY_EXCEPTION:
        if isinstance(exc, exc_type):
            break
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    for exc_type, message in _GENERIC_MESSAGES.items():
        if isinstance(exc, exc_type):
            logger.error(f"{request.method} {request.url.path}: {exc!r}", exc_info=exc.__cause__ or exc)
            return _error(status_code, message)
    return _error(status_code, str(exc))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else first.get("msg")
    else:
        message = "Invalid request"
    return _error(status.HTTP_400_BAD_REQUEST, message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error(exc.status_code, str(exc.detail))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Необработанная ошибка {request.method} {request.url.path}")
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainException, domain_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

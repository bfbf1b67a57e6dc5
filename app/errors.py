import logging

from fastapi import HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class RegistryError(HTTPException):
    """Base class for domain failures surfaced to API callers."""

    status_code = 500
    code = "registry_error"
    message = "Request failed"

    def __init__(self, message: str | None = None, details=None):
        self.message = message or self.message
        super().__init__(
            status_code=self.status_code,
            detail={"code": self.code, "message": self.message, "details": details},
        )


class ValidationError(RegistryError):
    status_code = 400
    code = "validation_error"
    message = "Invalid request"


class NumberConflict(RegistryError):
    """A freshly computed number was claimed concurrently. Safe to retry."""

    status_code = 409
    code = "number_conflict"
    message = "Generated number already exists, please retry"


class DuplicateNumber(RegistryError):
    status_code = 409
    code = "duplicate_number"
    message = "Document number already exists"


class ForbiddenNumber(RegistryError):
    status_code = 403
    code = "forbidden_number"
    message = "Invalid document number for this department"


class PermissionDenied(RegistryError):
    status_code = 403
    code = "forbidden"
    message = "Forbidden: Insufficient rights"


class NotFound(RegistryError):
    status_code = 404
    code = "not_found"
    message = "Resource not found"


class StorageError(RegistryError):
    """Persistence failure. Details stay in the server log; safe to retry."""

    status_code = 503
    code = "storage_error"
    message = "Storage is temporarily unavailable, please retry"


def _error_payload(code: str, message: str, details):
    return {"code": code, "message": message, "details": details}


def register_error_handlers(app) -> None:
    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        detail = exc.detail
        code = f"http_{exc.status_code}"
        message = "Request failed"
        details = None
        if isinstance(detail, dict):
            code = detail.get("code", code)
            message = detail.get("message", message)
            details = detail.get("details")
        elif isinstance(detail, str):
            message = detail
        else:
            details = detail
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_payload(code, message, details),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ):
        # ctx may contain raw Exception objects (not JSON-serialisable).
        errors = jsonable_encoder(
            [
                {k: str(v) if k == "ctx" else v for k, v in err.items() if k != "url"}
                for err in exc.errors()
            ]
        )
        return JSONResponse(
            status_code=422,
            content=_error_payload("validation_error", "Validation error", errors),
        )

    @app.exception_handler(SQLAlchemyError)
    async def storage_exception_handler(request: Request, exc: SQLAlchemyError):
        logger.exception(
            "Storage failure on %s %s", request.method, request.url.path
        )
        error = StorageError()
        return JSONResponse(
            status_code=error.status_code,
            content=_error_payload(error.code, error.message, None),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(
            "Unhandled error on %s %s", request.method, request.url.path
        )
        return JSONResponse(
            status_code=500,
            content=_error_payload("internal_error", "Internal server error", None),
        )

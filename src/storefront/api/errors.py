"""Exception handlers mapping domain failures onto HTTP responses.

Every error body has the shape ``{"success": false, "message": ...}``.
Checkout rejections also list each problem found.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import InvalidOperationError, ObjectNotFoundError, ValidationError

from storefront.exceptions import AuthenticationRequired, CheckoutRejected, InvalidCredentials, first_message

logger = structlog.get_logger(__name__)


def _error(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message, **extra})


async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    return _error(400, first_message(exc))


async def _request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    detail = errors[0]["msg"] if errors else "Invalid request"
    return _error(400, f"Validation Error: {detail}")


async def _not_found(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return _error(404, first_message(exc))


async def _unauthorized(request: Request, exc: InvalidOperationError) -> JSONResponse:
    return _error(401, first_message(exc))


async def _checkout_rejected(request: Request, exc: CheckoutRejected) -> JSONResponse:
    problems = [problem.message for problem in exc.problems]
    return _error(409, ". ".join(problems), problems=problems)


async def _invalid_operation(request: Request, exc: InvalidOperationError) -> JSONResponse:
    return _error(409, first_message(exc))


async def _unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", method=request.method, path=request.url.path)
    return _error(500, "An unexpected error occurred. Please try again.")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, _request_validation_error)
    app.add_exception_handler(ValidationError, _validation_error)
    app.add_exception_handler(ObjectNotFoundError, _not_found)
    app.add_exception_handler(AuthenticationRequired, _unauthorized)
    app.add_exception_handler(InvalidCredentials, _unauthorized)
    app.add_exception_handler(CheckoutRejected, _checkout_rejected)
    app.add_exception_handler(InvalidOperationError, _invalid_operation)
    app.add_exception_handler(Exception, _unexpected)

"""Error handling middleware for FastAPI."""

import logging
from typing import Callable, Optional

from fastapi import Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from standupsync.api.schemas.common import ErrorResponse
from standupsync.errors import StandupSyncError

logger = logging.getLogger(__name__)


def _request_id(request: Request) -> Optional[str]:
    # Set by RequestIdMiddleware, which runs inside this one
    return getattr(request.state, "request_id", None)


def _error_json(status_code: int, error: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=error.model_dump(by_alias=True))


async def error_handling_middleware(request: Request, call_next: Callable) -> Response:
    """
    Catch exceptions and return standardized JSON error responses.

    Handles different exception types:
    - StandupSyncError → its own status (400/403/404)
    - ValueError → 400 Bad Request
    - IntegrityError (SQLAlchemy) → 409 Conflict
    - Exception → 500 Internal Server Error, details only in the log

    Args:
        request: Incoming FastAPI request
        call_next: Next middleware/handler in chain

    Returns:
        Response object (either success or error JSON)
    """
    try:
        return await call_next(request)

    except StandupSyncError as e:
        request_id = _request_id(request)
        logger.info(
            f"domain_error: path={request.url.path}, status={e.status_code}, "
            f"error={e.message}, request_id={request_id}"
        )
        return _error_json(
            e.status_code,
            ErrorResponse(
                error=e.error, message=e.message, details=e.details, request_id=request_id
            ),
        )

    except ValueError as e:
        request_id = _request_id(request)
        logger.warning(
            f"validation_error: path={request.url.path}, error={str(e)}, request_id={request_id}"
        )
        return _error_json(
            400, ErrorResponse(error="validation_error", message=str(e), request_id=request_id)
        )

    except IntegrityError as e:
        request_id = _request_id(request)
        logger.warning(
            f"integrity_error: path={request.url.path}, error={str(e)}, request_id={request_id}"
        )
        return _error_json(
            409,
            ErrorResponse(
                error="conflict",
                message="Resource conflict or constraint violation",
                request_id=request_id,
            ),
        )

    except Exception as e:
        request_id = _request_id(request)
        logger.exception(
            f"internal_error: path={request.url.path}, error={str(e)}, request_id={request_id}"
        )
        return _error_json(
            500,
            ErrorResponse(
                error="internal_error",
                message="An unexpected error occurred",
                request_id=request_id,
            ),
        )


def _describe(error: dict) -> str:
    # The last loc entry is the field alias, e.g. ("body", "date") or ("query", "endDate")
    field = str(error["loc"][-1]) if error.get("loc") else "request"
    if error.get("type") == "missing":
        return f"{field} is required"
    return f"{field}: {error.get('msg', 'invalid value')}"


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Render schema validation failures as 400 ErrorResponse instead of FastAPI's 422.

    The message describes the first failing field; every failure is listed in
    details without the raw exception context.
    """
    errors = exc.errors()
    problems = [
        {"field": ".".join(str(part) for part in e.get("loc", ())), "message": _describe(e)}
        for e in errors
    ]
    message = problems[0]["message"] if problems else "Invalid request"
    request_id = _request_id(request)
    logger.info(
        f"request_validation_error: path={request.url.path}, error={message}, "
        f"request_id={request_id}"
    )
    return _error_json(
        400,
        ErrorResponse(
            error="validation_error",
            message=message,
            details={"errors": problems},
            request_id=request_id,
        ),
    )

import logging
from typing import Any, Dict, Iterable

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from leave_service.core.exceptions import LeaveTrackerError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

_LOCATION_PREFIXES = ("body", "query", "path")


def format_validation_errors(errors: Iterable[Dict[str, Any]]) -> str:
    """
    pydantic 에러 목록을 한 줄 메시지로.
    예: "Validation error: days: At least one day is required; reason: Field required"
    """
    parts = []
    for err in errors:
        loc = [str(p) for p in err.get("loc", ()) if p not in _LOCATION_PREFIXES]
        msg = err.get("msg", "Invalid value")
        ctx_error = (err.get("ctx") or {}).get("error")
        if err.get("type") == "value_error" and ctx_error is not None:
            # "Value error, ..." 접두어 없이 원래 메시지만
            msg = str(ctx_error)
        parts.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return "Validation error: " + "; ".join(parts)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": format_validation_errors(exc.errors())},
        )

    @app.exception_handler(LeaveTrackerError)
    async def leave_tracker_error_handler(request: Request, exc: LeaveTrackerError):
        if isinstance(exc, NotFoundError):
            status_code = status.HTTP_404_NOT_FOUND
        elif isinstance(exc, ValidationError):
            status_code = status.HTTP_400_BAD_REQUEST
        else:
            status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        return JSONResponse(status_code=status_code, content={"message": exc.message})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error: %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Internal server error"},
        )

"""
Exception handlers mapping specification errors to HTTP responses.

Every `SpecificationError` is a client error: the request asked for a filter or
sort the API cannot build. The handler answers with status 400 and the error
message as `detail`, the same shape FastAPI uses for `HTTPException`.
"""
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from queryspec.core.exceptions import SpecificationError, registered_exceptions
from queryspec.core.root_logger import get_logger

logger = get_logger("routes")


def log_wrapper(request: Request, exc: SpecificationError) -> None:
    """Logs the rejected request and the error raised while building its specification."""
    default_message = registered_exceptions().get(type(exc), "Invalid specification")
    logger.error(" Start 400 Bad Request Error ".center(80, "-"))
    logger.error(f"Request: {request.method} {request.url}")
    logger.error(f"{type(exc).__name__} ({default_message}): {exc}")
    logger.error(" End 400 Bad Request Error ".center(80, "-"))


def register_specification_handlers(app: FastAPI) -> None:
    """
    Registers the `SpecificationError` handler with the FastAPI app.

    Args:
        app (FastAPI): The FastAPI application instance.
    """

    @app.exception_handler(SpecificationError)
    async def specification_exception_handler(request: Request, exc: SpecificationError) -> JSONResponse:
        log_wrapper(request, exc)
        return JSONResponse(content={"detail": str(exc)}, status_code=status.HTTP_400_BAD_REQUEST)

    logger.info("Registered SpecificationError handler.")

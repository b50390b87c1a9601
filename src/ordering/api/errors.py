"""HTTP error handling for the Ordering API.

Domain exceptions keep Protean's mapping (ValidationError → 400,
ObjectNotFoundError → 404). Anything else is a system failure: it is logged
with its traceback and answered with a generic 500 envelope so clients can
tell it apart from a business-rule rejection.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

logger = structlog.get_logger(__name__)

GENERIC_FAILURE_MESSAGE = "Something went wrong"


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", path=request.url.path, method=request.method, error=str(exc))
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": GENERIC_FAILURE_MESSAGE, "data": None},
    )


def install_error_handlers(app: FastAPI) -> None:
    register_exception_handlers(app)
    app.add_exception_handler(Exception, unhandled_exception_handler)

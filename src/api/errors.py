"""
API error handling.

Request schema violations are answered with 400 and the same
{"message": ...} body the endpoints use, instead of FastAPI's 422 detail list.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = sorted({str(error["loc"][-1]) for error in exc.errors() if error.get("loc")})
    message = "Invalid or missing fields: " + ", ".join(fields) if fields else "Invalid request."
    logger.info("Rejected %s %s: %s", request.method, request.url.path, message)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": message})


def register_exception_handlers(app: FastAPI) -> None:
    """Install the API's exception handlers on an application."""
    app.add_exception_handler(RequestValidationError, request_validation_handler)

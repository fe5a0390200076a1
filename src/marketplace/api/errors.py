"""Map domain errors to HTTP responses.

Rule violations carry Protean's ``{field: [message, ...]}`` payload, which is
returned to the client under ``error``.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError

from marketplace.domain import logger
from marketplace.shared.errors import (
    AuthorizationError,
    InvalidStateTransitionError,
    InventoryUpdateError,
)

# Starlette dispatches on the most specific class in the exception's MRO.
_STATUS_CODES = {
    AuthorizationError: 403,
    InvalidStateTransitionError: 409,
    InventoryUpdateError: 409,
    ObjectNotFoundError: 404,
    ValidationError: 400,
}


def _payload(exc):
    messages = getattr(exc, "messages", None)
    if not messages:
        messages = {"error": [str(exc)]}
    return {"error": messages}


def register_exception_handlers(app: FastAPI) -> None:
    for exc_class, status_code in _STATUS_CODES.items():

        async def handler(request: Request, exc: Exception, status_code=status_code) -> JSONResponse:
            logger.info(
                "Request rejected",
                path=request.url.path,
                status_code=status_code,
                error=type(exc).__name__,
            )
            return JSONResponse(status_code=status_code, content=_payload(exc))

        app.add_exception_handler(exc_class, handler)

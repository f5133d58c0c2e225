# inventory/errors.py
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class InventoryError(Exception):
    """Base class for every error raised by the inventory service."""
    status_code = 500


class ClientInputError(InventoryError):
    """Malformed JSON body or a missing/invalid id parameter."""
    status_code = 400


class NotFoundError(InventoryError):
    status_code = 404


class MethodNotAllowedError(InventoryError):
    status_code = 405

    def __init__(self, message: str, allowed=("POST",)):
        super().__init__(message)
        self.allowed = tuple(allowed)


class StoreError(InventoryError):
    """Database connectivity, timeout or document mapping failure."""
    status_code = 500


class SeedFileError(InventoryError):
    """Seed file is malformed or could not be written."""
    status_code = 500


class ConfigurationError(InventoryError):
    """Raised when required configuration is missing or invalid."""


async def _inventory_error_handler(request: Request, exc: InventoryError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    headers = None
    if isinstance(exc, MethodNotAllowedError):
        headers = {"Allow": ", ".join(exc.allowed)}
    return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)}, headers=headers)


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # body decoding failures are plain client errors here, not 422s
    errors = exc.errors()
    if any(e.get("type") == "json_invalid" for e in errors):
        message = "invalid JSON"
    else:
        message = "; ".join(
            f"{'.'.join(str(p) for p in e.get('loc', ()))}: {e.get('msg')}" for e in errors
        ) or "invalid request"
    return JSONResponse(status_code=400, content={"detail": message})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(InventoryError, _inventory_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)

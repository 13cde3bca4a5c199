"""Custom exceptions and centralized FastAPI error handlers.

Rendezvous outcomes are reported to callers as plain-text bodies with a
200 status; the two clients match on the exact strings.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

logger = logging.getLogger(__name__)


class RendezvousError(Exception):
    """Base exception carrying the body text returned to the caller."""

    def __init__(self, message: str, status_code: int = 200):
        super().__init__(message)
        self.status_code = status_code


class MissingKey(RendezvousError):
    def __init__(self):
        super().__init__("no key")


class MalformedBundle(RendezvousError):
    def __init__(self):
        super().__init__("no ipaddress")


class EmptyRequest(RendezvousError):
    def __init__(self):
        super().__init__("queryString is null")


class DecodeFailure(Exception):
    """A stored record does not have the shape of a bundle. Never surfaced."""


def register_error_handlers(app: FastAPI) -> None:
    """Register centralized exception handlers on the FastAPI app."""

    @app.exception_handler(RendezvousError)
    async def handle_rendezvous_error(_request: Request, exc: RendezvousError):
        return PlainTextResponse(str(exc), status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception):
        logger.exception("Unhandled error: %s", exc)
        return PlainTextResponse("Internal server error", status_code=500)

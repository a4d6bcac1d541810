from __future__ import annotations

import logging

from flask import Flask
from werkzeug.exceptions import HTTPException, MethodNotAllowed, NotFound, RequestEntityTooLarge

from ..core.exceptions import DomainError
from .responses import fail

logger = logging.getLogger(__name__)


def register_error_handlers(app: Flask, *, max_upload_file_size: int) -> None:
    """Every error leaves the API in the ``{success: false, message}`` envelope."""

    @app.errorhandler(DomainError)
    def domain_error(e: DomainError):
        if e.status_code >= 500:
            logger.error("request failed: %s", e.message)
        return fail(e.message, e.status_code)

    @app.errorhandler(NotFound)
    def not_found(_e):
        return fail("API endpoint not found", 404)

    @app.errorhandler(MethodNotAllowed)
    def method_not_allowed(_e):
        return fail("Method not allowed", 405)

    @app.errorhandler(RequestEntityTooLarge)
    def too_large(_e):
        limit_mb = max_upload_file_size // (1024 * 1024)
        return fail(f"File too large. Maximum size is {limit_mb}MB.", 400)

    @app.errorhandler(HTTPException)
    def http_error(e: HTTPException):
        return fail(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def unexpected(e: Exception):
        logger.exception("unhandled error: %s", e)
        return fail("Internal server error", 500)
